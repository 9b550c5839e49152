"""
Supplemental-set generator.

Supplemental work follows the main sets at a single weight for a fixed
sets × reps.  Where the percentage comes from depends on the template:

  BBB : the lift's configured supplemental percentage (typically 40-70)
  FSL : the week's first work-set percentage
  SSL : the week's second work-set percentage
"""

from __future__ import annotations

from .calculator import calculate_weight, get_week_scheme
from .models import SupplementalPlan
from .rounding import format_weight
from .templates.registry import TEMPLATE_REGISTRY


def generate_supplemental_sets(
    template_id: str,
    training_max: float,
    week: int,
    supplemental_percentage: float,
    rounding_increment: float,
) -> SupplementalPlan | None:
    """
    Generate the supplemental prescription for a template.

    ``training_max`` may belong to a different lift than the one being
    trained (supplemental lift override); the caller resolves that.

    Args:
        template_id: Template id (e.g. "bbb")
        training_max: Training max the supplemental work is based on
        week: Week number (1-4)
        supplemental_percentage: User-configured percentage, used only by
            fixed-percentage templates
        rounding_increment: Rounding increment

    Returns:
        SupplementalPlan, or None when the template is unknown or has no
        supplemental work

    Raises:
        ValueError: If week is not 1-4 for a week-sourced template
    """
    template = TEMPLATE_REGISTRY.get(template_id)
    if template is None or not template.has_supplemental:
        return None

    if template.percentage_source == "first_set":
        percentage = get_week_scheme(week)[0].percentage
    elif template.percentage_source == "second_set":
        percentage = get_week_scheme(week)[1].percentage
    else:
        percentage = supplemental_percentage

    weight = calculate_weight(training_max, percentage, rounding_increment)

    return SupplementalPlan(
        template_name=template.name,
        sets=template.sets,
        reps=template.reps,
        weight=weight,
        percentage=percentage,
        display=f"{template.sets}×{template.reps} @ {format_weight(weight)}",
    )
