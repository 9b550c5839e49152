"""
Base type for training template definitions.

A Template tells the set generators whether a lift gets supplemental work,
where its percentage comes from, and whether the main sets are replaced.
"""

from dataclasses import dataclass

from ..models import PercentageSource


@dataclass(frozen=True)
class Template:
    """
    Full configuration for one training template.

    percentage_source:
      fixed      — the lift's configured supplemental percentage (BBB)
      first_set  — the week's first work-set percentage (FSL)
      second_set — the week's second work-set percentage (SSL)
    """

    # Identity
    id: str                   # e.g. "bbb"
    name: str                 # e.g. "BBB"
    description: str

    # Supplemental work
    has_supplemental: bool
    percentage_source: PercentageSource = "fixed"
    sets: int = 0
    reps: int = 0
    default_percentage: int | None = None

    # Main-set override (5×5/3/1)
    modifies_main_sets: bool = False

    # Menu order
    display_order: int = 0

    def __post_init__(self) -> None:
        """Validate template data."""
        if self.percentage_source not in ("fixed", "first_set", "second_set"):
            raise ValueError(f"Invalid percentage_source: {self.percentage_source!r}")
        if self.has_supplemental and (self.sets <= 0 or self.reps <= 0):
            raise ValueError(f"Template '{self.id}' has supplemental work but no sets/reps")
