"""
Configuration constants for the 5/3/1 progression engine.

All adjustable parameters are centralized here for easy tuning.
User overrides for the initial settings are read by config_loader.py.
"""

from typing import Final

# =============================================================================
# LIFTS
# =============================================================================

LIFT_IDS: Final[tuple[str, ...]] = ("squat", "bench", "deadlift", "ohp")

LIFT_NAMES: Final[dict[str, str]] = {
    "squat": "Squat",
    "bench": "Bench Press",
    "deadlift": "Deadlift",
    "ohp": "Overhead Press",
}

UPPER_BODY_LIFTS: Final[frozenset[str]] = frozenset({"bench", "ohp"})

# =============================================================================
# TRAINING MAX
# =============================================================================

TM_PERCENTAGE_MIN: Final[int] = 80
TM_PERCENTAGE_MAX: Final[int] = 95

# =============================================================================
# EPLEY ESTIMATION
# =============================================================================

EPLEY_DIVISOR: Final[float] = 30.0
REPS_TO_BEAT_EPSILON: Final[float] = 0.001  # nudge before ceil so an exact break-even moves up one rep

# =============================================================================
# 5×5/3/1 FILLER REPS (sets 1-4, per week)
# =============================================================================

FIVE_BY_531_REPS: Final[dict[int, int]] = {1: 5, 2: 3, 3: 1, 4: 5}
FIVE_BY_531_SET_COUNT: Final[int] = 5

# =============================================================================
# JOKER SETS
# =============================================================================

JOKER_STEP_PERCENTAGE: Final[int] = 5  # each joker climbs this far above the previous

# =============================================================================
# CYCLE INCREMENTS (added to 1RM at the end of a 4-week cycle)
# =============================================================================

CYCLE_INCREMENTS: Final[dict[str, dict[str, float]]] = {
    "lbs": {"upper": 5.0, "lower": 10.0},
    "kg": {"upper": 2.5, "lower": 5.0},
}

# =============================================================================
# UNITS
# =============================================================================

LBS_TO_KG: Final[float] = 0.45359237
UNITS: Final[tuple[str, ...]] = ("lbs", "kg")

# =============================================================================
# DOTS (male coefficients, body weight in kg)
# denom = c0*bw^4 + c1*bw^3 + c2*bw^2 + c3*bw + c4
# =============================================================================

DOTS_MALE_COEFFICIENTS: Final[tuple[float, float, float, float, float]] = (
    -1.093e-6,
    7.391293e-4,
    -0.1918759221,
    24.9653911277,
    -1511.14028827,
)
DOTS_NUMERATOR: Final[float] = 500.0

# =============================================================================
# DEFAULT SETTINGS (used by `init` unless ~/.lift531/config.yaml overrides)
# =============================================================================

DEFAULT_TM_PERCENTAGE: Final[int] = 85
DEFAULT_UNIT: Final[str] = "lbs"
DEFAULT_ROUNDING_INCREMENT: Final[float] = 5
DEFAULT_SHOW_WARMUPS: Final[bool] = False
DEFAULT_BAR_WEIGHT: Final[float] = 45
DEFAULT_AVAILABLE_PLATES: Final[tuple[float, ...]] = (45, 25, 10, 5, 2.5)
DEFAULT_TEMPLATE: Final[str] = "classic"
DEFAULT_SUPPLEMENTAL_PERCENTAGE: Final[int] = 50
