"""Pure training calculations and rules."""
