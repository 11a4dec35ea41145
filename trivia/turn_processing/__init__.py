"""Per-turn helpers and action validation."""
