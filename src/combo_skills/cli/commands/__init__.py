"""combo-skills top-level commands."""
