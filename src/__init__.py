"""Profile auto-switch engine."""
