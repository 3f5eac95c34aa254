"""Domain models: cache keys and the two-variant outcome type."""
