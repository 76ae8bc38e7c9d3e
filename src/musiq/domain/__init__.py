"""Domain layer - song library and tag queries."""
