"""CLI layer for burnrate."""
