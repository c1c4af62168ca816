"""Data files bundled with eopframes."""
