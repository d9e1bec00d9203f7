"""Configuration (environment-backed Settings)."""
