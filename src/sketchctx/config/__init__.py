"""TOML discovery, settings, and logging."""
