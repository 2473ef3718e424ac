"""Rendering of ServiceResult for the CLI."""
