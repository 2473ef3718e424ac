"""Errors, relay frames, and document nodes.

This layer depends only on stdlib and pydantic.
It must never import from relay, services, infrastructure, commands, or config.
"""
