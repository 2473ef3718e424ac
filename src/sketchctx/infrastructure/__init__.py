"""Archive parsing and document sources.

This layer depends on stdlib, httpx, and the domain layer.
It must never import from relay, services, commands, or output.
"""
