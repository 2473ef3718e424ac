"""Tool catalog, document queries, and command dispatch.

Services may import from domain, relay, and infrastructure layers.
They must never import from server, commands, output, or mcp.
"""
