"""Model Context Protocol adapter (optional ``mcp`` extra)."""
