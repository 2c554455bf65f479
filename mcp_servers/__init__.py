"""MCP servers exposed by this project."""
