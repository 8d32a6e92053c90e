"""DreamFactory MCP installer for Claude Desktop."""

__version__ = "1.0.0"
