"""MCP server for in-memory notes and Coze workflow runs."""

__version__ = "0.1.0"
