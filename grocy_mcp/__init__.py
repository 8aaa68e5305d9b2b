"""grocy-mcp: MCP server for the Grocy household management API."""

__version__ = "0.1.0"
