"""Cash Forecast MCP server."""
