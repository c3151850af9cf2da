"""MCP server exposing Salary Calc tools."""
