from mcp.server.fastmcp import FastMCP
from . import reports, ledger


def register_all_tools(mcp: FastMCP):
    """注册所有 MCP Tools"""
    reports.register(mcp)
    ledger.register(mcp)
