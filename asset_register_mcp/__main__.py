from mcp.server.fastmcp import FastMCP
from .config import config

mcp = FastMCP(
    "fixed-asset-register",
    instructions="固定资产台账 MCP Server — 查询折旧变动表、资产与分类",
)

# 注册所有 Tools
from .tools import register_all_tools
register_all_tools(mcp)

if __name__ == "__main__":
    if config.transport == "sse":
        mcp.settings.port = config.sse_port
        mcp.run(transport="sse")
    else:
        mcp.run(transport="stdio")
