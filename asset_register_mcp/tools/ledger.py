import json
from mcp.server.fastmcp import FastMCP
from ..client import register_client


def register(mcp: FastMCP):

    @mcp.tool()
    async def list_assets(query: str = "") -> str:
        """列出固定资产（按资产编码排序）。

        - query: 按名称或编码模糊搜索（可省略）
        """
        try:
            result = await register_client.list_assets(query or None)
        except Exception as e:
            return f"错误：{e}"
        return json.dumps(result, ensure_ascii=False, indent=2)

    @mcp.tool()
    async def list_categories() -> str:
        """列出资产分类及其默认使用年限、年折旧率。"""
        try:
            result = await register_client.list_categories()
        except Exception as e:
            return f"错误：{e}"
        return json.dumps(result, ensure_ascii=False, indent=2)
