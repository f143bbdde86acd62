import json
from mcp.server.fastmcp import FastMCP
from ..client import register_client


def register(mcp: FastMCP):

    @mcp.tool()
    async def get_depreciation_report(
        start_date: str = "",
        end_date: str = "",
        query: str = "",
    ) -> str:
        """获取固定资产折旧变动表。

        每项资产的期初余额、本期增加、本期处置、期末余额、期初/本期/期末累计折旧与净值，
        以及合计行和因参数无效被剔除的资产。
        - start_date: 开始日期 (YYYY-MM-DD)，默认本年 1 月 1 日
        - end_date: 结束日期 (YYYY-MM-DD)，默认本年 12 月 31 日
        - query: 按资产名称或编码筛选（可省略）
        """
        try:
            result = await register_client.get_depreciation_report(
                start_date or None, end_date or None, query or None
            )
        except Exception as e:
            return f"错误：{e}"
        return json.dumps(result, ensure_ascii=False, indent=2)

    @mcp.tool()
    async def get_report_summary(start_date: str = "", end_date: str = "") -> str:
        """获取折旧变动表概览：账面原值合计、累计折旧合计、净值合计、资产数。

        - start_date: 开始日期 (YYYY-MM-DD)
        - end_date: 结束日期 (YYYY-MM-DD)
        """
        try:
            result = await register_client.get_report_summary(
                start_date or None, end_date or None
            )
        except Exception as e:
            return f"错误：{e}"
        return json.dumps(result, ensure_ascii=False, indent=2)
