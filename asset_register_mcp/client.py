import httpx
from .config import config


class RegisterClient:
    """固定资产台账 REST API 客户端"""

    def __init__(self):
        self._base_url: str | None = None
        self._headers: dict[str, str] | None = None

    @property
    def base_url(self) -> str:
        if self._base_url is None:
            self._base_url = config.server_url.rstrip("/")
        return self._base_url

    @property
    def headers(self) -> dict[str, str]:
        if self._headers is None:
            self._headers = config.auth_header
        return self._headers

    async def _request(self, method: str, path: str, **kwargs) -> dict | list:
        async with httpx.AsyncClient(base_url=self.base_url, headers=self.headers) as client:
            response = await client.request(method, path, **kwargs)
            if response.status_code >= 400:
                detail = response.json().get("detail", response.text)
                raise Exception(f"API 错误 ({response.status_code}): {detail}")
            return response.json()

    # ─── 报表 ──────────────────────────────

    async def get_depreciation_report(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
        query: str | None = None,
    ) -> dict:
        params = {}
        if start_date:
            params["start"] = start_date
        if end_date:
            params["end"] = end_date
        if query:
            params["q"] = query
        return await self._request("GET", "/reports/depreciation", params=params)

    async def get_report_summary(
        self, start_date: str | None = None, end_date: str | None = None
    ) -> dict:
        params = {}
        if start_date:
            params["start"] = start_date
        if end_date:
            params["end"] = end_date
        return await self._request("GET", "/reports/depreciation/summary", params=params)

    # ─── 台账 ──────────────────────────────

    async def list_assets(self, query: str | None = None) -> list:
        params = {"q": query} if query else {}
        return await self._request("GET", "/assets", params=params)

    async def list_categories(self) -> list:
        return await self._request("GET", "/categories")


register_client = RegisterClient()
