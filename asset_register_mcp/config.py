import os
from dataclasses import dataclass


@dataclass
class MCPConfig:
    server_url: str = os.getenv("FAR_SERVER_URL", "http://localhost:8000")
    api_key: str = os.getenv("FAR_API_KEY", "")
    transport: str = os.getenv("FAR_TRANSPORT", "stdio")  # stdio | sse
    sse_port: int = int(os.getenv("FAR_SSE_PORT", "3000"))

    @property
    def auth_header(self) -> dict[str, str]:
        if self.api_key:
            return {"Authorization": f"Bearer {self.api_key}"}
        return {}


config = MCPConfig()
