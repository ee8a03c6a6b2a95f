"""Request-context adapters for web frameworks."""

from __future__ import annotations

from typing import Optional

from fastapi import Request


class StarletteRemoteAddress:
    """Exposes a FastAPI/Starlette request as a ``RemoteAddressProvider``."""

    def __init__(self, request: Request, *, trust_forwarded: bool = False) -> None:
        self.request = request
        self.trust_forwarded = trust_forwarded

    def remote_ip(self) -> Optional[str]:
        if self.trust_forwarded:
            forwarded = self.request.headers.get("x-forwarded-for", "")
            first_hop = forwarded.split(",")[0].strip()
            if first_hop:
                return first_hop
        client = self.request.client
        return client.host if client else None
