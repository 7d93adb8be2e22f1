"""OAuth token record."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class TokenRecord:
    """Access/refresh token pair plus the access token's expiry (UTC)."""

    access_token: str
    refresh_token: str
    expiry: datetime

    def with_access_token(self, access_token: str, expiry: datetime) -> TokenRecord:
        """Return a copy carrying a refreshed access token; the refresh token is kept."""
        return TokenRecord(
            access_token=access_token,
            refresh_token=self.refresh_token,
            expiry=expiry,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expiry": self.expiry.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TokenRecord:
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token") or "",
            expiry=datetime.fromisoformat(data["expiry"]),
        )
