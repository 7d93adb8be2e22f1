"""Operator-supplied API credentials."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class Credentials:
    client_id: str | None = None
    client_secret: str | None = None
    generation_api_key: str | None = None

    @property
    def configured(self) -> bool:
        """OAuth needs both the client id and secret."""
        return bool(self.client_id and self.client_secret)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Credentials:
        return cls(
            client_id=data.get("client_id"),
            client_secret=data.get("client_secret"),
            generation_api_key=data.get("generation_api_key"),
        )
