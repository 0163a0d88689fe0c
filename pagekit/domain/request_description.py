from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from pagekit.domain.http_method import HttpMethod


@dataclass(frozen=True)
class RequestDescription:
    """Everything the executor needs to send one request."""

    url: str
    method: HttpMethod
    headers: Dict[str, str] = field(default_factory=dict)
    json_body: Optional[Any] = None

    @property
    def has_body(self) -> bool:
        return self.json_body is not None
