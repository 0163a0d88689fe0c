from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional, Tuple


class HttpResponse(NamedTuple):
    """Response from an executed HTTP request."""
    status_code: int
    body: bytes
    headers: Mapping[str, str] = MappingProxyType({})
    set_cookies: Tuple[str, ...] = ()
    url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def content_type(self) -> Optional[str]:
        for name, value in self.headers.items():
            if name.lower() == "content-type":
                return value
        return None

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")
