import re
import threading
from typing import Dict, Iterable, List, Optional, Tuple

# A folded Set-Cookie header joins cookies with ", "; commas inside Expires
# dates are followed by a space, never by "name=".
_FOLDED_COOKIE_SPLIT = re.compile(r",\s*(?=[^;,=\s]+=)")


def parse_set_cookie(header_value: str) -> List[Tuple[str, Optional[str]]]:
    """Return the (name, value) pairs carried by a Set-Cookie header value.

    Only the leading `name[=value]` pair of each cookie is kept; attributes
    like Path, Expires or HttpOnly are ignored. A cookie without `=` yields a
    None value.
    """
    cookies: List[Tuple[str, Optional[str]]] = []
    if not header_value:
        return cookies
    for cookie in _FOLDED_COOKIE_SPLIT.split(header_value):
        pair = cookie.split(";", 1)[0].strip()
        if not pair:
            continue
        name, sep, value = pair.partition("=")
        name = name.strip()
        if not name:
            continue
        cookies.append((name, value.strip() if sep else None))
    return cookies


class CookieJar:
    """
    Session cookies shared by every request created from one client.

    Written after each response carrying Set-Cookie and read when the next
    request's headers are built. Requests execute on worker threads, so all
    access goes through a lock.
    """

    def __init__(self, cookies: Optional[Dict[str, Optional[str]]] = None):
        self._lock = threading.Lock()
        self._cookies: Dict[str, Optional[str]] = dict(cookies or {})

    def set(self, name: str, value: Optional[str] = None) -> None:
        with self._lock:
            self._cookies[name] = value

    def get(self, name: str) -> Optional[str]:
        with self._lock:
            return self._cookies.get(name)

    def remove(self, name: str) -> bool:
        with self._lock:
            return self._cookies.pop(name, _MISSING) is not _MISSING

    def clear(self) -> None:
        with self._lock:
            self._cookies.clear()

    def items(self) -> List[Tuple[str, Optional[str]]]:
        with self._lock:
            return list(self._cookies.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._cookies)

    def update_from_set_cookie(self, header_values: Iterable[str]) -> List[Tuple[str, Optional[str]]]:
        """Merge every cookie found in `header_values` and return what changed."""
        updated: List[Tuple[str, Optional[str]]] = []
        for header_value in header_values:
            updated.extend(parse_set_cookie(header_value))
        if updated:
            with self._lock:
                for name, value in updated:
                    self._cookies[name] = value
        return updated

    def header_value(self) -> Optional[str]:
        """Render the jar as a Cookie header, or None when it is empty."""
        with self._lock:
            if not self._cookies:
                return None
            return "; ".join(
                name if value is None else f"{name}={value}"
                for name, value in self._cookies.items()
            )


_MISSING = object()
