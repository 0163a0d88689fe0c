"""Optional hooks for watching requests go out and responses come back."""
import logging
from typing import Iterable, Optional, Protocol, Tuple

from pagekit.domain.http_response import HttpResponse
from pagekit.domain.request_description import RequestDescription

logger = logging.getLogger(__name__)


class RequestObserver(Protocol):
    def will_send(self, request: RequestDescription) -> None: ...

    def did_receive(self, request: RequestDescription, response: HttpResponse) -> None: ...

    def cookies_updated(self, cookies: Iterable[Tuple[str, Optional[str]]]) -> None: ...


class LoggingRequestObserver:
    """Logs every request/response pair at INFO, the way `print_log` asks for."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger

    def will_send(self, request: RequestDescription) -> None:
        self._log.info(">> %s %s: headers=%s, body=%s", request.method.value, request.url, request.headers, request.json_body)

    def did_receive(self, request: RequestDescription, response: HttpResponse) -> None:
        self._log.info(
            "<< %s %s: status=%s, headers=%s, body=%s",
            request.method.value,
            response.url or "<unidentified>",
            response.status_code,
            dict(response.headers),
            response.text,
        )

    def cookies_updated(self, cookies: Iterable[Tuple[str, Optional[str]]]) -> None:
        for name, value in cookies:
            self._log.info("Cookie updated. name=%s, value=%s", name, value)
