import requests
from typing import Callable, Tuple

from pagekit.domain.http_response import HttpResponse
from pagekit.domain.request_description import RequestDescription
from pagekit.exceptions import HttpFetchError


def _set_cookie_values(resp) -> Tuple[str, ...]:
    """Collect raw Set-Cookie values, unfolded when the transport allows it."""
    raw_headers = getattr(getattr(resp, "raw", None), "headers", None)
    getlist = getattr(raw_headers, "getlist", None)
    if callable(getlist):
        values = getlist("Set-Cookie")
        if isinstance(values, (list, tuple)) and values:
            return tuple(values)

    headers = getattr(resp, "headers", None) or {}
    folded = headers.get("Set-Cookie")
    return (folded,) if folded else ()


class HttpService:
    """
    HTTP executor for built request descriptions.

    Requires http_client callable for dependency injection, with the
    signature of `requests.request` / `requests.Session.request`.
    This enables easy testing without patching and allows swapping sessions.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: int = 10):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client

    def execute(self, request: RequestDescription) -> HttpResponse:
        """Send `request` and return status code, raw body, headers and cookies."""
        headers = {"User-Agent": self.user_agent}
        headers.update(request.headers)
        try:
            resp = self.http_client(
                request.method.value,
                request.url,
                headers=headers,
                json=request.json_body,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(request.url, e) from e

        # Let real exceptions from the response object bubble up.
        response_headers = getattr(resp, "headers", None) or {}
        return HttpResponse(
            status_code=resp.status_code,
            body=resp.content or b"",
            headers=dict(response_headers),
            set_cookies=_set_cookie_values(resp),
            url=request.url,
        )
