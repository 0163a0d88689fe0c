"""Declarative HTTP requests and paginated fetching on top of requests."""
from pagekit.domain import CancelReason, CookieJar, HttpMethod
from pagekit.services.fetch_context import ContinuousFetchContext
from pagekit.services.fetch_delegate import FetchDelegate, RequestPageDelegate
from pagekit.services.request_builder import RequestBuilder, RequestClient

__version__ = "0.1.0"

__all__ = [
    "CancelReason",
    "CookieJar",
    "HttpMethod",
    "ContinuousFetchContext",
    "FetchDelegate",
    "RequestPageDelegate",
    "RequestBuilder",
    "RequestClient",
]
