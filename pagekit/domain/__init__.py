"""Domain objects for pagekit - explicit re-exports to satisfy linters."""
from .cancel_reason import CancelReason as CancelReason
from .cookie_jar import CookieJar as CookieJar
from .http_method import HttpMethod as HttpMethod
from .http_response import HttpResponse as HttpResponse
from .responses import DataTransferObject as DataTransferObject
from .responses import EmptyResponse as EmptyResponse
from .responses import ErrorResponse as ErrorResponse

__all__ = [
    "CancelReason",
    "CookieJar",
    "HttpMethod",
    "HttpResponse",
    "DataTransferObject",
    "EmptyResponse",
    "ErrorResponse",
]
