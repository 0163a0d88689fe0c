from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union
from urllib.parse import quote

from pydantic import BaseModel, TypeAdapter
from requests.structures import CaseInsensitiveDict

from pagekit.domain.cookie_jar import CookieJar
from pagekit.domain.http_method import HttpMethod
from pagekit.domain.request_description import RequestDescription
from pagekit.exceptions import RequestBodyViolationError
from pagekit.services.async_request import AsyncRequest
from pagekit.services.http_service import HttpService
from pagekit.services.request_observer import LoggingRequestObserver, RequestObserver

logger = logging.getLogger(__name__)


def encode_document(document: Any) -> Any:
    """Turn a DTO, dataclass or mapping into a JSON-ready structure."""
    if isinstance(document, BaseModel):
        return document.model_dump(mode="json", by_alias=True)
    return TypeAdapter(type(document)).dump_python(document, mode="json")


def decode_document(body: bytes, target: Any) -> Any:
    """Validate a JSON body into `target` (a model, a `List[...]`, a dict type)."""
    return TypeAdapter(target).validate_json(body)


class RequestClient:
    """Shared state for every request sent to one API.

    Holds the base URL, the cookie jar carried between requests, the
    executor and the body policy. `strict_body` decides whether a body on a
    non-mutating method fails at construction or is dropped. `encoder` turns
    a body into JSON-ready data; `decoder(body, target)` turns response bytes
    into `target`. Both default to pydantic.
    """

    def __init__(
        self,
        base_url: str,
        http_service: HttpService,
        cookie_jar: Optional[CookieJar] = None,
        observer: Optional[RequestObserver] = None,
        strict_body: bool = True,
        default_headers: Optional[Mapping[str, str]] = None,
        print_log: bool = False,
        encoder: Callable[[Any], Any] = encode_document,
        decoder: Callable[[bytes, Any], Any] = decode_document,
    ):
        self.base_url = base_url.rstrip("/") if base_url else ""
        self.http_service = http_service
        self.cookie_jar = cookie_jar if cookie_jar is not None else CookieJar()
        if observer is None and print_log:
            observer = LoggingRequestObserver()
        self.observer = observer
        self.strict_body = bool(strict_body)
        self.default_headers = dict(default_headers or {})
        self.encoder = encoder
        self.decoder = decoder

    def create(self, path: str, method: Union[HttpMethod, str] = HttpMethod.GET) -> "RequestBuilder":
        return RequestBuilder(self, path, HttpMethod.parse(method))


class RequestBuilder:
    """Fluent accumulator for one request; every setter returns the builder."""

    def __init__(self, client: RequestClient, path: str, method: HttpMethod):
        self.client = client
        self.path = path
        self.method = method
        self._headers: Dict[str, str] = {}
        self._params: Dict[str, List[Optional[str]]] = {}
        self._document: Any = None
        self._fields: Dict[str, Any] = {}

    def add_param(self, name: str, value: Optional[Any]) -> "RequestBuilder":
        self._params.setdefault(name, []).append(None if value is None else str(value))
        return self

    def add_params(self, name: str, values: Iterable[Optional[Any]]) -> "RequestBuilder":
        present = self._params.setdefault(name, [])
        present.extend(None if v is None else str(v) for v in values)
        return self

    def set_header(self, name: str, value: str) -> "RequestBuilder":
        self._headers[name] = value
        return self

    def set_body(self, document: Any) -> "RequestBuilder":
        self._document = document
        return self

    def set_field(self, name: str, value: Any) -> "RequestBuilder":
        self._fields[name] = value
        return self

    def create_url(self) -> str:
        url = self.client.base_url + self.path
        if not self._params:
            return url

        pairs = []
        for name, values in self._params.items():
            encoded_name = quote(name, safe="[]")
            for value in values:
                pairs.append(f"{encoded_name}={quote(value, safe='') if value is not None else ''}")
        return url + "?" + "&".join(pairs)

    def create_body(self) -> Optional[Any]:
        if self._document is None and not self._fields:
            return None
        if not self.method.allows_body:
            if self.client.strict_body:
                raise RequestBodyViolationError(self.method.value)
            logger.warning("Dropping body for %s %s: method does not accept one", self.method.value, self.path)
            return None
        if self._document is not None:
            return self.client.encoder(self._document)
        return self.client.encoder(dict(self._fields))

    def create_headers(self) -> Dict[str, str]:
        headers = CaseInsensitiveDict()
        headers["Content-Type"] = "application/json"
        headers.update(self.client.default_headers)
        if "Cookie" not in CaseInsensitiveDict(self._headers):
            cookie = self.client.cookie_jar.header_value()
            if cookie:
                headers["Cookie"] = cookie
        headers.update(self._headers)
        return dict(headers)

    def build(self) -> RequestDescription:
        """Assemble the request; configuration violations raise here."""
        body = self.create_body()
        return RequestDescription(
            url=self.create_url(),
            method=self.method,
            headers=self.create_headers(),
            json_body=body,
        )

    def async_(self) -> AsyncRequest:
        # Fail now rather than once the request is awaited.
        self.create_body()
        return AsyncRequest(self)
