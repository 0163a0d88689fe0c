from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Generic, List, Mapping, Optional, Sequence, Type, TypeVar

from pagekit.domain.cancel_reason import CancelReason
from pagekit.domain.http_method import HttpMethod
from pagekit.services.request_builder import RequestClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FetchDelegate(ABC, Generic[T]):
    """Page I/O and outcome callbacks for a `ContinuousFetchContext`.

    `page_size` and `fetch_page` must be implemented. The remaining hooks
    default to: always fetch, ignore successes and cancellations, and
    propagate every failure.

    `on_success`, `on_failure` and `on_cancel` are plain functions run on
    the context's notifier.
    """

    async def will_fetch(self) -> bool:
        """Called before a fetch starts; return False to skip it."""
        return True

    @abstractmethod
    async def page_size(self) -> int:
        """Number of items a full page holds."""

    @abstractmethod
    async def fetch_page(self, page_index: int) -> Sequence[T]:
        """Return the items of page `page_index` (zero-based)."""

    def on_success(self, items: List[T], is_last: bool) -> None:
        pass

    def on_failure(self, error: Exception) -> bool:
        """Return True to re-raise `error` from `fetch()`."""
        return True

    def on_cancel(self, reason: CancelReason) -> None:
        pass


class RequestPageDelegate(FetchDelegate[T]):
    """Pages a REST endpoint that takes page index and size as query params.

    Each page is `GET <path>?<page_param>=<index>&<size_param>=<size>` plus
    `params` and `headers`, decoded as a JSON array of `model`.
    """

    def __init__(
        self,
        client: RequestClient,
        path: str,
        model: Type[T],
        *,
        size: int = 20,
        page_param: str = "page",
        size_param: str = "size",
        first_page: int = 0,
        params: Optional[Mapping[str, object]] = None,
        headers: Optional[Mapping[str, str]] = None,
        on_page: Optional[Callable[[List[T], bool], None]] = None,
        on_error: Optional[Callable[[Exception], bool]] = None,
    ):
        if size <= 0:
            raise ValueError("size must be > 0")
        self.client = client
        self.path = path
        self.model = model
        self.size = size
        self.page_param = page_param
        self.size_param = size_param
        self.first_page = first_page
        self.params = dict(params or {})
        self.headers = dict(headers or {})
        self._on_page = on_page
        self._on_error = on_error

    async def page_size(self) -> int:
        return self.size

    async def fetch_page(self, page_index: int) -> List[T]:
        builder = (
            self.client.create(self.path, HttpMethod.GET)
            .add_param(self.page_param, self.first_page + page_index)
            .add_param(self.size_param, self.size)
        )
        for name, value in self.params.items():
            if isinstance(value, (list, tuple)):
                builder.add_params(name, value)
            else:
                builder.add_param(name, value)
        for name, value in self.headers.items():
            builder.set_header(name, value)
        return await builder.async_().array(self.model)

    def on_success(self, items: List[T], is_last: bool) -> None:
        if self._on_page is not None:
            self._on_page(items, is_last)

    def on_failure(self, error: Exception) -> bool:
        if self._on_error is not None:
            return bool(self._on_error(error))
        logger.warning("Page fetch failed for %s: %s", self.path, error)
        return True
