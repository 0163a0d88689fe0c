from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Generic, Optional, TypeVar

from pagekit.domain.cancel_reason import CancelReason
from pagekit.services.fetch_delegate import FetchDelegate
from pagekit.services.notifier import LoopNotifier, Notifier

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ContinuousFetchContext(Generic[T]):
    """Page cursor and fetch state machine for one paginated resource.

    `fetch()` loads the next page through the delegate. It is meant to be
    called speculatively (e.g. on every scroll tick): calls that cannot
    proceed are reported to `delegate.on_cancel` with a `CancelReason` and
    never raise. Guards, in order:

    1. another fetch is in flight -> ALREADY_FETCHING
    2. a short page was already seen -> NO_MORE_CONTENT
    3. less than `min_interval` seconds since the last successful fetch
       -> INTERVAL_NOT_ELAPSED
    4. `delegate.will_fetch()` returned False -> WILL_FETCH_RETURNED_FALSE

    State lives behind one `asyncio.Condition`; its lock is never held
    across delegate calls. The context is bound to the event loop that
    first uses it.
    """

    def __init__(
        self,
        delegate: FetchDelegate[T],
        *,
        min_interval: float = 0.0,
        notifier: Optional[Notifier] = None,
        notify_cancellation: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        if min_interval is None or min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.delegate = delegate
        self.min_interval = float(min_interval)
        self.notify_cancellation = bool(notify_cancellation)
        self._notifier = notifier or LoopNotifier()
        self._clock = clock
        self._condition = asyncio.Condition()

        self._page_index = 0
        self._has_more_contents = True
        self._is_fetching = False
        self._pending_resets = 0
        self._last_fetch_at: Optional[float] = None

    @property
    def page_index(self) -> int:
        return self._page_index

    @property
    def has_more_contents(self) -> bool:
        return self._has_more_contents

    @property
    def is_fetching(self) -> bool:
        return self._is_fetching

    @property
    def last_fetch_at(self) -> Optional[float]:
        return self._last_fetch_at

    @property
    def interval_remaining(self) -> float:
        """Seconds until the interval guard admits another fetch."""
        if self._last_fetch_at is None:
            return 0.0
        return max(0.0, self.min_interval - (self._clock() - self._last_fetch_at))

    def _rejection(self) -> Optional[CancelReason]:
        # a pending reset holds off new claims until the cursor is rewound
        if self._is_fetching or self._pending_resets:
            return CancelReason.ALREADY_FETCHING
        if not self._has_more_contents:
            return CancelReason.NO_MORE_CONTENT
        if self._last_fetch_at is not None and self._clock() - self._last_fetch_at < self.min_interval:
            return CancelReason.INTERVAL_NOT_ELAPSED
        return None

    async def _claim(self) -> Optional[CancelReason]:
        async with self._condition:
            reason = self._rejection()
            if reason is None:
                self._is_fetching = True
            return reason

    async def _release(self) -> None:
        async with self._condition:
            self._is_fetching = False
            self._condition.notify_all()

    async def _cancel(self, reason: CancelReason) -> None:
        logger.debug("Fetch cancelled at page %d: %s", self._page_index, reason.value)
        if self.notify_cancellation:
            await self._notifier.call(self.delegate.on_cancel, reason)

    async def fetch(self) -> None:
        """Fetch the next page, or report why it cannot be fetched now.

        Raises only when the delegate's page I/O fails and `on_failure`
        returns True, or when `will_fetch` itself raises.
        """
        reason = await self._claim()
        if reason is not None:
            await self._cancel(reason)
            return

        try:
            proceed = await self.delegate.will_fetch()
        except BaseException:
            await self._release()
            raise
        if not proceed:
            await self._release()
            await self._cancel(CancelReason.WILL_FETCH_RETURNED_FALSE)
            return

        try:
            await self._fetch_next_page()
        finally:
            await self._release()

    async def _fetch_next_page(self) -> None:
        page_index = self._page_index
        try:
            page_size = await self.delegate.page_size()
            if page_size <= 0:
                raise ValueError(f"page size must be > 0, got {page_size!r}")
            items = list(await self.delegate.fetch_page(page_index))
        except Exception as error:
            logger.debug("Fetch of page %d failed: %s", page_index, error)
            if await self._notifier.call(self.delegate.on_failure, error):
                raise
            return

        if len(items) > page_size:
            logger.warning("Page %d returned %d items for a page size of %d", page_index, len(items), page_size)
        has_more_contents = len(items) == page_size

        async with self._condition:
            self._has_more_contents = has_more_contents
            self._page_index += 1
            self._last_fetch_at = self._clock()
        logger.debug("Fetched page %d (%d items, last=%s)", page_index, len(items), not has_more_contents)

        await self._notifier.call(self.delegate.on_success, items, not has_more_contents)

    async def reset(self) -> None:
        """Rewind to the first page once any in-flight fetch has finished.

        Fetches attempted while the reset is pending are cancelled with
        ALREADY_FETCHING. The interval since the last successful fetch still
        applies.
        """
        async with self._condition:
            self._pending_resets += 1
            try:
                await self._condition.wait_for(lambda: not self._is_fetching)
                self._page_index = 0
                self._has_more_contents = True
            finally:
                self._pending_resets -= 1
        logger.debug("Fetch context reset")

    def __repr__(self):
        return (
            f"<ContinuousFetchContext page_index={self._page_index} "
            f"has_more_contents={self._has_more_contents} is_fetching={self._is_fetching}>"
        )
