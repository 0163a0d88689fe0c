import argparse
import asyncio
import logging
from typing import Any, Dict, List, Optional

from pagekit.configs import load_client_settings
from pagekit.container import Container, apply_settings
from pagekit.domain.cancel_reason import CancelReason
from pagekit.services.fetch_delegate import RequestPageDelegate

logger = logging.getLogger("pagekit.run")


class _DrainDelegate(RequestPageDelegate[Dict[str, Any]]):
    """Collects every page and remembers the last cancellation reason."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.items: List[Dict[str, Any]] = []
        self.last_cancel: Optional[CancelReason] = None

    def on_success(self, items, is_last):
        self.items.extend(items)
        logger.info("Page received: %d items (last=%s)", len(items), is_last)

    def on_cancel(self, reason):
        self.last_cancel = reason


def _parse_params(raw: List[str]) -> Dict[str, List[str]]:
    params: Dict[str, List[str]] = {}
    for item in raw:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise ValueError(f"Invalid --param {item!r}, expected name=value")
        params.setdefault(name, []).append(value)
    return params


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Drain a paginated JSON endpoint.")
    parser.add_argument("path", help="endpoint path appended to the base URL, e.g. /items")
    parser.add_argument("--page-size", type=int, default=20)
    parser.add_argument("--pages", type=int, default=None, help="stop after this many pages")
    parser.add_argument("--page-param", default="page")
    parser.add_argument("--size-param", default="size")
    parser.add_argument("--param", action="append", default=[], help="extra query param name=value")
    parser.add_argument("--config", default=None, help="YAML client settings file")
    return parser


async def drain(container: Container, args) -> List[Dict[str, Any]]:
    delegate = _DrainDelegate(
        container.request_client(),
        args.path,
        Dict[str, Any],
        size=args.page_size,
        page_param=args.page_param,
        size_param=args.size_param,
        params=_parse_params(args.param),
    )
    context = container.fetch_context(delegate)

    pages = 0
    while context.has_more_contents and (args.pages is None or pages < args.pages):
        before = context.page_index
        delegate.last_cancel = None
        await context.fetch()
        if context.page_index > before:
            pages += 1
            continue
        wait = context.interval_remaining
        if wait > 0 or delegate.last_cancel is CancelReason.INTERVAL_NOT_ELAPSED:
            await asyncio.sleep(wait)
            continue
        if delegate.last_cancel is not None:
            logger.info("Stopped: %s", delegate.last_cancel.value)
        break

    logger.info("Fetched %d pages, %d items", pages, len(delegate.items))
    return delegate.items


def main(argv: Optional[List[str]] = None, container: Optional[Container] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)

    container = container or Container()
    if args.config:
        apply_settings(container, load_client_settings(args.config))

    items = asyncio.run(drain(container, args))
    print(f"{len(items)} items")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
