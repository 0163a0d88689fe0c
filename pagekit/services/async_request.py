from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, List, Type, TypeVar

from pagekit.domain.http_response import HttpResponse
from pagekit.domain.responses import EmptyResponse, ErrorResponse
from pagekit.exceptions import EmptyResponseError, HttpStatusError, ResponseDecodeError

if TYPE_CHECKING:
    from pagekit.services.request_builder import RequestBuilder

logger = logging.getLogger(__name__)

M = TypeVar("M")


class AsyncRequest:
    """Executes a built request off the event loop and decodes the result.

    The blocking executor call runs in a worker thread via
    `asyncio.to_thread`; the cookie jar is updated from that thread before
    the response is handed back.
    """

    def __init__(self, builder: "RequestBuilder"):
        self._builder = builder

    def _fetch_sync(self) -> HttpResponse:
        client = self._builder.client
        request = self._builder.build()
        if client.observer is not None:
            client.observer.will_send(request)

        response = client.http_service.execute(request)

        updated = client.cookie_jar.update_from_set_cookie(response.set_cookies)
        if updated:
            logger.debug("Cookie jar updated from %s: %s", request.url, [name for name, _ in updated])
        if client.observer is not None:
            if updated:
                client.observer.cookies_updated(updated)
            client.observer.did_receive(request, response)
        return response

    async def response(self) -> HttpResponse:
        """Raw response, whatever its status."""
        return await asyncio.to_thread(self._fetch_sync)

    async def _ok_response(self) -> HttpResponse:
        response = await self.response()
        if not response.ok:
            raise HttpStatusError(response.url or self._builder.path, response)
        return response

    def _decode(self, response: HttpResponse, target):
        url = response.url or self._builder.path
        if not response.body.strip():
            raise EmptyResponseError(url)
        try:
            return self._builder.client.decoder(response.body, target)
        except ValueError as e:
            raise ResponseDecodeError(url, e) from e

    async def data(self) -> bytes:
        response = await self._ok_response()
        return response.body

    async def object(self, model: Type[M]) -> M:
        response = await self._ok_response()
        return self._decode(response, model)

    async def array(self, model: Type[M]) -> List[M]:
        response = await self._ok_response()
        return self._decode(response, List[model])

    async def empty(self) -> EmptyResponse:
        response = await self._ok_response()
        if not response.body.strip():
            return EmptyResponse()
        return self._decode(response, EmptyResponse)

    async def error(self) -> ErrorResponse:
        """Decode the server's error document; the status code is not checked."""
        response = await self.response()
        if not response.body.strip():
            return ErrorResponse(status=response.status_code)
        decoded = self._decode(response, ErrorResponse)
        if decoded.status is None:
            decoded = decoded.model_copy(update={"status": response.status_code})
        return decoded
