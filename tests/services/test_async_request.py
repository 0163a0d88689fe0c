import asyncio
import logging
from types import SimpleNamespace

import pytest
from pydantic import BaseModel

from pagekit.domain.cookie_jar import CookieJar
from pagekit.domain.http_method import HttpMethod
from pagekit.domain.responses import EmptyResponse, ErrorResponse
from pagekit.exceptions import EmptyResponseError, HttpStatusError, ResponseDecodeError
from pagekit.services.http_service import HttpService
from pagekit.services.request_builder import RequestClient


class Widget(BaseModel):
    id: int
    name: str


class _RawHeaders:
    def __init__(self, set_cookies):
        self._set_cookies = list(set_cookies)

    def getlist(self, name):
        return list(self._set_cookies) if name == "Set-Cookie" else []


def _resp(status=200, body=b"", headers=None, set_cookies=None):
    raw = SimpleNamespace(headers=_RawHeaders(set_cookies)) if set_cookies is not None else None
    return SimpleNamespace(status_code=status, content=body, headers=headers or {}, raw=raw)


def _client(responses, **kwargs):
    calls = []

    def http_client(method, url, **kw):
        calls.append((method, url, kw))
        return responses.pop(0)

    service = HttpService(user_agent="TestAgent", http_client=http_client)
    return RequestClient("http://api.test", service, **kwargs), calls


def test_object_decodes_model():
    client, calls = _client([_resp(body=b'{"id": 1, "name": "pen"}')])
    widget = asyncio.run(client.create("/widgets/1").async_().object(Widget))
    assert widget == Widget(id=1, name="pen")
    method, url, kwargs = calls[0]
    assert (method, url) == ("GET", "http://api.test/widgets/1")
    assert kwargs["headers"]["User-Agent"] == "TestAgent"
    assert kwargs["json"] is None


def test_array_decodes_list_of_models():
    client, _ = _client([_resp(body=b'[{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]')])
    widgets = asyncio.run(client.create("/widgets").async_().array(Widget))
    assert [w.id for w in widgets] == [1, 2]


def test_empty_accepts_blank_and_ack_bodies():
    client, _ = _client([_resp(status=204), _resp(body=b'{"ok": true}')])
    first = asyncio.run(client.create("/ping", HttpMethod.POST).async_().empty())
    second = asyncio.run(client.create("/ping", HttpMethod.POST).async_().empty())
    assert isinstance(first, EmptyResponse)
    assert isinstance(second, EmptyResponse)


def test_error_decoded_regardless_of_status():
    client, _ = _client([_resp(status=422, body=b'{"code": "invalid", "message": "name required"}')])
    error = asyncio.run(client.create("/widgets", HttpMethod.POST).async_().error())
    assert isinstance(error, ErrorResponse)
    assert error.code == "invalid"
    assert error.message == "name required"
    assert error.status == 422


def test_error_with_blank_body_keeps_status():
    client, _ = _client([_resp(status=500)])
    error = asyncio.run(client.create("/widgets").async_().error())
    assert error.status == 500
    assert error.message is None


def test_non_2xx_raises_status_error():
    client, _ = _client([_resp(status=404, body=b'{"message": "nope"}')])
    with pytest.raises(HttpStatusError) as exc:
        asyncio.run(client.create("/widgets/9").async_().object(Widget))
    assert exc.value.status_code == 404
    assert exc.value.response.text == '{"message": "nope"}'


def test_blank_body_for_object_raises_empty_response():
    client, _ = _client([_resp(status=200, body=b"")])
    with pytest.raises(EmptyResponseError):
        asyncio.run(client.create("/widgets/1").async_().object(Widget))


def test_mismatched_body_raises_decode_error():
    client, _ = _client([_resp(body=b'{"id": "not-a-number"}')])
    with pytest.raises(ResponseDecodeError) as exc:
        asyncio.run(client.create("/widgets/1").async_().object(Widget))
    assert "http://api.test/widgets/1" in str(exc.value)


def test_data_returns_raw_bytes():
    client, _ = _client([_resp(body=b"\x00\x01")])
    assert asyncio.run(client.create("/blob").async_().data()) == b"\x00\x01"


def test_body_sent_as_json():
    client, calls = _client([_resp(status=204)])
    asyncio.run(client.create("/widgets", HttpMethod.POST).set_field("name", "pen").async_().empty())
    assert calls[0][2]["json"] == {"name": "pen"}


def test_set_cookie_updates_jar_and_next_request():
    jar = CookieJar()
    client, calls = _client(
        [
            _resp(body=b"{}", set_cookies=["sid=abc; Path=/; HttpOnly", "theme=dark"]),
            _resp(body=b"{}"),
        ],
        cookie_jar=jar,
    )

    async def scenario():
        await client.create("/login", HttpMethod.POST).async_().empty()
        await client.create("/me").async_().empty()

    asyncio.run(scenario())
    assert jar.get("sid") == "abc"
    assert jar.get("theme") == "dark"
    assert [name for name, _ in jar.items()] == ["sid", "theme"]
    assert calls[1][2]["headers"]["Cookie"] == "sid=abc; theme=dark"


def test_folded_set_cookie_header_is_split():
    jar = CookieJar()
    client, _ = _client(
        [_resp(body=b"{}", headers={"Set-Cookie": "a=1; Expires=Wed, 21 Oct 2015 07:28:00 GMT, b=2"})],
        cookie_jar=jar,
    )
    asyncio.run(client.create("/login", HttpMethod.POST).async_().empty())
    assert jar.items() == [("a", "1"), ("b", "2")]


def test_cookies_updated_even_on_error_status():
    jar = CookieJar()
    client, _ = _client([_resp(status=401, set_cookies=["sid=expired"])], cookie_jar=jar)
    with pytest.raises(HttpStatusError):
        asyncio.run(client.create("/me").async_().data())
    assert jar.get("sid") == "expired"


def test_print_log_logs_request_and_response(caplog):
    caplog.set_level(logging.INFO)
    client, _ = _client([_resp(body=b'{"id": 1, "name": "pen"}', set_cookies=["sid=1"])], print_log=True)
    asyncio.run(client.create("/widgets/1").async_().object(Widget))
    assert ">> GET http://api.test/widgets/1" in caplog.text
    assert "<< GET http://api.test/widgets/1: status=200" in caplog.text
    assert "Cookie updated. name=sid, value=1" in caplog.text


def test_custom_encoder_and_decoder():
    decoded = []

    def decoder(body, target):
        decoded.append(target)
        return {"raw": body.decode()}

    client, calls = _client(
        [_resp(body=b"hello")],
        encoder=lambda document: {"payload": document},
        decoder=decoder,
    )
    result = asyncio.run(
        client.create("/widgets", HttpMethod.POST).set_field("name", "pen").async_().object(Widget)
    )

    assert calls[0][2]["json"] == {"payload": {"name": "pen"}}
    assert decoded == [Widget]
    assert result == {"raw": "hello"}


def test_decoder_value_error_becomes_decode_error():
    def decoder(body, target):
        raise ValueError("not json")

    client, _ = _client([_resp(body=b"<html>")], decoder=decoder)
    with pytest.raises(ResponseDecodeError) as exc:
        asyncio.run(client.create("/widgets/1").async_().object(Widget))
    assert isinstance(exc.value.original, ValueError)
