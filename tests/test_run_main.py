"""
Tests for run.py main() and the dependency injection container.
"""
import json
from types import SimpleNamespace

from run import main
from pagekit.configs import ClientSettings
from pagekit.container import Container, apply_settings
from pagekit.domain.cookie_jar import CookieJar
from pagekit.services.fetch_context import ContinuousFetchContext
from pagekit.services.fetch_delegate import RequestPageDelegate
from pagekit.services.http_service import HttpService
from pagekit.services.notifier import LoopNotifier
from pagekit.services.request_builder import RequestClient


def test_container_creates_services():
    container = Container()
    container.config.PAGEKIT_BASE_URL.from_value("http://api.test")
    container.config.PAGEKIT_USER_AGENT.from_value("TestBot/1.0")

    http_service = container.http_service()
    client = container.request_client()

    assert isinstance(http_service, HttpService)
    assert http_service.user_agent == "TestBot/1.0"
    assert isinstance(client, RequestClient)
    assert client.base_url == "http://api.test"
    assert client.cookie_jar is container.cookie_jar()
    assert isinstance(client.cookie_jar, CookieJar)
    assert isinstance(container.notifier(), LoopNotifier)


def test_fetch_context_factory_uses_configuration():
    container = Container()
    apply_settings(container, ClientSettings(base_url="http://settings.test", min_fetch_interval=2.0, print_log=True))
    delegate = RequestPageDelegate(container.request_client(), "/items", dict)

    ctx = container.fetch_context(delegate)

    assert isinstance(ctx, ContinuousFetchContext)
    assert ctx.delegate is delegate
    assert ctx.min_interval == 2.0
    assert container.request_client().base_url == "http://settings.test"
    assert container.request_client().observer is not None
    assert container.fetch_context(delegate) is not ctx


def _pages(*pages):
    responses = [
        SimpleNamespace(status_code=200, content=json.dumps(page).encode(), headers={}, raw=None)
        for page in pages
    ]
    urls = []

    def http_client(method, url, **kwargs):
        urls.append(url)
        return responses.pop(0)

    return http_client, urls


def test_main_drains_all_pages(capsys):
    http_client, urls = _pages([{"id": 1}, {"id": 2}], [{"id": 3}])
    container = Container()
    container.config.PAGEKIT_BASE_URL.from_value("http://api.test")
    container.http_service.override(HttpService(user_agent="TestBot/1.0", http_client=http_client))

    assert main(["/items", "--page-size", "2", "--param", "sort=id"], container=container) == 0

    assert urls == [
        "http://api.test/items?page=0&size=2&sort=id",
        "http://api.test/items?page=1&size=2&sort=id",
    ]
    assert "3 items" in capsys.readouterr().out


def test_main_respects_page_limit(capsys):
    http_client, urls = _pages([{"id": 1}], [{"id": 2}], [{"id": 3}])
    container = Container()
    container.http_service.override(HttpService(user_agent="TestBot/1.0", http_client=http_client))

    main(["/items", "--page-size", "1", "--pages", "2"], container=container)

    assert len(urls) == 2
    assert "2 items" in capsys.readouterr().out


def test_main_reads_settings_file(tmp_path, capsys):
    settings = tmp_path / "client.yml"
    settings.write_text("base_url: http://from-yaml.test\nheaders:\n  X-Team: core\n", encoding="utf-8")
    http_client, urls = _pages([])
    container = Container()
    container.http_service.override(HttpService(user_agent="TestBot/1.0", http_client=http_client))

    main(["/items", "--config", str(settings)], container=container)

    assert urls == ["http://from-yaml.test/items?page=0&size=20"]
    assert "0 items" in capsys.readouterr().out


def test_main_waits_out_interval_when_cancellations_are_silent(capsys):
    http_client, urls = _pages([{"id": 1}], [{"id": 2}], [])
    container = Container()
    container.config.PAGEKIT_BASE_URL.from_value("http://api.test")
    container.config.PAGEKIT_MIN_FETCH_INTERVAL.from_value(0.05)
    container.config.PAGEKIT_NOTIFY_CANCELLATION.from_value(False)
    container.http_service.override(HttpService(user_agent="TestBot/1.0", http_client=http_client))

    main(["/items", "--page-size", "1"], container=container)

    assert urls == [
        "http://api.test/items?page=0&size=1",
        "http://api.test/items?page=1&size=1",
        "http://api.test/items?page=2&size=1",
    ]
    assert "2 items" in capsys.readouterr().out
