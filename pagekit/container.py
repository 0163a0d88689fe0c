"""Dependency injection container for pagekit."""
from dependency_injector import containers, providers
import requests

from pagekit import config as env
from pagekit.configs import ClientSettings
from pagekit.domain.cookie_jar import CookieJar
from pagekit.services.fetch_context import ContinuousFetchContext
from pagekit.services.http_service import HttpService
from pagekit.services.notifier import LoopNotifier
from pagekit.services.request_builder import RequestClient


# Environment variables used by the container (read via `pagekit.config` helpers).
#
# PAGEKIT_BASE_URL (str, default: "http://localhost:8000")
#   Prefix joined with every request path.
#
# PAGEKIT_USER_AGENT (str, default: "pagekit/0.1")
#   User-Agent header for outbound HTTP requests.
#
# PAGEKIT_HTTP_TIMEOUT (int seconds, default: 10)
#   Timeout handed to requests for each call.
#
# PAGEKIT_PRINT_LOG (bool, default: false)
#   Log every request/response pair and cookie update at INFO.
#
# PAGEKIT_STRICT_BODY (bool, default: true)
#   Fail when a body is set on GET/DELETE/...; when false the body is dropped.
#
# PAGEKIT_MIN_FETCH_INTERVAL (float seconds, default: 0.0)
#   Minimum time between successful page fetches of one fetch context.
#
# PAGEKIT_NOTIFY_CANCELLATION (bool, default: true)
#   Report guard rejections to `delegate.on_cancel`; when false they are silent.
ENV = {
    "PAGEKIT_BASE_URL": env.get_str_env("PAGEKIT_BASE_URL", "http://localhost:8000"),
    "PAGEKIT_USER_AGENT": env.get_str_env("PAGEKIT_USER_AGENT", "pagekit/0.1"),
    "PAGEKIT_HTTP_TIMEOUT": env.get_int_env("PAGEKIT_HTTP_TIMEOUT", 10),
    "PAGEKIT_PRINT_LOG": env.get_bool_env("PAGEKIT_PRINT_LOG", False),
    "PAGEKIT_STRICT_BODY": env.get_bool_env("PAGEKIT_STRICT_BODY", True),
    "PAGEKIT_MIN_FETCH_INTERVAL": env.get_float_env("PAGEKIT_MIN_FETCH_INTERVAL", 0.0),
    "PAGEKIT_NOTIFY_CANCELLATION": env.get_bool_env("PAGEKIT_NOTIFY_CANCELLATION", True),
    "PAGEKIT_DEFAULT_HEADERS": {},
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for pagekit clients."""

    config = providers.Configuration(default=ENV)

    # One session so connections are pooled across requests
    http_session = providers.Singleton(requests.Session)

    cookie_jar = providers.Singleton(CookieJar)

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.PAGEKIT_USER_AGENT.as_(str),
        http_client=http_session.provided.request,
        timeout=config.PAGEKIT_HTTP_TIMEOUT.as_(int),
    )

    request_client = providers.Singleton(
        RequestClient,
        base_url=config.PAGEKIT_BASE_URL.as_(str),
        http_service=http_service,
        cookie_jar=cookie_jar,
        strict_body=config.PAGEKIT_STRICT_BODY.as_(bool),
        default_headers=config.PAGEKIT_DEFAULT_HEADERS,
        print_log=config.PAGEKIT_PRINT_LOG.as_(bool),
    )

    notifier = providers.Singleton(LoopNotifier)

    # Call with the delegate: container.fetch_context(delegate)
    fetch_context = providers.Factory(
        ContinuousFetchContext,
        min_interval=config.PAGEKIT_MIN_FETCH_INTERVAL.as_(float),
        notifier=notifier,
        notify_cancellation=config.PAGEKIT_NOTIFY_CANCELLATION.as_(bool),
    )


def apply_settings(container: Container, settings: ClientSettings) -> Container:
    """Override container configuration with values from a settings file."""
    container.config.from_dict({
        "PAGEKIT_BASE_URL": settings.base_url,
        "PAGEKIT_HTTP_TIMEOUT": settings.timeout,
        "PAGEKIT_PRINT_LOG": settings.print_log,
        "PAGEKIT_STRICT_BODY": settings.strict_body,
        "PAGEKIT_MIN_FETCH_INTERVAL": settings.min_fetch_interval,
        "PAGEKIT_DEFAULT_HEADERS": dict(settings.headers),
    })
    return container
