"""Custom exceptions for pagekit requests and settings."""


class RequestBodyViolationError(Exception):
    """Raised when a body is attached to a method that does not accept one."""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"{method} requests cannot carry a body")


class HttpFetchError(Exception):
    """Raised when an HTTP request fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")


class HttpStatusError(Exception):
    """Raised when the server answers with a non-2xx status code."""

    def __init__(self, url: str, response):
        self.url = url
        self.response = response
        self.status_code = response.status_code
        super().__init__(f"HTTP {response.status_code} for {url}")


class EmptyResponseError(Exception):
    """Raised when a response has no body but a document was expected."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Response for {url} has no body")


class ResponseDecodeError(Exception):
    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"Could not decode response for {url}: {original}")


class SettingsFileError(Exception):
    """Raised when a client settings file cannot be read or is invalid."""

    def __init__(self, path: str, reason: str = "invalid"):
        self.path = path
        self.reason = reason
        super().__init__(f"Settings file '{path}' {reason}")
