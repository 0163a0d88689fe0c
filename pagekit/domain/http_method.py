from enum import Enum


class HttpMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    DELETE = "DELETE"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"

    @property
    def allows_body(self) -> bool:
        """Only mutating methods carry a request body."""
        return self in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)

    @classmethod
    def parse(cls, value) -> "HttpMethod":
        if isinstance(value, HttpMethod):
            return value
        if value is None or (isinstance(value, str) and value.strip() == ""):
            raise ValueError("method is required")
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown HTTP method: {value!r}") from None
