"""Errors raised while relaying the upstream stream."""


class UpstreamError(Exception):
    """Raised when the upstream call cannot be started."""

    pass


class UpstreamStatusError(UpstreamError):
    """Raised when upstream answers with a non-success status."""

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"API responded with status: {status_code}")


class UpstreamStreamError(Exception):
    """Raised when the upstream stream breaks after relaying has begun."""

    pass
