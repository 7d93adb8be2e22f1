"""Error kinds surfaced by the services and rendered by the API layer."""


class ShortsBotError(Exception):
    """Base error. ``status_code`` is what the API responds with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotAuthenticated(ShortsBotError):
    """No token record; the operator must connect the channel."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class RefreshFailed(ShortsBotError):
    """The identity provider rejected a refresh; re-authorization is required."""

    status_code = 502

    def __init__(self, reason: str):
        super().__init__(f"Token refresh failed: {reason}")
        self.reason = reason


class NotFound(ShortsBotError):
    status_code = 404


class UpstreamError(ShortsBotError):
    """An external API returned an error payload or the transport failed."""

    status_code = 502

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.reason = reason or message


class ValidationError(ShortsBotError):
    """Missing or malformed caller input."""

    status_code = 400
