class RelayError(Exception):
    pass


class CredentialsUnavailableError(RelayError):
    """Credentials were never loaded, so no backend call can be signed."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "Server not initialized: Missing token or other static parameters. Check server logs."
        )


class InvalidBackendResponse(RelayError):
    """The backend answered 2xx but the body is not JSON."""
