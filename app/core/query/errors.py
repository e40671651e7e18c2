class GatewayError(Exception):
    """Base class for every failure the query gateway reports to a caller."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(GatewayError):
    """The request itself is malformed (neither or both of sql/question)."""


class QueryRejected(BadRequest):
    """SqlGuard denied the statement; message is the guard's reason."""


class TranslationUnavailable(GatewayError):
    """No language-model credential is configured."""


class TranslationFailed(GatewayError):
    """The language model call failed or returned nothing usable."""


class QueryFailed(GatewayError):
    """Any database-layer fault while running an allowed statement."""


class QueryTimeout(QueryFailed):
    """The server-side statement timeout cancelled the query."""

    def __init__(self, message: str, timeout_ms: int):
        super().__init__(message)
        self.timeout_ms = timeout_ms
