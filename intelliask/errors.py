class IntelliAskError(RuntimeError):
    """Base class for errors surfaced by the question core."""


class MissingInput(IntelliAskError):
    """Question text is empty or whitespace-only. Raised before any side effect."""


class ConfigError(IntelliAskError):
    """A required setting (e.g. the Gemini API key) is missing."""


class GatewayFailure(IntelliAskError):
    """
    The generation endpoint could not be reached or answered with a
    non-success status. Never cached.

    detail: best-effort diagnostic text taken from the failed response
    """

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.detail = detail or message
