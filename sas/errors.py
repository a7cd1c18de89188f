from __future__ import annotations


class SharedAccessSignatureError(ValueError):
    """Base class for token construction and parsing failures."""


class InvalidArgumentError(SharedAccessSignatureError):
    def __init__(self, argument: str, message: str | None = None) -> None:
        super().__init__(message or f"{argument} must be a non-empty string.")
        self.argument = argument


class ArgumentTooLongError(InvalidArgumentError):
    """Raised when a credential exceeds its length limit.

    Only the first ten characters of the value are kept, so secrets are never
    echoed back in full.
    """

    def __init__(self, argument: str, value: str, max_length: int) -> None:
        self.preview = value[:10] + "..."
        self.max_length = max_length
        super().__init__(
            argument,
            f"{argument} exceeds the maximum length of {max_length} characters "
            f"(value: {self.preview}).",
        )


class MalformedTokenError(SharedAccessSignatureError):
    def __init__(self, message: str = "Malformed shared access signature.", field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
