"""Exception classes for remarkflow."""

from typing import Optional


class MalformedInteractionError(Exception):
    """Raised when a string is not a well-formed interaction block.

    Carries the raw content that was handed to the parser so callers can fall
    back to showing it as plain text.
    """

    def __init__(
        self,
        message: str,
        content: str,
        original_error: Optional[Exception] = None,
    ):
        self.content = content
        self.original_error = original_error
        super().__init__(message)

    def __repr__(self):
        return f"MalformedInteractionError({self.args[0]!r}, content={self.content!r})"
