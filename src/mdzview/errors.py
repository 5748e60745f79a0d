from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    DECOMPRESSION_FAILED = "DECOMPRESSION_FAILED"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_EXISTS = "FILE_EXISTS"
    FILE_UNREADABLE = "FILE_UNREADABLE"
    FILE_UNWRITABLE = "FILE_UNWRITABLE"
    NOT_MARKDOWN = "NOT_MARKDOWN"
    NOT_COMPRESSED = "NOT_COMPRESSED"


class MdzError(Exception):
    """Raised by the codec and vault layer for all expected failure conditions.

    Caught at the document-load and command boundaries (turned into a single
    user notice) and at the CLI boundary (printed to stderr, as ``to_dict()``
    JSON when the log format is json). Extraction and
    tree building never raise it: any text yields some heading list.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict[str, dict[str, object]]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }
