"""Log sanitization for GitHub credentials.

Redacts GitHub tokens from log lines and error messages before they are
printed to the workflow log. Covers:
- Personal access tokens (classic and fine-grained)
- OAuth, app installation and refresh tokens
- Authorization headers
- token=... assignments

Tokens are replaced as a whole; nothing of the secret is kept.
"""

import logging
import re
from re import Pattern
from typing import Any


class LogSanitizer:
    """Sanitize GitHub credentials from logs and error messages.

    All methods are class methods and can be called without instantiation.
    """

    REDACTED = "[REDACTED]"

    # Whole-token patterns, replaced entirely
    TOKEN_PATTERNS: dict[str, Pattern] = {
        "fine_grained_pat": re.compile(r"\bgithub_pat_[A-Za-z0-9_]{20,}"),
        "prefixed_token": re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}"),
    }

    # Assignment patterns, the first group is kept
    ASSIGNMENT_PATTERNS: dict[str, Pattern] = {
        "authorization_header": re.compile(
            r"(Authorization[\"']?\s*[:=]\s*[\"']?(?:Bearer|token)\s+)([^\s\"',}]+)",
            re.IGNORECASE,
        ),
        "token_assignment": re.compile(
            r'((?:^|[^a-zA-Z])token["\']?\s*[:=]\s*["\']?)([^\s"\'&,\)}]+)', re.IGNORECASE
        ),
    }

    @classmethod
    def sanitize(cls, message: Any) -> str:
        """Redact GitHub credentials from a message.

        Examples:
            >>> LogSanitizer.sanitize("Authorization: Bearer abc123")
            'Authorization: Bearer [REDACTED]'
            >>> LogSanitizer.sanitize("token=abc123")
            'token=[REDACTED]'
        """
        if not isinstance(message, str):
            message = str(message)

        result = message
        for pattern in cls.ASSIGNMENT_PATTERNS.values():
            result = pattern.sub(r"\1" + cls.REDACTED, result)
        for pattern in cls.TOKEN_PATTERNS.values():
            result = pattern.sub(cls.REDACTED, result)
        return result

    @classmethod
    def sanitize_exception(cls, exc: BaseException) -> str:
        """Sanitize an exception message."""
        return cls.sanitize(str(exc))


class SanitizingFilter(logging.Filter):
    """Logging filter that redacts credentials from every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = LogSanitizer.sanitize(record.getMessage())
        record.args = None
        return True


__all__ = ["LogSanitizer", "SanitizingFilter"]
