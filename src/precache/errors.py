from __future__ import annotations


class PrecacheError(Exception):
    """Base class for failures that abort a generation run."""


class PatternError(PrecacheError, ValueError):
    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class TemplateError(PrecacheError):
    pass
