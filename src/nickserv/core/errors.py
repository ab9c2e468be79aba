"""NickServ plugin exceptions."""

from __future__ import annotations


class NickServError(Exception):
    """Base for plugin errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class NickServConfigurationError(NickServError):
    """Invalid plugin configuration; raised at construction only."""

    @property
    def key(self) -> str | None:
        """Configuration key that failed validation."""
        key = self.details.get("key")
        return key if isinstance(key, str) else None
