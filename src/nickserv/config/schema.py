"""Config schema and accessor."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from nickserv.core.constants import (
    DEFAULT_AGENT_NICK,
    DEFAULT_GHOST_TEXT,
    DEFAULT_IDENTIFY_COMMAND,
    DEFAULT_IDENTIFY_TEXT,
    DEFAULT_LOGIN_TEXT,
)
from nickserv.core.errors import NickServConfigurationError


def _invalid(key: str, message: str) -> NickServConfigurationError:
    return NickServConfigurationError(
        message,
        code=f"invalid_{key}",
        details={"key": key},
    )


def _require_string(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise _invalid(key, f"{key} must be a non-empty string")
    return value


def _optional_string(data: Mapping[str, Any], key: str, default: str) -> str:
    if key not in data:
        return default
    return _require_string(data, key)


def _optional_pattern(data: Mapping[str, Any], key: str, default_text: str) -> re.Pattern[str]:
    if key not in data:
        return re.compile(re.escape(default_text))
    source = _require_string(data, key)
    try:
        return re.compile(source)
    except re.error as exc:
        raise NickServConfigurationError(
            f"{key} is not a valid regular expression: {exc}",
            code=f"invalid_{key}",
            details={"key": key},
            original_error=exc,
        ) from exc


@dataclass(frozen=True)
class NickServConfig:
    """Resolved plugin options. Built once per plugin instance."""

    password: str = field(repr=False)
    botnick: str = DEFAULT_AGENT_NICK
    ghost: bool = False
    identify_command: str = DEFAULT_IDENTIFY_COMMAND
    identify_pattern: re.Pattern[str] = field(
        default_factory=lambda: re.compile(re.escape(DEFAULT_IDENTIFY_TEXT))
    )
    login_pattern: re.Pattern[str] = field(
        default_factory=lambda: re.compile(re.escape(DEFAULT_LOGIN_TEXT))
    )
    ghost_pattern: re.Pattern[str] = field(
        default_factory=lambda: re.compile(re.escape(DEFAULT_GHOST_TEXT))
    )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> NickServConfig:
        """Validate raw options; raise NickServConfigurationError naming the bad key.

        Recognized keys: password (required), botnick, ghost, identifycommand,
        identifypattern, loggedinpattern, ghostpattern.
        """
        data = data or {}
        password = _require_string(data, "password")
        botnick = _optional_string(data, "botnick", DEFAULT_AGENT_NICK)

        ghost = data.get("ghost", False)
        if not isinstance(ghost, bool):
            raise _invalid("ghost", "ghost must be a boolean")

        return cls(
            password=password,
            botnick=botnick,
            ghost=ghost,
            identify_command=_optional_string(data, "identifycommand", DEFAULT_IDENTIFY_COMMAND),
            identify_pattern=_optional_pattern(data, "identifypattern", DEFAULT_IDENTIFY_TEXT),
            login_pattern=_optional_pattern(data, "loggedinpattern", DEFAULT_LOGIN_TEXT),
            ghost_pattern=_optional_pattern(data, "ghostpattern", DEFAULT_GHOST_TEXT),
        )

    def is_agent(self, nick: str | None) -> bool:
        """Case-insensitive match against the agent nickname."""
        return bool(nick) and nick.casefold() == self.botnick.casefold()


class Config:
    """Config accessor with attribute-style access for nested keys."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data or {}

    def reload(self, data: dict[str, Any], *, validate: bool = True) -> None:
        """Replace config data."""
        self._data = data or {}
        if validate:
            self._validate()
        logger.debug("Config reloaded: server={} nick={}", self.irc_server, self.irc_nick)

    def _validate(self) -> None:
        """Validate config structure; raise NickServConfigurationError on failure."""
        for section in ("irc", "nickserv"):
            value = self._data.get(section)
            if value is not None and not isinstance(value, dict):
                raise NickServConfigurationError(
                    f"{section} must be a mapping",
                    code=f"invalid_{section}",
                    details={"key": section, "type": type(value).__name__},
                )
        if not self.irc_server:
            raise NickServConfigurationError(
                "irc.server must be a non-empty string",
                code="missing_irc_server",
                details={"key": "irc.server"},
            )
        if not self.irc_nick:
            raise NickServConfigurationError(
                "irc.nick must be a non-empty string",
                code="missing_irc_nick",
                details={"key": "irc.nick"},
            )
        # Surface plugin option errors at load time rather than at connect
        NickServConfig.from_mapping(self.nickserv)

    @property
    def raw(self) -> dict[str, Any]:
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Get value by dot-separated path (e.g. 'irc.server')."""
        parts = key.split(".")
        obj: Any = self._data
        for part in parts:
            if isinstance(obj, dict) and part in obj:
                obj = obj[part]
            else:
                return default
        return obj

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    @property
    def nickserv(self) -> dict[str, Any]:
        """Raw plugin options (the ``nickserv`` section)."""
        section = self._data.get("nickserv")
        return section if isinstance(section, dict) else {}

    @property
    def irc_server(self) -> str:
        return str(self.get("irc.server", "") or "")

    @property
    def irc_port(self) -> int:
        return int(self.get("irc.port", 6697))

    @property
    def irc_tls(self) -> bool:
        return bool(self.get("irc.tls", True))

    @property
    def irc_tls_verify(self) -> bool:
        return bool(self.get("irc.tls_verify", True))

    @property
    def irc_nick(self) -> str:
        return str(self.get("irc.nick", "") or "")

    @property
    def irc_fallback_nicknames(self) -> list[str]:
        val = self.get("irc.fallback_nicknames")
        if isinstance(val, list):
            return [str(n) for n in val]
        return []

    @property
    def irc_username(self) -> str | None:
        val = self.get("irc.username")
        return str(val) if val else None

    @property
    def irc_realname(self) -> str | None:
        val = self.get("irc.realname")
        return str(val) if val else None


cfg: Config = Config({})
