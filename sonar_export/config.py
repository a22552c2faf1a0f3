"""Configuration for a single export call."""

from __future__ import annotations

import dataclasses
from pathlib import Path

__all__ = ["DEFAULT_ENCODING", "DEFAULT_OUTPUT", "ExportConfig", "coerce_bool"]

DEFAULT_OUTPUT = "SonarQube.xml"
DEFAULT_ENCODING = "utf-8"

_SWITCH_SPELLINGS = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}


def coerce_bool(value: object, *, default: bool, parameter: str = "value") -> bool:
    """Interpret an export switch given as a bool or a workflow input string.

    ``None`` and blank strings select ``default``. ``parameter`` names the
    switch in the error raised for anything else, e.g. ``--collate``.

    Examples
    --------
    >>> coerce_bool(" Off ", default=True, parameter="collate")
    False
    """
    if isinstance(value, bool):
        return value
    text = "" if value is None else value
    if isinstance(text, str):
        key = text.strip().lower()
        if not key:
            return default
        if key in _SWITCH_SPELLINGS:
            return _SWITCH_SPELLINGS[key]
    choices = ", ".join(_SWITCH_SPELLINGS)
    msg = f"Invalid {parameter} {value!r}; expected one of {choices}"
    raise ValueError(msg)


@dataclasses.dataclass(slots=True, frozen=True)
class ExportConfig:
    """Settings that shape the written report."""

    output: Path = Path(DEFAULT_OUTPUT)
    encoding: str = DEFAULT_ENCODING
    collate: bool = True

    @classmethod
    def from_argument(
        cls,
        argument: str | None,
        *,
        encoding: str | None = None,
        collate: object = None,
    ) -> ExportConfig:
        """Build a configuration from the plugin argument and optional inputs.

        ``argument`` is the destination override; ``None`` or an empty string
        selects :data:`DEFAULT_OUTPUT` in the working directory. ``collate``
        accepts the same spellings as :func:`coerce_bool`.
        """
        return cls(
            output=Path(argument) if argument else Path(DEFAULT_OUTPUT),
            encoding=encoding or DEFAULT_ENCODING,
            collate=coerce_bool(collate, default=True, parameter="collate"),
        )
