"""Producers that parse structured configuration files."""

from __future__ import annotations

import configparser
import json
import os
from pathlib import Path
from typing import Any

from artifact_cache.exceptions import ProducerLoadError, ProducerParseError


class _ConfigFileProducer:
    """Shared loading for producers that read a whole file before parsing it."""

    __slots__ = ("_encoding", "_path")

    def __init__(self, path: str | os.PathLike[str], *, encoding: str = "utf-8") -> None:
        self._path = Path(path)
        self._encoding = encoding

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> str:
        try:
            return self._path.read_text(encoding=self._encoding)
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Could not load configuration file '{self._path}'"
            raise ProducerLoadError(msg) from e

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={str(self._path)!r})"


class IniProducer(_ConfigFileProducer):
    """Parses an INI file into ``{section: {option: value}}``.

    Values are kept as strings, option names keep their case, and
    interpolation is disabled. Options in ``[DEFAULT]`` are inherited by every
    section, as ``configparser`` does, and also appear under ``"DEFAULT"``
    when present.
    """

    __slots__ = ()

    def __call__(self) -> dict[str, dict[str, str]]:
        """Load and parse the file.

        Raises:
            ProducerLoadError: If the file cannot be read.
            ProducerParseError: If the file is not valid INI.
        """
        text = self._load()
        parser = configparser.ConfigParser(interpolation=None, default_section="DEFAULT")
        parser.optionxform = str  # type: ignore[assignment,method-assign]
        try:
            parser.read_string(text, source=str(self._path))
        except configparser.Error as e:
            msg = f"Could not parse configuration file '{self._path}': {e}"
            raise ProducerParseError(msg) from e

        result: dict[str, dict[str, str]] = {}
        defaults = dict(parser.defaults())
        if defaults:
            result[parser.default_section] = defaults
        for section in parser.sections():
            result[section] = dict(parser.items(section, raw=True))
        return result


class JsonProducer(_ConfigFileProducer):
    """Parses a JSON file into Python objects."""

    __slots__ = ()

    def __call__(self) -> Any:
        """Load and parse the file.

        Raises:
            ProducerLoadError: If the file cannot be read.
            ProducerParseError: If the file is not valid JSON.
        """
        text = self._load()
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            msg = f"Could not parse JSON file '{self._path}': {e.msg} (line {e.lineno})"
            raise ProducerParseError(msg) from e
