"""Persisted key/value preference store.

Holds small user preferences (theme, last brand name, preferred export
presets) behind a narrow get/set/delete interface so callers never touch
module-level state.
"""

from __future__ import annotations

import os
import tempfile
import threading
from enum import StrEnum
from os import PathLike
from pathlib import Path
from typing import Protocol, runtime_checkable

from typing_extensions import override

from loguru import logger
from pydantic import JsonValue, TypeAdapter, ValidationError

_DOCUMENT = TypeAdapter(dict[str, JsonValue])

THEME_KEY = "theme"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


@runtime_checkable
class PreferenceStore(Protocol):
    def get(self, key: str, default: JsonValue = None) -> JsonValue: ...

    def set(self, key: str, value: JsonValue) -> None: ...

    def delete(self, key: str) -> bool: ...


class InMemoryPreferenceStore(PreferenceStore):
    def __init__(self, initial: dict[str, JsonValue] | None = None):
        self._values: dict[str, JsonValue] = dict(initial or {})
        self._lock: threading.Lock = threading.Lock()

    @override
    def get(self, key: str, default: JsonValue = None) -> JsonValue:
        with self._lock:
            return self._values.get(key, default)

    @override
    def set(self, key: str, value: JsonValue) -> None:
        with self._lock:
            self._values[key] = value

    @override
    def delete(self, key: str) -> bool:
        with self._lock:
            if key not in self._values:
                return False
            del self._values[key]
            return True


class JsonFilePreferenceStore(PreferenceStore):
    """
    Preference store backed by a single JSON object on disk.

    Every write rewrites the whole document through a temporary file and
    ``os.replace`` so a crash never leaves a half-written file. A missing
    or unreadable file reads as an empty document.
    """

    def __init__(self, path: str | PathLike[str]):
        self._path: Path = Path(path).expanduser()
        self._lock: threading.Lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, JsonValue]:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return {}
        try:
            return _DOCUMENT.validate_json(raw)
        except ValidationError as exc:
            logger.warning(f"Ignoring unreadable preference file {self._path}: {exc}")
            return {}

    def _dump(self, values: dict[str, JsonValue]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                _ = f.write(_DOCUMENT.dump_json(values, indent=2))
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @override
    def get(self, key: str, default: JsonValue = None) -> JsonValue:
        with self._lock:
            return self._load().get(key, default)

    @override
    def set(self, key: str, value: JsonValue) -> None:
        with self._lock:
            values = self._load()
            values[key] = value
            self._dump(values)

    @override
    def delete(self, key: str) -> bool:
        with self._lock:
            values = self._load()
            if key not in values:
                return False
            del values[key]
            self._dump(values)
            return True


def get_theme(store: PreferenceStore) -> Theme:
    value = store.get(THEME_KEY)
    if isinstance(value, str):
        try:
            return Theme(value)
        except ValueError:
            logger.debug(f"Unknown stored theme {value!r}, using system")
    return Theme.SYSTEM


def set_theme(store: PreferenceStore, theme: Theme | str) -> Theme:
    resolved = Theme(theme)
    store.set(THEME_KEY, resolved.value)
    return resolved
