# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""spanweave configuration: YAML/TOML files, ``SPANWEAVE_*`` env vars, model binding.

Values are looked up by dotted key (``spanweave.tracing.tracer_name``). An
environment variable derived from the key always wins over file values, and
string values may reference other values through ``${...}`` placeholders.
"""

from __future__ import annotations

import dataclasses
import os
import re
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

T = TypeVar("T")

PREFIX_ATTR = "__spanweave_config_prefix__"

_ENV_PREFIX = "SPANWEAVE_"
_ROOT_KEY = "spanweave."
_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")
_MAX_PLACEHOLDER_DEPTH = 10
_MISSING = object()

_TRUTHY = frozenset({"true", "1", "yes", "on"})

_SCALAR_COERCIONS: dict[type, Callable[[str], Any]] = {
    int: int,
    float: float,
    bool: lambda raw: raw.strip().lower() in _TRUTHY,
}


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Declare the configuration section a properties class binds to.

    Works on pydantic models (validated on bind) and on dataclasses (string
    values coerced to ``int``/``float``/``bool`` fields).

    Usage:
        @config_properties(prefix="spanweave.tracing")
        class TracingProperties(BaseModel):
            tracer_name: str = "spanweave"
    """

    def mark(cls: type[T]) -> type[T]:
        setattr(cls, PREFIX_ATTR, prefix)
        return cls

    return mark


def env_key(key: str) -> str:
    """Environment variable overriding *key*.

    ``spanweave.tracing.tracer-name`` maps to ``SPANWEAVE_TRACING_TRACER_NAME``.
    """
    return _ENV_PREFIX + re.sub(r"[.\-]", "_", key.removeprefix(_ROOT_KEY)).upper()


def _walk(data: Any, key: str) -> Any:
    node = data
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return _MISSING
        node = node[part]
    return _MISSING if node is None else node


def _merge(base: dict[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in overlay.items():
        current = result.get(key)
        result[key] = _merge(current, value) if isinstance(current, dict) and isinstance(value, Mapping) else value
    return result


def _read(path: Path) -> dict[str, Any]:
    if path.suffix == ".toml":
        return tomllib.loads(path.read_text()) or {}
    return yaml.safe_load(path.read_text()) or {}


class Config:
    """Read-only, dot-addressable configuration tree.

    Precedence, highest first: ``SPANWEAVE_*`` environment variables, file or
    dict values, then the defaults declared on bound models.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._sources: list[str] = []

    @classmethod
    def from_file(cls, path: str | Path, active_profiles: list[str] | None = None) -> Config:
        """Load *path* and any ``{stem}-{profile}{suffix}`` overlays beside it.

        A missing *path* gives an empty configuration. Overlays that do not
        exist are skipped; those that do are merged in the order given.
        """
        path = Path(path)
        config = cls()
        if not path.exists():
            return config

        config._data = _read(path)
        config._sources.append(str(path))
        for profile in active_profiles or ():
            overlay = path.with_name(f"{path.stem}-{profile}{path.suffix}")
            if overlay.exists():
                config._data = _merge(config._data, _read(overlay))
                config._sources.append(f"{overlay} (profile: {profile})")
        return config

    @property
    def loaded_sources(self) -> list[str]:
        """Files merged into this configuration, in order."""
        return list(self._sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        """Value at dotted *key*, or *default*.

        Placeholders in string values are expanded: ``${NAME}`` reads the
        environment, ``${a.b}`` reads another key and ``${x:fallback}``
        supplies a fallback when neither is found.
        """
        override = os.environ.get(env_key(key))
        if override is not None:
            return override

        value = _walk(self._data, key)
        if value is _MISSING:
            return default
        if isinstance(value, str) and "${" in value:
            return self._expand(value, depth=0)
        return value

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Flat view of the mapping under *prefix*.

        Dashed keys are renamed with underscores, and each value goes through
        :meth:`get` so environment overrides and placeholders apply.
        """
        section = _walk(self._data, prefix)
        if not isinstance(section, Mapping):
            return {}
        return {name.replace("-", "_"): self.get(f"{prefix}.{name}", raw) for name, raw in section.items()}

    def bind(self, config_cls: type[T]) -> T:
        """Build *config_cls* from its ``@config_properties`` section.

        Raises:
            ValueError: the class is not decorated, or pydantic validation fails.
        """
        prefix = getattr(config_cls, PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        values = self.get_section(prefix)
        for name in _field_names(config_cls):
            if name not in values:
                override = self.get(f"{prefix}.{name}")
                if override is not None:
                    values[name] = override

        if issubclass(config_cls, BaseModel):
            try:
                return config_cls.model_validate(values)  # type: ignore[return-value]
            except ValidationError as exc:
                raise ValueError(
                    f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}"
                ) from exc

        hints = get_type_hints(config_cls)
        kwargs = {
            f.name: _coerce(values[f.name], hints.get(f.name))
            for f in dataclasses.fields(config_cls)  # type: ignore[arg-type]
            if f.name in values
        }
        return config_cls(**kwargs)

    def _expand(self, text: str, depth: int) -> str:
        if depth > _MAX_PLACEHOLDER_DEPTH:
            raise ValueError(f"Placeholders in '{text}' nest too deeply; check for circular references")

        def substitute(match: re.Match[str]) -> str:
            reference, sep, fallback = match.group(1).partition(":")
            from_env = os.environ.get(reference)
            if from_env is not None:
                return from_env
            found = _walk(self._data, reference)
            if found is not _MISSING:
                resolved = str(found)
                return self._expand(resolved, depth + 1) if "${" in resolved else resolved
            if sep:
                return fallback
            raise ValueError(f"Cannot resolve placeholder '${{{match.group(1)}}}': not found in environment or config")

        return _PLACEHOLDER.sub(substitute, text)


def _field_names(config_cls: type) -> list[str]:
    if issubclass(config_cls, BaseModel):
        return list(config_cls.model_fields)
    return [f.name for f in dataclasses.fields(config_cls)]  # type: ignore[arg-type]


def _coerce(value: Any, expected: Any) -> Any:
    convert = _SCALAR_COERCIONS.get(expected) if isinstance(value, str) else None
    return convert(value) if convert is not None else value
