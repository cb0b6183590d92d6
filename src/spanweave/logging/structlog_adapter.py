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
"""StructlogAdapter — the default LoggingPort, rendering through structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from spanweave.core.config import Config

_LEVEL_KEY = "spanweave.logging.level"
_FORMAT_KEY = "spanweave.logging.format"

_SHARED_PROCESSORS: tuple[structlog.types.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
)


def _level_number(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


class StructlogAdapter:
    """Logging adapter configured from ``spanweave.logging.*``.

    ``level.root`` sets the root level and any other ``level.<logger>`` entry
    sets that logger's level. ``format`` is ``console`` (default) or ``json``.
    """

    def __init__(self) -> None:
        self._root_level = "INFO"
        self._format = "console"
        self._module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        levels = {name: str(level).upper() for name, level in config.get_section(_LEVEL_KEY).items()}
        self._root_level = levels.pop("root", "INFO")
        self._module_levels = levels
        self._format = str(config.get(_FORMAT_KEY, "console")).lower()

        renderer = structlog.processors.JSONRenderer() if self._format == "json" else structlog.dev.ConsoleRenderer()
        structlog.configure(
            processors=[*_SHARED_PROCESSORS, renderer],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", stream=sys.stdout, level=_level_number(self._root_level), force=True)

        for name, level in self._module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        """Set *name*'s stdlib level; unknown level names mean INFO."""
        logging.getLogger(name).setLevel(_level_number(level))
