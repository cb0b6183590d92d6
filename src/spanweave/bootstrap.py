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
"""Apply spanweave configuration: tracer name and logging."""

from __future__ import annotations

import structlog

from spanweave.core.config import Config
from spanweave.core.properties import TracingProperties
from spanweave.logging.port import LoggingPort
from spanweave.logging.structlog_adapter import StructlogAdapter
from spanweave.tracing.registry import set_tracer_name

logger = structlog.get_logger("spanweave.bootstrap")


def configure(config: Config | None = None, logging_port: LoggingPort | None = None) -> TracingProperties:
    """Configure spanweave from *config*.

    Must run before the first instrumented call, since the tracer name is
    frozen once a call resolves it. Installing a tracer provider is left to
    the application's OpenTelemetry SDK setup.

    Returns:
        The bound :class:`TracingProperties`.
    """
    config = config or Config()
    port = logging_port or StructlogAdapter()
    port.configure(config)

    properties = config.bind(TracingProperties)
    set_tracer_name(properties.tracer_name)
    logger.info("spanweave_configured", tracer_name=properties.tracer_name, sources=config.loaded_sources)
    return properties
