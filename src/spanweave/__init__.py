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
"""spanweave — declarative OpenTelemetry span instrumentation for Python functions."""

from spanweave.bootstrap import configure
from spanweave.instrument import WeavingProfile, instrument
from spanweave.kernel.exceptions import (
    ConfigSyntaxError,
    DefinitionError,
    SpanWeaveException,
    TracerNameAlreadySetError,
    UnknownOptionError,
    UnknownParameterError,
    UnsupportedFunctionError,
)
from spanweave.tracing import DEFAULT_TRACER_NAME, get_tracer_name, set_tracer_name

__version__ = "0.1.0"

__all__ = [
    "ConfigSyntaxError",
    "DEFAULT_TRACER_NAME",
    "DefinitionError",
    "SpanWeaveException",
    "TracerNameAlreadySetError",
    "UnknownOptionError",
    "UnknownParameterError",
    "UnsupportedFunctionError",
    "WeavingProfile",
    "configure",
    "get_tracer_name",
    "instrument",
    "set_tracer_name",
]
