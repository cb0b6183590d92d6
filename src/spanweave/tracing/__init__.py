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
"""spanweave tracing — tracer registry and parent context conversion."""

from spanweave.tracing.context import to_context
from spanweave.tracing.registry import (
    DEFAULT_TRACER_NAME,
    get_tracer_name,
    reset_tracer_name,
    resolve_tracer,
    set_tracer_name,
)

__all__ = [
    "DEFAULT_TRACER_NAME",
    "get_tracer_name",
    "reset_tracer_name",
    "resolve_tracer",
    "set_tracer_name",
    "to_context",
]
