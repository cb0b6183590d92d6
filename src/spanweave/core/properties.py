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
"""Tracing configuration properties (spanweave.tracing.*)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from spanweave.core.config import config_properties
from spanweave.tracing.registry import DEFAULT_TRACER_NAME


@config_properties(prefix="spanweave.tracing")
class TracingProperties(BaseModel):
    """Configuration for instrumented spans (spanweave.tracing.*)."""

    model_config = ConfigDict(extra="ignore")

    tracer_name: str = Field(default=DEFAULT_TRACER_NAME, min_length=1)

    @field_validator("tracer_name")
    @classmethod
    def _strip_tracer_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("tracer_name must not be blank")
        return stripped
