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
"""Conversion of parent-like values into an OpenTelemetry Context."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from opentelemetry import propagate, trace
from opentelemetry.context import Context


def to_context(parent: Any) -> Context | None:
    """Convert *parent* into a :class:`Context` to start a child span under.

    Accepted values:

    * ``None`` — no explicit parent; the ambient context is used.
    * :class:`Context` — used as is.
    * :class:`~opentelemetry.trace.Span` — its context becomes the parent.
    * :class:`~opentelemetry.trace.SpanContext` — wrapped in a non-recording span.
    * a mapping of propagation headers (e.g. ``traceparent``) — extracted
      with the globally configured propagator.

    Raises:
        TypeError: *parent* is none of the above.
    """
    if parent is None:
        return None
    # Context is a dict subclass, so it must be matched before Mapping.
    if isinstance(parent, Context):
        return parent
    if isinstance(parent, trace.Span):
        return trace.set_span_in_context(parent)
    if isinstance(parent, trace.SpanContext):
        return trace.set_span_in_context(trace.NonRecordingSpan(parent))
    if isinstance(parent, Mapping):
        return propagate.extract(parent)
    raise TypeError(f"Cannot use {type(parent).__name__} as a parent trace context")
