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
"""Assertion helpers for finished spans."""

from __future__ import annotations

from typing import Any

from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.trace import StatusCode


def assert_span_attributes(span: ReadableSpan, expected: dict[str, Any], exact: bool = False) -> None:
    """Assert that *span* carries the *expected* attributes.

    Args:
        span: The finished span.
        expected: Attribute key/value pairs that must be present.
        exact: If True, *span* must carry no other attributes.

    Raises:
        AssertionError: If an attribute is missing or differs.
    """
    actual = dict(span.attributes or {})
    for key, value in expected.items():
        assert key in actual, f"Expected attribute '{key}' on span '{span.name}', got {sorted(actual)}"
        assert actual[key] == value, f"Expected {key} == {value!r} on span '{span.name}', got {actual[key]!r}"
    if exact:
        extra = set(actual) - set(expected)
        assert not extra, f"Unexpected attributes on span '{span.name}': {sorted(extra)}"


def assert_span_status(span: ReadableSpan, code: StatusCode, description: str | None = None) -> None:
    """Assert the status code (and optionally the description) of *span*."""
    assert span.status.status_code is code, (
        f"Expected status {code.name} on span '{span.name}', got {span.status.status_code.name}"
    )
    if description is not None:
        assert span.status.description == description, (
            f"Expected status description {description!r}, got {span.status.description!r}"
        )


def exception_events(span: ReadableSpan) -> list[dict[str, Any]]:
    """Attributes of every ``exception`` event recorded on *span*."""
    return [dict(event.attributes or {}) for event in span.events if event.name == "exception"]
