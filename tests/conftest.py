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
"""Shared fixtures: a global in-memory tracer provider and tracer-name isolation."""

import pytest

from spanweave.testing import SpanRecorder
from spanweave.tracing.registry import reset_tracer_name

_recorder = SpanRecorder()
_recorder.install()


@pytest.fixture
def recorder() -> SpanRecorder:
    """The globally installed recorder, emptied before each test."""
    _recorder.clear()
    return _recorder


@pytest.fixture(autouse=True)
def _isolate_tracer_name():
    reset_tracer_name()
    yield
    reset_tracer_name()
