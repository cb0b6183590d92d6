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
"""Tests for the spanweave exception hierarchy."""

import pytest

from spanweave.kernel.exceptions import (
    ConfigSyntaxError,
    DefinitionError,
    SpanWeaveException,
    TracerNameAlreadySetError,
    UnknownOptionError,
    UnknownParameterError,
    UnsupportedFunctionError,
)


class TestSpanWeaveException:
    def test_basic_creation(self):
        exc = SpanWeaveException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_error_code(self):
        exc = SpanWeaveException("bad option", code="CUSTOM_001")
        assert exc.code == "CUSTOM_001"

    def test_with_context(self):
        exc = SpanWeaveException("bad option", context={"option": "foo", "position": 3})
        assert exc.context["option"] == "foo"
        assert exc.context["position"] == 3

    def test_context_not_shared(self):
        exc = SpanWeaveException("test")
        exc.context["key"] = "value"
        assert SpanWeaveException("test2").context == {}


class TestDefaultCodes:
    @pytest.mark.parametrize(
        ("exc_type", "code"),
        [
            (DefinitionError, "DEFINITION"),
            (UnknownOptionError, "DEFINITION_UNKNOWN_OPTION"),
            (ConfigSyntaxError, "DEFINITION_SYNTAX"),
            (UnsupportedFunctionError, "DEFINITION_UNSUPPORTED_FUNCTION"),
            (UnknownParameterError, "DEFINITION_UNKNOWN_PARAMETER"),
            (TracerNameAlreadySetError, "TRACER_NAME_ALREADY_SET"),
        ],
    )
    def test_default_code(self, exc_type, code):
        assert exc_type("msg").code == code

    def test_explicit_code_wins(self):
        assert ConfigSyntaxError("msg", code="OTHER").code == "OTHER"


class TestExceptionHierarchy:
    @pytest.mark.parametrize(
        "exc_type",
        [UnknownOptionError, ConfigSyntaxError, UnsupportedFunctionError, UnknownParameterError],
    )
    def test_definition_errors(self, exc_type):
        assert issubclass(exc_type, DefinitionError)

    def test_tracer_name_error_is_not_definition_error(self):
        assert not issubclass(TracerNameAlreadySetError, DefinitionError)
        assert issubclass(TracerNameAlreadySetError, SpanWeaveException)

    def test_catch_all_spanweave_exceptions(self):
        exceptions = [
            UnknownOptionError("Unknown attribute 'foo'"),
            ConfigSyntaxError("Expected ')'"),
            TracerNameAlreadySetError("already set"),
        ]
        for exc in exceptions:
            with pytest.raises(SpanWeaveException):
                raise exc
