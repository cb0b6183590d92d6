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
"""Tests for WrapperSynthesizer planning and emission."""

import pytest

from spanweave.instrument.parser import parse_config
from spanweave.instrument.signature import analyze_function
from spanweave.instrument.synthesizer import AttributeSource, WrapperSynthesizer
from spanweave.kernel.exceptions import UnknownParameterError
from spanweave.testing import SpanRecorder


def login(username, password, *extras, remember=False, **options):
    return f"Hello, {username}"


def _plan(text, func=login):
    return WrapperSynthesizer().plan(parse_config(text), analyze_function(func))


class TestSpanName:
    def test_defaults_to_function_name(self):
        assert _plan("").span_name == "login"

    def test_override(self):
        assert _plan('name = "custom_span_name"').span_name == "custom_span_name"

    def test_empty_override_falls_back(self):
        assert _plan('name = ""').span_name == "login"


class TestAttributePlan:
    def test_captures_simple_parameters_only(self):
        plan = _plan("")
        assert [a.key for a in plan.attributes] == ["username", "password", "remember"]
        assert all(a.source is AttributeSource.PARAMETER for a in plan.attributes)

    def test_skip_removes_exactly_named_parameter(self):
        plan = _plan("skip(password)")
        assert [a.key for a in plan.attributes] == ["username", "remember"]

    def test_skip_all_keeps_fields(self):
        plan = _plan("skip_all, fields(operation = 'login')")
        assert [(a.key, a.source) for a in plan.attributes] == [("operation", AttributeSource.FIELD)]

    def test_fields_follow_parameters(self):
        plan = _plan("skip(password, remember), fields(b = 1, a = 2)")
        assert [a.key for a in plan.attributes] == ["username", "b", "a"]

    def test_fields_not_deduplicated_against_parameters(self):
        plan = _plan("skip(password, remember), fields(username = username.upper())")
        assert [a.key for a in plan.attributes] == ["username", "username"]
        assert [a.source for a in plan.attributes] == [AttributeSource.PARAMETER, AttributeSource.FIELD]

    def test_skipping_structural_parameter_is_allowed(self):
        plan = _plan("skip(options, extras)")
        assert [a.key for a in plan.attributes] == ["username", "password", "remember"]

    def test_skip_unknown_parameter_rejected(self):
        with pytest.raises(UnknownParameterError, match="passwd") as exc_info:
            _plan("skip(passwd)")
        assert exc_info.value.context["parameters"] == ["passwd"]

    def test_result_options_carried(self):
        plan = _plan("ret, err = e.args")
        assert plan.capture_return is True
        assert plan.error_capture.is_custom is True
        assert plan.is_async is False

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("", False),
            ("skip(password), ret, err", False),
            ("fields(operation = 'login')", True),
            ("err = e.args", True),
            ("parent = options.get('ctx')", True),
        ],
    )
    def test_has_expressions(self, text, expected):
        assert _plan(text).has_expressions is expected


class TestEmit:
    def test_wrapper_keeps_metadata(self):
        recorder = SpanRecorder()
        synthesizer = WrapperSynthesizer(recorder.provider)
        plan = synthesizer.plan(parse_config("ret"), analyze_function(login))
        wrapper = synthesizer.emit(plan)

        assert wrapper.__name__ == "login"
        assert wrapper.__wrapped__ is login
        assert wrapper.__spanweave_plan__ is plan

    def test_injected_provider_receives_span(self, recorder):
        own = SpanRecorder()
        synthesizer = WrapperSynthesizer(own.provider)
        wrapper = synthesizer.synthesize(parse_config("skip(password)"), analyze_function(login))

        assert wrapper("admin", "secret") == "Hello, admin"
        span = own.only("login")
        assert span.attributes["username"] == "admin"
        assert recorder.spans == ()
