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
"""Tests for attribute value formatting."""

from spanweave.instrument.formatting import format_value


class Broken:
    def __repr__(self):
        raise RuntimeError("cannot render")


class BrokenError(Exception):
    def __str__(self):
        raise RuntimeError("cannot render")


class TestFormatValue:
    def test_strings_are_verbatim(self):
        assert format_value("admin") == "admin"

    def test_numbers_use_repr(self):
        assert format_value(123) == "123"
        assert format_value(1.5) == "1.5"

    def test_none_and_bool(self):
        assert format_value(None) == "None"
        assert format_value(True) == "True"

    def test_containers_use_repr(self):
        assert format_value({"id": "o-1"}) == "{'id': 'o-1'}"
        assert format_value(["a", 1]) == "['a', 1]"

    def test_exception_uses_message(self):
        assert format_value(ValueError("Test error")) == "Test error"

    def test_exception_without_message_uses_type_name(self):
        assert format_value(KeyboardInterrupt()) == "KeyboardInterrupt"

    def test_unformattable_value_degrades(self):
        assert format_value(Broken()) == "<unformattable Broken>"

    def test_unformattable_exception_degrades(self):
        assert format_value(BrokenError()) == "<unformattable BrokenError>"
