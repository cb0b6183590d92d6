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
"""Formatting of captured values into span attribute strings."""

from __future__ import annotations

from typing import Any


def format_value(value: Any) -> str:
    """Render *value* as a span attribute string.

    Strings are kept verbatim, exceptions use their message (falling back to
    the exception type name when the message is empty), and everything else
    uses ``repr()``. A value whose ``__str__``/``__repr__`` raises degrades to
    ``<unformattable TypeName>`` instead of propagating the error.
    """
    try:
        if isinstance(value, str):
            return value
        if isinstance(value, BaseException):
            return str(value) or type(value).__name__
        return repr(value)
    except Exception:
        return unformattable(value)


def unformattable(value: Any) -> str:
    """Placeholder for a value that cannot be rendered."""
    return f"<unformattable {type(value).__name__}>"
