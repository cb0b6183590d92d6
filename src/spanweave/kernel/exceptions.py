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
"""Unified exception hierarchy for spanweave.

All library exceptions inherit from SpanWeaveException, enabling unified
error handling. Only definition-time problems and tracer registry misuse are
raised by the library; failures of instrumented functions are never wrapped.

Categories:
- DefinitionError: malformed ``@instrument`` options or unsupported functions
- TracerNameAlreadySetError: the process-wide tracer name was set twice
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class SpanWeaveException(Exception):
    """Base exception for all spanweave errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "DEFINITION_SYNTAX").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    default_code: str | None = None

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code if code is not None else self.default_code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Definition-time Exceptions
# =============================================================================


class DefinitionError(SpanWeaveException):
    """Instrumentation rejected before the function became callable."""

    default_code = "DEFINITION"


class UnknownOptionError(DefinitionError):
    """An option name outside the ``@instrument`` grammar was used."""

    default_code = "DEFINITION_UNKNOWN_OPTION"


class ConfigSyntaxError(DefinitionError):
    """The option text does not follow the ``@instrument`` grammar."""

    default_code = "DEFINITION_SYNTAX"


class UnsupportedFunctionError(DefinitionError):
    """The function kind is not supported by the selected weaving profile."""

    default_code = "DEFINITION_UNSUPPORTED_FUNCTION"


class UnknownParameterError(DefinitionError):
    """``skip(...)`` names a parameter the function does not declare."""

    default_code = "DEFINITION_UNKNOWN_PARAMETER"


# =============================================================================
# Registry Exceptions
# =============================================================================


class TracerNameAlreadySetError(SpanWeaveException):
    """The process-wide tracer name may only be set once."""

    default_code = "TRACER_NAME_ALREADY_SET"
