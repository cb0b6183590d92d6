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
"""``@instrument`` — trace a function with a declarative option string."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar, overload

from opentelemetry import trace

from spanweave.instrument.parser import InstrumentConfig, parse_config
from spanweave.instrument.signature import WeavingProfile, analyze_function
from spanweave.instrument.synthesizer import WrapperSynthesizer
from spanweave.kernel.exceptions import ConfigSyntaxError

F = TypeVar("F", bound=Callable[..., Any])


@overload
def instrument(func: F, /) -> F: ...


@overload
def instrument(
    *options: str,
    profile: WeavingProfile = ...,
    tracer_provider: trace.TracerProvider | None = ...,
) -> Callable[[F], F]: ...


def instrument(
    *options: Any,
    profile: WeavingProfile = WeavingProfile.ANY,
    tracer_provider: trace.TracerProvider | None = None,
) -> Any:
    """Wrap a function in an OpenTelemetry span.

    Every call creates exactly one span, named after the function unless
    ``name`` overrides it, and makes it the current span for the duration of
    the call. Parameters are recorded as attributes unless skipped. The
    function's return value and exceptions pass through untouched.

    Options (comma separated, in one or several strings):

    * ``skip(a, b)`` — do not record parameters ``a`` and ``b``.
    * ``skip_all`` — record no parameters.
    * ``fields(key = expr, other)`` — extra attributes; ``other`` alone
      records the variable ``other``.
    * ``ret`` — record the return value as ``return``.
    * ``err`` / ``err = expr`` — record failures as attribute ``error`` and as
      an exception event; ``expr`` (with the failure bound to ``e``) replaces
      what is recorded as the event.
    * ``name = "span-name"`` — span name override.
    * ``parent = expr`` — start the span under the ``Context``, ``Span``,
      ``SpanContext`` or header mapping ``expr`` evaluates to.

    Args:
        *options: Option strings, or the function itself for bare ``@instrument``.
        profile: Function kinds accepted; others raise ``UnsupportedFunctionError``.
        tracer_provider: Provider to resolve the tracer from; defaults to
            the global provider, looked up at call time.

    Raises:
        DefinitionError: at decoration time, for malformed options or an
            unsupported function. The function is never wrapped partially.

    Usage:
        @instrument("skip(password), ret, err, fields(operation = 'login')")
        async def login(username: str, password: str) -> str: ...
    """
    if len(options) == 1 and _is_target(options[0]):
        return _weave(options[0], parse_config(""), profile, tracer_provider)

    config = parse_config(_join_options(options))

    def decorator(func: F) -> F:
        return _weave(func, config, profile, tracer_provider)

    return decorator


def _is_target(obj: Any) -> bool:
    """True when bare ``@instrument`` received the function itself."""
    if isinstance(obj, str):
        return False
    # classmethod objects are not callable themselves.
    return isinstance(obj, (staticmethod, classmethod)) or callable(obj)


def _join_options(options: tuple[Any, ...]) -> str:
    parts: list[str] = []
    for option in options:
        if not isinstance(option, str):
            raise ConfigSyntaxError(
                f"@instrument options must be strings, got {type(option).__name__}",
                context={"option": repr(option)},
            )
        stripped = option.strip().rstrip(",")
        if stripped:
            parts.append(stripped)
    return ", ".join(parts)


def _weave(
    func: Any,
    config: InstrumentConfig,
    profile: WeavingProfile,
    tracer_provider: trace.TracerProvider | None,
) -> Any:
    if isinstance(func, staticmethod):
        return staticmethod(_weave(func.__func__, config, profile, tracer_provider))
    if isinstance(func, classmethod):
        return classmethod(_weave(func.__func__, config, profile, tracer_provider))

    descriptor = analyze_function(func, profile)
    return WrapperSynthesizer(tracer_provider).synthesize(config, descriptor)
