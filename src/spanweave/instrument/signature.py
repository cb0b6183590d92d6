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
"""Function shape analysis for the instrumentation weaver.

Inspects a function's parameters, receiver and sync/async kind without
looking at any ``@instrument`` options.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from spanweave.kernel.exceptions import UnsupportedFunctionError

_RECEIVER_NAMES = frozenset({"self", "cls"})

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)

_STRUCTURAL_KINDS = (
    inspect.Parameter.VAR_POSITIONAL,
    inspect.Parameter.VAR_KEYWORD,
)


class WeavingProfile(StrEnum):
    """Which function kinds ``@instrument`` accepts."""

    ANY = "any"
    SYNC_ONLY = "sync_only"
    ASYNC_ONLY = "async_only"


class BindingKind(StrEnum):
    """How a parameter is bound.

    ``SIMPLE`` parameters hold one named value and can be captured
    automatically. ``STRUCTURAL`` ones (``*args``, ``**kwargs``) pack an
    arbitrary shape and are only reachable through ``fields``.
    """

    SIMPLE = "simple"
    STRUCTURAL = "structural"


@dataclass(frozen=True)
class ParameterBinding:
    name: str
    kind: BindingKind

    @property
    def capturable(self) -> bool:
        return self.kind is BindingKind.SIMPLE


@dataclass(frozen=True)
class FunctionDescriptor:
    """Read-only description of the function being instrumented.

    Attributes:
        name: The function's ``__name__``.
        qualname: The function's ``__qualname__`` (used in diagnostics).
        parameters: Parameters in declaration order, receiver excluded.
        receiver: Name of the receiver parameter (``self``/``cls``) when it is
            passed in the call's arguments.
        has_receiver: True for methods, including already-bound ones.
        is_async: True for ``async def`` functions.
        original: The unmodified callable.
        signature: The callable's signature, used to bind call arguments.
    """

    name: str
    qualname: str
    parameters: tuple[ParameterBinding, ...]
    receiver: str | None
    has_receiver: bool
    is_async: bool
    original: Callable[..., Any]
    signature: inspect.Signature

    @property
    def simple_parameters(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.parameters if p.capturable)

    @property
    def parameter_names(self) -> frozenset[str]:
        """Every declared name, receiver included."""
        names = {p.name for p in self.parameters}
        if self.receiver is not None:
            names.add(self.receiver)
        return frozenset(names)


def analyze_function(
    func: Callable[..., Any],
    profile: WeavingProfile = WeavingProfile.ANY,
) -> FunctionDescriptor:
    """Describe *func* for the weaver.

    Raises:
        UnsupportedFunctionError: *func* is not a plain or ``async`` function,
            or its kind is excluded by *profile*.
    """
    qualname = getattr(func, "__qualname__", type(func).__qualname__)

    if not callable(func) or inspect.isclass(func):
        raise UnsupportedFunctionError(
            f"@instrument can only be applied to functions, not {type(func).__name__}",
            context={"function": qualname},
        )
    if inspect.isgeneratorfunction(func) or inspect.isasyncgenfunction(func):
        raise UnsupportedFunctionError(
            f"@instrument does not support generator functions ({qualname})",
            context={"function": qualname, "kind": "generator"},
        )

    is_async = inspect.iscoroutinefunction(func)
    if profile is WeavingProfile.SYNC_ONLY and is_async:
        raise UnsupportedFunctionError(
            f"Weaving profile '{profile}' does not accept async function {qualname}",
            context={"function": qualname, "profile": str(profile)},
        )
    if profile is WeavingProfile.ASYNC_ONLY and not is_async:
        raise UnsupportedFunctionError(
            f"Weaving profile '{profile}' does not accept sync function {qualname}",
            context={"function": qualname, "profile": str(profile)},
        )

    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError) as exc:
        raise UnsupportedFunctionError(
            f"Cannot inspect the signature of {qualname}: {exc}",
            context={"function": qualname},
        ) from exc

    params = list(signature.parameters.values())
    receiver: str | None = None
    if params and params[0].kind in _POSITIONAL_KINDS and params[0].name in _RECEIVER_NAMES:
        receiver = params[0].name
        params = params[1:]

    bindings = tuple(
        ParameterBinding(
            name=p.name,
            kind=BindingKind.STRUCTURAL if p.kind in _STRUCTURAL_KINDS else BindingKind.SIMPLE,
        )
        for p in params
    )

    return FunctionDescriptor(
        name=getattr(func, "__name__", type(func).__name__),
        qualname=qualname,
        parameters=bindings,
        receiver=receiver,
        has_receiver=receiver is not None or inspect.ismethod(func),
        is_async=is_async,
        original=func,
        signature=signature,
    )
