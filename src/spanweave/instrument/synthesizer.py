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
"""Wrapper synthesis — turns parsed options plus a function shape into a traced function.

:meth:`WrapperSynthesizer.plan` decides, once at definition time, which
attributes a span receives and how results and failures are captured.
:meth:`WrapperSynthesizer.emit` builds the sync or async wrapper that executes
that plan for every call:

1. evaluate ``parent`` (if any) and start the span under it, or under the
   ambient context;
2. activate the span for the whole call, across ``await`` points;
3. set parameter attributes, then ``fields`` attributes;
4. call the original function with the exact arguments it was given;
5. capture the result or the failure and re-raise the failure unchanged.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import structlog
from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.trace import Status, StatusCode

from spanweave.instrument.formatting import format_value
from spanweave.instrument.parser import ErrorCapture, Expression, InstrumentConfig
from spanweave.instrument.signature import FunctionDescriptor
from spanweave.kernel.exceptions import UnknownParameterError
from spanweave.tracing.context import to_context
from spanweave.tracing.registry import resolve_tracer

logger = structlog.get_logger("spanweave.instrument")

RETURN_ATTRIBUTE = "return"
ERROR_ATTRIBUTE = "error"
ERROR_BINDING = "e"


class AttributeSource(StrEnum):
    PARAMETER = "parameter"
    FIELD = "field"


@dataclass(frozen=True)
class AttributeInstruction:
    """Set attribute *key* from a call parameter or a ``fields`` expression."""

    key: str
    source: AttributeSource
    parameter: str | None = None
    expression: Expression | None = None


@dataclass(frozen=True)
class WrapperPlan:
    """Everything the emitted wrapper does, decided at definition time."""

    span_name: str
    attributes: tuple[AttributeInstruction, ...]
    parent: Expression | None
    capture_return: bool
    error_capture: ErrorCapture | None
    descriptor: FunctionDescriptor
    tracer_provider: trace.TracerProvider | None = None

    @property
    def is_async(self) -> bool:
        return self.descriptor.is_async

    @property
    def has_expressions(self) -> bool:
        """True when a call evaluates ``fields``, ``parent`` or ``err = ...`` expressions."""
        return (
            self.parent is not None
            or any(a.source is AttributeSource.FIELD for a in self.attributes)
            or (self.error_capture is not None and self.error_capture.is_custom)
        )


class WrapperSynthesizer:
    """Builds :class:`WrapperPlan` objects and the wrappers that run them.

    Args:
        tracer_provider: Provider used to resolve the tracer on every call.
            ``None`` defers to the global OpenTelemetry provider.
    """

    def __init__(self, tracer_provider: trace.TracerProvider | None = None) -> None:
        self._tracer_provider = tracer_provider

    def plan(self, config: InstrumentConfig, descriptor: FunctionDescriptor) -> WrapperPlan:
        """Combine *config* with *descriptor*.

        Raises:
            UnknownParameterError: ``skip`` names a parameter *descriptor*
                does not declare.
        """
        unknown = config.skip - descriptor.parameter_names
        if unknown:
            names = ", ".join(sorted(unknown))
            raise UnknownParameterError(
                f"skip() names parameters not declared by {descriptor.qualname}: {names}",
                context={"function": descriptor.qualname, "parameters": sorted(unknown)},
            )

        if config.skip_all:
            captured: tuple[str, ...] = ()
        else:
            captured = tuple(p for p in descriptor.simple_parameters if p not in config.skip)

        attributes = tuple(
            AttributeInstruction(key=name, source=AttributeSource.PARAMETER, parameter=name) for name in captured
        ) + tuple(
            AttributeInstruction(key=spec.name, source=AttributeSource.FIELD, expression=spec.expression)
            for spec in config.fields
        )

        return WrapperPlan(
            span_name=config.name or descriptor.name,
            attributes=attributes,
            parent=config.parent,
            capture_return=config.ret,
            error_capture=config.err,
            descriptor=descriptor,
            tracer_provider=self._tracer_provider,
        )

    def emit(self, plan: WrapperPlan) -> Callable[..., Any]:
        """Build the replacement function for *plan*."""
        original = plan.descriptor.original

        if plan.is_async:

            @functools.wraps(original)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                call = _Call(plan, args, kwargs)
                with call.start_span() as span:
                    call.set_attributes(span)
                    try:
                        result = await original(*args, **kwargs)
                    except Exception as exc:
                        call.capture_failure(span, exc)
                        raise
                    call.capture_success(span, result)
                    return result

            wrapper: Callable[..., Any] = async_wrapper
        else:

            @functools.wraps(original)
            def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
                call = _Call(plan, args, kwargs)
                with call.start_span() as span:
                    call.set_attributes(span)
                    try:
                        result = original(*args, **kwargs)
                    except Exception as exc:
                        call.capture_failure(span, exc)
                        raise
                    call.capture_success(span, result)
                    return result

            wrapper = sync_wrapper

        wrapper.__spanweave_plan__ = plan  # type: ignore[attr-defined]
        logger.debug(
            "function_instrumented",
            function=plan.descriptor.qualname,
            span_name=plan.span_name,
            attributes=[a.key for a in plan.attributes],
            is_async=plan.is_async,
        )
        return wrapper

    def synthesize(self, config: InstrumentConfig, descriptor: FunctionDescriptor) -> Callable[..., Any]:
        return self.emit(self.plan(config, descriptor))


class _Call:
    """Per-invocation state: the expression namespace and bound arguments."""

    __slots__ = ("_plan", "_namespace", "_arguments")

    def __init__(self, plan: WrapperPlan, args: tuple, kwargs: dict[str, Any]) -> None:
        self._plan = plan
        original = plan.descriptor.original

        try:
            bound = plan.descriptor.signature.bind(*args, **kwargs)
        except TypeError:
            # The original call raises its own TypeError; only capture is skipped.
            self._arguments: dict[str, Any] | None = None
        else:
            bound.apply_defaults()
            self._arguments = dict(bound.arguments)

        self._namespace: dict[str, Any] = {}
        if plan.has_expressions:
            # Globals, then closure cells, then the receiver and arguments, later ones winning.
            target = inspect.unwrap(original)
            self._namespace.update(getattr(target, "__globals__", {}))
            self._namespace.update(_closure_values(target))
            if inspect.ismethod(original):
                self._namespace["self"] = original.__self__
            self._namespace.update(self._arguments or {})

    def start_span(self) -> Any:
        tracer = resolve_tracer(self._plan.tracer_provider)
        return tracer.start_as_current_span(
            self._plan.span_name,
            context=self._parent_context(),
            record_exception=False,
            set_status_on_exception=False,
        )

    def _parent_context(self) -> Context | None:
        expression = self._plan.parent
        if expression is None:
            return None
        try:
            return to_context(expression.evaluate(self._namespace))
        except Exception as exc:
            logger.warning(
                "parent_context_unavailable",
                function=self._plan.descriptor.qualname,
                expression=expression.source,
                error=f"{type(exc).__name__}: {format_value(exc)}",
            )
            return None

    def set_attributes(self, span: trace.Span) -> None:
        if not span.is_recording():
            return
        for instruction in self._plan.attributes:
            if instruction.source is AttributeSource.PARAMETER:
                if self._arguments is None:
                    continue
                value = format_value(self._arguments[instruction.parameter])  # type: ignore[index]
            else:
                value = self._evaluate_field(instruction)
            span.set_attribute(instruction.key, value)

    def _evaluate_field(self, instruction: AttributeInstruction) -> str:
        expression = instruction.expression
        assert expression is not None
        try:
            return format_value(expression.evaluate(self._namespace))
        except Exception as exc:
            logger.warning(
                "field_evaluation_failed",
                function=self._plan.descriptor.qualname,
                field=instruction.key,
                expression=expression.source,
                error=f"{type(exc).__name__}: {format_value(exc)}",
            )
            return f"<error: {type(exc).__name__}>"

    def capture_success(self, span: trace.Span, result: Any) -> None:
        if self._plan.capture_return:
            span.set_attribute(RETURN_ATTRIBUTE, format_value(result))
        span.set_status(Status(StatusCode.OK))

    def capture_failure(self, span: trace.Span, exc: Exception) -> None:
        message = format_value(exc)
        capture = self._plan.error_capture

        if capture is not None:
            span.set_attribute(ERROR_ATTRIBUTE, message)
        span.set_status(Status(StatusCode.ERROR, message))
        if capture is None:
            return

        recorded: Any = exc
        if capture.expression is not None:
            try:
                recorded = capture.expression.evaluate({**self._namespace, ERROR_BINDING: exc})
            except Exception as eval_exc:
                logger.warning(
                    "error_expression_failed",
                    function=self._plan.descriptor.qualname,
                    expression=capture.expression.source,
                    error=f"{type(eval_exc).__name__}: {format_value(eval_exc)}",
                )
        _record_error(span, recorded)


def _record_error(span: trace.Span, value: Any) -> None:
    if isinstance(value, BaseException):
        span.record_exception(value)
        return
    span.add_event(
        "exception",
        attributes={
            "exception.type": type(value).__qualname__,
            "exception.message": format_value(value),
        },
    )


def _closure_values(func: Any) -> dict[str, Any]:
    """Current values of *func*'s closure cells; empty cells are left out."""
    code = getattr(func, "__code__", None)
    closure = getattr(func, "__closure__", None)
    if code is None or not closure:
        return {}

    values: dict[str, Any] = {}
    for name, cell in zip(code.co_freevars, closure):
        try:
            values[name] = cell.cell_contents
        except ValueError:
            continue
    return values
