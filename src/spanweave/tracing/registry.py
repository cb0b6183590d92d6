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
"""Process-wide tracer name and lazy tracer resolution.

The tracer name is set at most once, before the first instrumented call
resolves it. Reads are lock-free so any number of concurrent invocations can
resolve tracers; only :func:`set_tracer_name` takes the lock.
"""

from __future__ import annotations

import threading

from opentelemetry import trace

from spanweave.kernel.exceptions import TracerNameAlreadySetError

DEFAULT_TRACER_NAME = "spanweave"

_lock = threading.Lock()
_tracer_name: str | None = None
_resolved = False


def set_tracer_name(name: str) -> None:
    """Set the instrumentation scope name used by every instrumented call.

    Setting the same name again is a no-op. Setting a different name once a
    name was set, or once an instrumented call already resolved the default,
    raises :class:`TracerNameAlreadySetError`.
    """
    global _tracer_name
    if not name:
        raise ValueError("Tracer name must be a non-empty string")

    with _lock:
        current = _tracer_name if _tracer_name is not None else (DEFAULT_TRACER_NAME if _resolved else None)
        if current is not None and current != name:
            raise TracerNameAlreadySetError(
                f"Tracer name already set to '{current}'; cannot change it to '{name}'",
                context={"current": current, "requested": name},
            )
        _tracer_name = name


def get_tracer_name() -> str:
    """Return the configured tracer name, freezing it on first read."""
    global _resolved
    _resolved = True
    return _tracer_name if _tracer_name is not None else DEFAULT_TRACER_NAME


def resolve_tracer(tracer_provider: trace.TracerProvider | None = None) -> trace.Tracer:
    """Resolve the tracer for one invocation.

    Uses *tracer_provider* when given, otherwise the global provider, looked
    up lazily so a provider installed after decoration is still honoured.
    """
    name = get_tracer_name()
    if tracer_provider is not None:
        return tracer_provider.get_tracer(name)
    return trace.get_tracer(name)


def reset_tracer_name() -> None:
    """Forget the configured tracer name. Intended for test isolation."""
    global _tracer_name, _resolved
    with _lock:
        _tracer_name = None
        _resolved = False
