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
"""MethodInvocation — the reified call handed to each interceptor.

Each interceptor receives a view of the call positioned just after
itself. ``proceed()`` on that view runs the rest of the chain and finally
the original method, so calling it twice (e.g. for a retry) runs the
remainder twice. Views never change position; argument lists are shared
along the chain so an interceptor can rewrite them before forwarding::

    class LoggingInterceptor:
        def invoke(self, invocation):
            print(f"calling {invocation.method}")
            return invocation.proceed()
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

from pyweave.aop.types import MethodSignature


@runtime_checkable
class MethodInterceptor(Protocol):
    """Protocol that interceptors must implement."""

    def invoke(self, invocation: MethodInvocation) -> Any: ...


class MethodInvocation:
    """A single call to an intercepted method.

    Attributes:
        this: The receiver (the proxy instance).
        method: Identity of the called method.
        arguments: Positional arguments; mutable, shared along the chain.
        kwargs: Keyword arguments; mutable, shared along the chain.
    """

    __slots__ = ("_this", "_method", "_function", "_arguments", "_kwargs", "_interceptors", "_cursor")

    def __init__(
        self,
        this: Any,
        method: MethodSignature,
        function: Callable[..., Any],
        arguments: list[Any],
        kwargs: dict[str, Any] | None = None,
        interceptors: Sequence[Any] = (),
        cursor: int = 0,
    ) -> None:
        self._this = this
        self._method = method
        self._function = function
        self._arguments = arguments
        self._kwargs = kwargs if kwargs is not None else {}
        self._interceptors = tuple(interceptors)
        self._cursor = cursor

    @property
    def this(self) -> Any:
        return self._this

    @property
    def method(self) -> MethodSignature:
        return self._method

    @property
    def arguments(self) -> list[Any]:
        return self._arguments

    @property
    def kwargs(self) -> dict[str, Any]:
        return self._kwargs

    @property
    def named_arguments(self) -> dict[str, Any]:
        """Arguments keyed by parameter name, defaults applied, ``self`` excluded."""
        bound = inspect.signature(self._function).bind(self._this, *self._arguments, **self._kwargs)
        bound.apply_defaults()
        names = list(bound.arguments)
        return {name: bound.arguments[name] for name in names[1:]}

    @property
    def cursor(self) -> int:
        return self._cursor

    def proceed(self) -> Any:
        """Run the next interceptor, or the original method at the chain's end."""
        if self._cursor < len(self._interceptors):
            return self._interceptors[self._cursor].invoke(self._advance())
        return self._function(self._this, *self._arguments, **self._kwargs)

    def _advance(self) -> MethodInvocation:
        return type(self)(
            self._this,
            self._method,
            self._function,
            self._arguments,
            self._kwargs,
            self._interceptors,
            self._cursor + 1,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._method} cursor={self._cursor}/{len(self._interceptors)}>"


class AsyncMethodInvocation(MethodInvocation):
    """Invocation of a coroutine method; ``proceed()`` must be awaited.

    Interceptors may be plain or async. A plain interceptor may simply
    ``return invocation.proceed()``; whatever a link returns is awaited if
    it is awaitable.
    """

    __slots__ = ()

    async def proceed(self) -> Any:  # type: ignore[override]
        if self._cursor < len(self._interceptors):
            result = self._interceptors[self._cursor].invoke(self._advance())
            if inspect.isawaitable(result):
                result = await result
            return result
        return await self._function(self._this, *self._arguments, **self._kwargs)
