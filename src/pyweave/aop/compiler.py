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
"""Compiler — generates and caches intercepting proxy subclasses.

For a target type and a :class:`Bind`, the compiler resolves the
interceptor chain of every eligible method and builds a subclass that
overrides exactly those methods. A method is eligible when it is a
public, non-final instance method of a non-final class and at least one
pointcut matches it. Everything else is inherited untouched.

Calls the original method body makes on its own receiver (``self.other()``)
skip interception and run the original implementation directly.

Generated types are cached process-wide by ``(target type, Bind)``;
check-generate-insert runs under one lock so concurrent callers always
observe the same proxy type. The cache holds strong references to every
target type and Bind it has seen and lives until process exit; callers
that create short-lived Binds should call :meth:`Compiler.clear_cache`.
"""

from __future__ import annotations

import contextlib
import contextvars
import functools
import threading
import types
from collections.abc import Callable, Iterator, Sequence
from typing import Any, TypeVar

import structlog

from pyweave.aop.bind import Bind
from pyweave.aop.introspection import INSTANCE, MethodInfo, is_final_class, iter_methods
from pyweave.aop.invocation import AsyncMethodInvocation, MethodInvocation
from pyweave.aop.properties import ERROR, AopProperties
from pyweave.aop.types import MethodSignature, Weaved
from pyweave.core.config import Config
from pyweave.kernel.exceptions import FinalClassException, ProxyGenerationException

T = TypeVar("T")

logger = structlog.get_logger("pyweave.aop.compiler")

_PROXY_CACHE: dict[tuple[type, Bind], type] = {}
# reentrant: user matchers run while the lock is held and may compile too
_CACHE_LOCK = threading.RLock()

# ids of receivers whose original method body is currently executing
_IN_BODY: contextvars.ContextVar[frozenset[int]] = contextvars.ContextVar("pyweave_in_body", default=frozenset())


class Compiler:
    """Builds proxy types for a target type and a Bind."""

    def __init__(self, properties: AopProperties | None = None) -> None:
        self._properties = properties or AopProperties()

    @classmethod
    def from_config(cls, config: Config) -> Compiler:
        return cls(AopProperties.from_config(config))

    @property
    def properties(self) -> AopProperties:
        return self._properties

    def compile(self, target_type: type[T], bind: Bind) -> type[T]:
        """Return the proxy type for *target_type* woven with *bind*.

        Returns *target_type* itself when nothing is eligible for
        interception (including final classes under the passthrough policy).
        """
        key = (target_type, bind)
        with _CACHE_LOCK:
            cached = _PROXY_CACHE.get(key)
            if cached is not None:
                logger.debug("compiler.cache_hit", target=target_type.__qualname__)
                return cached
            proxy = self._generate(target_type, bind)
            _PROXY_CACHE[key] = proxy
            return proxy

    def new_instance(
        self,
        target_type: type[T],
        args: Sequence[Any],
        bind: Bind,
        kwargs: dict[str, Any] | None = None,
    ) -> T:
        """Instantiate the proxy of *target_type*, forwarding constructor arguments.

        *args* and *kwargs* are passed as containers so the signature mirrors
        ``compile`` plus the constructor arguments;
        :meth:`Weaver.new_instance` offers the spread form.
        """
        proxy_type = self.compile(target_type, bind)
        return proxy_type(*args, **(kwargs or {}))

    @staticmethod
    def is_cached(target_type: type, bind: Bind) -> bool:
        with _CACHE_LOCK:
            return (target_type, bind) in _PROXY_CACHE

    @staticmethod
    def clear_cache() -> None:
        """Forget every generated proxy type."""
        with _CACHE_LOCK:
            _PROXY_CACHE.clear()

    # -- generation -----------------------------------------------------------

    def _generate(self, target_type: type[T], bind: Bind) -> type[T]:
        bind.validate(target_type)

        if is_final_class(target_type):
            return self._final_class(target_type, bind)

        chains: dict[str, tuple[MethodInfo, tuple[Any, ...]]] = {}
        for info in iter_methods(target_type):
            if not _is_eligible(info):
                continue
            chain = bind.resolve(target_type, info)
            if chain:
                chains[info.name] = (info, chain)

        if not chains:
            logger.debug("compiler.passthrough", target=target_type.__qualname__, reason="no_matches")
            return target_type

        name = f"{target_type.__name__}{self._properties.proxy_suffix}"
        namespace: dict[str, Any] = {
            "__module__": target_type.__module__,
            "__qualname__": f"{target_type.__qualname__}{self._properties.proxy_suffix}",
            "__doc__": target_type.__doc__,
            "__slots__": (),
            "__pyweave_target__": target_type,
            "__pyweave_bind__": bind,
            "__pyweave_chains__": types.MappingProxyType({n: c for n, (_, c) in chains.items()}),
        }
        for method_name, (info, chain) in chains.items():
            namespace[method_name] = self._build_override(info, chain)

        try:
            proxy = types.new_class(name, (target_type, Weaved), exec_body=lambda ns: ns.update(namespace))
        except TypeError as exc:
            raise ProxyGenerationException(
                f"Cannot generate a proxy for {target_type.__qualname__}: {exc}",
                code="AOP_PROXY_GENERATION",
                context={"target": target_type.__qualname__},
            ) from exc

        logger.debug(
            "compiler.generated",
            target=target_type.__qualname__,
            proxy=proxy.__qualname__,
            methods=sorted(chains),
        )
        return proxy

    def _final_class(self, target_type: type[T], bind: Bind) -> type[T]:
        if self._properties.final_class_policy == ERROR:
            intercepted = sorted(
                info.name for info in iter_methods(target_type) if _is_eligible(info) and bind.resolve(target_type, info)
            )
            if intercepted:
                raise FinalClassException(
                    f"{target_type.__qualname__} is final; cannot intercept {', '.join(intercepted)}",
                    code="AOP_FINAL_CLASS",
                    context={"target": target_type.__qualname__, "methods": intercepted},
                )
        logger.debug("compiler.passthrough", target=target_type.__qualname__, reason="final_class")
        return target_type

    def _build_override(self, info: MethodInfo, chain: tuple[Any, ...]) -> Callable[..., Any]:
        signature = info.signature()
        if info.is_async:
            return _build_async_override(info.function, signature, chain, self._properties.annotate_exceptions)
        return _build_sync_override(info.function, signature, chain, self._properties.annotate_exceptions)


def _is_eligible(info: MethodInfo) -> bool:
    return info.kind == INSTANCE and info.is_public and not info.is_final


@contextlib.contextmanager
def _inside_body(receiver: Any) -> Iterator[None]:
    token = _IN_BODY.set(_IN_BODY.get() | {id(receiver)})
    try:
        yield
    finally:
        _IN_BODY.reset(token)


def _build_sync_override(
    original: Callable[..., Any],
    signature: MethodSignature,
    chain: tuple[Any, ...],
    annotate: bool,
) -> Callable[..., Any]:
    @functools.wraps(original)
    def body(self: Any, *args: Any, **kwargs: Any) -> Any:
        with _inside_body(self):
            return original(self, *args, **kwargs)

    @functools.wraps(original)
    def override(self: Any, *args: Any, **kwargs: Any) -> Any:
        if id(self) in _IN_BODY.get():
            return original(self, *args, **kwargs)
        invocation = MethodInvocation(self, signature, body, list(args), dict(kwargs), chain)
        try:
            return invocation.proceed()
        except Exception as exc:
            if annotate:
                exc.add_note(f"while invoking intercepted method {signature}")
            raise

    return override


def _build_async_override(
    original: Callable[..., Any],
    signature: MethodSignature,
    chain: tuple[Any, ...],
    annotate: bool,
) -> Callable[..., Any]:
    @functools.wraps(original)
    async def body(self: Any, *args: Any, **kwargs: Any) -> Any:
        with _inside_body(self):
            return await original(self, *args, **kwargs)

    @functools.wraps(original)
    async def override(self: Any, *args: Any, **kwargs: Any) -> Any:
        if id(self) in _IN_BODY.get():
            return await original(self, *args, **kwargs)
        invocation = AsyncMethodInvocation(self, signature, body, list(args), dict(kwargs), chain)
        try:
            return await invocation.proceed()
        except Exception as exc:
            if annotate:
                exc.add_note(f"while invoking intercepted method {signature}")
            raise

    return override
