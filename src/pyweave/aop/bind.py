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
"""Bind — aggregates pointcuts and name bindings and resolves interceptor chains."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence
from typing import Any

import structlog

from pyweave.aop.introspection import INSTANCE, MethodInfo, find_method, iter_methods
from pyweave.aop.markers import Marker, get_markers
from pyweave.aop.matcher import Matcher, MethodNameMatcher
from pyweave.aop.pointcut import Pointcut, validate_interceptors
from pyweave.kernel.exceptions import BindFrozenException, MethodNotFoundException

logger = structlog.get_logger("pyweave.aop.bind")


class Bind:
    """Ordered registry of pointcuts, resolved lazily per method.

    Usage::

        bind = Bind()
        bind.add_pointcut(Pointcut(Matcher.any(), Matcher.annotated_with(NotOnWeekends), [WeekendBlocker()]))
        bind.bind_interceptors("charge_order", [LoggingInterceptor()])

        chain = bind.resolve(RealBillingService, "charge_order")

    Resolution order for a method is: priority pointcuts in registration
    order, then marker-based pointcuts in the order the markers are
    declared on the method, then every other match (including name
    bindings) in registration order.
    Pointcuts registered through :meth:`bind` only apply to the type they
    were bound to.

    The first resolution freezes the Bind; later registrations raise
    :class:`BindFrozenException`. Resolved chains are cached per
    ``(type, method name)`` and returned as the same tuple every time.
    """

    def __init__(self) -> None:
        # (pointcut, target type it is scoped to, or None for every type)
        self._pointcuts: list[tuple[Pointcut, type | None]] = []
        self._method_names: list[str] = []
        self._cache: dict[tuple[type, str], tuple[Any, ...]] = {}
        self._frozen = False
        self._lock = threading.Lock()

    # -- registration -------------------------------------------------------

    def add_pointcut(self, pointcut: Pointcut) -> Bind:
        """Register *pointcut* after all previously registered ones."""
        self._register(pointcut, None)
        return self

    def bind(self, target_type: type, pointcuts: Iterable[Pointcut]) -> Bind:
        """Register *pointcuts* for *target_type* only and validate name bindings against it.

        These pointcuts take part in resolution for exactly *target_type*;
        other types compiled with this Bind, subclasses included, ignore them.
        """
        for pointcut in pointcuts:
            self._register(pointcut, target_type)
        self.validate(target_type)
        return self

    def bind_interceptors(self, method_name: str, interceptors: Sequence[Any]) -> Bind:
        """Attach *interceptors* to the method literally named *method_name*.

        The binding takes part in resolution as a plain pointcut at its
        registration position.
        """
        validate_interceptors(interceptors, owner=method_name)
        pointcut = Pointcut(Matcher.any(), MethodNameMatcher(method_name), interceptors)
        with self._lock:
            self._check_not_frozen()
            self._pointcuts.append((pointcut, None))
            self._method_names.append(method_name)
        return self

    def validate(self, target_type: type) -> None:
        """Raise :class:`MethodNotFoundException` for name bindings *target_type* lacks."""
        for name in self._method_names:
            info = find_method(target_type, name)
            if info is None or info.kind != INSTANCE:
                raise MethodNotFoundException(
                    f"{target_type.__qualname__} has no method '{name}' to bind interceptors to",
                    code="AOP_METHOD_NOT_FOUND",
                    context={"target": target_type.__qualname__, "method": name},
                )

    def _register(self, pointcut: Pointcut, scope: type | None) -> None:
        if not isinstance(pointcut, Pointcut):
            raise TypeError(f"Expected a Pointcut, got {type(pointcut).__name__}")
        with self._lock:
            self._check_not_frozen()
            self._pointcuts.append((pointcut, scope))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise BindFrozenException(
                "Bind has already resolved methods and can no longer be modified",
                code="AOP_BIND_FROZEN",
            )

    # -- resolution ---------------------------------------------------------

    @property
    def pointcuts(self) -> tuple[Pointcut, ...]:
        return tuple(pointcut for pointcut, _ in self._pointcuts)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, target_type: type, method: MethodInfo | str) -> tuple[Any, ...]:
        """Return the ordered interceptors for *method* on *target_type*.

        An empty tuple means the method is not intercepted.
        """
        if isinstance(method, str):
            info = find_method(target_type, method)
            if info is None:
                raise MethodNotFoundException(
                    f"{target_type.__qualname__} has no method '{method}'",
                    code="AOP_METHOD_NOT_FOUND",
                    context={"target": target_type.__qualname__, "method": method},
                )
            method = info

        key = (target_type, method.name)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        with self._lock:
            self._frozen = True
        chain = self._compute(target_type, method)
        # equal results under a race; setdefault publishes exactly one of them
        return self._cache.setdefault(key, chain)

    def bindings(self, target_type: type) -> dict[str, tuple[Any, ...]]:
        """Resolve every public instance method of *target_type*, keeping non-empty chains."""
        result: dict[str, tuple[Any, ...]] = {}
        for info in iter_methods(target_type):
            if not info.is_public or info.kind != INSTANCE:
                continue
            chain = self.resolve(target_type, info)
            if chain:
                result[info.name] = chain
        return result

    def _compute(self, target_type: type, method: MethodInfo) -> tuple[Any, ...]:
        priority: list[Pointcut] = []
        annotated: list[Pointcut] = []
        plain: list[Pointcut] = []
        for pointcut, scope in self._pointcuts:
            if scope is not None and scope is not target_type:
                continue
            if not pointcut.matches(target_type, method):
                continue
            if pointcut.is_priority:
                priority.append(pointcut)
            elif pointcut.annotation is not None:
                annotated.append(pointcut)
            else:
                plain.append(pointcut)

        declared = get_markers(method.function)
        annotated.sort(key=lambda p: _declared_rank(declared, p.annotation))

        chain = tuple(i for p in (*priority, *annotated, *plain) for i in p.interceptors)
        if chain:
            logger.debug(
                "bind.resolved",
                target=target_type.__qualname__,
                method=method.name,
                interceptors=[type(i).__name__ for i in chain],
            )
        return chain

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"<Bind pointcuts={len(self._pointcuts)} {state}>"


def _declared_rank(declared: tuple[Marker, ...], target_marker: Marker | None) -> int:
    # markers matched through a combinator but absent from the method sort last
    try:
        return declared.index(target_marker)  # type: ignore[arg-type]
    except ValueError:
        return len(declared)
