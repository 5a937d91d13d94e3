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
"""Pointcuts — a class matcher, a method matcher and the interceptors to attach."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from pyweave.aop.introspection import MethodInfo
from pyweave.aop.markers import Marker
from pyweave.aop.matcher import Matcher
from pyweave.kernel.exceptions import InvalidPointcutException


@dataclass(frozen=True)
class Pointcut:
    """Interceptors to run around every method selected by both matchers.

    Attributes:
        class_matcher: Selects participating classes.
        method_matcher: Selects participating methods on those classes.
        interceptors: Non-empty, ordered; each implements
            :class:`~pyweave.aop.invocation.MethodInterceptor`.
        is_priority: Priority pointcuts run before all other matches.

    Raises:
        InvalidPointcutException: If a matcher is not a :class:`Matcher`,
            the interceptor list is empty, or an interceptor has no
            ``invoke`` method.
    """

    class_matcher: Matcher
    method_matcher: Matcher
    interceptors: Sequence[Any]
    is_priority: bool = False

    def __post_init__(self) -> None:
        for role in ("class_matcher", "method_matcher"):
            value = getattr(self, role)
            if not isinstance(value, Matcher):
                raise InvalidPointcutException(
                    f"Pointcut {role} must be a Matcher, got {type(value).__name__}",
                    code="AOP_INVALID_MATCHER",
                    context={"role": role},
                )
        interceptors = tuple(self.interceptors)
        validate_interceptors(interceptors, owner=repr(self.method_matcher))
        object.__setattr__(self, "interceptors", interceptors)

    @property
    def annotation(self) -> Marker | None:
        """Marker the method matcher selects by, or None for structural matchers."""
        return self.method_matcher.annotation

    def matches(self, cls: type, method: MethodInfo) -> bool:
        return self.class_matcher.accepts_class(cls) and self.method_matcher.accepts_method(method)


@dataclass(frozen=True)
class PriorityPointcut(Pointcut):
    """A pointcut whose interceptors run ahead of every non-priority match."""

    is_priority: bool = field(default=True, init=False)


def validate_interceptors(interceptors: Sequence[Any], owner: str) -> None:
    """Reject an empty interceptor list or entries lacking ``invoke``."""
    if not interceptors:
        raise InvalidPointcutException(
            f"No interceptors given for {owner}",
            code="AOP_EMPTY_INTERCEPTORS",
            context={"owner": owner},
        )
    for interceptor in interceptors:
        if not callable(getattr(interceptor, "invoke", None)):
            raise InvalidPointcutException(
                f"{interceptor!r} does not implement invoke(invocation)",
                code="AOP_INVALID_INTERCEPTOR",
                context={"owner": owner},
            )
