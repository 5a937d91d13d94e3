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
"""Matchers — composable predicates selecting classes and methods.

Every matcher answers two independent questions: does it accept a class,
and does it accept a method. Both evaluators receive the auxiliary
arguments captured when the matcher was built::

    class NameContains(Matcher):
        def matches_class(self, cls, arguments):
            return arguments[0] in cls.__name__

        def matches_method(self, method, arguments):
            return arguments[0] in method.name

    matcher = NameContains("charge") & ~Matcher.starts_with("test")

Matching only looks at static shape and markers, never at call-time
argument values, and is evaluated when a Bind first resolves a method.
"""

from __future__ import annotations

import abc
from collections.abc import Callable
from typing import Any

from pyweave.aop.introspection import MethodInfo
from pyweave.aop.markers import Marker, get_class_markers, get_markers
from pyweave.aop.pattern import matches_pattern
from pyweave.kernel.exceptions import InvalidPointcutException

ClassPredicate = Callable[[type, tuple[Any, ...]], bool]
MethodPredicate = Callable[[MethodInfo, tuple[Any, ...]], bool]


class Matcher(abc.ABC):
    """Base class of all matchers. Instances are immutable."""

    __slots__ = ("_arguments",)

    def __init__(self, *arguments: Any) -> None:
        self._arguments: tuple[Any, ...] = arguments

    @property
    def arguments(self) -> tuple[Any, ...]:
        return self._arguments

    @property
    def annotation(self) -> Marker | None:
        """The marker this matcher selects methods by, if it is marker based."""
        return None

    @abc.abstractmethod
    def matches_class(self, cls: type, arguments: tuple[Any, ...]) -> bool: ...

    @abc.abstractmethod
    def matches_method(self, method: MethodInfo, arguments: tuple[Any, ...]) -> bool: ...

    def accepts_class(self, cls: type) -> bool:
        return self.matches_class(cls, self._arguments)

    def accepts_method(self, method: MethodInfo) -> bool:
        return self.matches_method(method, self._arguments)

    # -- combinators --------------------------------------------------------

    def and_(self, other: Matcher) -> Matcher:
        _check_matcher(other)
        if isinstance(other, AnyMatcher):
            return self
        if isinstance(self, AnyMatcher):
            return other
        return AndMatcher(self, other)

    def or_(self, other: Matcher) -> Matcher:
        _check_matcher(other)
        if isinstance(other, AnyMatcher) or isinstance(self, AnyMatcher):
            return _ANY
        return OrMatcher(self, other)

    def not_(self) -> Matcher:
        if isinstance(self, NotMatcher):
            return self._arguments[0]
        return NotMatcher(self)

    def __and__(self, other: Matcher) -> Matcher:
        return self.and_(other)

    def __or__(self, other: Matcher) -> Matcher:
        return self.or_(other)

    def __invert__(self) -> Matcher:
        return self.not_()

    def __repr__(self) -> str:
        args = ", ".join(repr(a) for a in self._arguments)
        return f"{type(self).__name__}({args})"

    # -- factories ----------------------------------------------------------

    @staticmethod
    def any() -> Matcher:
        """Matcher that accepts every class and every method."""
        return _ANY

    @staticmethod
    def annotated_with(target_marker: Marker) -> Matcher:
        """Accept classes / methods carrying *target_marker*."""
        return AnnotatedWithMatcher(target_marker)

    @staticmethod
    def subclasses_of(base: type) -> Matcher:
        """Accept *base* and its subclasses, and methods they declare."""
        return SubclassesOfMatcher(base)

    @staticmethod
    def starts_with(prefix: str) -> Matcher:
        """Accept classes / methods whose name starts with *prefix*."""
        return StartsWithMatcher(prefix)

    @staticmethod
    def named(pattern: str) -> Matcher:
        """Accept by glob over ``module.Class`` / ``module.Class.method``."""
        return NamedMatcher(pattern)

    @staticmethod
    def custom(
        matches_class: ClassPredicate,
        matches_method: MethodPredicate,
        *arguments: Any,
    ) -> Matcher:
        """Build a matcher from two predicates and their auxiliary arguments."""
        return CustomMatcher(matches_class, matches_method, *arguments)


def _check_matcher(obj: Any) -> None:
    if not isinstance(obj, Matcher):
        raise InvalidPointcutException(
            f"Expected a Matcher, got {type(obj).__name__}",
            code="AOP_INVALID_MATCHER",
            context={"value": repr(obj)},
        )


# ---------------------------------------------------------------------------
# Built-in matchers
# ---------------------------------------------------------------------------


class AnyMatcher(Matcher):
    __slots__ = ()

    def matches_class(self, cls: type, arguments: tuple[Any, ...]) -> bool:
        return True

    def matches_method(self, method: MethodInfo, arguments: tuple[Any, ...]) -> bool:
        return True


_ANY = AnyMatcher()


class AnnotatedWithMatcher(Matcher):
    __slots__ = ()

    def __init__(self, target_marker: Marker) -> None:
        if not isinstance(target_marker, Marker):
            raise InvalidPointcutException(
                f"annotated_with expects a Marker, got {type(target_marker).__name__}",
                code="AOP_INVALID_MATCHER",
            )
        super().__init__(target_marker)

    @property
    def annotation(self) -> Marker:
        return self._arguments[0]

    def matches_class(self, cls: type, arguments: tuple[Any, ...]) -> bool:
        return arguments[0] in get_class_markers(cls)

    def matches_method(self, method: MethodInfo, arguments: tuple[Any, ...]) -> bool:
        return arguments[0] in get_markers(method.function)


class SubclassesOfMatcher(Matcher):
    __slots__ = ()

    def matches_class(self, cls: type, arguments: tuple[Any, ...]) -> bool:
        return issubclass(cls, arguments[0])

    def matches_method(self, method: MethodInfo, arguments: tuple[Any, ...]) -> bool:
        return issubclass(method.declaring_type, arguments[0])


class StartsWithMatcher(Matcher):
    __slots__ = ()

    def matches_class(self, cls: type, arguments: tuple[Any, ...]) -> bool:
        return cls.__name__.startswith(arguments[0])

    def matches_method(self, method: MethodInfo, arguments: tuple[Any, ...]) -> bool:
        return method.name.startswith(arguments[0])


class NamedMatcher(Matcher):
    __slots__ = ()

    def matches_class(self, cls: type, arguments: tuple[Any, ...]) -> bool:
        return matches_pattern(arguments[0], f"{cls.__module__}.{cls.__qualname__}")

    def matches_method(self, method: MethodInfo, arguments: tuple[Any, ...]) -> bool:
        return matches_pattern(arguments[0], method.qualified_name)


class MethodNameMatcher(Matcher):
    """Accepts exactly one method name; backs explicit name bindings."""

    __slots__ = ()

    def matches_class(self, cls: type, arguments: tuple[Any, ...]) -> bool:
        return True

    def matches_method(self, method: MethodInfo, arguments: tuple[Any, ...]) -> bool:
        return method.name == arguments[0]


class CustomMatcher(Matcher):
    __slots__ = ("_class_predicate", "_method_predicate")

    def __init__(self, matches_class: ClassPredicate, matches_method: MethodPredicate, *arguments: Any) -> None:
        super().__init__(*arguments)
        self._class_predicate = matches_class
        self._method_predicate = matches_method

    def matches_class(self, cls: type, arguments: tuple[Any, ...]) -> bool:
        return bool(self._class_predicate(cls, arguments))

    def matches_method(self, method: MethodInfo, arguments: tuple[Any, ...]) -> bool:
        return bool(self._method_predicate(method, arguments))


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


class AndMatcher(Matcher):
    __slots__ = ()

    @property
    def annotation(self) -> Marker | None:
        left, right = self._arguments
        return left.annotation or right.annotation

    def matches_class(self, cls: type, arguments: tuple[Any, ...]) -> bool:
        return all(m.accepts_class(cls) for m in arguments)

    def matches_method(self, method: MethodInfo, arguments: tuple[Any, ...]) -> bool:
        return all(m.accepts_method(method) for m in arguments)


class OrMatcher(Matcher):
    __slots__ = ()

    def matches_class(self, cls: type, arguments: tuple[Any, ...]) -> bool:
        return any(m.accepts_class(cls) for m in arguments)

    def matches_method(self, method: MethodInfo, arguments: tuple[Any, ...]) -> bool:
        return any(m.accepts_method(method) for m in arguments)


class NotMatcher(Matcher):
    __slots__ = ()

    def matches_class(self, cls: type, arguments: tuple[Any, ...]) -> bool:
        return not arguments[0].accepts_class(cls)

    def matches_method(self, method: MethodInfo, arguments: tuple[Any, ...]) -> bool:
        return not arguments[0].accepts_method(method)
