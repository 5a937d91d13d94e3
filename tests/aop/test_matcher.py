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
"""Tests for matchers and their combinators."""

from __future__ import annotations

from typing import Any

import pytest

from pyweave.aop.introspection import MethodInfo, find_method
from pyweave.aop.markers import Marker
from pyweave.aop.matcher import Matcher
from pyweave.kernel.exceptions import InvalidPointcutException

Audited = Marker("Audited")
Cached = Marker("Cached")


@Audited
class AuditedService:
    @Cached
    def lookup(self) -> None: ...

    def charge(self) -> None: ...

    def refund(self) -> None: ...


class PlainService:
    def charge(self) -> None: ...


class SpecialService(PlainService):
    def special(self) -> None: ...


def method(cls: type, name: str) -> MethodInfo:
    info = find_method(cls, name)
    assert info is not None
    return info


class NameContains(Matcher):
    def matches_class(self, cls: type, arguments: tuple[Any, ...]) -> bool:
        return arguments[0] in cls.__name__

    def matches_method(self, method: MethodInfo, arguments: tuple[Any, ...]) -> bool:
        return arguments[0] in method.name


# ---------------------------------------------------------------------------
# Built-in matchers
# ---------------------------------------------------------------------------


class TestBuiltinMatchers:
    def test_any_matches_everything(self) -> None:
        m = Matcher.any()
        assert m.accepts_class(PlainService)
        assert m.accepts_method(method(PlainService, "charge"))

    def test_any_is_shared(self) -> None:
        assert Matcher.any() is Matcher.any()

    def test_annotated_with_class(self) -> None:
        m = Matcher.annotated_with(Audited)
        assert m.accepts_class(AuditedService)
        assert not m.accepts_class(PlainService)

    def test_annotated_with_method(self) -> None:
        m = Matcher.annotated_with(Cached)
        assert m.accepts_method(method(AuditedService, "lookup"))
        assert not m.accepts_method(method(AuditedService, "charge"))

    def test_annotated_with_exposes_marker(self) -> None:
        assert Matcher.annotated_with(Cached).annotation is Cached
        assert Matcher.any().annotation is None

    def test_annotated_with_rejects_non_marker(self) -> None:
        with pytest.raises(InvalidPointcutException):
            Matcher.annotated_with("Cached")  # type: ignore[arg-type]

    def test_subclasses_of(self) -> None:
        m = Matcher.subclasses_of(PlainService)
        assert m.accepts_class(SpecialService)
        assert not m.accepts_class(AuditedService)
        assert m.accepts_method(method(SpecialService, "special"))
        assert not m.accepts_method(method(AuditedService, "charge"))

    def test_starts_with(self) -> None:
        m = Matcher.starts_with("ch")
        assert m.accepts_method(method(AuditedService, "charge"))
        assert not m.accepts_method(method(AuditedService, "refund"))
        assert not m.accepts_class(PlainService)
        assert Matcher.starts_with("Plain").accepts_class(PlainService)

    def test_named_pattern(self) -> None:
        m = Matcher.named("**.AuditedService.re*")
        assert m.accepts_method(method(AuditedService, "refund"))
        assert not m.accepts_method(method(AuditedService, "charge"))
        assert Matcher.named("**.*Service").accepts_class(PlainService)

    def test_custom_receives_arguments(self) -> None:
        seen: list[tuple[Any, ...]] = []

        def by_class(cls: type, args: tuple[Any, ...]) -> bool:
            seen.append(args)
            return cls.__name__.endswith(args[0])

        def by_method(info: MethodInfo, args: tuple[Any, ...]) -> bool:
            return info.name == args[1]

        m = Matcher.custom(by_class, by_method, "Service", "refund")
        assert m.accepts_class(PlainService)
        assert m.accepts_method(method(AuditedService, "refund"))
        assert not m.accepts_method(method(AuditedService, "charge"))
        assert seen == [("Service", "refund")]

    def test_subclassed_matcher(self) -> None:
        m = NameContains("arg")
        assert m.arguments == ("arg",)
        assert m.accepts_method(method(AuditedService, "charge"))
        assert not m.accepts_method(method(AuditedService, "refund"))


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


class TestCombinators:
    def test_and_with_any_is_identity(self) -> None:
        m = Matcher.starts_with("ch")
        assert m.and_(Matcher.any()) is m
        assert Matcher.any().and_(m) is m

    def test_or_with_any_always_matches(self) -> None:
        m = Matcher.starts_with("zz")
        combined = m.or_(Matcher.any())
        assert combined.accepts_method(method(AuditedService, "charge"))
        assert combined.accepts_class(PlainService)

    @pytest.mark.parametrize("name", ["lookup", "charge", "refund"])
    def test_and_any_agrees_with_matcher(self, name: str) -> None:
        m = Matcher.starts_with("r")
        info = method(AuditedService, name)
        assert m.and_(Matcher.any()).accepts_method(info) == m.accepts_method(info)

    def test_and(self) -> None:
        m = Matcher.starts_with("c") & NameContains("arg")
        assert m.accepts_method(method(AuditedService, "charge"))
        assert not m.accepts_method(method(AuditedService, "refund"))

    def test_or(self) -> None:
        m = Matcher.starts_with("c") | Matcher.starts_with("r")
        assert m.accepts_method(method(AuditedService, "charge"))
        assert m.accepts_method(method(AuditedService, "refund"))
        assert not m.accepts_method(method(AuditedService, "lookup"))

    def test_not(self) -> None:
        m = ~Matcher.starts_with("c")
        assert not m.accepts_method(method(AuditedService, "charge"))
        assert m.accepts_method(method(AuditedService, "refund"))

    def test_double_not_unwraps(self) -> None:
        m = Matcher.starts_with("c")
        assert m.not_().not_() is m

    def test_and_keeps_marker(self) -> None:
        m = Matcher.starts_with("l") & Matcher.annotated_with(Cached)
        assert m.annotation is Cached

    def test_or_and_not_are_not_marker_based(self) -> None:
        assert (Matcher.annotated_with(Cached) | Matcher.starts_with("x")).annotation is None
        assert (~Matcher.annotated_with(Cached)).annotation is None

    def test_combining_with_non_matcher_is_rejected(self) -> None:
        with pytest.raises(InvalidPointcutException):
            Matcher.any().and_(lambda *_: True)  # type: ignore[arg-type]

    def test_matching_is_deterministic(self) -> None:
        m = Matcher.named("**.charge") & ~Matcher.annotated_with(Cached)
        info = method(AuditedService, "charge")
        assert all(m.accepts_method(info) for _ in range(5))
