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
"""Markers — named annotations recorded on methods and classes.

A :class:`Marker` is applied as a decorator::

    NotOnWeekends = Marker("NotOnWeekends")

    class RealBillingService:
        @NotOnWeekends
        def charge_order(self, order, card): ...

Applying a marker stores it in ``__pyweave_markers__`` on the decorated
object. Decorators run bottom-up, so each new marker is prepended; the
stored tuple is therefore in source order, top-most decorator first.
"""

from __future__ import annotations

from typing import Any, TypeVar

T = TypeVar("T")

_MARKERS_ATTR = "__pyweave_markers__"


class Marker:
    """A named annotation. Identity, not name, decides equality."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __call__(self, target: T) -> T:
        holder = _holder(target)
        existing = _own_markers(holder)
        if self not in existing:
            setattr(holder, _MARKERS_ATTR, (self, *existing))
        return target

    def __repr__(self) -> str:
        return f"@{self.name}"


def marker(name: str) -> Marker:
    """Create a new :class:`Marker` called *name*."""
    return Marker(name)


def get_markers(obj: Any) -> tuple[Marker, ...]:
    """Return the markers declared directly on a function, in source order."""
    return _own_markers(_holder(obj))


def get_class_markers(cls: type) -> tuple[Marker, ...]:
    """Return markers declared on *cls* and its bases, most-derived first."""
    seen: list[Marker] = []
    for klass in cls.__mro__:
        for m in _own_markers(klass):
            if m not in seen:
                seen.append(m)
    return tuple(seen)


def has_marker(obj: Any, target_marker: Marker) -> bool:
    """Return True if *target_marker* is present on *obj*.

    Classes are checked including their bases; functions only by their
    own declaration.
    """
    if isinstance(obj, type):
        return target_marker in get_class_markers(obj)
    return target_marker in get_markers(obj)


def _holder(obj: Any) -> Any:
    # staticmethod / classmethod keep the markers on the wrapped function
    return getattr(obj, "__func__", obj)


def _own_markers(holder: Any) -> tuple[Marker, ...]:
    # vars() rather than getattr so a subclass does not report its base's markers
    try:
        return tuple(vars(holder).get(_MARKERS_ATTR, ()))
    except TypeError:
        return ()
