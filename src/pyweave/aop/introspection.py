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
"""Class and method introspection used by matching and weaving.

Visibility is by naming convention (no leading underscore means public).
Finality follows :func:`typing.final`, which sets ``__final__ = True``;
a class the interpreter refuses to subclass (e.g. ``bool``) is final too.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pyweave.aop.types import MethodSignature

# Py_TPFLAGS_BASETYPE — set on every type that may be subclassed.
_TPFLAGS_BASETYPE = 1 << 10

INSTANCE = "instance"
STATIC = "static"
CLASS = "class"


@dataclass(frozen=True)
class MethodInfo:
    """A method as seen on a target type.

    Attributes:
        name: Attribute name on the class.
        function: The underlying plain function (unwrapped from
            ``staticmethod``/``classmethod``).
        declaring_type: First class in the MRO whose ``__dict__`` holds it.
        kind: ``"instance"``, ``"static"`` or ``"class"``.
    """

    name: str
    function: Callable[..., Any]
    declaring_type: type
    kind: str = INSTANCE

    @property
    def is_public(self) -> bool:
        return not self.name.startswith("_")

    @property
    def is_final(self) -> bool:
        return is_final(self.function)

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.function)

    @property
    def qualified_name(self) -> str:
        owner = self.declaring_type
        return f"{owner.__module__}.{owner.__qualname__}.{self.name}"

    def signature(self) -> MethodSignature:
        """Build the :class:`MethodSignature` for this method."""
        try:
            params = list(inspect.signature(self.function).parameters.values())
        except (TypeError, ValueError):
            params = []
        if self.kind != STATIC:
            params = params[1:]
        types = tuple(Any if p.annotation is inspect.Parameter.empty else p.annotation for p in params)
        return MethodSignature(name=self.name, parameter_types=types, declaring_type=self.declaring_type)


def is_final(obj: Any) -> bool:
    """Return True if *obj* was decorated with :func:`typing.final`."""
    return getattr(obj, "__final__", False) is True


def is_final_class(cls: type) -> bool:
    """Return True if *cls* is marked final or cannot be subclassed."""
    return is_final(cls) or not (cls.__flags__ & _TPFLAGS_BASETYPE)


def iter_methods(cls: type) -> list[MethodInfo]:
    """List the methods reachable on *cls*, most-derived definition first.

    Members inherited from :class:`object` are excluded. Properties and
    other non-function descriptors are not methods and are skipped.
    """
    methods: list[MethodInfo] = []
    seen: set[str] = set()
    for klass in cls.__mro__:
        if klass is object:
            continue
        for name, member in vars(klass).items():
            if name in seen:
                continue
            # a non-method attribute still hides base definitions of the same name
            seen.add(name)
            info = _as_method(name, member, klass)
            if info is not None:
                methods.append(info)
    return methods


def find_method(cls: type, name: str) -> MethodInfo | None:
    """Return the method *name* on *cls*, or None if it has none."""
    for info in iter_methods(cls):
        if info.name == name:
            return info
    return None


def _as_method(name: str, member: Any, klass: type) -> MethodInfo | None:
    if isinstance(member, staticmethod):
        return MethodInfo(name, member.__func__, klass, STATIC)
    if isinstance(member, classmethod):
        return MethodInfo(name, member.__func__, klass, CLASS)
    if inspect.isfunction(member):
        return MethodInfo(name, member, klass, INSTANCE)
    return None
