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
"""AOP core types — MethodSignature and the Weaved proxy marker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MethodSignature:
    """Identity of an intercepted method.

    Attributes:
        name: The method name.
        parameter_types: Declared annotation of each parameter after
            ``self``, in order. Unannotated parameters report ``Any``.
        declaring_type: The class whose ``__dict__`` defines the method.
    """

    name: str
    parameter_types: tuple[Any, ...]
    declaring_type: type

    @property
    def qualified_name(self) -> str:
        """``module.Class.method`` form, as matched by name patterns."""
        owner = self.declaring_type
        return f"{owner.__module__}.{owner.__qualname__}.{self.name}"

    def __str__(self) -> str:
        params = ", ".join(getattr(t, "__name__", str(t)) for t in self.parameter_types)
        return f"{self.declaring_type.__qualname__}.{self.name}({params})"


class Weaved:
    """Base mixed into every generated proxy type.

    Proxies also expose ``__pyweave_target__`` (the woven class),
    ``__pyweave_bind__`` and ``__pyweave_chains__`` (method name to
    interceptor tuple).
    """

    __slots__ = ()


def is_weaved(obj: Any) -> bool:
    """Return True if *obj* is a generated proxy type or an instance of one."""
    if isinstance(obj, type):
        return issubclass(obj, Weaved)
    return isinstance(obj, Weaved)
