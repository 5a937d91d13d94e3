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
"""Weaver — a Bind paired with a Compiler, for weaving many target types."""

from __future__ import annotations

from typing import Any, TypeVar

from pyweave.aop.bind import Bind
from pyweave.aop.compiler import Compiler
from pyweave.aop.properties import AopProperties
from pyweave.aop.types import is_weaved

T = TypeVar("T")


class Weaver:
    """Weave target types with one Bind.

    Usage::

        weaver = Weaver(bind)
        service = weaver.new_instance(RealBillingService, processor, log)
        service.charge_order(order, card)
    """

    def __init__(self, bind: Bind, properties: AopProperties | None = None) -> None:
        self._bind = bind
        self._compiler = Compiler(properties)

    @property
    def bind(self) -> Bind:
        return self._bind

    def weave(self, target_type: type[T]) -> type[T]:
        """Return the (cached) proxy type of *target_type*."""
        return self._compiler.compile(target_type, self._bind)

    def new_instance(self, target_type: type[T], *args: Any, **kwargs: Any) -> T:
        """Instantiate the proxy of *target_type* with the given constructor arguments.

        Unlike :meth:`Compiler.new_instance`, which takes the arguments as a
        sequence and a mapping next to the Bind, the Bind is held here, so the
        constructor arguments are spread like a normal call.
        """
        return self._compiler.new_instance(target_type, args, self._bind, kwargs)

    def is_woven(self, target_type: type) -> bool:
        """True if *target_type* compiles to a generated proxy rather than passthrough."""
        return is_weaved(self.weave(target_type))
