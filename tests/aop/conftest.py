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
"""Shared fixtures for AOP tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from pyweave.aop.compiler import Compiler
from pyweave.aop.invocation import MethodInvocation


class Recorder:
    """Interceptor that appends its label to a shared call log."""

    def __init__(self, label: str, calls: list[str]) -> None:
        self.label = label
        self.calls = calls

    def invoke(self, invocation: MethodInvocation) -> Any:
        self.calls.append(self.label)
        return invocation.proceed()

    def __repr__(self) -> str:
        return f"Recorder({self.label!r})"


@pytest.fixture(autouse=True)
def _clear_proxy_cache() -> Iterator[None]:
    Compiler.clear_cache()
    yield
    Compiler.clear_cache()


@pytest.fixture
def calls() -> list[str]:
    return []


@pytest.fixture
def recorder(calls: list[str]) -> Callable[[str], Recorder]:
    """Factory for interceptors that log their label into ``calls``."""

    def make(label: str) -> Recorder:
        return Recorder(label, calls)

    return make
