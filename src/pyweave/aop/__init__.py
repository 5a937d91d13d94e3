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
"""Aspect-Oriented Programming support for PyWeave."""

from pyweave.aop.bind import Bind
from pyweave.aop.compiler import Compiler
from pyweave.aop.introspection import MethodInfo
from pyweave.aop.invocation import AsyncMethodInvocation, MethodInterceptor, MethodInvocation
from pyweave.aop.markers import Marker, get_class_markers, get_markers, has_marker, marker
from pyweave.aop.matcher import Matcher
from pyweave.aop.pattern import matches_pattern
from pyweave.aop.pointcut import Pointcut, PriorityPointcut
from pyweave.aop.properties import AopProperties
from pyweave.aop.types import MethodSignature, Weaved, is_weaved
from pyweave.aop.weaver import Weaver

__all__ = [
    "AopProperties",
    "AsyncMethodInvocation",
    "Bind",
    "Compiler",
    "Marker",
    "Matcher",
    "MethodInfo",
    "MethodInterceptor",
    "MethodInvocation",
    "MethodSignature",
    "Pointcut",
    "PriorityPointcut",
    "Weaved",
    "Weaver",
    "get_class_markers",
    "get_markers",
    "has_marker",
    "is_weaved",
    "marker",
    "matches_pattern",
]
