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
"""Exception hierarchy for PyWeave.

All library exceptions inherit from PyWeaveException, enabling unified
error handling. Each carries a machine-readable code and a context dict.

Categories:
- ConfigurationException: Bind, pointcut and compile-time mistakes, raised
  while the weaving is being set up and never at call time
- ProxyGenerationException: the interpreter refused to build a proxy type

Failures raised by interceptors or by the intercepted methods themselves are
never wrapped in these types.
"""

from __future__ import annotations

# =============================================================================
# Base
# =============================================================================


class PyWeaveException(Exception):
    """Base exception for all PyWeave errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "AOP_BIND_FROZEN").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationException(PyWeaveException):
    """Weaving was configured incorrectly."""


class InvalidPointcutException(ConfigurationException):
    """A pointcut or name binding is malformed (e.g. no interceptors)."""


class MethodNotFoundException(ConfigurationException):
    """A name binding refers to a method the target type does not define."""


class FinalClassException(ConfigurationException):
    """Interception was requested on a final class and passthrough is disabled."""


class BindFrozenException(ConfigurationException):
    """A Bind was modified after it had already resolved a method."""


# =============================================================================
# Proxy generation
# =============================================================================


class ProxyGenerationException(PyWeaveException):
    """The proxy subclass could not be created for the target type."""
