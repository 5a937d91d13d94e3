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
"""AOP configuration properties bound from the ``pyweave.aop`` section."""

from __future__ import annotations

from dataclasses import dataclass

from pyweave.core.config import Config, config_properties
from pyweave.kernel.exceptions import ConfigurationException

PASSTHROUGH = "passthrough"
ERROR = "error"


@config_properties(prefix="pyweave.aop")
@dataclass
class AopProperties:
    """Weaving settings.

    Attributes:
        final_class_policy: ``"passthrough"`` returns a final target type
            unwoven; ``"error"`` rejects interception requests on it.
        proxy_suffix: Appended to the target class name to name proxies.
        annotate_exceptions: Add the intercepted method's identity as a
            note on exceptions leaving a proxy method.
    """

    final_class_policy: str = PASSTHROUGH
    proxy_suffix: str = "_Weaved"
    annotate_exceptions: bool = True

    def __post_init__(self) -> None:
        self.final_class_policy = self.final_class_policy.lower()
        if self.final_class_policy not in (PASSTHROUGH, ERROR):
            raise ConfigurationException(
                f"Unknown final_class_policy '{self.final_class_policy}'",
                code="AOP_INVALID_PROPERTY",
                context={"allowed": [PASSTHROUGH, ERROR]},
            )
        if not self.proxy_suffix or not f"X{self.proxy_suffix}".isidentifier():
            raise ConfigurationException(
                f"proxy_suffix '{self.proxy_suffix}' cannot form a class name",
                code="AOP_INVALID_PROPERTY",
            )

    @classmethod
    def from_config(cls, config: Config) -> AopProperties:
        return config.bind(cls)
