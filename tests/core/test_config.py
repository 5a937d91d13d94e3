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
"""Tests for Config — dot access, files, profiles, env vars and binding."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from pyweave.core.config import Config, config_properties


class TestConfig:
    def test_get_nested_value(self):
        config = Config({"pyweave": {"aop": {"proxy_suffix": "_P"}}})
        assert config.get("pyweave.aop.proxy_suffix") == "_P"

    def test_get_with_default(self):
        config = Config({})
        assert config.get("missing.key", "default") == "default"

    def test_false_value_is_not_default(self):
        config = Config({"flags": {"enabled": False}})
        assert config.get("flags.enabled", True) is False

    def test_get_section(self):
        config = Config({"pyweave": {"logging": {"level": {"root": "DEBUG"}}}})
        assert config.get_section("pyweave.logging.level") == {"root": "DEBUG"}
        assert config.get_section("pyweave.nothing") == {}

    def test_load_from_yaml_file(self, tmp_path: Path):
        config_file = tmp_path / "pyweave.yaml"
        config_file.write_text("pyweave:\n  aop:\n    final-class-policy: error\n")
        config = Config.from_file(config_file)
        assert config.get("pyweave.aop.final-class-policy") == "error"
        assert config.loaded_sources == [str(config_file)]

    def test_load_from_toml_file(self, tmp_path: Path):
        config_file = tmp_path / "pyweave.toml"
        config_file.write_text('[pyweave.aop]\nproxy_suffix = "_Toml"\n')
        config = Config.from_file(config_file)
        assert config.get("pyweave.aop.proxy_suffix") == "_Toml"

    def test_missing_file_is_empty(self, tmp_path: Path):
        config = Config.from_file(tmp_path / "absent.yaml")
        assert config.to_dict() == {}
        assert config.loaded_sources == []

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("PYWEAVE_AOP_PROXY_SUFFIX", "_Env")
        config = Config({"pyweave": {"aop": {"proxy_suffix": "_File"}}})
        assert config.get("pyweave.aop.proxy_suffix") == "_Env"


class TestProfileConfigMerging:
    def test_merge_profile_config(self, tmp_path):
        base = tmp_path / "pyweave.yaml"
        base.write_text("pyweave:\n  aop:\n    proxy_suffix: _Base\n    annotate_exceptions: true\n")

        profile = tmp_path / "pyweave-dev.yaml"
        profile.write_text("pyweave:\n  aop:\n    proxy_suffix: _Dev\n")

        config = Config.from_file(base, active_profiles=["dev"])
        assert config.get("pyweave.aop.proxy_suffix") == "_Dev"
        assert config.get("pyweave.aop.annotate_exceptions") is True
        assert len(config.loaded_sources) == 2

    def test_later_profile_wins(self, tmp_path):
        (tmp_path / "pyweave.yaml").write_text("db:\n  url: base\n")
        (tmp_path / "pyweave-dev.yaml").write_text("db:\n  url: dev-url\n")
        (tmp_path / "pyweave-local.yaml").write_text("db:\n  url: local-url\n")

        config = Config.from_file(tmp_path / "pyweave.yaml", active_profiles=["dev", "local"])
        assert config.get("db.url") == "local-url"

    def test_missing_profile_file_is_skipped(self, tmp_path):
        base = tmp_path / "pyweave.yaml"
        base.write_text("app:\n  name: test\n")

        config = Config.from_file(base, active_profiles=["nonexistent"])
        assert config.get("app.name") == "test"


class TestPlaceholderResolution:
    def test_resolve_env_var(self, monkeypatch):
        monkeypatch.setenv("MY_SUFFIX", "_FromEnv")
        config = Config({"pyweave": {"aop": {"proxy_suffix": "${MY_SUFFIX}"}}})
        assert config.get("pyweave.aop.proxy_suffix") == "_FromEnv"

    def test_resolve_config_reference(self):
        config = Config({"app": {"name": "Billing"}, "greeting": "Hello from ${app.name}"})
        assert config.get("greeting") == "Hello from Billing"

    def test_resolve_with_default(self):
        config = Config({"key": "${MISSING_VAR_FOR_TEST:fallback_value}"})
        assert config.get("key") == "fallback_value"

    def test_unresolvable_placeholder(self):
        config = Config({"key": "${MISSING_VAR_FOR_TEST}"})
        with pytest.raises(ValueError, match="Cannot resolve placeholder"):
            config.get("key")

    def test_max_recursion_guard(self):
        config = Config({"a": "${b}", "b": "${a}"})
        with pytest.raises(ValueError, match="[Mm]ax.*recursion"):
            config.get("a")


class TestConfigProperties:
    def test_bind_to_dataclass(self):
        @config_properties(prefix="billing")
        @dataclass
        class BillingConfig:
            currency: str = "EUR"
            retries: int = 1

        config = Config({"billing": {"currency": "USD", "retries": "3"}})
        bound = config.bind(BillingConfig)
        assert bound.currency == "USD"
        assert bound.retries == 3

    def test_bind_uses_defaults(self):
        @config_properties(prefix="billing")
        @dataclass
        class BillingConfig:
            currency: str = "EUR"

        assert Config({}).bind(BillingConfig).currency == "EUR"

    def test_bind_requires_decorator(self):
        @dataclass
        class Plain:
            value: int = 0

        with pytest.raises(ValueError, match="not decorated"):
            Config({}).bind(Plain)
