# /*
# Copyright 2026 The Booster RT Authors.
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
# */

"""Tests for harness settings and the booster catalog."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from booster_rt.config import BoosterSpec, ConfigMapSpec, HarnessConfig, get_booster, load_boosters
from booster_rt.constants import catalog_value
from booster_rt.errors import ConfigurationError


def test_defaults():
    config = HarnessConfig()

    assert config.poll_interval_seconds == 5
    assert config.initial_max_polls == 60
    assert config.redeploy_max_polls == 120
    assert config.settle_seconds == 10
    assert config.post_deploy_seconds == 20
    assert config.cli_binary == "oc"
    assert config.namespace is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BOOSTER_RT_NAMESPACE", "boosters")
    monkeypatch.setenv("BOOSTER_RT_WORKDIR", "/tmp/boosters")
    monkeypatch.setenv("BOOSTER_RT_INITIAL_MAX_POLLS", "10")

    config = HarnessConfig()

    assert config.namespace == "boosters"
    assert config.workdir == Path("/tmp/boosters")
    assert config.initial_max_polls == 10


def test_redeploy_bound_must_exceed_initial_bound():
    with pytest.raises(ValidationError, match="must exceed"):
        HarnessConfig(initial_max_polls=10, redeploy_max_polls=10)


def test_packaged_catalog_is_valid():
    boosters = load_boosters()

    assert {"vertx-http", "spring-boot-crud", "vertx-configmap"} <= set(boosters)
    assert boosters["spring-boot-crud"].crud is not None
    assert boosters["vertx-http"].repository_name == "vertx-http-booster"
    assert catalog_value("boosters", "vertx-http", "annotation", "key") == "vertx-testKey"
    assert catalog_value("boosters", "missing", "annotation", default="x") == "x"


def test_unknown_booster():
    with pytest.raises(ConfigurationError, match="Unknown booster 'nope'"):
        get_booster("nope")


def test_greeting_check_requires_settings():
    with pytest.raises(ValidationError):
        BoosterSpec(
            name="demo",
            repository="https://example.com/demo.git",
            annotation={"key": "k", "value": "v"},
            check="greeting",
        )


def test_config_map_data_from_resource():
    spec = get_booster("vertx-configmap").config_map

    assert "Hello, %s from a ConfigMap !" in spec.data()["app-config.yml"]
    assert "Bonjour, %s from a ConfigMap !" in spec.data(redeployed=True)["app-config.yml"]


def test_config_map_requires_content():
    with pytest.raises(ValidationError):
        ConfigMapSpec(name="cm", key="k")
