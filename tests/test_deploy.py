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

"""Tests for the deployment trigger and command helpers."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import FakeEngine

from booster_rt.deploy import MavenEngine, deploy
from booster_rt.errors import DeploymentError
from booster_rt.utils import exec_command, repository_name


def test_maven_command_line():
    args = MavenEngine("mvn").command(Path("/work/demo"), "fabric8:deploy -DskipTests", "openshift")

    assert args == ["-B", "-f", "/work/demo/pom.xml", "-P", "openshift", "fabric8:deploy", "-DskipTests"]


def test_maven_command_without_profile():
    assert "-P" not in MavenEngine().command(Path("demo"), "clean install", "")


def test_deploy_runs_engine_once(tmp_path):
    engine = FakeEngine()

    deploy(engine, tmp_path, "fabric8:deploy", "openshift")

    assert engine.runs == [(tmp_path, "fabric8:deploy", "openshift")]


def test_deploy_failure(tmp_path):
    with pytest.raises(DeploymentError, match="exit status 1"):
        deploy(FakeEngine(status=1), tmp_path, "fabric8:deploy", "openshift")


def test_exec_command_rejects_empty_command():
    with pytest.raises(ValueError):
        exec_command("   ")


@pytest.mark.parametrize(
    ("url", "name"),
    [
        ("https://github.com/org/vertx-http-booster.git", "vertx-http-booster"),
        ("https://github.com/org/vertx-http-booster", "vertx-http-booster"),
        ("git@github.com:org/spring-boot-crud-booster.git/", "spring-boot-crud-booster"),
    ],
)
def test_repository_name(url, name):
    assert repository_name(url) == name
