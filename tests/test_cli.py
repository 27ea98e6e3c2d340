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

"""Tests for the command-line entry point."""

from __future__ import annotations

from conftest import POM_WITH_PLUGIN_PROFILE, POM_WITHOUT_PLUGIN
from typer.testing import CliRunner

from booster_rt.descriptor import BuildDescriptor
from cli import app

runner = CliRunner()


def test_booster_list():
    result = runner.invoke(app, ["booster", "list"])

    assert result.exit_code == 0


def test_booster_run_rejects_unknown_scenario():
    result = runner.invoke(app, ["booster", "run", "vertx-http", "--scenario", "sometimes"])

    assert result.exit_code != 0


def test_pom_pin(write_pom, version_pom):
    pom = write_pom(POM_WITHOUT_PLUGIN)

    result = runner.invoke(app, ["pom", "pin", "--pom", str(pom), "--version-source", str(version_pom)])

    assert result.exit_code == 0
    assert [profile.id for profile in BuildDescriptor.read(pom).profiles] == ["openshift"]


def test_pom_add_dependency(write_pom):
    pom = write_pom(POM_WITHOUT_PLUGIN)

    result = runner.invoke(app, ["pom", "add-dependency", "g:a:1", "--pom", str(pom)])

    assert result.exit_code == 0
    assert BuildDescriptor.read(pom).dependencies[-1].coordinates == ("g", "a", "1")


def test_pom_add_dependency_rejects_bad_coordinates(write_pom):
    pom = write_pom(POM_WITHOUT_PLUGIN)

    result = runner.invoke(app, ["pom", "add-dependency", "g:a", "--pom", str(pom)])

    assert result.exit_code != 0
    assert pom.read_text() == POM_WITHOUT_PLUGIN


def test_pom_annotate(write_pom):
    pom = write_pom(POM_WITH_PLUGIN_PROFILE)

    result = runner.invoke(app, ["pom", "annotate", "testKey", "testValue", "--pom", str(pom)])

    assert result.exit_code == 0
    assert "<name>testKey</name>" in pom.read_text()
