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

"""
Live-cluster scenarios for every catalog booster.

These tests clone the booster repositories, build them with Maven and
deploy them to the namespace of the current ``oc`` context. They only run
when BOOSTER_RT_E2E=1; harness settings come from BOOSTER_RT_* variables.
"""

from __future__ import annotations

import os

import pytest

from booster_rt.config import HarnessConfig, get_booster, load_boosters
from booster_rt.errors import EnvironmentUnavailable
from booster_rt.lifecycle import prepare_template, run_scenario

pytestmark = [
    pytest.mark.e2e,
    pytest.mark.skipif(os.environ.get("BOOSTER_RT_E2E") != "1", reason="set BOOSTER_RT_E2E=1 to run against a cluster"),
]


@pytest.fixture(scope="module")
def harness_config() -> HarnessConfig:
    return HarnessConfig()


@pytest.mark.parametrize("name", sorted(load_boosters()))
def test_deploy_then_redeploy(name, harness_config):
    booster = get_booster(name)
    template = prepare_template(harness_config, booster)
    test_class = f"{name}-e2e"

    try:
        run_scenario(harness_config, booster, "deploy-once", template, test_class=test_class)
        run_scenario(harness_config, booster, "redeploy", template, test_class=test_class)
    except EnvironmentUnavailable as err:
        pytest.skip(str(err))
