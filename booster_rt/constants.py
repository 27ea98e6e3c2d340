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

"""Constants, booster catalog loading, and catalog_value helper."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

# -- Resolved paths --
PACKAGE_DIR = Path(__file__).resolve().parent
RESOURCES_DIR = PACKAGE_DIR / "resources"


def load_catalog() -> dict:
    """Load booster definitions from boosters.yaml.

    Returns:
        Parsed YAML content as a nested dictionary.
    """
    catalog_file = PACKAGE_DIR / "boosters.yaml"
    with open(catalog_file) as f:
        return yaml.safe_load(f)


CATALOG = load_catalog()


def catalog_value(*keys: str, default: Any = None) -> Any:
    """Safely traverse the CATALOG dict by key path.

    Args:
        *keys: Sequence of dictionary keys to traverse.
        default: Value to return if any key is missing.

    Returns:
        The value at the nested key path, or *default* if not found.
    """
    node = CATALOG
    for key in keys:
        if not isinstance(node, dict):
            return default
        node = node.get(key)
        if node is None:
            return default
    return node


# -- Deployment plugin --
PLUGIN_GROUP_ID = "io.fabric8"
PLUGIN_ARTIFACT_ID = "fabric8-maven-plugin"
PLUGIN_KEY = (PLUGIN_GROUP_ID, PLUGIN_ARTIFACT_ID)
PLUGIN_PROFILE_ID = "openshift"
PLUGIN_EXECUTIONS = ("resource", "build")
DEFAULT_PLUGIN_GROUP_ID = "org.apache.maven.plugins"

# -- Build descriptor --
POM_XML = "pom.xml"
DEFAULT_INDENT = "  "

# -- Redeploy dependency --
REDEPLOY_DEPENDENCY = ("org.apache.commons", "commons-lang3", "3.5")

# -- Annotations --
FIRST_DEPLOY_ANNOTATION = ("deploymentType", "deployOnce")
FRAGMENT_KEY_TOKEN = "{key}"
FRAGMENT_VALUE_TOKEN = "{value}"

# -- Cluster kinds --
KIND_POD = "pod"
KIND_DEPLOYMENT = "deploymentconfig"
KIND_SERVICE = "service"
KIND_ROUTE = "route"
KIND_CONFIG_MAP = "configmap"

LABEL_APP = "app"
POD_PHASE_RUNNING = "Running"
POD_CONDITION_READY = "Ready"

# -- Build/deploy --
DEFAULT_BUILD_GOALS = "fabric8:deploy -Dfabric8.openshift.trimImageInContainerSpec=true"
DEFAULT_BUILD_PROFILE = PLUGIN_PROFILE_ID

# -- Harness defaults --
DEFAULT_WORKDIR = "target/boosters"
DEFAULT_CLI_BINARY = "oc"
DEFAULT_MAVEN_BINARY = "mvn"
DEFAULT_PLUGIN_CONFIG_TEMPLATE = RESOURCES_DIR / "plugin-config.xml"
DEFAULT_NAMESPACE = "default"

# -- Polling --
DEFAULT_POLL_INTERVAL_SECONDS = 5
DEFAULT_INITIAL_MAX_POLLS = 60
DEFAULT_REDEPLOY_MAX_POLLS = 120
DEFAULT_SETTLE_SECONDS = 10
DEFAULT_POST_DEPLOY_SECONDS = 20

# -- HTTP probe --
DEFAULT_HTTP_TIMEOUT_SECONDS = 30
DEFAULT_PROBE_ATTEMPTS = 3
DEFAULT_PROBE_RETRY_SECONDS = 10
DEFAULT_RECOVERY_SECONDS = 120
JSON_CONTENT_TYPE = "application/json; charset=utf-8"
HTTP_OK = 200
HTTP_CREATED = 201
HEALTH_LIVENESS_PATH = "/api/health/liveness"
HEALTH_STOP_PATH = "/api/stop"
HEALTH_UP = "UP"
HEALTH_DOWN = "DOWN"

# -- CLI --
DEFAULT_KUBECTL_TIMEOUT = 60
VIEW_ROLE_COMMAND = "policy add-role-to-user view -z default"
