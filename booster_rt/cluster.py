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

"""Cluster object store access and helpers for routes, config maps and deployments."""

from __future__ import annotations

import json
from typing import Any, Protocol

from booster_rt import logger
from booster_rt.constants import (
    DEFAULT_CLI_BINARY,
    DEFAULT_KUBECTL_TIMEOUT,
    DEFAULT_NAMESPACE,
    KIND_CONFIG_MAP,
    KIND_DEPLOYMENT,
    KIND_ROUTE,
)
from booster_rt.errors import ClusterError
from booster_rt.utils import run_kubectl

Manifest = dict[str, Any]


class ClusterClient(Protocol):
    def list(self, namespace: str, kind: str, label_selector: str | None = None) -> list[Manifest]: ...

    def get(self, namespace: str, kind: str, name: str) -> Manifest | None: ...

    def create(self, namespace: str, kind: str, spec: Manifest) -> Manifest: ...

    def edit(self, namespace: str, kind: str, name: str, patch: Manifest) -> Manifest: ...

    def delete(self, namespace: str, kind: str, name: str) -> None: ...


# ============================================================================
# kubectl-backed client
# ============================================================================

class KubectlClient:
    """ClusterClient backed by the ``oc``/``kubectl`` CLI with JSON output.

    Args:
        binary: CLI executable.
        timeout: Maximum seconds per CLI invocation.
    """

    def __init__(self, binary: str = DEFAULT_CLI_BINARY, timeout: int = DEFAULT_KUBECTL_TIMEOUT) -> None:
        self.binary = binary
        self.timeout = timeout

    def _run(self, args: list[str], stdin: str | None = None) -> str:
        ok, stdout, stderr = run_kubectl(args, timeout=self.timeout, binary=self.binary, stdin=stdin)
        if not ok:
            raise ClusterError(f"{self.binary} {' '.join(args)} failed: {stderr.strip()[:200]}")
        return stdout

    def current_namespace(self) -> str:
        """Namespace of the CLI's current context, or ``default``."""
        output = self._run(["config", "view", "--minify", "-o", "jsonpath={..namespace}"])
        return output.strip() or DEFAULT_NAMESPACE

    def list(self, namespace: str, kind: str, label_selector: str | None = None) -> list[Manifest]:
        args = ["get", kind, "-n", namespace, "-o", "json"]
        if label_selector:
            args += ["-l", label_selector]
        return json.loads(self._run(args)).get("items", [])

    def get(self, namespace: str, kind: str, name: str) -> Manifest | None:
        output = self._run(["get", kind, name, "-n", namespace, "-o", "json", "--ignore-not-found"])
        return json.loads(output) if output.strip() else None

    def create(self, namespace: str, kind: str, spec: Manifest) -> Manifest:
        output = self._run(["create", "-n", namespace, "-f", "-", "-o", "json"], stdin=json.dumps(spec))
        return json.loads(output)

    def edit(self, namespace: str, kind: str, name: str, patch: Manifest) -> Manifest:
        output = self._run([
            "patch", kind, name, "-n", namespace,
            "--type", "merge", "-p", json.dumps(patch), "-o", "json",
        ])
        return json.loads(output)

    def delete(self, namespace: str, kind: str, name: str) -> None:
        self._run(["delete", kind, name, "-n", namespace, "--ignore-not-found"])


# ============================================================================
# Object helpers
# ============================================================================

def config_map_manifest(name: str, data: dict[str, str]) -> Manifest:
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": name},
        "data": data,
    }


def create_or_replace_config_map(client: ClusterClient, namespace: str, name: str, data: dict[str, str]) -> None:
    """Replace the data of an existing config map."""
    client.edit(namespace, KIND_CONFIG_MAP, name, {"data": data})
    logger.info("Updated config map %s/%s", namespace, name)


def create_config_map_resource(client: ClusterClient, namespace: str, name: str, data: dict[str, str]) -> None:
    """Create a config map, or update its data if it already exists."""
    if client.get(namespace, KIND_CONFIG_MAP, name) is None:
        client.create(namespace, KIND_CONFIG_MAP, config_map_manifest(name, data))
        logger.info("Created config map %s/%s", namespace, name)
    else:
        create_or_replace_config_map(client, namespace, name, data)


def route_with_name(client: ClusterClient, namespace: str, name: str) -> Manifest | None:
    for route in client.list(namespace, KIND_ROUTE):
        if route.get("metadata", {}).get("name") == name:
            return route
    return None


def route_host(route: Manifest | None) -> str | None:
    if route is None:
        return None
    return route.get("spec", {}).get("host") or None


def deployments_with_annotation(client: ClusterClient, namespace: str, key: str) -> list[str]:
    """Names of deployments whose metadata carries the annotation *key*."""
    names = []
    for deployment in client.list(namespace, KIND_DEPLOYMENT):
        metadata = deployment.get("metadata") or {}
        if key in (metadata.get("annotations") or {}):
            names.append(metadata.get("name"))
    return names
