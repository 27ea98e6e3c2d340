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
Shared pytest fixtures: an in-memory cluster, a recording build engine,
an HTTP router standing in for the application route, and sample
build descriptors.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import pytest
import requests

from booster_rt.config import HarnessConfig

# =============================================================================
# SAMPLE BUILD DESCRIPTORS
# =============================================================================

POM_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<project xmlns="http://maven.apache.org/POM/4.0.0" '
    'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
    'xsi:schemaLocation="http://maven.apache.org/POM/4.0.0 http://maven.apache.org/xsd/maven-4.0.0.xsd">\n'
)

POM_WITHOUT_PLUGIN = POM_HEADER + """\
  <!-- Demo booster -->
  <modelVersion>4.0.0</modelVersion>
  <groupId>io.example</groupId>
  <artifactId>demo-app</artifactId>
  <version>1.0.0</version>
  <dependencies>
    <dependency>
      <groupId>io.vertx</groupId>
      <artifactId>vertx-web</artifactId>
    </dependency>
  </dependencies>
  <build>
    <plugins>
      <plugin>
        <artifactId>maven-compiler-plugin</artifactId>
        <configuration>
          <release>11</release>
        </configuration>
      </plugin>
    </plugins>
  </build>
</project>
"""

POM_WITH_PLUGIN_PROFILE = POM_HEADER + """\
  <modelVersion>4.0.0</modelVersion>
  <groupId>io.example</groupId>
  <artifactId>demo-app</artifactId>
  <version>1.0.0</version>
  <profiles>
    <profile>
      <id>local</id>
    </profile>
    <profile>
      <id>openshift</id>
      <build>
        <plugins>
          <plugin>
            <groupId>io.fabric8</groupId>
            <artifactId>fabric8-maven-plugin</artifactId>
            <version>3.5.30</version>
            <configuration>
              <generator>
                <includes>
                  <include>java-exec</include>
                </includes>
              </generator>
            </configuration>
          </plugin>
        </plugins>
      </build>
    </profile>
  </profiles>
</project>
"""

POM_WITH_BARE_OPENSHIFT_PROFILE = POM_HEADER + """\
  <modelVersion>4.0.0</modelVersion>
  <groupId>io.example</groupId>
  <artifactId>demo-app</artifactId>
  <version>1.0.0</version>
  <profiles>
    <profile>
      <id>openshift</id>
      <properties>
        <skipTests>true</skipTests>
      </properties>
    </profile>
  </profiles>
</project>
"""

VERSION_POM = POM_HEADER + """\
  <modelVersion>4.0.0</modelVersion>
  <groupId>io.example.harness</groupId>
  <artifactId>booster-rt</artifactId>
  <version>3.5.99-SNAPSHOT</version>
</project>
"""

PINNED_VERSION = "3.5.99-SNAPSHOT"


@pytest.fixture
def write_pom(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write descriptor text into ``tmp_path/<dirname>/pom.xml``."""
    def _write(text: str, dirname: str = "project") -> Path:
        project = tmp_path / dirname
        project.mkdir(parents=True, exist_ok=True)
        pom = project / "pom.xml"
        pom.write_text(text, encoding="utf-8")
        return pom
    return _write


@pytest.fixture
def version_pom(tmp_path: Path) -> Path:
    path = tmp_path / "harness-pom.xml"
    path.write_text(VERSION_POM, encoding="utf-8")
    return path


# =============================================================================
# CONFIGURATION
# =============================================================================


@pytest.fixture
def config(tmp_path: Path, version_pom: Path) -> HarnessConfig:
    """Harness configuration with every delay set to zero."""
    return HarnessConfig(
        workdir=tmp_path / "workdir",
        namespace="test",
        plugin_version_pom=version_pom,
        poll_interval_seconds=0,
        initial_max_polls=3,
        redeploy_max_polls=4,
        settle_seconds=0,
        post_deploy_seconds=0,
        probe_attempts=2,
        probe_retry_seconds=0,
        recovery_seconds=2,
    )


# =============================================================================
# CLUSTER
# =============================================================================


def pod(
    name: str,
    app: str = "demo-app",
    ready: bool = True,
    annotations: dict[str, str] | None = None,
    created: str = "2024-01-01T00:00:00Z",
) -> dict[str, Any]:
    """Pod manifest labelled with the application identity."""
    return {
        "kind": "Pod",
        "metadata": {
            "name": name,
            "labels": {"app": app},
            "annotations": annotations or {},
            "creationTimestamp": created,
        },
        "status": {
            "phase": "Running",
            "conditions": [{"type": "Ready", "status": "True" if ready else "False"}],
        },
    }


def named(name: str, annotations: dict[str, str] | None = None, **extra: Any) -> dict[str, Any]:
    return {"metadata": {"name": name, "annotations": annotations or {}}, **extra}


class FakeCluster:
    """In-memory ClusterClient.

    Pod listings can be scripted with :meth:`script_pods`: each pod list
    call consumes the next batch, and the last batch keeps being returned.
    """

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], dict[str, dict[str, Any]]] = {}
        self.calls: list[tuple] = []
        self._pod_batches: list[list[dict[str, Any]]] = []

    def add(self, namespace: str, kind: str, manifest: dict[str, Any]) -> None:
        self.objects.setdefault((namespace, kind), {})[manifest["metadata"]["name"]] = manifest

    def script_pods(self, namespace: str, *batches: list[dict[str, Any]]) -> None:
        self._pod_batches = [list(batch) for batch in batches]
        self.objects[(namespace, "pod")] = {}

    def calls_to(self, verb: str, kind: str | None = None) -> list[tuple]:
        return [call for call in self.calls if call[0] == verb and (kind is None or call[2] == kind)]

    def list(self, namespace: str, kind: str, label_selector: str | None = None) -> list[dict[str, Any]]:
        self.calls.append(("list", namespace, kind, label_selector))
        if kind == "pod" and self._pod_batches:
            batch = self._pod_batches.pop(0) if len(self._pod_batches) > 1 else self._pod_batches[0]
            self.objects[(namespace, kind)] = {item["metadata"]["name"]: item for item in batch}
        items = list(self.objects.get((namespace, kind), {}).values())
        if label_selector:
            label, value = label_selector.split("=", 1)
            items = [item for item in items if item["metadata"].get("labels", {}).get(label) == value]
        return copy.deepcopy(items)

    def get(self, namespace: str, kind: str, name: str) -> dict[str, Any] | None:
        self.calls.append(("get", namespace, kind, name))
        found = self.objects.get((namespace, kind), {}).get(name)
        return copy.deepcopy(found) if found is not None else None

    def create(self, namespace: str, kind: str, spec: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("create", namespace, kind, spec["metadata"]["name"]))
        self.add(namespace, kind, copy.deepcopy(spec))
        return spec

    def edit(self, namespace: str, kind: str, name: str, patch: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("edit", namespace, kind, name, patch))
        current = self.objects[(namespace, kind)][name]
        for key, value in patch.items():
            if isinstance(value, dict) and isinstance(current.get(key), dict):
                current[key].update(value)
            else:
                current[key] = value
        return current

    def delete(self, namespace: str, kind: str, name: str) -> None:
        self.calls.append(("delete", namespace, kind, name))
        self.objects.get((namespace, kind), {}).pop(name, None)


@pytest.fixture
def cluster() -> FakeCluster:
    return FakeCluster()


# =============================================================================
# BUILD ENGINE
# =============================================================================


class FakeEngine:
    """BuildEngine that records each run and calls an optional hook."""

    def __init__(self, status: int = 0, on_run: Callable[[Path], None] | None = None) -> None:
        self.status = status
        self.on_run = on_run
        self.runs: list[tuple[Path, str, str]] = []

    def run(self, project_path: Path, goals: str, profile: str) -> int:
        self.runs.append((project_path, goals, profile))
        if self.on_run is not None:
            self.on_run(project_path)
        return self.status


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


class CommandRecorder:
    def __init__(self) -> None:
        self.commands: list[str] = []

    def __call__(self, command: str) -> list[str]:
        self.commands.append(command)
        return []


@pytest.fixture
def run_command() -> CommandRecorder:
    return CommandRecorder()


# =============================================================================
# HTTP
# =============================================================================


class HttpRouter:
    """Answers requests sent through any requests.Session.

    Each route holds a sequence of responses consumed in order; the last
    one keeps being returned. A response is ``(status, body)`` where a
    non-string body is JSON-encoded, or an exception instance to raise.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Any]] = {}
        self.requests: list[tuple[str, str, bytes | None]] = []
        self.fallback: Any = None

    def route(self, method: str, url: str, *responses: Any) -> None:
        self.routes[(method, url.rstrip("/"))] = list(responses)

    def count(self, method: str, url: str) -> int:
        return sum(1 for m, u, _ in self.requests if (m, u) == (method, url.rstrip("/")))

    def send(self, prepared: requests.PreparedRequest) -> requests.Response:
        url = prepared.url.rstrip("/")
        self.requests.append((prepared.method, url, prepared.body))
        queue = self.routes.get((prepared.method, url))
        if queue:
            outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        elif self.fallback is not None:
            outcome = self.fallback
        else:
            outcome = (404, f"no route for {prepared.method} {urlsplit(url).path}")
        if isinstance(outcome, BaseException):
            raise outcome
        status, body = outcome
        response = requests.Response()
        response.status_code = status
        response._content = (body if isinstance(body, str) else json.dumps(body)).encode("utf-8")
        response.encoding = "utf-8"
        response.url = prepared.url
        response.request = prepared
        return response


@pytest.fixture
def http(monkeypatch: pytest.MonkeyPatch) -> HttpRouter:
    router = HttpRouter()
    monkeypatch.setattr(requests.Session, "send", lambda session, prepared, **kwargs: router.send(prepared))
    return router
