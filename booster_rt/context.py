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

"""Per-run context handed to every lifecycle step."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from functools import partial

import requests

from booster_rt import console, logger
from booster_rt.cluster import ClusterClient, KubectlClient
from booster_rt.config import HarnessConfig
from booster_rt.constants import DEFAULT_NAMESPACE
from booster_rt.deploy import BuildEngine, MavenEngine
from booster_rt.errors import ClusterError
from booster_rt.poller import Waiter
from booster_rt.probe import Method, ProbeResponse, request
from booster_rt.utils import exec_command


@dataclass
class RunContext:
    """Collaborators and state for one test run.

    Attributes:
        config: Harness configuration.
        cluster: Cluster object store.
        namespace: Namespace all objects of the run live in.
        engine: Build engine used by the deployment trigger.
        session: HTTP session used by the probe.
        waiter: Cancellable sleep for polls and settle delays.
        run_command: Runs a cluster CLI command line and returns its output lines.
        created: (kind, name) of objects to delete at teardown.
    """

    config: HarnessConfig
    cluster: ClusterClient
    namespace: str
    engine: BuildEngine
    session: requests.Session = field(default_factory=requests.Session)
    waiter: Waiter = field(default_factory=Waiter)
    run_command: Callable[[str], list[str]] | None = None
    created: list[tuple[str, str]] = field(default_factory=list)

    def probe(self, method: Method, url: str, body: str | None = None) -> ProbeResponse:
        return request(method, url, body, session=self.session, timeout=self.config.http_timeout_seconds)

    def sleep(self, seconds: float) -> None:
        self.waiter.sleep(seconds)

    def track(self, kind: str, name: str) -> None:
        if (kind, name) not in self.created:
            self.created.append((kind, name))

    def teardown(self) -> None:
        """Delete tracked objects and release the HTTP session."""
        try:
            for kind, name in reversed(self.created):
                try:
                    self.cluster.delete(self.namespace, kind, name)
                    logger.info("Deleted %s/%s in %s", kind, name, self.namespace)
                except ClusterError as err:
                    console.print(f"[yellow]\u26a0\ufe0f  Could not delete {kind}/{name}: {err}[/yellow]")
            self.created.clear()
        finally:
            self.session.close()


@contextmanager
def open_context(
    config: HarnessConfig,
    *,
    cluster: ClusterClient | None = None,
    engine: BuildEngine | None = None,
    run_command: Callable[[str], list[str]] | None = None,
) -> Iterator[RunContext]:
    """Build a RunContext for one run and tear it down afterwards."""
    if cluster is None:
        cluster = KubectlClient(config.cli_binary, config.kubectl_timeout)
    namespace = config.namespace
    if namespace is None:
        namespace = cluster.current_namespace() if isinstance(cluster, KubectlClient) else DEFAULT_NAMESPACE
    ctx = RunContext(
        config=config,
        cluster=cluster,
        namespace=namespace,
        engine=engine or MavenEngine(config.maven_binary),
        run_command=run_command or partial(exec_command, binary=config.cli_binary),
    )
    try:
        yield ctx
    finally:
        ctx.teardown()
