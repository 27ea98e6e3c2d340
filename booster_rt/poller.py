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

"""Bounded readiness polling for application pods.

A poll lists the pods labelled with the application identity and stops at
the first one satisfying the readiness predicate. Pods are re-fetched on
every iteration; nothing is remembered between polls.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from tenacity import RetryError, Retrying, retry_if_result, stop_after_attempt, stop_when_event_set, wait_fixed

from booster_rt import console, logger
from booster_rt.cluster import ClusterClient, Manifest
from booster_rt.constants import (
    DEFAULT_INITIAL_MAX_POLLS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_REDEPLOY_MAX_POLLS,
    DEFAULT_SETTLE_SECONDS,
    KIND_POD,
    LABEL_APP,
    POD_CONDITION_READY,
    POD_PHASE_RUNNING,
)
from booster_rt.errors import PollCancelled, ReadinessTimeout


class Waiter:
    """Cancellable sleep shared by the poll loop and settle delays."""

    def __init__(self) -> None:
        self.event = threading.Event()

    def sleep(self, seconds: float) -> None:
        self.event.wait(seconds)

    def cancel(self) -> None:
        self.event.set()

    @property
    def cancelled(self) -> bool:
        return self.event.is_set()


@dataclass(frozen=True)
class PodObservation:
    """Pod state seen by one poll iteration."""

    name: str
    ready: bool
    annotations: dict[str, str] = field(default_factory=dict)
    created: str = ""

    @classmethod
    def from_manifest(cls, pod: Manifest) -> PodObservation:
        metadata = pod.get("metadata") or {}
        return cls(
            name=metadata.get("name", ""),
            ready=is_pod_ready(pod),
            annotations=dict(metadata.get("annotations") or {}),
            created=metadata.get("creationTimestamp") or "",
        )

    def has_annotation(self, key: str, value: str) -> bool:
        """Exact key match, case-insensitive value match."""
        actual = self.annotations.get(key)
        return actual is not None and actual.lower() == value.lower()


def is_pod_ready(pod: Manifest) -> bool:
    """True when the pod is running and its Ready condition is True."""
    status = pod.get("status") or {}
    if status.get("phase") != POD_PHASE_RUNNING:
        return False
    return any(
        cond.get("type") == POD_CONDITION_READY and cond.get("status") == "True"
        for cond in status.get("conditions") or []
    )


def observe_pods(client: ClusterClient, namespace: str, app_name: str) -> list[PodObservation]:
    """List the application's pods, newest first."""
    pods = [
        PodObservation.from_manifest(pod)
        for pod in client.list(namespace, KIND_POD, f"{LABEL_APP}={app_name}")
    ]
    return sorted(pods, key=lambda pod: (pod.created, pod.name), reverse=True)


def _poll(
    client: ClusterClient,
    namespace: str,
    app_name: str,
    predicate: Callable[[PodObservation], bool],
    max_polls: int,
    poll_interval: float,
    settle_seconds: float,
    waiter: Waiter | None,
) -> PodObservation:
    waiter = waiter or Waiter()

    def _find_pod() -> PodObservation | None:
        for pod in observe_pods(client, namespace, app_name):
            logger.info("Pod %s: ready=%s annotations=%s", pod.name, pod.ready, pod.annotations)
            if predicate(pod):
                return pod
        return None

    retrying = Retrying(
        stop=stop_after_attempt(max_polls) | stop_when_event_set(waiter.event),
        wait=wait_fixed(poll_interval),
        retry=retry_if_result(lambda pod: pod is None),
        sleep=waiter.sleep,
    )
    console.print(f"[yellow]\u2139\ufe0f  Waiting for application pod of {app_name} (max {max_polls} polls)...[/yellow]")
    try:
        pod = retrying(_find_pod)
    except RetryError as err:
        if waiter.cancelled:
            raise PollCancelled(f"Pod wait for {app_name} cancelled") from err
        raise ReadinessTimeout(f"Pod wait timeout! Could not find application pod for {app_name}") from err

    console.print(f"[green]\u2705 Pod {pod.name} is ready[/green]")
    waiter.sleep(settle_seconds)
    return pod


def wait_for_application_pod(
    client: ClusterClient,
    namespace: str,
    app_name: str,
    *,
    max_polls: int = DEFAULT_INITIAL_MAX_POLLS,
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    settle_seconds: float = DEFAULT_SETTLE_SECONDS,
    waiter: Waiter | None = None,
) -> PodObservation:
    """Wait until any pod labelled ``app=<app_name>`` is ready.

    Raises:
        ReadinessTimeout: If no pod is ready within *max_polls* polls.
        PollCancelled: If *waiter* is cancelled first.
    """
    return _poll(
        client, namespace, app_name, lambda pod: pod.ready,
        max_polls, poll_interval, settle_seconds, waiter,
    )


def wait_for_redeployed_pod(
    client: ClusterClient,
    namespace: str,
    app_name: str,
    key: str,
    value: str,
    *,
    max_polls: int = DEFAULT_REDEPLOY_MAX_POLLS,
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    settle_seconds: float = DEFAULT_SETTLE_SECONDS,
    waiter: Waiter | None = None,
) -> PodObservation:
    """Wait until a ready pod carries the redeploy annotation.

    A ready pod without the annotation belongs to the previous rollout and
    does not end the wait.

    Raises:
        ReadinessTimeout: If no such pod appears within *max_polls* polls.
        PollCancelled: If *waiter* is cancelled first.
    """
    def _redeployed(pod: PodObservation) -> bool:
        if key in pod.annotations:
            logger.info("%s is a redeployed pod", pod.name)
        return pod.ready and pod.has_annotation(key, value)

    return _poll(
        client, namespace, app_name, _redeployed,
        max_polls, poll_interval, settle_seconds, waiter,
    )
