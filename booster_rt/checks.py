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

"""Application checks run against a booster's exposed route."""

from __future__ import annotations

import json
from collections.abc import Callable

from tenacity import Retrying, retry_if_result, stop_after_attempt, wait_fixed

from booster_rt import console, logger
from booster_rt.config import BoosterSpec
from booster_rt.constants import (
    HEALTH_DOWN,
    HEALTH_LIVENESS_PATH,
    HEALTH_STOP_PATH,
    HEALTH_UP,
    HTTP_CREATED,
    HTTP_OK,
)
from booster_rt.context import RunContext
from booster_rt.errors import DeploymentAssertionError
from booster_rt.probe import ProbeResponse


def _url(host: str, path: str = "") -> str:
    return f"http://{host}{path}"


def _expect_status(response: ProbeResponse, expected: int, what: str) -> None:
    if response.status_code != expected:
        raise DeploymentAssertionError(f"{what}: expected HTTP {expected}, got {response.status_code}")


def _expect_equal(actual: object, expected: object) -> None:
    if actual != expected:
        raise DeploymentAssertionError(f"Actual : {actual}, Expected : {expected}")


def get_until_ok(ctx: RunContext, url: str, attempts: int, interval: float) -> ProbeResponse:
    """GET *url* until it answers 200 or *attempts* run out; return the last response."""
    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_fixed(interval),
        retry=retry_if_result(lambda response: response.status_code != HTTP_OK),
        sleep=ctx.sleep,
        retry_error_callback=lambda state: state.outcome.result(),
    )
    return retrying(ctx.probe, "GET", url)


# ============================================================================
# Checks
# ============================================================================

def check_greeting(ctx: RunContext, booster: BoosterSpec, host: str, redeployed: bool) -> None:
    """The greeting endpoint returns the expected literal."""
    greeting = booster.greeting
    response = get_until_ok(
        ctx, _url(host, greeting.path), ctx.config.probe_attempts, ctx.config.probe_retry_seconds,
    )
    _expect_status(response, HTTP_OK, greeting.path)
    _expect_equal(response.field(greeting.field), greeting.expected_for(redeployed))


def check_route(ctx: RunContext, booster: BoosterSpec, host: str, redeployed: bool) -> None:
    """The route root answers 200."""
    _expect_status(ctx.probe("GET", _url(host)), HTTP_OK, f"route of {booster.name}")


def check_crud(ctx: RunContext, booster: BoosterSpec, host: str, redeployed: bool) -> None:
    """A created record can be read back."""
    crud = booster.crud
    url = _url(host, crud.path)

    created = ctx.probe("POST", url, json.dumps({"name": crud.name}))
    _expect_status(created, HTTP_CREATED, f"POST {crud.path}")
    record_id = created.field("id")

    read = ctx.probe("GET", f"{url}/{record_id}")
    _expect_status(read, HTTP_OK, f"GET {crud.path}/{record_id}")
    _expect_equal(read.field("name"), crud.name)


def check_health(ctx: RunContext, booster: BoosterSpec, host: str, redeployed: bool) -> None:
    """The application reports UP, goes DOWN when stopped, and recovers on its own."""
    greeting = booster.greeting
    liveness_url = _url(host, HEALTH_LIVENESS_PATH)
    greeting_url = _url(host, greeting.path)

    _expect_equal(ctx.probe("GET", liveness_url).field("outcome"), HEALTH_UP)
    _expect_equal(ctx.probe("GET", greeting_url).field(greeting.field), greeting.expected_for(redeployed))

    _expect_status(ctx.probe("GET", _url(host, HEALTH_STOP_PATH)), HTTP_OK, HEALTH_STOP_PATH)

    stopped = ctx.probe("GET", liveness_url)
    if stopped.status_code == HTTP_OK:
        raise DeploymentAssertionError("Liveness still reports HTTP 200 after stop")
    _expect_equal(stopped.field("outcome"), HEALTH_DOWN)

    recovered = get_until_ok(ctx, greeting_url, ctx.config.recovery_seconds, 1)
    if recovered.status_code != HTTP_OK:
        raise DeploymentAssertionError("Application recovery failed")
    logger.info("Application recovery successful")


CHECKS: dict[str, Callable[[RunContext, BoosterSpec, str, bool], None]] = {
    "greeting": check_greeting,
    "route": check_route,
    "crud": check_crud,
    "health": check_health,
}


def run_check(ctx: RunContext, booster: BoosterSpec, host: str, redeployed: bool = False) -> None:
    """Run the booster's application check against *host*."""
    console.print(f"[yellow]\u2139\ufe0f  Running '{booster.check}' check against {host}...[/yellow]")
    CHECKS[booster.check](ctx, booster, host, redeployed)
    console.print(f"[green]\u2705 '{booster.check}' check passed[/green]")
