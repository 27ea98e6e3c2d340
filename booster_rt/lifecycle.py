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

"""Orchestration functions that compose the harness steps into booster scenarios."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from rich.panel import Panel

from booster_rt import console, logger
from booster_rt.checks import run_check
from booster_rt.cluster import (
    ClusterClient,
    create_config_map_resource,
    create_or_replace_config_map,
    deployments_with_annotation,
    route_host,
    route_with_name,
)
from booster_rt.config import BoosterSpec, HarnessConfig
from booster_rt.constants import (
    FIRST_DEPLOY_ANNOTATION,
    KIND_CONFIG_MAP,
    KIND_DEPLOYMENT,
    KIND_SERVICE,
    POM_XML,
    REDEPLOY_DEPENDENCY,
    VIEW_ROLE_COMMAND,
)
from booster_rt.context import RunContext, open_context
from booster_rt.deploy import BuildEngine, deploy
from booster_rt.errors import ConfigurationError, DeploymentAssertionError
from booster_rt.mutator import (
    inject_dependency,
    inject_plugin_configuration,
    pin_plugin_version,
    read_artifact_id,
)
from booster_rt.poller import wait_for_application_pod, wait_for_redeployed_pod
from booster_rt.provision import ProvisionedRepository, clone_template, provision

# ============================================================================
# Internal helpers
# ============================================================================


def _prepare_cluster(ctx: RunContext, booster: BoosterSpec) -> None:
    """Create the cluster-side prerequisites a booster needs before deployment."""
    if booster.view_role:
        ctx.run_command(f"{VIEW_ROLE_COMMAND} -n {ctx.namespace}")
    for command in booster.setup_commands:
        ctx.run_command(f"{command} -n {ctx.namespace}")
    if booster.config_map is not None:
        spec = booster.config_map
        create_config_map_resource(ctx.cluster, ctx.namespace, spec.name, spec.data())
        ctx.track(KIND_CONFIG_MAP, spec.name)


def _require(client: ClusterClient, namespace: str, kind: str, name: str) -> None:
    if client.get(namespace, kind, name) is None:
        raise DeploymentAssertionError(f"No {kind} named '{name}' in namespace {namespace}")


def assert_cluster_objects(ctx: RunContext, app_name: str) -> str:
    """Assert the workload, service and route exist; return the route host.

    Raises:
        DeploymentAssertionError: If any object is missing or the route has no host.
    """
    _require(ctx.cluster, ctx.namespace, KIND_DEPLOYMENT, app_name)
    _require(ctx.cluster, ctx.namespace, KIND_SERVICE, app_name)
    host = route_host(route_with_name(ctx.cluster, ctx.namespace, app_name))
    if host is None:
        raise DeploymentAssertionError(f"[No route found for: {app_name}]")
    console.print(f"[green]\u2705 Deployment, service and route for {app_name} exist ({host})[/green]")
    return host


# ============================================================================
# Scenarios
# ============================================================================


def deploy_once(ctx: RunContext, booster: BoosterSpec, project: ProvisionedRepository) -> None:
    """First deployment: annotate, build, wait for any ready pod, and check the application."""
    app_name = read_artifact_id(project.pom)
    console.print(Panel.fit(f"{booster.name}: deploy once", style="bold blue"))

    _prepare_cluster(ctx, booster)
    inject_plugin_configuration(project.pom, *FIRST_DEPLOY_ANNOTATION, ctx.config.plugin_config_template)

    deploy(ctx.engine, project.path, booster.goals, booster.profile)
    wait_for_application_pod(
        ctx.cluster, ctx.namespace, app_name,
        max_polls=ctx.config.initial_max_polls,
        poll_interval=ctx.config.poll_interval_seconds,
        settle_seconds=ctx.config.settle_seconds,
        waiter=ctx.waiter,
    )
    ctx.sleep(ctx.config.post_deploy_seconds)

    host = assert_cluster_objects(ctx, app_name)
    run_check(ctx, booster, host, redeployed=False)


def redeploy(ctx: RunContext, booster: BoosterSpec, project: ProvisionedRepository) -> None:
    """Redeployment: change the build, rebuild, and wait for the newly annotated pod."""
    app_name = read_artifact_id(project.pom)
    key, value = booster.annotation.key, booster.annotation.value
    console.print(Panel.fit(f"{booster.name}: redeploy", style="bold blue"))

    _prepare_cluster(ctx, booster)
    inject_dependency(project.pom, *REDEPLOY_DEPENDENCY)
    inject_plugin_configuration(project.pom, key, value, ctx.config.plugin_config_template)

    deploy(ctx.engine, project.path, booster.goals, booster.profile)
    if booster.config_map is not None:
        spec = booster.config_map
        create_or_replace_config_map(ctx.cluster, ctx.namespace, spec.name, spec.data(redeployed=True))

    wait_for_redeployed_pod(
        ctx.cluster, ctx.namespace, app_name, key, value,
        max_polls=ctx.config.redeploy_max_polls,
        poll_interval=ctx.config.poll_interval_seconds,
        settle_seconds=ctx.config.settle_seconds,
        waiter=ctx.waiter,
    )
    ctx.sleep(ctx.config.post_deploy_seconds)

    host = assert_cluster_objects(ctx, app_name)
    run_check(ctx, booster, host, redeployed=True)
    if booster.check_deployment_annotation and not deployments_with_annotation(ctx.cluster, ctx.namespace, key):
        raise DeploymentAssertionError(f"No deployment carries annotation '{key}' after redeploy")


SCENARIOS: dict[str, Callable[[RunContext, BoosterSpec, ProvisionedRepository], None]] = {
    "deploy-once": deploy_once,
    "redeploy": redeploy,
}


# ============================================================================
# Public API
# ============================================================================


def prepare_template(config: HarnessConfig, booster: BoosterSpec) -> Path:
    """Clone the booster's template repository and pin the deployment plugin version in it."""
    template = clone_template(booster.repository, config.workdir)
    pin_plugin_version(template / POM_XML, config.plugin_version_pom)
    return template


def run_scenario(
    config: HarnessConfig,
    booster: BoosterSpec,
    scenario: str,
    template: Path,
    *,
    test_class: str,
    cluster: ClusterClient | None = None,
    engine: BuildEngine | None = None,
    run_command: Callable[[str], list[str]] | None = None,
) -> ProvisionedRepository:
    """Run one scenario on a fresh copy of *template*.

    Args:
        config: Harness configuration.
        booster: Booster under test.
        scenario: ``deploy-once`` or ``redeploy``.
        template: Pinned template clone.
        test_class: Name grouping the per-test copy (e.g. the test class).
        cluster: Cluster client override, or None for the CLI-backed client.
        engine: Build engine override, or None for Maven.
        run_command: Cluster command runner override.

    Returns:
        The provisioned repository the scenario ran in.

    Raises:
        ConfigurationError: If the scenario is unknown.
    """
    try:
        steps = SCENARIOS[scenario]
    except KeyError:
        raise ConfigurationError(f"Unknown scenario '{scenario}' (known: {', '.join(SCENARIOS)})") from None

    project = provision(template, test_class, scenario)
    logger.info("Running %s/%s in %s", booster.name, scenario, project.path)
    with open_context(config, cluster=cluster, engine=engine, run_command=run_command) as ctx:
        steps(ctx, booster, project)
    return project


def run_booster(config: HarnessConfig, booster: BoosterSpec, scenarios: list[str]) -> None:
    """Prepare the booster's template once and run the given scenarios in order."""
    template = prepare_template(config, booster)
    for scenario in scenarios:
        run_scenario(config, booster, scenario, template, test_class=booster.name)
        console.print(f"[green]\u2705 {booster.name}: {scenario} passed[/green]")
