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

"""Harness configuration and booster catalog models."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.panel import Panel
from rich.table import Table

from booster_rt import console
from booster_rt.constants import (
    CATALOG,
    DEFAULT_BUILD_GOALS,
    DEFAULT_BUILD_PROFILE,
    DEFAULT_CLI_BINARY,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_INITIAL_MAX_POLLS,
    DEFAULT_KUBECTL_TIMEOUT,
    DEFAULT_MAVEN_BINARY,
    DEFAULT_PLUGIN_CONFIG_TEMPLATE,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_POST_DEPLOY_SECONDS,
    DEFAULT_PROBE_ATTEMPTS,
    DEFAULT_PROBE_RETRY_SECONDS,
    DEFAULT_RECOVERY_SECONDS,
    DEFAULT_REDEPLOY_MAX_POLLS,
    DEFAULT_SETTLE_SECONDS,
    DEFAULT_WORKDIR,
    POM_XML,
    RESOURCES_DIR,
)
from booster_rt.errors import ConfigurationError
from booster_rt.utils import repository_name


# ============================================================================
# Harness configuration
# ============================================================================

class HarnessConfig(BaseSettings):
    """Harness settings, auto-loaded from BOOSTER_RT_* env vars.

    Attributes:
        workdir: Directory holding template clones and per-test copies.
        namespace: Cluster namespace, or None for the CLI's current context.
        cli_binary: kubectl-compatible CLI used for cluster operations.
        maven_binary: Build engine executable.
        plugin_version_pom: Harness-owned descriptor supplying the plugin version.
        plugin_config_template: Configuration-fragment template file.
        poll_interval_seconds: Sleep between readiness polls.
        initial_max_polls: Poll bound for the first deployment.
        redeploy_max_polls: Poll bound for redeploy confirmation.
        settle_seconds: Delay after a pod is found ready.
        post_deploy_seconds: Delay before asserting cluster objects.
        http_timeout_seconds: Per-request HTTP timeout.
        probe_attempts: Greeting attempts while the route answers non-200.
        probe_retry_seconds: Delay between greeting attempts.
        recovery_seconds: Time allowed for a stopped application to recover.
        kubectl_timeout: Maximum seconds per CLI invocation.
    """

    model_config = SettingsConfigDict(env_prefix="BOOSTER_RT_", extra="ignore")

    workdir: Path = Path(DEFAULT_WORKDIR)
    namespace: str | None = None
    cli_binary: str = DEFAULT_CLI_BINARY
    maven_binary: str = DEFAULT_MAVEN_BINARY
    plugin_version_pom: Path = Path(POM_XML)
    plugin_config_template: Path = DEFAULT_PLUGIN_CONFIG_TEMPLATE
    poll_interval_seconds: float = Field(default=DEFAULT_POLL_INTERVAL_SECONDS, ge=0)
    initial_max_polls: int = Field(default=DEFAULT_INITIAL_MAX_POLLS, ge=1)
    redeploy_max_polls: int = Field(default=DEFAULT_REDEPLOY_MAX_POLLS, ge=1)
    settle_seconds: float = Field(default=DEFAULT_SETTLE_SECONDS, ge=0)
    post_deploy_seconds: float = Field(default=DEFAULT_POST_DEPLOY_SECONDS, ge=0)
    http_timeout_seconds: float = Field(default=DEFAULT_HTTP_TIMEOUT_SECONDS, gt=0)
    probe_attempts: int = Field(default=DEFAULT_PROBE_ATTEMPTS, ge=1)
    probe_retry_seconds: float = Field(default=DEFAULT_PROBE_RETRY_SECONDS, ge=0)
    recovery_seconds: int = Field(default=DEFAULT_RECOVERY_SECONDS, ge=1)
    kubectl_timeout: int = Field(default=DEFAULT_KUBECTL_TIMEOUT, ge=1)

    @model_validator(mode="after")
    def _redeploy_bound_exceeds_initial(self) -> HarnessConfig:
        if self.redeploy_max_polls <= self.initial_max_polls:
            raise ValueError(
                f"redeploy_max_polls ({self.redeploy_max_polls}) must exceed "
                f"initial_max_polls ({self.initial_max_polls})"
            )
        return self


def display_config(config: HarnessConfig) -> None:
    """Print the resolved harness configuration."""
    table = Table(show_header=False, box=None)
    for name, value in config.model_dump().items():
        table.add_row(f"[cyan]{name}[/cyan]", str(value))
    console.print(Panel.fit(table, title="Harness configuration", style="bold blue"))


# ============================================================================
# Booster catalog
# ============================================================================

class AnnotationPair(BaseModel):
    key: str
    value: str


class GreetingCheck(BaseModel):
    """Expected greeting payload.

    Attributes:
        path: Endpoint path appended to the route host.
        field: JSON field compared against the expected literal.
        expected: Literal expected after the first deployment.
        redeploy_expected: Literal expected after redeploy, or None for *expected*.
    """

    path: str = "/api/greeting"
    field: str = "content"
    expected: str
    redeploy_expected: str | None = None

    def expected_for(self, redeployed: bool) -> str:
        if redeployed and self.redeploy_expected is not None:
            return self.redeploy_expected
        return self.expected


class CrudCheck(BaseModel):
    path: str = "/api/fruits"
    name: str = "Pineapple"


class ConfigMapSpec(BaseModel):
    """Config map created for the booster before deployment.

    Attributes:
        name: Config map name.
        key: Data key holding the content.
        content: Inline content, used when *source* is not set.
        source: Resource file name providing the content.
        replace: Text replaced in the content on redeploy.
        replacement: Replacement text for *replace*.
    """

    name: str
    key: str
    content: str | None = None
    source: str | None = None
    replace: str | None = None
    replacement: str | None = None

    @model_validator(mode="after")
    def _has_content(self) -> ConfigMapSpec:
        if self.content is None and self.source is None:
            raise ValueError(f"config map '{self.name}' needs either content or source")
        return self

    def data(self, redeployed: bool = False) -> dict[str, str]:
        text = self.content if self.source is None else (RESOURCES_DIR / self.source).read_text()
        if redeployed and self.replace is not None:
            text = text.replace(self.replace, self.replacement or "")
        return {self.key: text}


class BoosterSpec(BaseModel):
    """A booster application and how to verify it."""

    name: str
    repository: str
    goals: str = DEFAULT_BUILD_GOALS
    profile: str = DEFAULT_BUILD_PROFILE
    annotation: AnnotationPair
    check: Literal["greeting", "route", "crud", "health"] = "route"
    greeting: GreetingCheck | None = None
    crud: CrudCheck | None = None
    config_map: ConfigMapSpec | None = None
    view_role: bool = False
    setup_commands: list[str] = Field(default_factory=list)
    check_deployment_annotation: bool = False

    @model_validator(mode="after")
    def _check_has_settings(self) -> BoosterSpec:
        if self.check in ("greeting", "health") and self.greeting is None:
            raise ValueError(f"booster '{self.name}' uses check '{self.check}' without greeting settings")
        if self.check == "crud" and self.crud is None:
            self.crud = CrudCheck()
        return self

    @property
    def repository_name(self) -> str:
        return repository_name(self.repository)


def load_boosters(catalog: dict | None = None) -> dict[str, BoosterSpec]:
    """Validate the booster catalog into BoosterSpec models.

    Args:
        catalog: Parsed catalog, or None for the packaged boosters.yaml.

    Returns:
        Mapping of booster name to its validated spec.
    """
    entries = (catalog if catalog is not None else CATALOG).get("boosters") or {}
    return {name: BoosterSpec(name=name, **entry) for name, entry in entries.items()}


def get_booster(name: str) -> BoosterSpec:
    """Look up a booster by name.

    Raises:
        ConfigurationError: If no booster with that name is defined.
    """
    boosters = load_boosters()
    try:
        return boosters[name]
    except KeyError:
        known = ", ".join(sorted(boosters))
        raise ConfigurationError(f"Unknown booster '{name}' (known: {known})") from None
