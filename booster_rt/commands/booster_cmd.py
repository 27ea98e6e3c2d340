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

"""Booster subcommands (list, run)."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from booster_rt import console
from booster_rt.config import HarnessConfig, display_config, get_booster, load_boosters
from booster_rt.lifecycle import SCENARIOS, run_booster
from booster_rt.utils import require_command

app = typer.Typer(help="List and verify booster applications.")

ALL_SCENARIOS = "all"


@app.command("list")
def list_boosters() -> None:
    """Show the boosters in the catalog."""
    table = Table(title="Boosters")
    table.add_column("Name", style="cyan")
    table.add_column("Repository")
    table.add_column("Check")
    table.add_column("Annotation")
    for name, booster in sorted(load_boosters().items()):
        table.add_row(name, booster.repository, booster.check, f"{booster.annotation.key}={booster.annotation.value}")
    console.print(table)


@app.command("run")
def run(
    name: str = typer.Argument(..., help="Booster name (see 'booster list')"),
    scenario: str = typer.Option(
        ALL_SCENARIOS, "--scenario", "-s",
        help=f"Scenario to run: {', '.join(SCENARIOS)} or {ALL_SCENARIOS}",
    ),
    namespace: str | None = typer.Option(None, "--namespace", "-n", help="Target namespace"),
    workdir: str | None = typer.Option(None, "--workdir", help="Directory for repository clones"),
) -> None:
    """Deploy a booster to the cluster and verify it."""
    config = HarnessConfig()
    overrides: dict = {}
    if namespace is not None:
        overrides["namespace"] = namespace
    if workdir is not None:
        overrides["workdir"] = Path(workdir)
    if overrides:
        config = config.model_copy(update=overrides)

    booster = get_booster(name)
    scenarios = list(SCENARIOS) if scenario == ALL_SCENARIOS else [scenario]
    if any(s not in SCENARIOS for s in scenarios):
        raise typer.BadParameter(f"unknown scenario '{scenario}'", param_hint="--scenario")

    require_command("git")
    require_command(config.cli_binary)
    require_command(config.maven_binary)
    display_config(config)
    run_booster(config, booster, scenarios)
