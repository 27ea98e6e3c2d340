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

"""Build descriptor subcommands (pin, add-dependency, annotate)."""

from __future__ import annotations

from pathlib import Path

import typer

from booster_rt import console
from booster_rt.config import HarnessConfig
from booster_rt.constants import POM_XML
from booster_rt.mutator import inject_dependency, inject_plugin_configuration, pin_plugin_version

app = typer.Typer(help="Edit a project's build descriptor.")

_POM_OPTION = typer.Option(Path(POM_XML), "--pom", "-f", help="Build descriptor to edit")


@app.command("pin")
def pin(
    pom: Path = _POM_OPTION,
    version_source: Path | None = typer.Option(
        None, "--version-source", help="Descriptor whose version is pinned",
    ),
) -> None:
    """Pin the deployment plugin version, declaring the plugin if needed."""
    source = version_source or HarnessConfig().plugin_version_pom
    version = pin_plugin_version(pom, source)
    console.print(f"[green]\u2705 Pinned plugin version {version} in {pom}[/green]")


@app.command("add-dependency")
def add_dependency(
    coordinates: str = typer.Argument(..., help="groupId:artifactId:version"),
    pom: Path = _POM_OPTION,
) -> None:
    """Append a dependency to the descriptor."""
    parts = coordinates.split(":")
    if len(parts) != 3 or not all(parts):
        raise typer.BadParameter("expected groupId:artifactId:version", param_hint="COORDINATES")
    inject_dependency(pom, *parts)
    console.print(f"[green]\u2705 Added {coordinates} to {pom}[/green]")


@app.command("annotate")
def annotate(
    key: str = typer.Argument(..., help="Annotation key"),
    value: str = typer.Argument(..., help="Annotation value"),
    pom: Path = _POM_OPTION,
    template: Path | None = typer.Option(None, "--template", help="Configuration-fragment template"),
) -> None:
    """Stamp an annotation pair into the deployment plugin configuration."""
    inject_plugin_configuration(pom, key, value, template or HarnessConfig().plugin_config_template)
    console.print(f"[green]\u2705 Set annotation {key}={value} in {pom}[/green]")
