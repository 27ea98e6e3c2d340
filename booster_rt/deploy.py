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

"""Deployment trigger: run the build engine against a provisioned repository."""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Protocol

import sh
from rich.panel import Panel

from booster_rt import console, logger
from booster_rt.constants import DEFAULT_MAVEN_BINARY, POM_XML
from booster_rt.errors import DeploymentError


class BuildEngine(Protocol):
    def run(self, project_path: Path, goals: str, profile: str) -> int:
        """Run the build and block until it exits; return the exit status."""
        ...


class MavenEngine:
    """Runs Maven as an external process.

    Args:
        binary: Maven executable.
    """

    def __init__(self, binary: str = DEFAULT_MAVEN_BINARY) -> None:
        self.binary = binary

    def command(self, project_path: Path, goals: str, profile: str) -> list[str]:
        args = ["-B", "-f", str(Path(project_path) / POM_XML)]
        if profile:
            args += ["-P", profile]
        return args + shlex.split(goals)

    def run(self, project_path: Path, goals: str, profile: str) -> int:
        args = self.command(project_path, goals, profile)
        logger.info("%s %s", self.binary, " ".join(args))
        try:
            sh.Command(self.binary)(*args, _cwd=str(project_path), _out=logger.debug, _err=logger.debug)
        except sh.ErrorReturnCode as err:
            return err.exit_code
        return 0


def deploy(engine: BuildEngine, project_path: Path, goals: str, profile: str) -> None:
    """Run the build with the given goals and profile.

    Raises:
        DeploymentError: If the build engine exits non-zero.
    """
    console.print(Panel.fit(f"Deploying {Path(project_path).name}", style="bold blue"))
    console.print(f"[yellow]Goals: {goals} (profile: {profile})[/yellow]")
    status = engine.run(Path(project_path), goals, profile)
    if status != 0:
        raise DeploymentError(f"Build of {project_path} failed with exit status {status}")
    console.print("[green]\u2705 Build finished[/green]")
