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

"""Template repository cloning and per-test repository copies."""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass
from pathlib import Path

import sh

from booster_rt import console, logger
from booster_rt.constants import POM_XML
from booster_rt.utils import repository_name


@dataclass(frozen=True)
class ProvisionedRepository:
    """An isolated copy of a template repository owned by one test.

    Attributes:
        path: Root of the per-test copy.
        template: Template clone the copy was made from.
    """

    path: Path
    template: Path

    @property
    def pom(self) -> Path:
        return self.path / POM_XML


def clone_template(repository: str, workdir: Path) -> Path:
    """Clone a repository into *workdir* unless a clone already exists.

    Args:
        repository: Git URL of the template repository.
        workdir: Directory holding template clones.

    Returns:
        Path of the template clone.
    """
    target = Path(workdir) / repository_name(repository)
    if (target / ".git").exists():
        logger.info("Reusing existing clone of %s at %s", repository, target)
        return target
    target.parent.mkdir(parents=True, exist_ok=True)
    console.print(f"[yellow]\u2139\ufe0f  Cloning {repository}...[/yellow]")
    sh.git("clone", "--depth", "1", repository, str(target))
    console.print(f"[green]\u2705 Cloned into {target}[/green]")
    return target


def _safe(part: str) -> str:
    return re.sub(r"[^\w.-]", "_", part)


def provision(template: Path, test_class: str, test_method: str) -> ProvisionedRepository:
    """Copy the template into a directory unique to (template, test class, test method).

    Any stale copy left at that path is removed first, so the test always
    starts from the template's current content.
    """
    template = Path(template)
    target = template.parent / f"{template.name}_{_safe(test_class)}_{_safe(test_method)}"
    if target.exists():
        shutil.rmtree(target)
    shutil.copytree(template, target, symlinks=True)
    logger.info("Provisioned %s from %s", target, template)
    return ProvisionedRepository(path=target, template=template)
