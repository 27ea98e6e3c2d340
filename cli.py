#!/usr/bin/env python3
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
cli.py - Unified CLI for the booster deployment verification harness.

Subcommands:
    booster    List boosters and run deployment scenarios against a cluster
    pom        Edit a project's build descriptor (pin, add-dependency, annotate)

Examples:
    # Show the booster catalog
    ./cli.py booster list

    # Deploy and redeploy a booster in the current namespace
    ./cli.py booster run vertx-http

    # Only the first deployment, in a given namespace
    ./cli.py booster run spring-boot-crud --scenario deploy-once -n boosters

    # Stamp an annotation into a local project's plugin configuration
    ./cli.py pom annotate testKey testValue --pom my-app/pom.xml

For detailed usage information, run: ./cli.py --help
"""

from __future__ import annotations

import logging
import sys

import typer

from booster_rt import console
from booster_rt.commands import booster_cmd, pom_cmd

app = typer.Typer(
    help="End-to-end deployment verification harness for booster applications.",
    no_args_is_help=True,
)


@app.callback()
def _main_callback(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log build output")) -> None:
    """Initialize logging for all subcommands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


app.add_typer(booster_cmd.app, name="booster")
app.add_typer(pom_cmd.app, name="pom")


def main() -> None:
    try:
        app()
    except Exception as e:
        console.print(f"[red]\u274c {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
