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

"""Utility functions for cluster CLI calls and command checks."""

from __future__ import annotations

import shlex
import subprocess

import sh

from booster_rt.constants import DEFAULT_CLI_BINARY, DEFAULT_KUBECTL_TIMEOUT


def require_command(cmd: str) -> None:
    """Check if a command exists on the system PATH.

    Args:
        cmd: Name of the CLI command to check.

    Raises:
        RuntimeError: If the command is not found.
    """
    try:
        sh.which(cmd)
    except sh.ErrorReturnCode as err:
        raise RuntimeError(f"Required command '{cmd}' not found. Please install it first.") from err


def run_kubectl(
    args: list[str],
    timeout: int = DEFAULT_KUBECTL_TIMEOUT,
    binary: str = DEFAULT_CLI_BINARY,
    stdin: str | None = None,
) -> tuple[bool, str, str]:
    """Run a kubectl-compatible command via subprocess and return (success, stdout, stderr).

    Uses subprocess instead of sh because JSON output parsing requires
    precise control over stdout/stderr separation.

    Args:
        args: CLI arguments (e.g. ``["get", "pods", "-n", "default"]``).
        timeout: Maximum seconds to wait for the command to complete.
        binary: CLI executable, ``oc`` or ``kubectl``.
        stdin: Text fed to the command's standard input, if any.

    Returns:
        Tuple of (success, stdout, stderr).
    """
    try:
        result = subprocess.run(
            [binary, *args],
            capture_output=True,
            text=True,
            timeout=timeout,
            input=stdin,
        )
        return result.returncode == 0, result.stdout, result.stderr
    except (subprocess.SubprocessError, OSError) as exc:
        return False, "", str(exc)


def exec_command(command: str, binary: str | None = None) -> list[str]:
    """Run a whitespace-separated command line and return its output lines.

    Args:
        command: Command line; split on whitespace.
        binary: Executable prepended to the command, if any.

    Returns:
        Output lines of the command.

    Raises:
        ValueError: If the command is empty.
        sh.ErrorReturnCode: If the command exits non-zero.
    """
    arguments = shlex.split(command)
    if binary:
        arguments.insert(0, binary)
    if not arguments:
        raise ValueError("command to run can't be empty")
    output = sh.Command(arguments[0])(*arguments[1:])
    return str(output).splitlines()


def repository_name(url: str) -> str:
    """Directory name a git clone of *url* gets (``.../foo.git`` -> ``foo``)."""
    return url.rstrip("/").rsplit("/", 1)[-1].removesuffix(".git")
