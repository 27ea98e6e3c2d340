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

"""Harness error types. None of these are retried by the caller."""

from __future__ import annotations


class HarnessError(RuntimeError):
    """Base class for harness failures."""


class ConfigurationError(HarnessError):
    """A structural slot an operation relies on is missing."""


class EnvironmentUnavailable(HarnessError):
    """The probe target host could not be resolved."""


class ReadinessTimeout(HarnessError, AssertionError):
    """The readiness poll bound was exhausted without a matching pod."""


class PollCancelled(HarnessError):
    """The readiness poll was cancelled through its wait primitive."""


class DeploymentError(HarnessError):
    """The build engine exited with a non-zero status."""


class ClusterError(HarnessError):
    """A cluster CLI invocation failed."""


class DeploymentAssertionError(AssertionError):
    """Observed cluster or application state does not match expectations."""
