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

"""Build descriptor mutations: plugin version pin, dependency and configuration injection.

Every operation re-reads the descriptor from disk, applies one edit and
writes the whole file back, so independent calls compose.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from booster_rt import logger
from booster_rt.constants import (
    FRAGMENT_KEY_TOKEN,
    FRAGMENT_VALUE_TOKEN,
    PLUGIN_ARTIFACT_ID,
    PLUGIN_EXECUTIONS,
    PLUGIN_GROUP_ID,
    PLUGIN_KEY,
    PLUGIN_PROFILE_ID,
)
from booster_rt.descriptor import (
    BuildDescriptor,
    Profile,
    find_plugin,
    find_profile,
    parse_fragment,
    profiles_hosting,
)
from booster_rt.errors import ConfigurationError


@contextmanager
def _rewrite(pom_path: Path) -> Iterator[BuildDescriptor]:
    """Read the descriptor, hand it out for mutation, and write it back."""
    descriptor = BuildDescriptor.read(pom_path)
    yield descriptor
    descriptor.write(pom_path)


def read_artifact_id(pom_path: Path) -> str:
    """Return the project artifactId of a descriptor.

    Raises:
        ConfigurationError: If the descriptor declares no artifactId.
    """
    artifact_id = BuildDescriptor.read(pom_path).artifact_id
    if not artifact_id:
        raise ConfigurationError(f"{pom_path} declares no artifactId")
    return artifact_id


def read_plugin_version(version_source: Path) -> str:
    """Read the plugin version from the harness-owned descriptor.

    Raises:
        ConfigurationError: If neither the project nor its parent declares a version.
    """
    version = BuildDescriptor.read(version_source).version
    if not version:
        raise ConfigurationError(f"{version_source} declares no version")
    return version


# ============================================================================
# Plugin profile synthesis
# ============================================================================

def _synthesize_plugin_profile(descriptor: BuildDescriptor) -> Profile:
    """Declare the deployment plugin in the openshift profile, creating the profile if needed."""
    executions = [
        descriptor.make("execution", children=[
            descriptor.make("id", goal),
            descriptor.make("goals", children=[descriptor.make("goal", goal)]),
        ])
        for goal in PLUGIN_EXECUTIONS
    ]
    plugin = descriptor.make("plugin", children=[
        descriptor.make("groupId", PLUGIN_GROUP_ID),
        descriptor.make("artifactId", PLUGIN_ARTIFACT_ID),
        descriptor.make("executions", children=executions),
    ])

    profile = find_profile(descriptor, PLUGIN_PROFILE_ID)
    if profile is None:
        logger.info("Creating '%s' profile for %s:%s", PLUGIN_PROFILE_ID, *PLUGIN_KEY)
        profile = descriptor.add_profile(PLUGIN_PROFILE_ID)
    else:
        logger.info("Adding %s:%s to existing '%s' profile", *PLUGIN_KEY, PLUGIN_PROFILE_ID)
    profile.ensure_build().add_plugin(plugin)
    return profile


# ============================================================================
# Operations
# ============================================================================

def pin_plugin_version(pom_path: Path, version_source: Path) -> str:
    """Point the descriptor's deployment plugin at the locally-built version.

    When no profile declares the plugin, it is first added to the
    ``openshift`` profile with ``resource`` and ``build`` executions.
    The version is set on the top-level plugin entry if there is one,
    otherwise on every profile that declares the plugin.

    Args:
        pom_path: Descriptor to modify.
        version_source: Harness-owned descriptor whose version is pinned.

    Returns:
        The pinned version.
    """
    version = read_plugin_version(version_source)
    with _rewrite(pom_path) as descriptor:
        if not profiles_hosting(descriptor, PLUGIN_KEY):
            logger.warning("No profile found in %s using %s:%s", pom_path, *PLUGIN_KEY)
            _synthesize_plugin_profile(descriptor)

        plugin = find_plugin(descriptor.build, PLUGIN_KEY)
        if plugin is not None:
            plugin.version = version
        else:
            for profile in profiles_hosting(descriptor, PLUGIN_KEY):
                find_plugin(profile.build, PLUGIN_KEY).version = version
    logger.info("Pinned %s:%s to %s in %s", *PLUGIN_KEY, version, pom_path)
    return version


def inject_dependency(pom_path: Path, group_id: str, artifact_id: str, version: str) -> None:
    """Append a dependency entry. Duplicates are not detected."""
    with _rewrite(pom_path) as descriptor:
        descriptor.add_dependency(group_id, artifact_id, version)
    logger.info("Added dependency %s:%s:%s to %s", group_id, artifact_id, version, pom_path)


def render_fragment(template: str, key: str, value: str) -> str:
    """Stamp the annotation key and value into a configuration-fragment template."""
    return template.replace(FRAGMENT_KEY_TOKEN, key).replace(FRAGMENT_VALUE_TOKEN, value)


def inject_plugin_configuration(pom_path: Path, key: str, value: str, template_path: Path) -> None:
    """Replace the deployment plugin's configuration with a stamped fragment.

    The plugin is looked up in the first profile declaring it.

    Args:
        pom_path: Descriptor to modify.
        key: Annotation key substituted for ``{key}``.
        value: Annotation value substituted for ``{value}``.
        template_path: Configuration-fragment template file.

    Raises:
        ConfigurationError: If no profile declares the deployment plugin.
    """
    fragment = parse_fragment(render_fragment(Path(template_path).read_text(encoding="utf-8"), key, value))
    with _rewrite(pom_path) as descriptor:
        hosts = profiles_hosting(descriptor, PLUGIN_KEY)
        if not hosts:
            raise ConfigurationError(
                f"No profile in {pom_path} declares {PLUGIN_GROUP_ID}:{PLUGIN_ARTIFACT_ID}; "
                "pin the plugin version first"
            )
        find_plugin(hosts[0].build, PLUGIN_KEY).replace_configuration(fragment)
    logger.info("Set plugin annotation %s=%s in %s", key, value, pom_path)
