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

"""Typed build-descriptor (pom.xml) tree with a round-trip-preserving parser/serializer.

The typed nodes are thin views over the parsed element tree. Anything the
views do not touch (comments, unknown elements, attribute order, whitespace)
is written back exactly as it was read.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from pathlib import Path

from booster_rt.constants import DEFAULT_INDENT, DEFAULT_PLUGIN_GROUP_ID
from booster_rt.errors import ConfigurationError

PluginKey = tuple[str, str]

_PROLOG_RE = re.compile(r"(?:\s*(?:<\?.*?\?>|<!--.*?-->|<!DOCTYPE[^>]*>))*\s*", re.DOTALL)
_ROOT_NAME_RE = re.compile(r"<([\w:.-]+)")


def _parser() -> ET.XMLParser:
    return ET.XMLParser(target=ET.TreeBuilder(insert_comments=True, insert_pis=True))


def _local_name(tag: object) -> str | None:
    if not isinstance(tag, str):
        return None
    return tag.rsplit("}", 1)[-1]


# ============================================================================
# Typed views
# ============================================================================

class _Node:
    """Typed view over one element of a BuildDescriptor."""

    def __init__(self, element: ET.Element, descriptor: BuildDescriptor) -> None:
        self.element = element
        self.descriptor = descriptor

    def _children(self, name: str) -> list[ET.Element]:
        return [child for child in self.element if _local_name(child.tag) == name]

    def _child(self, name: str) -> ET.Element | None:
        found = self._children(name)
        return found[0] if found else None

    def _text(self, name: str) -> str | None:
        child = self._child(name)
        if child is None or child.text is None:
            return None
        return child.text.strip()

    def _set_text(self, name: str, value: str, after: tuple[str, ...] = ()) -> None:
        child = self._child(name)
        if child is not None:
            child.text = value
            return
        child = self.descriptor.make(name, value)
        index = None
        for anchor_name in after:
            anchor = self._child(anchor_name)
            if anchor is not None:
                index = list(self.element).index(anchor) + 1
                break
        self.descriptor.graft(self.element, child, index)

    def _ensure(self, name: str) -> ET.Element:
        child = self._child(name)
        if child is None:
            child = self.descriptor.make(name)
            self.descriptor.graft(self.element, child)
        return child


class Dependency(_Node):
    @property
    def group_id(self) -> str | None:
        return self._text("groupId")

    @property
    def artifact_id(self) -> str | None:
        return self._text("artifactId")

    @property
    def version(self) -> str | None:
        return self._text("version")

    @property
    def coordinates(self) -> tuple[str | None, str | None, str | None]:
        return self.group_id, self.artifact_id, self.version


class Execution(_Node):
    @property
    def id(self) -> str | None:
        return self._text("id")

    @property
    def goals(self) -> list[str]:
        goals = self._child("goals")
        if goals is None:
            return []
        return [(goal.text or "").strip() for goal in goals if _local_name(goal.tag) == "goal"]


class Plugin(_Node):
    @property
    def group_id(self) -> str:
        return self._text("groupId") or DEFAULT_PLUGIN_GROUP_ID

    @property
    def artifact_id(self) -> str | None:
        return self._text("artifactId")

    @property
    def key(self) -> PluginKey:
        return self.group_id, self.artifact_id or ""

    @property
    def version(self) -> str | None:
        return self._text("version")

    @version.setter
    def version(self, value: str) -> None:
        self._set_text("version", value, after=("artifactId", "groupId"))

    @property
    def executions(self) -> list[Execution]:
        container = self._child("executions")
        if container is None:
            return []
        return [Execution(el, self.descriptor) for el in container if _local_name(el.tag) == "execution"]

    @property
    def configuration(self) -> ET.Element | None:
        """The opaque configuration sub-tree, if any."""
        return self._child("configuration")

    def replace_configuration(self, fragment: ET.Element) -> None:
        """Replace the plugin configuration wholesale with *fragment*."""
        self.descriptor.adopt(fragment)
        existing = self.configuration
        if existing is None:
            self.descriptor.graft(self.element, fragment)
        else:
            self.descriptor.replace(self.element, existing, fragment)


class BuildBlock(_Node):
    @property
    def plugins(self) -> list[Plugin]:
        container = self._child("plugins")
        if container is None:
            return []
        return [Plugin(el, self.descriptor) for el in container if _local_name(el.tag) == "plugin"]

    def add_plugin(self, plugin: ET.Element) -> Plugin:
        self.descriptor.graft(self._ensure("plugins"), plugin)
        return Plugin(plugin, self.descriptor)


class Profile(_Node):
    @property
    def id(self) -> str | None:
        return self._text("id")

    @property
    def build(self) -> BuildBlock | None:
        build = self._child("build")
        return BuildBlock(build, self.descriptor) if build is not None else None

    def ensure_build(self) -> BuildBlock:
        return BuildBlock(self._ensure("build"), self.descriptor)


# ============================================================================
# Descriptor
# ============================================================================

class BuildDescriptor(_Node):
    """A parsed build descriptor.

    Attributes:
        element: Root ``<project>`` element.
        namespace: Default namespace URI of the document, or empty string.
        indent: Indentation unit detected from the document.
        prolog: Raw text before the root element (declaration, comments).
        epilog: Raw text after the root element.
    """

    def __init__(self, root: ET.Element, prolog: str = "", epilog: str = "") -> None:
        super().__init__(root, self)
        root.tail = None
        tag = root.tag if isinstance(root.tag, str) else ""
        self.namespace = tag[1:].split("}", 1)[0] if tag.startswith("{") else ""
        self.indent = _detect_indent(root)
        self.prolog = prolog
        self.epilog = epilog

    # -- parse / serialize --

    @classmethod
    def parse(cls, text: str) -> BuildDescriptor:
        """Parse descriptor text.

        Raises:
            ConfigurationError: If the text is not well-formed XML.
        """
        prolog = _PROLOG_RE.match(text).group(0)
        try:
            root = ET.fromstring(text, parser=_parser())
        except ET.ParseError as err:
            raise ConfigurationError(f"Malformed build descriptor: {err}") from err
        epilog = ""
        name_match = _ROOT_NAME_RE.match(text, len(prolog))
        if name_match:
            closing = text.rfind(f"</{name_match.group(1)}")
            if closing >= 0:
                epilog = text[text.index(">", closing) + 1:]
        return cls(root, prolog, epilog)

    @classmethod
    def read(cls, path: Path) -> BuildDescriptor:
        return cls.parse(Path(path).read_text(encoding="utf-8"))

    def serialize(self) -> str:
        if self.namespace:
            # Unprefixed namespace keeps unqualified attributes (combine.children etc.) serializable.
            ET.register_namespace("", self.namespace)
        body = ET.tostring(self.element, encoding="unicode")
        return f"{self.prolog}{body}{self.epilog}"

    def write(self, path: Path) -> None:
        Path(path).write_text(self.serialize(), encoding="utf-8")

    # -- element construction --

    def qualify(self, name: str) -> str:
        return f"{{{self.namespace}}}{name}" if self.namespace else name

    def make(self, name: str, text: str | None = None, children: list[ET.Element] | None = None) -> ET.Element:
        """Create a namespace-qualified element with optional text and children."""
        element = ET.Element(self.qualify(name))
        element.text = text
        element.extend(children or [])
        return element

    def adopt(self, element: ET.Element) -> None:
        """Move an unqualified sub-tree into the document namespace."""
        if not self.namespace:
            return
        for el in element.iter():
            if isinstance(el.tag, str) and not el.tag.startswith("{"):
                el.tag = self.qualify(el.tag)

    def depth(self, element: ET.Element) -> int:
        parents = {child: parent for parent in self.element.iter() for child in parent}
        depth = 0
        while element is not self.element:
            element = parents[element]
            depth += 1
        return depth

    def graft(self, parent: ET.Element, child: ET.Element, index: int | None = None) -> None:
        """Insert *child* under *parent*, indented to match the document."""
        depth = self.depth(parent)
        inner = "\n" + self.indent * (depth + 1)
        ET.indent(child, space=self.indent, level=depth + 1)
        existing = list(parent)
        if index is None or index >= len(existing):
            if existing:
                last = existing[-1]
                child.tail = last.tail
                last.tail = inner
            else:
                parent.text = inner
                child.tail = "\n" + self.indent * depth
            parent.append(child)
        else:
            child.tail = inner
            parent.insert(index, child)

    def replace(self, parent: ET.Element, old: ET.Element, new: ET.Element) -> None:
        index = list(parent).index(old)
        ET.indent(new, space=self.indent, level=self.depth(parent) + 1)
        new.tail = old.tail
        parent[index] = new

    # -- typed accessors --

    @property
    def artifact_id(self) -> str | None:
        return self._text("artifactId")

    @property
    def version(self) -> str | None:
        """Project version, falling back to the parent's version."""
        version = self._text("version")
        if version:
            return version
        parent = self._child("parent")
        return _Node(parent, self)._text("version") if parent is not None else None

    @property
    def dependencies(self) -> list[Dependency]:
        container = self._child("dependencies")
        if container is None:
            return []
        return [Dependency(el, self) for el in container if _local_name(el.tag) == "dependency"]

    def add_dependency(self, group_id: str, artifact_id: str, version: str) -> Dependency:
        dependency = self.make("dependency", children=[
            self.make("groupId", group_id),
            self.make("artifactId", artifact_id),
            self.make("version", version),
        ])
        self.graft(self._ensure("dependencies"), dependency)
        return Dependency(dependency, self)

    @property
    def profiles(self) -> list[Profile]:
        container = self._child("profiles")
        if container is None:
            return []
        return [Profile(el, self) for el in container if _local_name(el.tag) == "profile"]

    def add_profile(self, profile_id: str) -> Profile:
        profile = self.make("profile", children=[self.make("id", profile_id)])
        self.graft(self._ensure("profiles"), profile)
        return Profile(profile, self)

    @property
    def build(self) -> BuildBlock | None:
        build = self._child("build")
        return BuildBlock(build, self) if build is not None else None


def _detect_indent(root: ET.Element) -> str:
    text = root.text or ""
    if text.strip() or "\n" not in text:
        return DEFAULT_INDENT
    unit = text.rsplit("\n", 1)[-1]
    return unit or DEFAULT_INDENT


# ============================================================================
# Lookups
# ============================================================================

def find_plugin(block: BuildBlock | None, key: PluginKey) -> Plugin | None:
    """Find the plugin with the given (groupId, artifactId) in a build block."""
    if block is None:
        return None
    for plugin in block.plugins:
        if plugin.key == key:
            return plugin
    return None


def find_profile(descriptor: BuildDescriptor, profile_id: str) -> Profile | None:
    for profile in descriptor.profiles:
        if profile.id == profile_id:
            return profile
    return None


def profiles_hosting(descriptor: BuildDescriptor, key: PluginKey) -> list[Profile]:
    """Profiles whose build block declares the plugin, in declaration order."""
    return [profile for profile in descriptor.profiles if find_plugin(profile.build, key) is not None]


def parse_fragment(text: str) -> ET.Element:
    """Parse a configuration fragment into an element sub-tree.

    Raises:
        ConfigurationError: If the fragment is malformed or not a ``<configuration>``.
    """
    try:
        fragment = ET.fromstring(text.strip(), parser=_parser())
    except ET.ParseError as err:
        raise ConfigurationError(f"Malformed configuration fragment: {err}") from err
    if _local_name(fragment.tag) != "configuration":
        raise ConfigurationError(
            f"Configuration fragment root must be <configuration>, got <{_local_name(fragment.tag)}>"
        )
    return fragment
