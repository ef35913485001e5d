"""Maven POM reader on top of xml.etree.ElementTree.

Element lookups ignore XML namespaces, so POMs with or without the
``http://maven.apache.org/POM/4.0.0`` default namespace read the same.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from projscan.models.documents import (
    Dependency,
    ParentInfo,
    Plugin,
    PluginConfiguration,
    PomStructure,
    Property,
)


class PomParseError(Exception):
    """The file is not well-formed XML or not a Maven project descriptor."""

    def __init__(self, path: Path | str, reason: str):
        self.path = str(path)
        super().__init__(f"Error parsing POM file {path}: {reason}")


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag


def _child(element: ET.Element | None, name: str) -> ET.Element | None:
    if element is None:
        return None
    for child in element:
        if _local(child.tag) == name:
            return child
    return None


def _children(element: ET.Element | None, name: str) -> list[ET.Element]:
    if element is None:
        return []
    return [child for child in element if _local(child.tag) == name]


def _text(element: ET.Element | None, name: str) -> str | None:
    child = _child(element, name)
    if child is None or child.text is None:
        return None
    return child.text.strip()


def _flatten_configuration(
    element: ET.Element, prefix: str = ""
) -> list[PluginConfiguration]:
    """Plugin <configuration> as dotted name/value pairs, leaves only."""
    items: list[PluginConfiguration] = []
    stack = [(prefix, child) for child in reversed(list(element))]
    while stack:
        base, node = stack.pop()
        if not isinstance(node.tag, str):
            # comments and processing instructions
            continue
        name = f"{base}.{_local(node.tag)}" if base else _local(node.tag)
        nested = [c for c in node if isinstance(c.tag, str)]
        if nested:
            stack.extend((name, c) for c in reversed(nested))
        else:
            items.append(PluginConfiguration(name=name, value=(node.text or "").strip()))
    return items


def _parent(project: ET.Element) -> ParentInfo | None:
    parent = _child(project, "parent")
    if parent is None:
        return None
    return ParentInfo(
        group_id=_text(parent, "groupId"),
        artifact_id=_text(parent, "artifactId"),
        version=_text(parent, "version"),
        relative_path=_text(parent, "relativePath"),
    )


def _dependencies(project: ET.Element) -> list[Dependency]:
    return [
        Dependency(
            group_id=_text(dep, "groupId"),
            artifact_id=_text(dep, "artifactId"),
            version=_text(dep, "version"),
            scope=_text(dep, "scope") or "compile",
            type=_text(dep, "type") or "jar",
        )
        for dep in _children(_child(project, "dependencies"), "dependency")
    ]


def _plugins(project: ET.Element) -> list[Plugin]:
    plugins = []
    build = _child(project, "build")
    for plugin in _children(_child(build, "plugins"), "plugin"):
        configuration = _child(plugin, "configuration")
        plugins.append(
            Plugin(
                group_id=_text(plugin, "groupId") or "org.apache.maven.plugins",
                artifact_id=_text(plugin, "artifactId"),
                version=_text(plugin, "version"),
                configuration_items=(
                    _flatten_configuration(configuration)
                    if configuration is not None
                    else []
                ),
            )
        )
    return plugins


def parse_pom_text(
    content: str | bytes, source: Path | str = "<string>"
) -> PomStructure:
    try:
        project = ET.fromstring(content)
    except ET.ParseError as exc:
        raise PomParseError(source, str(exc)) from exc
    if _local(project.tag) != "project":
        raise PomParseError(source, f"root element is <{_local(project.tag)}>")

    parent = _parent(project)
    properties_element = _child(project, "properties")
    properties = [
        Property(name=_local(prop.tag), value=(prop.text or "").strip())
        for prop in (properties_element if properties_element is not None else [])
        if isinstance(prop.tag, str)
    ]
    modules = [
        (module.text or "").strip()
        for module in _children(_child(project, "modules"), "module")
    ]

    return PomStructure(
        # groupId and version are inherited from the parent when absent
        group_id=_text(project, "groupId") or (parent.group_id if parent else None),
        artifact_id=_text(project, "artifactId"),
        version=_text(project, "version") or (parent.version if parent else None),
        packaging=_text(project, "packaging") or "jar",
        name=_text(project, "name"),
        description=_text(project, "description"),
        parent_info=parent,
        properties=properties,
        dependencies=_dependencies(project),
        plugins=_plugins(project),
        modules=modules,
    )


def parse_pom(path: Path) -> PomStructure:
    """Read and summarize a pom.xml.

    Raises:
        PomParseError: malformed XML or a root element other than <project>
    """
    return parse_pom_text(path.read_bytes(), path)
