"""POM file reading and writing."""
from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from typing import Callable, Dict, List, Optional

from ..constants import Constants
from ..exceptions import ManifestSaveError, ModelLoadError
from .models import Dependency, Manifest, ParentRef, Repository

logger = logging.getLogger(__name__)


def _namespace(root: ET.Element) -> str:
    if isinstance(root.tag, str) and root.tag.startswith("{"):
        return root.tag[1:].split("}", 1)[0]
    return ""


def _qualifier(ns: str) -> Callable[[str], str]:
    if ns:
        return lambda name: f"{{{ns}}}{name}"
    return lambda name: name


def _local_name(tag) -> Optional[str]:
    if not isinstance(tag, str):  # comments and processing instructions
        return None
    return tag.rsplit("}", 1)[-1]


def _text(parent: Optional[ET.Element], tag: str) -> Optional[str]:
    if parent is None:
        return None
    elem = parent.find(tag)
    if elem is None or elem.text is None:
        return None
    value = elem.text.strip()
    return value or None


def _parse_dependencies(container: Optional[ET.Element], q) -> List[Dependency]:
    deps: List[Dependency] = []
    if container is None:
        return deps
    for node in container.findall(q("dependency")):
        deps.append(Dependency(
            group_id=_text(node, q("groupId")),
            artifact_id=_text(node, q("artifactId")),
            version=_text(node, q("version")),
            scope=_text(node, q("scope")),
            type=_text(node, q("type")),
        ))
    return deps


def parse_pom(root: ET.Element, source_file: Optional[str] = None) -> Manifest:
    """Build a Manifest from a parsed ``<project>`` element."""
    q = _qualifier(_namespace(root))

    parent = None
    parent_elem = root.find(q("parent"))
    if parent_elem is not None:
        rel_elem = parent_elem.find(q("relativePath"))
        relative_path = None
        if rel_elem is not None:
            relative_path = (rel_elem.text or "").strip()
        parent = ParentRef(
            group_id=_text(parent_elem, q("groupId")),
            artifact_id=_text(parent_elem, q("artifactId")),
            version=_text(parent_elem, q("version")),
            relative_path=relative_path,
        )

    properties: Dict[str, str] = {}
    props_elem = root.find(q("properties"))
    if props_elem is not None:
        for child in props_elem:
            name = _local_name(child.tag)
            if name:
                properties[name] = (child.text or "").strip()

    managed: List[Dependency] = []
    mgmt_elem = root.find(q("dependencyManagement"))
    if mgmt_elem is not None:
        managed = _parse_dependencies(mgmt_elem.find(q("dependencies")), q)

    repositories: List[Repository] = []
    repos_elem = root.find(q("repositories"))
    if repos_elem is not None:
        for node in repos_elem.findall(q("repository")):
            url = _text(node, q("url"))
            if url:
                repositories.append(Repository(url=url, id=_text(node, q("id"))))

    return Manifest(
        artifact_id=_text(root, q("artifactId")),
        group_id=_text(root, q("groupId")),
        version=_text(root, q("version")),
        packaging=_text(root, q("packaging")),
        parent=parent,
        properties=properties,
        dependencies=_parse_dependencies(root.find(q("dependencies")), q),
        managed_dependencies=managed,
        repositories=repositories,
        source_file=source_file,
    )


def load_pom(path) -> Manifest:
    """Read and parse a POM file.

    Raises:
        ModelLoadError: the file does not exist, cannot be read or is not
            a well-formed POM.
    """
    path = os.fspath(path)
    if not os.path.isfile(path):
        raise ModelLoadError(path, "POM file not found")
    try:
        tree = ET.parse(path)
    except ET.ParseError as exc:
        raise ModelLoadError(path, f"XML parse error: {exc}") from exc
    except OSError as exc:
        raise ModelLoadError(path, f"IO error reading POM file: {exc}") from exc
    root = tree.getroot()
    if _local_name(root.tag) != "project":
        raise ModelLoadError(path, f"unexpected root element <{_local_name(root.tag)}>")
    return parse_pom(root, source_file=path)


def _indent_unit(root: ET.Element) -> str:
    """Indentation used by the document, read from the whitespace before the first child."""
    text = root.text or ""
    if "\n" in text:
        unit = text.rsplit("\n", 1)[-1]
        if unit and not unit.strip():
            return unit
    return "    "


def _append_child(parent: ET.Element, tag: str, level: int, unit: str) -> ET.Element:
    """Append ``tag`` to ``parent`` (which sits at ``level - 1``) keeping the layout."""
    children = list(parent)
    elem = ET.SubElement(parent, tag)
    if children:
        children[-1].tail = "\n" + unit * level
    else:
        parent.text = "\n" + unit * level
    elem.tail = "\n" + unit * (level - 1)
    return elem


def _set_child_text(parent: ET.Element, tag: str, value: Optional[str],
                    level: int, unit: str) -> None:
    elem = parent.find(tag)
    if value is None:
        if elem is not None:
            children = list(parent)
            idx = children.index(elem)
            if idx > 0:
                children[idx - 1].tail = elem.tail
            parent.remove(elem)
        return
    if elem is None:
        elem = _append_child(parent, tag, level, unit)
    elem.text = value


def _patch_tree(root: ET.Element, manifest: Manifest) -> None:
    q = _qualifier(_namespace(root))
    unit = _indent_unit(root)

    if manifest.properties:
        props_elem = root.find(q("properties"))
        if props_elem is None:
            props_elem = _append_child(root, q("properties"), 1, unit)
        existing = {_local_name(c.tag): c for c in props_elem if _local_name(c.tag)}
        for name, value in manifest.properties.items():
            elem = existing.get(name)
            if elem is None:
                elem = _append_child(props_elem, q(name), 2, unit)
            elem.text = value

    def _patch_deps(container: Optional[ET.Element], deps: List[Dependency], level: int) -> None:
        if container is None:
            return
        for node, dep in zip(container.findall(q("dependency")), deps):
            _set_child_text(node, q("version"), dep.version, level, unit)

    # <project>/<dependencies>/<dependency>/<version> is at level 3
    _patch_deps(root.find(q("dependencies")), manifest.dependencies, 3)
    mgmt_elem = root.find(q("dependencyManagement"))
    if mgmt_elem is not None:
        _patch_deps(mgmt_elem.find(q("dependencies")), manifest.managed_dependencies, 4)


def _dependency_element(parent: ET.Element, dep: Dependency, q) -> None:
    node = ET.SubElement(parent, q("dependency"))
    for tag, value in (("groupId", dep.group_id), ("artifactId", dep.artifact_id),
                       ("version", dep.version), ("type", dep.type), ("scope", dep.scope)):
        if value is not None:
            ET.SubElement(node, q(tag)).text = value


def build_tree(manifest: Manifest) -> ET.ElementTree:
    """Generate a fresh POM document for ``manifest``."""
    q = _qualifier(Constants.POM_NAMESPACE)
    root = ET.Element(q("project"))
    ET.SubElement(root, q("modelVersion")).text = "4.0.0"

    if manifest.parent is not None:
        parent_elem = ET.SubElement(root, q("parent"))
        ref = manifest.parent
        for tag, value in (("groupId", ref.group_id), ("artifactId", ref.artifact_id),
                           ("version", ref.version), ("relativePath", ref.relative_path)):
            if value is not None:
                ET.SubElement(parent_elem, q(tag)).text = value

    for tag, value in (("groupId", manifest.group_id), ("artifactId", manifest.artifact_id),
                       ("version", manifest.version), ("packaging", manifest.packaging)):
        if value is not None:
            ET.SubElement(root, q(tag)).text = value

    if manifest.properties:
        props_elem = ET.SubElement(root, q("properties"))
        for name, value in manifest.properties.items():
            ET.SubElement(props_elem, q(name)).text = value

    if manifest.managed_dependencies:
        mgmt = ET.SubElement(ET.SubElement(root, q("dependencyManagement")), q("dependencies"))
        for dep in manifest.managed_dependencies:
            _dependency_element(mgmt, dep, q)

    if manifest.dependencies:
        deps_elem = ET.SubElement(root, q("dependencies"))
        for dep in manifest.dependencies:
            _dependency_element(deps_elem, dep, q)

    if manifest.repositories:
        repos_elem = ET.SubElement(root, q("repositories"))
        for repo in manifest.repositories:
            node = ET.SubElement(repos_elem, q("repository"))
            if repo.id is not None:
                ET.SubElement(node, q("id")).text = repo.id
            ET.SubElement(node, q("url")).text = repo.url

    tree = ET.ElementTree(root)
    ET.indent(tree, space="    ")
    return tree


def _discard(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove temporary file %s: %s", path, exc)


def save_pom(manifest: Manifest, path=None) -> str:
    """Write ``manifest`` to ``path`` (defaults to its source file).

    An existing file is re-read and patched (properties and dependency
    versions) so comments and unrelated elements survive; otherwise a new
    document is generated.

    Returns:
        The path written.

    Raises:
        ManifestSaveError: no target path, or the file could not be written.
    """
    target = os.fspath(path) if path is not None else manifest.source_file
    if not target:
        raise ManifestSaveError("<unknown>", "manifest has no source file and no path was given")

    tmp_path = f"{target}.tmp"
    try:
        if os.path.isfile(target):
            parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
            tree = ET.parse(target, parser=parser)
            _patch_tree(tree.getroot(), manifest)
        else:
            tree = build_tree(manifest)
        ns = _namespace(tree.getroot())
        if ns:
            ET.register_namespace("", ns)
        tree.write(tmp_path, encoding="UTF-8", xml_declaration=True)
        os.replace(tmp_path, target)
    except ET.ParseError as exc:
        raise ManifestSaveError(target, f"existing file is not valid XML: {exc}") from exc
    except OSError as exc:
        _discard(tmp_path)
        raise ManifestSaveError(target, str(exc)) from exc

    logger.debug("Saved POM to %s", target)
    return target
