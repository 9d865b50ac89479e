# ==============================================================================
# RESOURCE OPERATIONS MODULE
# ==============================================================================
# Editing operations over a list of resources (an open archive's contents).
#
# Every operation returns a NEW list and leaves its input untouched, so the
# caller can keep the previous state, compare, or discard a failed edit.
#
# Moving a Link animation header also moves its data resource to
# "<new path>_Data" and rewrites the header's reference to it. If the data
# resource cannot be found the move is refused.
#
# Usage:
#   resources = move_resource(resources, "anims/gOld", "anims/gNew")
#   tree = build_tree(resources)
# ==============================================================================

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .errors import ResourceConflictError, ResourceNotFoundError
from ..parsers.animation_parser import (
    LINK_DATA_SUFFIX, find_link_data_resource, is_link_animation_header,
    parse_link_animation_header, update_link_header_path,
)
from ..parsers.resource_header import ResourceEntry


# ==============================================================================
# LOOKUP
# ==============================================================================

def find_resource(resources: List[ResourceEntry], path: str) -> Optional[ResourceEntry]:
    for resource in resources:
        if resource.path == path:
            return resource
    return None


def resources_of_type(resources: List[ResourceEntry], type_name: str) -> List[ResourceEntry]:
    """Resources whose registry name equals ``type_name`` (e.g. "Texture")."""
    return [r for r in resources if r.resource_type == type_name]


def _require(resources: List[ResourceEntry], path: str) -> ResourceEntry:
    resource = find_resource(resources, path)
    if resource is None:
        raise ResourceNotFoundError(f"No resource at {path}")
    return resource


# ==============================================================================
# EDITING
# ==============================================================================

def add_resource(resources: List[ResourceEntry], entry: ResourceEntry,
                 overwrite: bool = False) -> List[ResourceEntry]:
    """
    Add a resource.

    Args:
        resources: Current resources
        entry: Resource to add
        overwrite: Replace an existing resource at the same path in place

    Raises:
        ResourceConflictError: If the path is taken and overwrite is False
    """
    existing = find_resource(resources, entry.path)
    if existing is None:
        return list(resources) + [entry]
    if not overwrite:
        raise ResourceConflictError(f"A resource already exists at {entry.path}")
    return [entry if r.path == entry.path else r for r in resources]


def remove_resource(resources: List[ResourceEntry], path: str) -> List[ResourceEntry]:
    """
    Raises:
        ResourceNotFoundError: If nothing is stored at ``path``
    """
    _require(resources, path)
    return [r for r in resources if r.path != path]


def replace_resource_data(resources: List[ResourceEntry], path: str,
                          data: bytes) -> List[ResourceEntry]:
    """
    Replace a resource's full bytes (header included).

    Raises:
        ResourceNotFoundError: If nothing is stored at ``path``
        UnknownResourceTypeError: If ``data`` has no valid resource header
    """
    updated = _require(resources, path).with_data(data)
    return [updated if r.path == path else r for r in resources]


def move_resource(resources: List[ResourceEntry], old_path: str,
                  new_path: str) -> List[ResourceEntry]:
    """
    Move a resource to a new path.

    A Link animation header takes its data resource along to
    ``<new_path>_Data`` and its embedded reference is rewritten.

    Raises:
        ResourceNotFoundError: If nothing is stored at ``old_path``
        ResourceConflictError: If a target path is already taken
        MissingCompanionError: If a Link header's data resource is absent
    """
    resource = _require(resources, old_path)
    if new_path == old_path:
        return list(resources)
    if find_resource(resources, new_path) is not None:
        raise ResourceConflictError(f"A resource already exists at {new_path}")

    if not is_link_animation_header(resource):
        moved = resource.with_path(new_path)
        return [moved if r.path == old_path else r for r in resources]

    info = parse_link_animation_header(resource.data_without_header)
    data_resource = find_link_data_resource(info.data_path, resources)

    new_data_path = new_path + LINK_DATA_SUFFIX
    occupant = find_resource(resources, new_data_path)
    if occupant is not None and occupant.path != data_resource.path:
        raise ResourceConflictError(f"A resource already exists at {new_data_path}")

    moved_header = update_link_header_path(resource.with_path(new_path), new_data_path)
    moved_data = data_resource.with_path(new_data_path)

    result = []
    for r in resources:
        if r.path == old_path:
            result.append(moved_header)
        elif r.path == data_resource.path:
            result.append(moved_data)
        else:
            result.append(r)
    return result


# ==============================================================================
# TREE VIEW
# ==============================================================================

@dataclass
class TreeNode:
    """
    Folder/file node built from flat resource paths.

    Attributes:
        name: Path component
        path: Path up to and including this component
        is_directory: True for folders
        children: Child nodes, folders first then alphabetical
        resource: The resource for file nodes
    """
    name: str
    path: str
    is_directory: bool
    children: List["TreeNode"] = field(default_factory=list)
    resource: Optional[ResourceEntry] = None

    def child(self, name: str) -> Optional["TreeNode"]:
        for node in self.children:
            if node.name == name:
                return node
        return None

    def walk(self, depth: int = 0) -> Iterator[Tuple[int, "TreeNode"]]:
        """Yield (depth, node) for every node below this one, depth-first."""
        for node in self.children:
            yield depth, node
            yield from node.walk(depth + 1)


def _sort_tree(node: TreeNode):
    node.children.sort(key=lambda c: (not c.is_directory, c.name.lower(), c.name))
    for child in node.children:
        _sort_tree(child)


def build_tree(resources: List[ResourceEntry]) -> TreeNode:
    """Build a folder tree from resource paths (empty components ignored)."""
    root = TreeNode(name="", path="", is_directory=True)

    for resource in resources:
        parts = [p for p in resource.path.split("/") if p]
        current = root

        for i, part in enumerate(parts):
            is_last = i == len(parts) - 1
            node = current.child(part)
            if node is None:
                node = TreeNode(
                    name=part,
                    path="/".join(parts[:i + 1]),
                    is_directory=not is_last,
                    resource=resource if is_last else None,
                )
                current.children.append(node)
            current = node

    _sort_tree(root)
    return root
