"""
Minimal tree traversal over the node dataclasses.

Modeled on the Babel `NodePath` API: visitors are mappings from node kind to a
callback, callbacks receive a `NodePath` they can navigate (`get`) and edit
(`remove`), and any per-traversal data travels in an explicit `state` object.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from export_lens.services.nodes import Node, child_fields

VisitorCallback = Callable[["NodePath", Any], None]
Visitor = Mapping[str, Union[VisitorCallback, Mapping[str, VisitorCallback]]]


class TraversalError(Exception):
    """Raised when a path edit is requested on a node that is no longer attached."""


class NodePath:
    def __init__(
        self,
        node: Optional[Node],
        parent: Optional[Node] = None,
        parent_path: Optional["NodePath"] = None,
        container: Optional[List[Any]] = None,
        key: Union[str, int, None] = None,
        list_key: Optional[str] = None,
    ):
        self.node = node
        self.parent = parent
        self.parent_path = parent_path
        # For list members, `container` is the parent's list and `key` the
        # index at creation time. For plain attributes, `key` is the field name.
        self.container = container
        self.key = key
        self.list_key = list_key
        self.removed = False

    def __repr__(self) -> str:
        kind = self.node.type if self.node is not None else None
        return f"NodePath({kind!r}, key={self.key!r})"

    def get(self, path: str) -> Union["NodePath", List["NodePath"]]:
        """
        Resolve a dotted path relative to this node, e.g. `"declaration"`,
        `"properties.1"` or `"declaration.declarations.0.id"`.

        A list field without an index resolves to a list of paths. Any missing
        step resolves to a `NodePath` wrapping `None`.
        """
        current: Union[NodePath, List[NodePath]] = self
        for part in path.split("."):
            if isinstance(current, list):
                if not part.isdigit() or int(part) >= len(current):
                    return NodePath(None)
                current = current[int(part)]
                continue
            current = current._get_key(part)
        return current

    def _get_key(self, part: str) -> Union["NodePath", List["NodePath"]]:
        node = self.node
        if node is None or part.startswith("_") or not hasattr(node, part):
            return NodePath(None, parent=node, parent_path=self)

        value = getattr(node, part)
        if isinstance(value, list):
            paths = []
            for index, item in enumerate(value):
                paths.append(
                    NodePath(item, node, self, container=value, key=index, list_key=part)
                )
            return paths
        return NodePath(value, node, self, key=part)

    def traverse(self, visitor: Visitor, state: Any = None) -> None:
        """Visit every descendant of this path's node (not the node itself)."""
        if self.node is None or self.removed:
            return
        _traverse_children(self, visitor, state)

    def remove(self) -> None:
        if self.removed:
            raise TraversalError(f"{self!r} has already been removed")
        if self.node is None or self.parent is None:
            raise TraversalError(f"{self!r} is not attached to a parent")

        if self.container is not None:
            index = self._current_index()
            if index is None:
                raise TraversalError(f"{self!r} is no longer in its parent list")
            del self.container[index]
            self.key = index
        else:
            if getattr(self.parent, self.key, None) is not self.node:
                raise TraversalError(f"{self!r} is no longer attached to its parent")
            setattr(self.parent, self.key, None)

        self.removed = True

    def _current_index(self) -> Optional[int]:
        # Siblings may have been removed since this path was created, so the
        # stored index is only a hint.
        if (
            isinstance(self.key, int)
            and self.key < len(self.container)
            and self.container[self.key] is self.node
        ):
            return self.key
        for index, item in enumerate(self.container):
            if item is self.node:
                return index
        return None


def traverse(node: Node, visitor: Visitor, state: Any = None) -> None:
    """Visit `node` and all of its descendants."""
    _visit(NodePath(node), visitor, state)


def _callbacks(visitor: Visitor, kind: str) -> Dict[str, Optional[VisitorCallback]]:
    entry = visitor.get(kind)
    if entry is None:
        return {"enter": None, "exit": None}
    if callable(entry):
        return {"enter": entry, "exit": None}
    return {"enter": entry.get("enter"), "exit": entry.get("exit")}


def _visit(path: NodePath, visitor: Visitor, state: Any) -> None:
    callbacks = _callbacks(visitor, path.node.type)

    if callbacks["enter"]:
        callbacks["enter"](path, state)
        if path.removed:
            return

    _traverse_children(path, visitor, state)

    if callbacks["exit"] and not path.removed:
        callbacks["exit"](path, state)


def _traverse_children(path: NodePath, visitor: Visitor, state: Any) -> None:
    node = path.node
    for name in child_fields(node):
        value = getattr(node, name)

        if isinstance(value, list):
            index = 0
            while index < len(value):
                item = value[index]
                if not isinstance(item, Node):
                    index += 1
                    continue
                child = NodePath(item, node, path, container=value, key=index, list_key=name)
                _visit(child, visitor, state)
                # Only advance if the item is still in place; a removal shifts
                # the next sibling into this slot.
                if index < len(value) and value[index] is item:
                    index += 1
        elif isinstance(value, Node):
            _visit(NodePath(value, node, path, key=name), visitor, state)
