from dataclasses import dataclass, field, fields
from typing import List, Optional

# Node kinds follow the ESTree/Babel naming so that the predicates read the
# same way regardless of which parser produced the tree.


@dataclass
class Node:
    """
    Base syntax tree node.

    `type` is the kind discriminant. Plain `Node` instances are used for any
    construct we don't model structurally (expressions, classes, statements
    other than exports) and carry the parser's own kind string.
    """

    type: str
    # 1-based line numbers; 0 for nodes built by hand.
    start_line: int = field(default=0, kw_only=True)
    end_line: int = field(default=0, kw_only=True)


@dataclass
class Identifier(Node):
    type: str = field(default="Identifier", init=False)
    name: str = ""


@dataclass
class StringLiteral(Node):
    type: str = field(default="StringLiteral", init=False)
    value: str = ""


@dataclass
class RestElement(Node):
    type: str = field(default="RestElement", init=False)
    argument: Optional[Node] = None


@dataclass
class AssignmentPattern(Node):
    type: str = field(default="AssignmentPattern", init=False)
    left: Optional[Node] = None
    right: Optional[Node] = None


@dataclass
class ArrayPattern(Node):
    type: str = field(default="ArrayPattern", init=False)
    elements: List[Optional[Node]] = field(default_factory=list)


@dataclass
class ObjectProperty(Node):
    type: str = field(default="ObjectProperty", init=False)
    # `key` is the property as written, `value` the binding it lands in.
    key: Optional[Node] = None
    value: Optional[Node] = None
    shorthand: bool = False
    computed: bool = False


@dataclass
class ObjectPattern(Node):
    type: str = field(default="ObjectPattern", init=False)
    properties: List[Node] = field(default_factory=list)


@dataclass
class VariableDeclarator(Node):
    type: str = field(default="VariableDeclarator", init=False)
    id: Optional[Node] = None
    init: Optional[Node] = None


@dataclass
class VariableDeclaration(Node):
    type: str = field(default="VariableDeclaration", init=False)
    kind: str = "const"  # 'const', 'let', 'var'
    declarations: List[Node] = field(default_factory=list)


@dataclass
class FunctionDeclaration(Node):
    type: str = field(default="FunctionDeclaration", init=False)
    id: Optional[Identifier] = None
    params: List[Node] = field(default_factory=list)
    is_async: bool = False
    generator: bool = False


@dataclass
class ExportSpecifier(Node):
    type: str = field(default="ExportSpecifier", init=False)
    local: Optional[Node] = None
    exported: Optional[Node] = None


@dataclass
class ExportNamespaceSpecifier(Node):
    type: str = field(default="ExportNamespaceSpecifier", init=False)
    exported: Optional[Node] = None


@dataclass
class ExportNamedDeclaration(Node):
    type: str = field(default="ExportNamedDeclaration", init=False)
    declaration: Optional[Node] = None
    specifiers: List[Node] = field(default_factory=list)
    source: Optional[StringLiteral] = None
    export_kind: str = "value"  # 'value' or 'type'


@dataclass
class Program(Node):
    type: str = field(default="Program", init=False)
    body: List[Node] = field(default_factory=list)


def child_fields(node: Node) -> List[str]:
    """Names of the fields on `node` that may hold child nodes, in source order."""
    return [
        f.name
        for f in fields(node)
        if f.name not in {"type", "start_line", "end_line"}
    ]
