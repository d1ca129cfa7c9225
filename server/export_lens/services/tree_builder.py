import logging
from typing import Dict, List, Optional, Union

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node as TSNode, Parser

from export_lens.services.nodes import (
    ArrayPattern,
    AssignmentPattern,
    ExportNamedDeclaration,
    ExportNamespaceSpecifier,
    ExportSpecifier,
    FunctionDeclaration,
    Identifier,
    Node,
    ObjectPattern,
    ObjectProperty,
    Program,
    RestElement,
    StringLiteral,
    VariableDeclaration,
    VariableDeclarator,
)

# Load TypeScript and TSX grammars. JavaScript (which may hold JSX) uses TSX.
TYPESCRIPT_LANGUAGE = Language(tstypescript.language_typescript())
TSX_LANGUAGE = Language(tstypescript.language_tsx())

logger = logging.getLogger(__name__)

_TYPE_ONLY_DECLARATIONS = {"type_alias_declaration", "interface_declaration"}


def _loc(n: TSNode) -> Dict[str, int]:
    return {"start_line": n.start_point.row + 1, "end_line": n.end_point.row + 1}


def _text(n: TSNode) -> str:
    return n.text.decode("utf-8")


def _named(n: TSNode) -> List[TSNode]:
    return [c for c in n.named_children if c.type != "comment"]


class ModuleTreeBuilder:
    """
    Build the export-oriented node model from TypeScript / TSX / JavaScript
    source.

    Only the top level of the module is converted: export statements get the
    full structural treatment (declarations, declarators, destructuring
    patterns, specifiers), everything else becomes an opaque `Node` that
    carries the tree-sitter kind and its line span.
    """

    def __init__(self):
        self.ts_parser = Parser(TYPESCRIPT_LANGUAGE)
        self.tsx_parser = Parser(TSX_LANGUAGE)

    def build(self, source: Union[str, bytes], tsx: bool = False) -> Program:
        if isinstance(source, str):
            source = source.encode("utf-8")

        parser = self.tsx_parser if tsx else self.ts_parser
        tree = parser.parse(source)
        root = tree.root_node
        if root.has_error:
            logger.warning("Parse errors in module source (continuing with partial tree)")

        body = [self._convert_statement(child) for child in _named(root)]
        return Program(body=body, **_loc(root))

    def _convert_statement(self, n: TSNode) -> Node:
        if n.type == "export_statement":
            return self._convert_export(n)
        return Node(n.type, **_loc(n))

    def _convert_export(self, n: TSNode) -> Node:
        tokens = {c.type for c in n.children if not c.is_named}

        if "default" in tokens:
            return Node("ExportDefaultDeclaration", **_loc(n))
        if "*" in tokens:
            # `export * from "..."`; `export * as ns from` goes through
            # namespace_export below.
            return Node("ExportAllDeclaration", **_loc(n))
        if "=" in tokens:
            return Node("TSExportAssignment", **_loc(n))
        if "namespace" in tokens:
            return Node("TSNamespaceExportDeclaration", **_loc(n))

        declaration: Optional[Node] = None
        declaration_node = n.child_by_field_name("declaration")
        if declaration_node is not None:
            declaration = self._convert_declaration(declaration_node)

        specifiers: List[Node] = []
        for child in _named(n):
            if child.type == "export_clause":
                specifiers.extend(
                    self._convert_specifier(s)
                    for s in _named(child)
                    if s.type == "export_specifier"
                )
            elif child.type == "namespace_export":
                names = _named(child)
                exported = self._module_export_name(names[0]) if names else None
                specifiers.append(ExportNamespaceSpecifier(exported=exported, **_loc(child)))

        source = None
        source_node = n.child_by_field_name("source")
        if source_node is not None:
            source = self._string(source_node)

        export_kind = "value"
        if "type" in tokens or (
            declaration_node is not None and declaration_node.type in _TYPE_ONLY_DECLARATIONS
        ):
            export_kind = "type"

        return ExportNamedDeclaration(
            declaration=declaration,
            specifiers=specifiers,
            source=source,
            export_kind=export_kind,
            **_loc(n),
        )

    def _convert_specifier(self, n: TSNode) -> ExportSpecifier:
        name_node = n.child_by_field_name("name")
        alias_node = n.child_by_field_name("alias")
        local = self._module_export_name(name_node) if name_node is not None else None
        exported_node = alias_node if alias_node is not None else name_node
        exported = self._module_export_name(exported_node) if exported_node is not None else None
        return ExportSpecifier(local=local, exported=exported, **_loc(n))

    def _module_export_name(self, n: TSNode) -> Node:
        if n.type == "string":
            return self._string(n)
        return Identifier(name=_text(n), **_loc(n))

    def _string(self, n: TSNode) -> StringLiteral:
        return StringLiteral(value=_text(n)[1:-1], **_loc(n))

    def _convert_declaration(self, n: TSNode) -> Node:
        if n.type in {"function_declaration", "generator_function_declaration"}:
            name_node = n.child_by_field_name("name")
            params_node = n.child_by_field_name("parameters")
            return FunctionDeclaration(
                id=Identifier(name=_text(name_node), **_loc(name_node)) if name_node else None,
                params=self._convert_params(params_node) if params_node else [],
                is_async=any(c.type == "async" for c in n.children),
                generator=n.type == "generator_function_declaration",
                **_loc(n),
            )

        if n.type in {"lexical_declaration", "variable_declaration"}:
            kind_node = n.child_by_field_name("kind")
            return VariableDeclaration(
                kind=_text(kind_node) if kind_node is not None else "var",
                declarations=[
                    self._convert_declarator(c)
                    for c in _named(n)
                    if c.type == "variable_declarator"
                ],
                **_loc(n),
            )

        # class, interface, enum, ambient declarations, ...
        return Node(n.type, **_loc(n))

    def _convert_declarator(self, n: TSNode) -> VariableDeclarator:
        value = n.child_by_field_name("value")
        return VariableDeclarator(
            id=self._convert_pattern(n.child_by_field_name("name")),
            init=Node(value.type, **_loc(value)) if value is not None else None,
            **_loc(n),
        )

    def _convert_params(self, n: TSNode) -> List[Node]:
        params = []
        for child in _named(n):
            if child.type in {"required_parameter", "optional_parameter"}:
                # TypeScript wraps each parameter: pattern, optional type and
                # optional default value.
                pattern = self._convert_pattern(child.child_by_field_name("pattern"))
                value = child.child_by_field_name("value")
                if value is not None:
                    pattern = AssignmentPattern(
                        left=pattern, right=Node(value.type, **_loc(value)), **_loc(child)
                    )
                params.append(pattern)
            else:
                params.append(self._convert_pattern(child))
        return params

    def _convert_pattern(self, n: Optional[TSNode]) -> Optional[Node]:
        if n is None:
            return None

        if n.type in {"identifier", "shorthand_property_identifier_pattern"}:
            return Identifier(name=_text(n), **_loc(n))

        if n.type == "object_pattern":
            return ObjectPattern(
                properties=[self._convert_object_member(c) for c in _named(n)],
                **_loc(n),
            )

        if n.type == "array_pattern":
            return ArrayPattern(
                elements=[self._convert_pattern(c) for c in _named(n)],
                **_loc(n),
            )

        if n.type == "assignment_pattern":
            right = n.child_by_field_name("right")
            return AssignmentPattern(
                left=self._convert_pattern(n.child_by_field_name("left")),
                right=Node(right.type, **_loc(right)) if right is not None else None,
                **_loc(n),
            )

        if n.type == "rest_pattern":
            inner = _named(n)
            return RestElement(
                argument=self._convert_pattern(inner[0]) if inner else None,
                **_loc(n),
            )

        # member expressions, `this`, `undefined`, ...
        return Node(n.type, **_loc(n))

    def _convert_object_member(self, n: TSNode) -> Node:
        if n.type == "pair_pattern":
            key_node = n.child_by_field_name("key")
            return ObjectProperty(
                key=self._property_key(key_node),
                value=self._convert_pattern(n.child_by_field_name("value")),
                computed=key_node is not None and key_node.type == "computed_property_name",
                **_loc(n),
            )

        if n.type == "shorthand_property_identifier_pattern":
            # `{ a }` binds `a` from `a`; key and value are separate nodes.
            return ObjectProperty(
                key=Identifier(name=_text(n), **_loc(n)),
                value=Identifier(name=_text(n), **_loc(n)),
                shorthand=True,
                **_loc(n),
            )

        if n.type == "object_assignment_pattern":
            # `{ a = 1 }`: the bound value is an AssignmentPattern, never a
            # plain Identifier.
            left = n.child_by_field_name("left")
            right = n.child_by_field_name("right")
            key = (
                Identifier(name=_text(left), **_loc(left))
                if left is not None and left.type == "shorthand_property_identifier_pattern"
                else Node(left.type if left is not None else "Unknown", **_loc(n))
            )
            return ObjectProperty(
                key=key,
                value=AssignmentPattern(
                    left=self._convert_pattern(left),
                    right=Node(right.type, **_loc(right)) if right is not None else None,
                    **_loc(n),
                ),
                shorthand=True,
                **_loc(n),
            )

        if n.type == "rest_pattern":
            return self._convert_pattern(n)

        return Node(n.type, **_loc(n))

    def _property_key(self, n: Optional[TSNode]) -> Optional[Node]:
        if n is None:
            return None
        if n.type == "property_identifier":
            return Identifier(name=_text(n), **_loc(n))
        if n.type == "string":
            return self._string(n)
        return Node(n.type, **_loc(n))
