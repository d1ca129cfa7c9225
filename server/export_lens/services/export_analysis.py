import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Union

from export_lens.config import SUPPORTED_SUFFIXES, TSX_SUFFIXES
from export_lens.services.export_utils import (
    RemoveNamedExportPropertiesVisitor,
    RemovePropertiesState,
    named_export_form,
)
from export_lens.services.nodes import Node, ObjectPattern, Program
from export_lens.services.traversal import NodePath, traverse
from export_lens.services.tree_builder import ModuleTreeBuilder

logger = logging.getLogger(__name__)


class UnsupportedFileError(Exception):
    """Raised when asked to analyze a file the module parser can't handle."""


@dataclass
class ExportMatch:
    name: str
    form: str  # 'function', 'variable', 'destructured', 'specifier'
    start_line: int
    end_line: int
    declaration: Node


def collect_object_patterns(node: Node) -> List[ObjectPattern]:
    """All ObjectPattern nodes at or below `node`, outermost first."""
    patterns: List[ObjectPattern] = []
    traverse(node, {"ObjectPattern": lambda path, state: state.append(path.node)}, patterns)
    return patterns


def describe_property(prop: Node) -> str:
    """
    Human-readable label for one entry of an object pattern: the local
    binding where there is one, `...rest` for rest elements, otherwise the
    key as written.
    """
    if prop.type == "RestElement":
        argument = getattr(prop, "argument", None)
        return f"...{getattr(argument, 'name', '')}"

    value = getattr(prop, "value", None)
    if getattr(value, "type", None) == "Identifier":
        return value.name

    key = getattr(prop, "key", None)
    if getattr(key, "type", None) == "Identifier":
        return key.name
    if getattr(key, "type", None) == "StringLiteral":
        return key.value
    return prop.type


class ExportAnalyzer:
    def __init__(self):
        self.builder = ModuleTreeBuilder()

    def parse(self, source: Union[str, bytes], tsx: bool = False) -> Program:
        return self.builder.build(source, tsx=tsx)

    def parse_file(self, file_path: str) -> Program:
        path = Path(file_path)
        suffix = path.suffix.lower()
        if suffix not in SUPPORTED_SUFFIXES:
            raise UnsupportedFileError(f"Unsupported file type: {path.name}")

        with open(path, 'rb') as f:
            content = f.read()

        return self.parse(content, tsx=suffix in TSX_SUFFIXES)

    def find_named_exports(self, program: Program, name: str) -> List[ExportMatch]:
        """
        Find every top-level named export declaration that exports `name`.

        Well-formed modules export a name at most once, but we report all
        matches so duplicate exports show up instead of being hidden.
        """
        matches: List[ExportMatch] = []
        for statement in program.body:
            if statement.type != "ExportNamedDeclaration":
                continue
            form = named_export_form(statement, name)
            if form is None:
                continue
            matches.append(
                ExportMatch(
                    name=name,
                    form=form,
                    start_line=statement.start_line,
                    end_line=statement.end_line,
                    declaration=statement,
                )
            )
        return matches

    def remove_export_properties(self, program: Program, names: Iterable[str]) -> int:
        """
        Drop destructured properties bound to any of `names` from every named
        export in `program`, in place. Returns how many properties were removed.
        """
        state = RemovePropertiesState(properties_to_remove=frozenset(names))
        removed = 0

        for statement_path in NodePath(program).get("body"):
            if statement_path.node.type != "ExportNamedDeclaration":
                continue
            before = _count_properties(statement_path.node)
            statement_path.traverse(RemoveNamedExportPropertiesVisitor, state)
            removed += before - _count_properties(statement_path.node)

        logger.debug(
            "Removed %d destructured export properties for %s",
            removed,
            sorted(state.properties_to_remove),
        )
        return removed


def _count_properties(node: Node) -> int:
    return sum(len(pattern.properties) for pattern in collect_object_patterns(node))
