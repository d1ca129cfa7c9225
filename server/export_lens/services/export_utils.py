"""
Shared named export comparators and visitors used in export traversals.

All comparators take an `ExportNamedDeclaration` node and a binding name and
return a plain bool. They only look at node kinds through the `type`
discriminant and fall back to `False` for any shape they don't recognise.
"""

from dataclasses import dataclass
from typing import Any, FrozenSet, Optional

from export_lens.services.traversal import NodePath, Visitor


def _declaration(node: Any) -> Any:
    return getattr(node, "declaration", None)


def _first(items: Any) -> Any:
    # Only the leading entry of a declarator or property list is ever checked
    # by the variable comparators.
    if not items:
        return None
    return items[0]


def _is_identifier(node: Any) -> bool:
    return getattr(node, "type", None) == "Identifier"


def is_named_export_function(node: Any, name: str) -> bool:
    """
    Match a specific named export function declaration. Matches:

        export function name() {}
        export async function name() {}
    """
    declaration = _declaration(node)
    if getattr(declaration, "type", None) != "FunctionDeclaration":
        return False
    function_id = getattr(declaration, "id", None)
    return function_id is not None and getattr(function_id, "name", None) == name


def is_named_export_variable(node: Any, name: str) -> bool:
    """
    Match a specific named export variable declaration. Matches:

        export const name = () => {}   // or `let`/`var`
        export let name1, name2        // only `name1` is compared
    """
    declaration = _declaration(node)
    if getattr(declaration, "type", None) != "VariableDeclaration":
        return False

    declarator = _first(getattr(declaration, "declarations", None))
    if getattr(declarator, "type", None) != "VariableDeclarator":
        return False

    binding = getattr(declarator, "id", None)
    if not _is_identifier(binding):
        return False

    return getattr(binding, "name", None) == name


def is_named_export_destructured_variable(node: Any, name: str) -> bool:
    """
    Match a specific named export destructured variable declaration. Matches:

        export const { name } = {}             // or `let`/`var`
        export const { name1, name2: bar } = {}

    The comparison uses the local binding (`bar` above), and only the first
    property of the first declarator is compared.
    """
    declaration = _declaration(node)
    if getattr(declaration, "type", None) != "VariableDeclaration":
        return False

    declarator = _first(getattr(declaration, "declarations", None))
    if getattr(declarator, "type", None) != "VariableDeclarator":
        return False

    pattern = getattr(declarator, "id", None)
    if getattr(pattern, "type", None) != "ObjectPattern":
        return False

    prop = _first(getattr(pattern, "properties", None))
    if getattr(prop, "type", None) != "ObjectProperty" or not _is_identifier(getattr(prop, "value", None)):
        return False

    return getattr(prop.value, "name", None) == name


def is_named_export_specifier(node: Any, name: str) -> bool:
    """
    Inclusively match a specific export specifier. Matches:

        export { name1, name2, nameN }
        export { local as name }
    """
    return any(
        getattr(specifier, "type", None) == "ExportSpecifier"
        and _is_identifier(getattr(specifier, "exported", None))
        and getattr(specifier.exported, "name", None) == name
        for specifier in getattr(node, "specifiers", None) or []
    )


# Evaluated in order; the forms are mutually exclusive on well-formed input.
NAMED_EXPORT_FORMS = (
    ("function", is_named_export_function),
    ("variable", is_named_export_variable),
    ("destructured", is_named_export_destructured_variable),
    ("specifier", is_named_export_specifier),
)


def is_named_export(node: Any, name: str) -> bool:
    """
    Match a variety of specific named exports. See `is_named_export_function`,
    `is_named_export_variable`, `is_named_export_destructured_variable` and
    `is_named_export_specifier`.
    """
    return (
        is_named_export_function(node, name)
        or is_named_export_variable(node, name)
        or is_named_export_destructured_variable(node, name)
        or is_named_export_specifier(node, name)
    )


def named_export_form(node: Any, name: str) -> Optional[str]:
    """Return which form (`"function"`, `"variable"`, ...) exports `name`, if any."""
    for form, matcher in NAMED_EXPORT_FORMS:
        if matcher(node, name):
            return form
    return None


@dataclass(frozen=True)
class RemovePropertiesState:
    properties_to_remove: FrozenSet[str]

    @classmethod
    def of(cls, *names: str) -> "RemovePropertiesState":
        return cls(properties_to_remove=frozenset(names))


def _remove_object_pattern_properties(object_path: NodePath, state: RemovePropertiesState) -> None:
    properties = object_path.node.properties
    i = 0
    while i < len(properties):
        prop = properties[i]
        if (
            getattr(prop, "type", None) == "ObjectProperty"
            and _is_identifier(getattr(prop, "value", None))
            and getattr(prop.value, "name", None) in state.properties_to_remove
        ):
            property_path = object_path.get(f"properties.{i}")
            if isinstance(property_path, NodePath):
                property_path.remove()
                # The next property has shifted into slot `i`.
                continue
        i += 1


# Remove specific properties from a destructured variable named export, e.g.
#
#     export const { foo } = {}
#     export const { foo, bar: baz } = {}
#
# by traversing inside an `ExportNamedDeclaration` path:
#
#     declaration_path.traverse(
#         RemoveNamedExportPropertiesVisitor,
#         RemovePropertiesState.of("foo", "baz"),
#     )
RemoveNamedExportPropertiesVisitor: Visitor = {
    "ObjectPattern": _remove_object_pattern_properties,
}
