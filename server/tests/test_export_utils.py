import copy

import pytest

from export_lens.services.export_utils import (
    is_named_export,
    is_named_export_destructured_variable,
    is_named_export_function,
    is_named_export_specifier,
    is_named_export_variable,
    named_export_form,
)
from export_lens.services.nodes import (
    AssignmentPattern,
    ExportNamedDeclaration,
    ExportNamespaceSpecifier,
    ExportSpecifier,
    FunctionDeclaration,
    Identifier,
    Node,
    ObjectPattern,
    ObjectProperty,
    StringLiteral,
    VariableDeclaration,
    VariableDeclarator,
)


def _function_export(name):
    fn_id = Identifier(name=name) if name is not None else None
    return ExportNamedDeclaration(declaration=FunctionDeclaration(id=fn_id))


def _variable_export(*names, kind="const"):
    return ExportNamedDeclaration(
        declaration=VariableDeclaration(
            kind=kind,
            declarations=[VariableDeclarator(id=Identifier(name=n)) for n in names],
        )
    )


def _prop(key, value=None):
    # `{ key }` when value is None, `{ key: value }` otherwise.
    return ObjectProperty(
        key=Identifier(name=key),
        value=Identifier(name=value or key),
        shorthand=value is None,
    )


def _destructured_export(*properties):
    return ExportNamedDeclaration(
        declaration=VariableDeclaration(
            declarations=[
                VariableDeclarator(
                    id=ObjectPattern(properties=list(properties)),
                    init=Node("identifier"),
                )
            ]
        )
    )


def _specifier_export(*pairs):
    return ExportNamedDeclaration(
        specifiers=[
            ExportSpecifier(local=Identifier(name=local), exported=Identifier(name=exported))
            for local, exported in pairs
        ]
    )


# export function f() {}
def test_function_form_matches_its_name():
    node = _function_export("f")
    assert is_named_export_function(node, "f")
    assert is_named_export(node, "f")
    assert not is_named_export(node, "g")


def test_anonymous_function_never_matches():
    node = _function_export(None)
    assert not is_named_export_function(node, "")
    assert not is_named_export_function(node, "default")
    assert not is_named_export(node, "f")


# export const a = 1
def test_simple_variable_form():
    node = _variable_export("a")
    assert is_named_export_variable(node, "a")
    assert is_named_export(node, "a")
    assert not is_named_export(node, "b")


# export let a, b
def test_variable_form_only_checks_first_declarator():
    node = _variable_export("a", "b", kind="let")
    assert is_named_export(node, "a")
    assert not is_named_export_variable(node, "b")
    assert not is_named_export(node, "b")


def test_variable_form_stops_at_leading_pattern():
    # export const { x } = o, y = 1 -> `y` is never inspected
    node = ExportNamedDeclaration(
        declaration=VariableDeclaration(
            declarations=[
                VariableDeclarator(id=ObjectPattern(properties=[_prop("x")])),
                VariableDeclarator(id=Identifier(name="y")),
            ]
        )
    )
    assert not is_named_export_variable(node, "y")
    assert not is_named_export(node, "y")


# export const { a, b: c } = obj
def test_destructured_form_checks_first_local_binding_only():
    node = _destructured_export(_prop("a"), _prop("b", "c"))
    assert is_named_export_destructured_variable(node, "a")
    assert is_named_export(node, "a")
    assert not is_named_export(node, "c")
    assert not is_named_export(node, "b")


def test_destructured_form_matches_renamed_local_not_key():
    node = _destructured_export(_prop("b", "c"))
    assert is_named_export_destructured_variable(node, "c")
    assert not is_named_export_destructured_variable(node, "b")


def test_destructured_form_non_identifier_value_short_circuits():
    # export const { a = 1, b } = obj
    defaulted = ObjectProperty(
        key=Identifier(name="a"),
        value=AssignmentPattern(left=Identifier(name="a"), right=Node("number")),
        shorthand=True,
    )
    nested = ObjectProperty(key=Identifier(name="n"), value=ObjectPattern(properties=[_prop("a")]))
    assert not is_named_export_destructured_variable(_destructured_export(defaulted, _prop("b")), "a")
    assert not is_named_export_destructured_variable(_destructured_export(defaulted, _prop("b")), "b")
    assert not is_named_export_destructured_variable(_destructured_export(nested), "a")


def test_destructured_form_empty_pattern():
    assert not is_named_export(_destructured_export(), "a")


# export { x, y as z }
def test_specifier_form_matches_exported_names():
    node = _specifier_export(("x", "x"), ("y", "z"))
    assert is_named_export_specifier(node, "x")
    assert is_named_export_specifier(node, "z")
    assert is_named_export(node, "z")
    assert not is_named_export(node, "y")


def test_specifier_form_scans_whole_list():
    node = _specifier_export(("a", "a"), ("b", "b"), ("c", "c"))
    assert all(is_named_export(node, name) for name in ("a", "b", "c"))


def test_specifier_form_ignores_string_and_namespace_exports():
    node = ExportNamedDeclaration(
        specifiers=[
            ExportSpecifier(local=Identifier(name="a"), exported=StringLiteral(value="b")),
            ExportNamespaceSpecifier(exported=Identifier(name="ns")),
        ]
    )
    assert not is_named_export(node, "b")
    assert not is_named_export(node, "ns")


@pytest.mark.parametrize(
    "node",
    [
        ExportNamedDeclaration(),
        ExportNamedDeclaration(declaration=Node("ClassDeclaration")),
        ExportNamedDeclaration(declaration=VariableDeclaration(declarations=[])),
        ExportNamedDeclaration(declaration=VariableDeclaration(declarations=[Node("Unknown")])),
        ExportNamedDeclaration(declaration=VariableDeclaration(declarations=[VariableDeclarator()])),
        # Identifier-typed nodes without a `name`
        ExportNamedDeclaration(specifiers=[ExportSpecifier(exported=Node("Identifier"))]),
        ExportNamedDeclaration(
            declaration=VariableDeclaration(declarations=[VariableDeclarator(id=Node("Identifier"))])
        ),
        ExportNamedDeclaration(
            declaration=VariableDeclaration(
                declarations=[
                    VariableDeclarator(
                        id=ObjectPattern(
                            properties=[ObjectProperty(key=Identifier(name="a"), value=Node("Identifier"))]
                        )
                    )
                ]
            )
        ),
        Node("ExportDefaultDeclaration"),
        Identifier(name="a"),
        None,
        object(),
    ],
)
def test_unrecognised_shapes_never_match(node):
    assert not is_named_export(node, "a")
    assert named_export_form(node, "a") is None


def test_named_export_form_reports_matching_form():
    assert named_export_form(_function_export("f"), "f") == "function"
    assert named_export_form(_variable_export("a"), "a") == "variable"
    assert named_export_form(_destructured_export(_prop("a")), "a") == "destructured"
    assert named_export_form(_specifier_export(("x", "y")), "y") == "specifier"


def test_predicates_do_not_mutate():
    node = _destructured_export(_prop("a"), _prop("b", "c"))
    before = copy.deepcopy(node)
    for name in ("a", "b", "c", "missing"):
        is_named_export(node, name)
    assert node == before
