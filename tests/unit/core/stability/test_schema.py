from __future__ import annotations

"""
Unit tests for the Schema Transformer.

Verifies:
1. Per-field branding rule under both policies.
2. Shallowness, idempotence and input immutability.
3. Render-skip registration for function and class components.
"""

import pytest

from memoguard.core.stability.brand import is_branded, name_stabilized
from memoguard.core.stability.schema import (
    ComponentSignature,
    TransformPolicy,
    register_render_skip,
    requires_brand,
    transform,
)
from memoguard.domain.types import ElementType, FunctionType, ObjectType, PrimitiveType

NESTED = ObjectType("Config", fields=(("on_change", FunctionType(arity=1)),))
CHILDREN = ObjectType("list", items=ElementType())

DECLARED = {
    "label": PrimitiveType("str"),
    "count": PrimitiveType("int"),
    "icon": ElementType(),
    "on_click": FunctionType(arity=0),
    "config": NESTED,
    "children": CHILDREN,
}


def test_strict_brands_functions_and_objects_only() -> None:
    out = transform(DECLARED, TransformPolicy.STRICT)

    assert out["label"] == PrimitiveType("str")
    assert out["count"] == PrimitiveType("int")
    assert out["icon"] == ElementType()
    assert out["on_click"] == name_stabilized(FunctionType(arity=0))
    assert out["config"] == name_stabilized(NESTED)
    assert is_branded(out["children"])


def test_element_permissive_keeps_renderable_collections() -> None:
    out = transform(DECLARED, TransformPolicy.ELEMENT_PERMISSIVE)

    assert out["children"] == CHILDREN
    assert is_branded(out["on_click"])
    assert is_branded(out["config"])


def test_element_permissive_still_brands_mixed_collections() -> None:
    handlers = ObjectType("list", items=FunctionType())
    assert requires_brand(handlers, TransformPolicy.ELEMENT_PERMISSIVE) is True

    nested_children = ObjectType("list", items=ObjectType("tuple", items=ElementType()))
    assert requires_brand(nested_children, TransformPolicy.ELEMENT_PERMISSIVE) is False


@pytest.mark.parametrize("name", ["dict", "Mapping", "set", "frozenset"])
def test_element_permissive_brands_mappings_and_sets(name) -> None:
    descriptor = ObjectType(name, items=PrimitiveType("int"))
    assert requires_brand(descriptor, TransformPolicy.ELEMENT_PERMISSIVE) is True


def test_element_permissive_keeps_primitive_sequences() -> None:
    for name in ("list", "tuple", "Sequence", "Iterable"):
        assert requires_brand(ObjectType(name, items=PrimitiveType("str")), TransformPolicy.ELEMENT_PERMISSIVE) is False


def test_transform_is_shallow() -> None:
    """Nested members of an object field are not branded individually."""
    out = transform({"config": NESTED})
    inner = out["config"].inner
    assert inner.field("on_change") == FunctionType(arity=1)


@pytest.mark.parametrize("policy", list(TransformPolicy))
def test_transform_is_idempotent(policy) -> None:
    once = transform(DECLARED, policy)
    assert transform(once, policy) == once


def test_transform_does_not_mutate_input() -> None:
    declared = dict(DECLARED)
    transform(declared)
    assert declared == DECLARED


def test_transform_empty_schema() -> None:
    assert transform({}) == {}


def test_policy_parse() -> None:
    assert TransformPolicy.parse("Element-Permissive") is TransformPolicy.ELEMENT_PERMISSIVE
    assert TransformPolicy.parse(TransformPolicy.STRICT) is TransformPolicy.STRICT
    with pytest.raises(ValueError):
        TransformPolicy.parse("lenient")


def test_register_render_skip_function_and_class_share_rule() -> None:
    props = {"label": PrimitiveType("str"), "on_click": FunctionType()}
    fn = register_render_skip(ComponentSignature("Row", "function", props))
    cls = register_render_skip(ComponentSignature(
        "RowView", "class", props, state=ObjectType("State"),
    ))

    assert fn.props == cls.props
    assert is_branded(fn.props["on_click"])
    assert fn.comparator_schema == fn.props
    assert fn.name == "Row"
    assert cls.component.state == ObjectType("State")


def test_register_render_skip_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError):
        register_render_skip(ComponentSignature("Row", "module"))
