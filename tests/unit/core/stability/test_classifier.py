from __future__ import annotations

"""
Unit tests for the Value Classifier.

Verifies:
1. Precedence order (Primitive > UI element > Function > Object).
2. Callable objects classify as functions.
3. Branded descriptors classify as their payload.
"""

import pytest

from memoguard.core.stability.brand import name_stabilized
from memoguard.core.stability.classifier import classify, is_reference_compared
from memoguard.domain.types import (
    Category,
    ElementType,
    FunctionType,
    ObjectType,
    PrimitiveType,
)


@pytest.mark.parametrize("descriptor, expected", [
    (PrimitiveType("str"), Category.PRIMITIVE),
    (PrimitiveType("None"), Category.PRIMITIVE),
    (PrimitiveType("Color"), Category.PRIMITIVE),
    (ElementType(), Category.UI_ELEMENT),
    (FunctionType(arity=0), Category.FUNCTION),
    (ObjectType("dict"), Category.OBJECT),
    (ObjectType("list", items=PrimitiveType("int")), Category.OBJECT),
])
def test_classify_basic_variants(descriptor, expected) -> None:
    assert classify(descriptor) is expected


def test_callable_object_is_function() -> None:
    """An object defining __call__ is classified as a function, not an object."""
    handler = ObjectType("Handler", fields=(("name", PrimitiveType("str")),), callable=True)
    assert classify(handler) is Category.FUNCTION


def test_branded_descriptor_classifies_as_payload() -> None:
    assert classify(name_stabilized(FunctionType())) is Category.FUNCTION
    assert classify(name_stabilized(ObjectType("Config"))) is Category.OBJECT


def test_is_reference_compared() -> None:
    assert is_reference_compared(FunctionType()) is True
    assert is_reference_compared(ObjectType("dict")) is True
    assert is_reference_compared(PrimitiveType("int")) is False
    assert is_reference_compared(ElementType()) is False
