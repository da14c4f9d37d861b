from __future__ import annotations

"""
Value Classifier.

Maps a type descriptor to exactly one category. Precedence is fixed:
Primitive, then UI element, then Function, then Object. A callable object
therefore classifies as Function, and a branded descriptor classifies as
the descriptor it wraps.
"""

from memoguard.domain.types import (
    Category,
    ElementType,
    FunctionType,
    ObjectType,
    PrimitiveType,
    TypeDescriptor,
)


def classify(descriptor: TypeDescriptor) -> Category:
    """
    Classify a descriptor. Total and side-effect free.

    Args:
        descriptor: Any type descriptor, branded or not.

    Returns:
        Category: The first matching category in precedence order.
    """
    inner = _unwrap(descriptor)

    if _is_primitive(inner):
        return Category.PRIMITIVE
    if _is_ui_element(inner):
        return Category.UI_ELEMENT
    if _is_function(inner):
        return Category.FUNCTION
    return Category.OBJECT


def is_reference_compared(descriptor: TypeDescriptor) -> bool:
    """True when equality of the value depends on reference identity."""
    return classify(descriptor) in (Category.FUNCTION, Category.OBJECT)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _unwrap(descriptor: TypeDescriptor) -> TypeDescriptor:
    # Branded exposes its payload as `inner`; brand.py imports this module.
    return getattr(descriptor, "inner", descriptor)


def _is_primitive(d: TypeDescriptor) -> bool:
    return isinstance(d, PrimitiveType)


def _is_ui_element(d: TypeDescriptor) -> bool:
    return isinstance(d, ElementType)


def _is_function(d: TypeDescriptor) -> bool:
    if isinstance(d, FunctionType):
        return True
    return isinstance(d, ObjectType) and d.callable
