from __future__ import annotations

"""
Static Type Descriptor Models.

Defines the explicit tagged representation of value shapes used by the
stability engine. Every descriptor is an immutable value object; the
category tag is derived by the classifier, never stored.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

# -----------------------------------------------------------------------------
# CATEGORY TAGS
# -----------------------------------------------------------------------------

class Category(str, Enum):
    """Classification buckets, listed in precedence order."""
    PRIMITIVE = "primitive"
    UI_ELEMENT = "ui_element"
    FUNCTION = "function"
    OBJECT = "object"


# -----------------------------------------------------------------------------
# DESCRIPTOR VARIANTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TypeDescriptor:
    """Base class for all static descriptors."""

    def __str__(self) -> str:
        return "object"


@dataclass(frozen=True)
class PrimitiveType(TypeDescriptor):
    """
    Value compared by equality rather than identity.

    Attributes:
        kind: Python-level name (str, int, float, bool, bytes, None, or an Enum name).
    """
    kind: str = "str"

    def __str__(self) -> str:
        return self.kind


@dataclass(frozen=True)
class ElementType(TypeDescriptor):
    """Renderable node produced by the component framework."""
    name: str = "Element"

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class FunctionType(TypeDescriptor):
    """
    Callable signature.

    Attributes:
        arity: Maximum number of positional parameters, or None when unknown
            or unbounded (`*args`).
        returns: Descriptor of the return value, or None when unknown.
        min_arity: Positional parameters without a default; None means the
            same as `arity`.
    """
    arity: Optional[int] = None
    returns: Optional[TypeDescriptor] = None
    min_arity: Optional[int] = None

    @property
    def required(self) -> int:
        if self.min_arity is not None:
            return self.min_arity
        return self.arity if self.arity is not None else 0

    @property
    def signature_known(self) -> bool:
        return self.arity is not None or self.min_arity is not None

    def accepts(self, count: int) -> bool:
        """Whether a call with `count` positional arguments is valid."""
        return self.required <= count and (self.arity is None or count <= self.arity)

    def __str__(self) -> str:
        params = "..." if self.arity is None else "[" + ", ".join(["Any"] * self.arity) + "]"
        ret = str(self.returns) if self.returns is not None else "Any"
        return f"Callable[{params}, {ret}]"


@dataclass(frozen=True)
class ObjectType(TypeDescriptor):
    """
    Catch-all for structured data: dicts, class instances, containers.

    Attributes:
        name: Nominal label used in diagnostics (e.g. 'dict', 'Config').
        fields: Ordered (name, descriptor) pairs for known members.
        items: Element/value descriptor for homogeneous containers.
        callable: True when instances define __call__.
        opaque: Shape unknown; only the brand state is trusted.
    """
    name: str = "object"
    fields: Tuple[Tuple[str, TypeDescriptor], ...] = ()
    items: Optional[TypeDescriptor] = None
    callable: bool = False
    opaque: bool = False

    def field(self, key: str) -> Optional[TypeDescriptor]:
        for k, v in self.fields:
            if k == key:
                return v
        return None

    def field_map(self) -> Dict[str, TypeDescriptor]:
        return dict(self.fields)

    def __str__(self) -> str:
        if self.fields:
            body = ", ".join(f"{k}: {v}" for k, v in self.fields)
            return f"{self.name}{{{body}}}"
        if self.items is not None:
            return f"{self.name}[{self.items}]"
        return self.name


# -----------------------------------------------------------------------------
# SCHEMAS
# -----------------------------------------------------------------------------

Schema = Dict[str, TypeDescriptor]


def describe(descriptor: Optional[TypeDescriptor]) -> str:
    """Render a descriptor for diagnostics; None renders as 'unknown'."""
    if descriptor is None:
        return "unknown"
    return str(descriptor)
