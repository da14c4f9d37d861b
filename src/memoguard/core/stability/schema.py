from __future__ import annotations

"""
Schema Transformer.

Derives the required (stabilized) props schema from a declared one and
applies it when a component is registered through the render-skip wrapper.
The rule is evaluated per field from the field's classification alone, so
the transform is shallow, order-free and idempotent.

Two policies exist because two declaration variants were in circulation:
'strict' brands every Function/Object field, while 'element-permissive'
also leaves renderable node collections (children-like props) untouched.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from memoguard.core.stability.brand import Branded, name_stabilized, unbrand
from memoguard.core.stability.classifier import classify
from memoguard.domain.constants import SEQUENCE_NAMES
from memoguard.domain.types import Category, ObjectType, Schema, TypeDescriptor

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# POLICIES
# -----------------------------------------------------------------------------

class TransformPolicy(str, Enum):
    STRICT = "strict"
    ELEMENT_PERMISSIVE = "element-permissive"

    @classmethod
    def parse(cls, value: object) -> "TransformPolicy":
        if isinstance(value, TransformPolicy):
            return value
        return cls(str(value).strip().lower())


DEFAULT_POLICY = TransformPolicy.STRICT


def requires_brand(
        descriptor: TypeDescriptor,
        policy: TransformPolicy = DEFAULT_POLICY,
) -> bool:
    """Whether a field of this type must be branded under the given policy."""
    category = classify(descriptor)
    if category in (Category.PRIMITIVE, Category.UI_ELEMENT):
        return False
    if policy is TransformPolicy.ELEMENT_PERMISSIVE and _is_renderable(descriptor):
        return False
    return True


def transform_field(
        descriptor: TypeDescriptor,
        policy: TransformPolicy = DEFAULT_POLICY,
) -> TypeDescriptor:
    """Apply the branding rule to a single field descriptor."""
    if requires_brand(descriptor, policy):
        return name_stabilized(descriptor)
    return descriptor


def transform(
        schema: Mapping[str, TypeDescriptor],
        policy: TransformPolicy = DEFAULT_POLICY,
) -> Schema:
    """
    Build the stabilized schema (`RequireStabilizedProps[P]`).

    Args:
        schema: Declared field descriptors.
        policy: Branding policy.

    Returns:
        Schema: New mapping; the input is left untouched.
    """
    return {name: transform_field(d, policy) for name, d in schema.items()}


# -----------------------------------------------------------------------------
# COMPONENT REGISTRATION (RENDER-SKIP WRAPPER)
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ComponentSignature:
    """
    Declared contract of a component.

    Attributes:
        name: Component identifier.
        kind: 'function' or 'class'.
        props: Resolved field descriptors (unannotated fields are absent).
        field_names: Every accepted field, in declaration order.
        required: Fields without a default.
        accepts_extra: True when the component takes **kwargs.
        nullable: Fields annotated Optional[...].
        state: Class components only; carried through unchanged.
    """
    name: str
    kind: str = "function"
    props: Dict[str, TypeDescriptor] = field(default_factory=dict)
    field_names: Tuple[str, ...] = ()
    required: FrozenSet[str] = frozenset()
    accepts_extra: bool = False
    nullable: FrozenSet[str] = frozenset()
    state: Optional[TypeDescriptor] = None


@dataclass(frozen=True)
class MemoizedComponent:
    """
    Result of registering a component through the render-skip wrapper.

    `props` is the contract call sites are verified against; the optional
    comparator receives two values of that same transformed schema.
    """
    component: ComponentSignature
    props: Dict[str, TypeDescriptor]
    policy: TransformPolicy

    @property
    def name(self) -> str:
        return self.component.name

    @property
    def comparator_schema(self) -> Dict[str, TypeDescriptor]:
        return self.props


def register_render_skip(
        component: ComponentSignature,
        policy: TransformPolicy = DEFAULT_POLICY,
) -> MemoizedComponent:
    """
    Contract of `memo(component, are_equal=None)`.

    Function components and class components share one rule; a class
    component keeps its state type and only its props are transformed.
    """
    if component.kind not in ("function", "class"):
        raise ValueError(f"Unsupported component kind: {component.kind!r}")

    transformed = transform(component.props, policy)
    branded = sorted(k for k, v in transformed.items() if isinstance(v, Branded))
    logger.debug(f"Registered '{component.name}' ({component.kind}) with stabilized fields: {branded}")

    return MemoizedComponent(component=component, props=transformed, policy=policy)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _is_renderable(descriptor: TypeDescriptor) -> bool:
    d = unbrand(descriptor)
    category = classify(d)
    if category in (Category.PRIMITIVE, Category.UI_ELEMENT):
        return True
    # Mappings and sets stay plain data even when their values are renderable.
    if (
            isinstance(d, ObjectType)
            and d.name in SEQUENCE_NAMES
            and not d.fields
            and not d.callable
            and d.items is not None
    ):
        return _is_renderable(d.items)
    return False
