from __future__ import annotations

"""
Brand Applier.

Owns the sealed `Branded` wrapper and the only producers of it: the two
stabilizing constructors (`stabilize_value`, `stabilize_callback`) and
`name_stabilized`, used where a type position names the brand explicitly
(annotations, required schemas). Literals, structural coincidence and casts never
yield a Branded descriptor.

Also declares the hook contracts: where each stabilizing or watch-and-run
primitive takes its dependency list and whether the list is mandatory.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from memoguard.core.stability.classifier import classify, is_reference_compared
from memoguard.domain.errors import ContractViolation
from memoguard.domain.types import Category, FunctionType, ObjectType, TypeDescriptor

logger = logging.getLogger(__name__)

_SEAL = object()


# -----------------------------------------------------------------------------
# SEALED BRAND
# -----------------------------------------------------------------------------

class Branded(TypeDescriptor):
    """
    A descriptor certified as produced by a stabilizing constructor.

    Nominal: two Branded descriptors are equal only when their payloads are
    equal, and no structural value ever compares equal to a Branded one.
    """

    def __init__(self, inner: TypeDescriptor, *, _seal: object = None) -> None:
        if _seal is not _SEAL:
            raise TypeError(
                "Branded descriptors are only produced by stabilize_value, "
                "stabilize_callback or a Stabilized[...] annotation"
            )
        object.__setattr__(self, "inner", inner)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Branded descriptors are immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Branded descriptors are immutable")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Branded) and other.inner == self.inner

    def __hash__(self) -> int:
        return hash(("Branded", self.inner))

    def __repr__(self) -> str:
        return f"Branded({self.inner!r})"

    def __str__(self) -> str:
        return f"Stabilized[{self.inner}]"


def is_branded(descriptor: Optional[TypeDescriptor]) -> bool:
    return isinstance(descriptor, Branded)


def unbrand(descriptor: TypeDescriptor) -> TypeDescriptor:
    """Return the payload of a branded descriptor, or the descriptor itself."""
    if isinstance(descriptor, Branded):
        return descriptor.inner
    return descriptor


def _brand(descriptor: TypeDescriptor) -> Branded:
    # Branding does not nest.
    if isinstance(descriptor, Branded):
        return descriptor
    return Branded(descriptor, _seal=_SEAL)


# -----------------------------------------------------------------------------
# STABILIZING CONSTRUCTORS
# -----------------------------------------------------------------------------

OPAQUE_VALUE = ObjectType(name="object", opaque=True)


def stabilize_value(
        compute: TypeDescriptor,
        deps: Optional[Sequence[Optional[TypeDescriptor]]],
) -> TypeDescriptor:
    """
    Result type of `use_memo(compute, deps)`.

    Args:
        compute: Descriptor of the zero-argument producer.
        deps: Descriptors of the dependency list elements, or None when the
              list is omitted (recompute on every render).

    Returns:
        TypeDescriptor: Branded[T] when T is reference-compared, T otherwise.
                        An uninferable T yields a branded opaque object.

    Raises:
        ContractViolation: If `compute` is not a zero-argument callable.
    """
    _require_callable("compute", compute, arity=0)
    produced = _returns_of(compute)

    if produced is None:
        logger.debug("Producer return type unknown; treating result as opaque stabilized value.")
        return _brand(OPAQUE_VALUE)

    if is_reference_compared(produced):
        return _brand(produced)
    return produced


def stabilize_callback(
        fn: TypeDescriptor,
        deps: Optional[Sequence[Optional[TypeDescriptor]]],
) -> Branded:
    """
    Result type of `use_callback(fn, deps)`. Always branded.

    Raises:
        ContractViolation: If `fn` is not callable or `deps` is missing.
    """
    _require_callable("fn", fn)
    if deps is None:
        raise ContractViolation("deps", "Sequence[Primitive | Stabilized[object]]", "None")
    return _brand(fn)


def name_stabilized(inner: TypeDescriptor) -> Branded:
    """
    Name the branded type of `inner` in a type position.

    Used for `Stabilized[T]` annotations and for the fields of a required
    schema. Callers are checked against such types, so this never certifies
    a value.
    """
    return _brand(inner)


# -----------------------------------------------------------------------------
# DEPENDENCY LIST CONTRACT
# -----------------------------------------------------------------------------

DEPENDENCY_ELEMENT = "Primitive | Stabilized[object]"


def is_dependency_element(descriptor: TypeDescriptor) -> bool:
    """True when the descriptor satisfies the dependency list element type."""
    if isinstance(descriptor, Branded):
        return True
    return classify(descriptor) == Category.PRIMITIVE


@dataclass(frozen=True)
class HookContract:
    """
    Static contract of a hook-style primitive.

    Attributes:
        name: Canonical call name.
        deps_index: Positional index of the dependency list.
        deps_keywords: Keyword names accepted for the dependency list.
        deps_required: Whether the dependency list must be supplied.
        stabilizes: 'value', 'callback' or None for watch-and-run primitives.
    """
    name: str
    deps_index: int
    deps_keywords: Tuple[str, ...] = ("dependencies", "deps")
    deps_required: bool = False
    stabilizes: Optional[str] = None


HOOK_CONTRACTS: Dict[str, HookContract] = {
    "use_memo": HookContract("use_memo", 1, stabilizes="value"),
    "use_callback": HookContract("use_callback", 1, deps_required=True, stabilizes="callback"),
    "use_effect": HookContract("use_effect", 1),
    "use_layout_effect": HookContract("use_layout_effect", 1),
    "use_insertion_effect": HookContract("use_insertion_effect", 1),
    "use_imperative_handle": HookContract("use_imperative_handle", 2),
}


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _require_callable(argument: str, descriptor: TypeDescriptor, arity: Optional[int] = None) -> None:
    if classify(descriptor) != Category.FUNCTION:
        raise ContractViolation(argument, "Callable[..., Any]", str(descriptor))

    declared = unbrand(descriptor)
    if arity is not None and isinstance(declared, FunctionType) and not declared.accepts(arity):
        raise ContractViolation(argument, f"Callable[[{', '.join(['Any'] * arity)}], Any]", str(descriptor))


def _returns_of(compute: TypeDescriptor) -> Optional[TypeDescriptor]:
    inner = unbrand(compute)
    if isinstance(inner, FunctionType):
        return inner.returns
    return None
