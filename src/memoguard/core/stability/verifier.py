from __future__ import annotations

"""
Call-site Verifier.

Compares the inferred types of actual arguments against a transformed
schema or the dependency list element type. The only output is a list of
`Mismatch` records; turning them into located diagnostics is the caller's
job. A branded expectation is met only by an already branded actual:
structural equivalence alone never satisfies it.
"""

from dataclasses import dataclass
from typing import Collection, Dict, List, Mapping, Optional, Sequence

from memoguard.core.stability.brand import DEPENDENCY_ELEMENT, Branded, is_dependency_element
from memoguard.domain.types import (
    ElementType,
    FunctionType,
    ObjectType,
    PrimitiveType,
    TypeDescriptor,
    describe,
)

MISMATCH = "schema-mismatch"
UNRESOLVED = "unresolved"

_ABSTRACT = frozenset({
    "object", "Mapping", "MutableMapping", "Sequence", "MutableSequence",
    "Iterable", "Collection", "Container",
})


COMPARATOR_FIELD = "are_equal"

_SUBJECTS: Dict[str, str] = {
    "props": "Property",
    "argument": "Argument",
    "dependency-list": "Dependency list",
    "callback": "Callback argument",
    "comparator": "Comparator parameter",
    "assignment": "Variable",
}


@dataclass(frozen=True)
class Mismatch:
    """
    A single failed field or position.

    Attributes:
        field: Field name, or 'deps[i]' / parameter name for lists and comparators.
        expected: Rendered expected type.
        actual: Rendered actual type ('missing' / 'unknown' when absent).
        reason: 'type', 'missing', 'unexpected' or 'unresolved'.
        site: Where the value flows; selects the wording of the message.
    """
    field: str
    expected: str
    actual: str
    reason: str = "type"
    site: str = "props"

    @property
    def code(self) -> str:
        return UNRESOLVED if self.reason == "unresolved" else MISMATCH

    @property
    def message(self) -> str:
        return self.message_for(self.site)

    def message_for(self, site: str) -> str:
        """Render the mismatch as reported at `site`."""
        if self.field.startswith("deps["):
            label, subject = self.field, "Dependency list element"
        elif site == "comparator" and self.field == COMPARATOR_FIELD:
            label, subject = f"'{self.field}'", "Comparator"
        else:
            label, subject = f"'{self.field}'", _SUBJECTS.get(site, "Property")
        if self.reason == "missing":
            return f"{subject} {label} is missing; required type '{self.expected}'"
        if self.reason == "unexpected":
            return f"{subject} {label} does not exist on type '{self.expected}'"
        if self.reason == "unresolved":
            return (
                f"{subject} {label}: cannot infer the type of the supplied value; "
                f"required type '{self.expected}'"
            )
        return f"{subject} {label}: type '{self.actual}' is not assignable to type '{self.expected}'"


# -----------------------------------------------------------------------------
# ASSIGNABILITY
# -----------------------------------------------------------------------------

def is_assignable(actual: TypeDescriptor, expected: TypeDescriptor) -> bool:
    """
    Decide whether a value of type `actual` may flow where `expected` is required.

    Args:
        actual: Inferred descriptor of the supplied value.
        expected: Descriptor required by the schema.

    Returns:
        bool: True when the flow is allowed.
    """
    if isinstance(expected, Branded):
        if not isinstance(actual, Branded):
            return False
        return _structural(actual.inner, expected.inner)

    if isinstance(actual, Branded):
        return _structural(actual.inner, expected)
    return _structural(actual, expected)


def is_equivalent(a: TypeDescriptor, b: TypeDescriptor) -> bool:
    return is_assignable(a, b) and is_assignable(b, a)


def _structural(actual: TypeDescriptor, expected: TypeDescriptor) -> bool:
    # Opaque shapes only carry a brand state.
    if isinstance(actual, ObjectType) and actual.opaque:
        return True
    if isinstance(expected, ObjectType) and expected.opaque:
        return True

    if isinstance(expected, PrimitiveType):
        return isinstance(actual, PrimitiveType) and _primitive_kind_ok(actual.kind, expected.kind)

    if isinstance(expected, ElementType):
        return isinstance(actual, ElementType)

    if isinstance(expected, FunctionType):
        return _function_ok(actual, expected)

    if isinstance(expected, ObjectType):
        return _object_ok(actual, expected)

    return False


def _primitive_kind_ok(actual: str, expected: str) -> bool:
    allowed = set(expected.split(" | "))
    for kind in actual.split(" | "):
        if kind in allowed:
            continue
        # Numeric tower: bool <: int <: float <: complex.
        if kind == "bool" and allowed & {"int", "float", "complex"}:
            continue
        if kind == "int" and allowed & {"float", "complex"}:
            continue
        if kind == "float" and "complex" in allowed:
            continue
        return False
    return True


def _function_ok(actual: TypeDescriptor, expected: FunctionType) -> bool:
    if isinstance(actual, ObjectType):
        return actual.callable
    if not isinstance(actual, FunctionType):
        return False
    if not _arity_ok(actual, expected):
        return False
    if actual.returns is not None and expected.returns is not None:
        return is_assignable(actual.returns, expected.returns)
    return True


def _arity_ok(actual: FunctionType, expected: FunctionType) -> bool:
    # Every positional count the expected signature admits must be accepted.
    if not actual.signature_known or not expected.signature_known:
        return True
    if actual.required > expected.required:
        return False
    if actual.arity is None:
        return True
    return expected.arity is not None and actual.arity >= expected.arity


def _object_ok(actual: TypeDescriptor, expected: ObjectType) -> bool:
    if isinstance(actual, FunctionType):
        return expected.callable and not expected.fields
    if not isinstance(actual, ObjectType):
        return False

    if expected.callable and not actual.callable:
        return False

    for name, want in expected.fields:
        got = actual.field(name)
        if got is None or not is_assignable(got, want):
            return False

    if expected.items is not None and actual.items is not None:
        if not is_assignable(actual.items, expected.items):
            return False

    # Nominal classes without declared fields can only match by name.
    if not expected.fields and not actual.fields and expected.items is None:
        return expected.name in _ABSTRACT or expected.name == actual.name
    return True


# -----------------------------------------------------------------------------
# CHECKS
# -----------------------------------------------------------------------------

def check_props(
        schema: Mapping[str, TypeDescriptor],
        actual: Mapping[str, Optional[TypeDescriptor]],
        *,
        field_names: Optional[Collection[str]] = None,
        required: Collection[str] = (),
        accepts_extra: bool = False,
        nullable: Collection[str] = (),
        component: str = "props",
) -> List[Mismatch]:
    """
    Verify the props supplied at a call site.

    Args:
        schema: Transformed schema (fields whose type is known).
        actual: Supplied field name -> inferred descriptor (None if unknown).
        field_names: All accepted fields; defaults to the schema keys.
        required: Fields that must be supplied.
        accepts_extra: Skip the unknown-field check.
        nullable: Fields declared Optional; a None literal always satisfies them.
        component: Name used when reporting unknown fields.

    Returns:
        List[Mismatch]: One record per offending field, in supply order.
    """
    known = set(field_names) if field_names is not None else set(schema)
    known |= set(schema)
    out: List[Mismatch] = []

    for name, got in actual.items():
        if name not in known:
            if not accepts_extra:
                out.append(Mismatch(name, component, describe(got), "unexpected"))
            continue

        want = schema.get(name)
        if want is None:
            continue
        if got is None:
            out.append(Mismatch(name, describe(want), "unknown", "unresolved"))
        elif name in nullable and got == PrimitiveType("None"):
            continue
        elif not is_assignable(got, want):
            out.append(Mismatch(name, describe(want), describe(got)))

    for name in sorted(set(required) - set(actual)):
        want = schema.get(name)
        out.append(Mismatch(name, describe(want) if want else "Any", "missing", "missing"))

    return out


def check_dependency_list(elements: Sequence[Optional[TypeDescriptor]]) -> List[Mismatch]:
    """Verify every element satisfies `Primitive | Stabilized[object]`."""
    out: List[Mismatch] = []
    for idx, got in enumerate(elements):
        label = f"deps[{idx}]"
        if got is None:
            out.append(Mismatch(label, DEPENDENCY_ELEMENT, "unknown", "unresolved", "dependency-list"))
        elif not is_dependency_element(got):
            out.append(Mismatch(label, DEPENDENCY_ELEMENT, describe(got), site="dependency-list"))
    return out


def check_comparator(
        schema: Mapping[str, TypeDescriptor],
        params: Sequence[Optional[TypeDescriptor]],
        param_names: Sequence[str] = ("prev_props", "next_props"),
) -> List[Mismatch]:
    """
    Verify a custom equality comparator for the render-skip wrapper.

    Each annotated parameter must be equivalent to the transformed schema,
    so an annotation against the declared (untransformed) props fails.
    Unannotated parameters (None) take the transformed schema implicitly.
    """
    expected = ObjectType(name="StabilizedProps", fields=tuple(schema.items()))
    if len(params) != 2:
        return [Mismatch(
            COMPARATOR_FIELD,
            f"Callable[[{expected}, {expected}], bool]",
            f"Callable[[{', '.join(['Any'] * len(params))}], Any]",
            site="comparator",
        )]

    out: List[Mismatch] = []
    for name, got in zip(param_names, params):
        if got is None:
            continue
        if not (isinstance(got, ObjectType) and _fields_equivalent(got, expected)):
            out.append(Mismatch(name, describe(expected), describe(got), site="comparator"))
    return out


def _fields_equivalent(a: ObjectType, b: ObjectType) -> bool:
    left, right = a.field_map(), b.field_map()
    if set(left) != set(right):
        return False
    return all(is_equivalent(left[k], right[k]) for k in left)
