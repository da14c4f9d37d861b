from __future__ import annotations

"""
Unit tests for the Brand Applier.

Verifies:
1. The Branded wrapper cannot be constructed or mutated from outside.
2. use_memo/use_callback result types.
3. Contract violations of the stabilizing constructors.
4. The dependency list element predicate.
"""

import pytest

from memoguard.core.stability.brand import (
    HOOK_CONTRACTS,
    OPAQUE_VALUE,
    Branded,
    is_branded,
    is_dependency_element,
    name_stabilized,
    stabilize_callback,
    stabilize_value,
    unbrand,
)
from memoguard.domain.errors import ContractViolation
from memoguard.domain.types import ElementType, FunctionType, ObjectType, PrimitiveType

CONFIG = ObjectType("dict", fields=(("theme", PrimitiveType("str")),))


def test_branded_cannot_be_constructed_directly() -> None:
    with pytest.raises(TypeError):
        Branded(CONFIG)


def test_branded_is_immutable() -> None:
    branded = name_stabilized(CONFIG)
    with pytest.raises(AttributeError):
        branded.inner = PrimitiveType("int")
    with pytest.raises(AttributeError):
        del branded.inner


def test_branded_is_nominal() -> None:
    """Structural equality with the payload is not enough."""
    branded = name_stabilized(CONFIG)
    assert branded != CONFIG
    assert branded == name_stabilized(CONFIG)
    assert hash(branded) == hash(name_stabilized(CONFIG))
    assert str(branded) == "Stabilized[dict{theme: str}]"


def test_branding_does_not_nest() -> None:
    once = name_stabilized(CONFIG)
    assert name_stabilized(once) is once
    assert unbrand(once) == CONFIG
    assert unbrand(CONFIG) is CONFIG


def test_stabilize_value_brands_reference_compared_results() -> None:
    result = stabilize_value(FunctionType(arity=0, returns=CONFIG), [PrimitiveType("int")])
    assert is_branded(result)
    assert unbrand(result) == CONFIG


def test_stabilize_value_leaves_primitives_unbranded() -> None:
    result = stabilize_value(FunctionType(arity=0, returns=PrimitiveType("int")), None)
    assert result == PrimitiveType("int")
    assert not is_branded(result)


def test_stabilize_value_leaves_elements_unbranded() -> None:
    result = stabilize_value(FunctionType(arity=0, returns=ElementType()), [])
    assert result == ElementType()


def test_stabilize_value_unknown_result_is_opaque_branded() -> None:
    result = stabilize_value(FunctionType(arity=0), [])
    assert result == name_stabilized(OPAQUE_VALUE)


def test_stabilize_value_rejects_non_callable_and_arguments() -> None:
    with pytest.raises(ContractViolation):
        stabilize_value(CONFIG, [])
    with pytest.raises(ContractViolation) as exc:
        stabilize_value(FunctionType(arity=1, returns=CONFIG), [])
    assert exc.value.argument == "compute"


def test_stabilize_callback_always_brands() -> None:
    fn = FunctionType(arity=1, returns=PrimitiveType("None"))
    result = stabilize_callback(fn, [])
    assert is_branded(result)
    assert unbrand(result) == fn


def test_stabilize_callback_requires_dependency_list() -> None:
    with pytest.raises(ContractViolation) as exc:
        stabilize_callback(FunctionType(), None)
    assert exc.value.argument == "deps"
    assert "not assignable" in str(exc.value)


def test_stabilize_callback_rejects_non_callable() -> None:
    with pytest.raises(ContractViolation):
        stabilize_callback(PrimitiveType("str"), [])


def test_dependency_element_predicate() -> None:
    assert is_dependency_element(PrimitiveType("str")) is True
    assert is_dependency_element(name_stabilized(CONFIG)) is True
    assert is_dependency_element(CONFIG) is False
    assert is_dependency_element(FunctionType()) is False
    assert is_dependency_element(ElementType()) is False


def test_hook_contracts() -> None:
    assert HOOK_CONTRACTS["use_callback"].deps_required is True
    assert HOOK_CONTRACTS["use_memo"].stabilizes == "value"
    assert HOOK_CONTRACTS["use_effect"].stabilizes is None
    assert HOOK_CONTRACTS["use_imperative_handle"].deps_index == 2
