from __future__ import annotations

"""
Unit tests for Module Symbol Collection.

Verifies:
1. Component discovery (decorators, render classes, memo targets).
2. memo registrations in decorator and assignment form.
3. Props class fields, TypedDict totality and import aliases.
"""

import ast
import textwrap

from memoguard.core.analysis.symbols import collect_symbols, is_memo_call


def _collect(source: str):
    return collect_symbols(ast.parse(textwrap.dedent(source)), ["component"])


def test_collects_components_and_registrations() -> None:
    symbols = _collect("""
        from reactpy import component, memo

        @memo
        @component
        def Row(label: str):
            return label

        @component
        def Panel():
            return None

        def helper():
            return 1

        def TableView(rows):
            return rows

        Table = memo(TableView, lambda a, b: a == b)
    """)

    assert {"Row", "Panel", "TableView", "Table"} <= symbols.components
    assert "helper" not in symbols.components

    regs = {r.bound_name: r for r in symbols.registrations}
    assert regs["Row"].target == "Row"
    assert regs["Row"].comparator is None
    assert regs["Table"].target == "TableView"
    assert isinstance(regs["Table"].comparator, ast.Lambda)


def test_memo_decorator_with_comparator_keyword() -> None:
    symbols = _collect("""
        @memo(are_equal=same_row)
        def Row(label):
            return label
    """)
    reg = symbols.registrations[0]
    assert isinstance(reg.comparator, ast.Name)
    assert reg.comparator.id == "same_row"


def test_memo_of_wrapped_component_call() -> None:
    symbols = _collect("""
        def render_row(label):
            return label

        Row = memo(component(render_row))
    """)
    assert symbols.registrations[0].target == "render_row"


def test_import_aliases_resolve_call_names() -> None:
    symbols = _collect("""
        from reactpy import memo as remember

        def Row(label):
            return label

        FastRow = remember(Row)
    """)
    assert symbols.canonical("remember") == "memo"
    assert symbols.registrations[0].bound_name == "FastRow"

    call = ast.parse("remember(Row)").body[0].value
    assert is_memo_call(call, symbols) is True


def test_class_fields_and_flags() -> None:
    symbols = _collect("""
        from typing import TypedDict, NotRequired
        from enum import Enum

        class Color(Enum):
            RED = 1

        class Props(TypedDict):
            label: str
            hint: NotRequired[str]

        class Partial(TypedDict, total=False):
            label: str

        @require_stabilized_props
        class RowProps:
            label: str
            size: int = 1

        class Handler:
            def __call__(self):
                pass

        class Counter:
            def render(self):
                pass
    """)
    classes = symbols.classes

    assert classes["Color"].is_enum is True
    assert [(f.name, f.required) for f in classes["Props"].fields] == [("label", True), ("hint", False)]
    assert classes["Partial"].fields[0].required is False
    assert classes["RowProps"].stabilized_props is True
    assert [f.has_default for f in classes["RowProps"].fields] == [False, True]
    assert classes["Handler"].is_callable is True
    assert classes["Counter"].is_component is True
    assert "Counter" in symbols.components
