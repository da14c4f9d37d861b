from __future__ import annotations

"""
Module Symbol Collection.

First pass over a parsed module: import aliases, classes with annotated
fields, top-level functions, components and render-skip registrations.
Nothing here infers value types; it only records where things are declared.
"""

import ast
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Union

from memoguard.domain.constants import (
    COMPARATOR_KEYWORDS,
    ENUM_BASES,
    MEMO_WRAPPER_NAMES,
    STABILIZED_PROPS_DECORATOR,
)

logger = logging.getLogger(__name__)

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]


# -----------------------------------------------------------------------------
# DATA MODELS
# -----------------------------------------------------------------------------

@dataclass
class FieldDecl:
    """An annotated class attribute."""
    name: str
    annotation: ast.expr
    has_default: bool
    required: bool


@dataclass
class ClassInfo:
    """
    Static facts about a module-level class.

    Attributes:
        fields: Annotated attributes in declaration order.
        is_enum: Derives from an Enum base.
        is_callable: Defines __call__.
        is_component: Defines render().
        stabilized_props: Decorated with require_stabilized_props.
    """
    name: str
    node: ast.ClassDef
    fields: List[FieldDecl] = field(default_factory=list)
    is_enum: bool = False
    is_callable: bool = False
    is_component: bool = False
    stabilized_props: bool = False

    def method(self, name: str) -> Optional[FunctionNode]:
        for child in self.node.body:
            if isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef)) and child.name == name:
                return child
        return None


@dataclass
class MemoRegistration:
    """
    A component registered through the render-skip wrapper.

    Attributes:
        bound_name: Module name that refers to the memoized component.
        target: Name of the wrapped component.
        comparator: Expression supplied as the custom equality function.
        node: Decorator or call node, used for locating diagnostics.
    """
    bound_name: str
    target: str
    comparator: Optional[ast.expr]
    node: ast.AST


@dataclass
class ModuleSymbols:
    """Declarations gathered from one module."""
    aliases: Dict[str, str] = field(default_factory=dict)
    classes: Dict[str, ClassInfo] = field(default_factory=dict)
    functions: Dict[str, FunctionNode] = field(default_factory=dict)
    components: Set[str] = field(default_factory=set)
    registrations: List[MemoRegistration] = field(default_factory=list)

    def canonical(self, name: str) -> str:
        """Resolve an imported alias back to the name it was imported as."""
        return self.aliases.get(name, name)

    def call_name(self, func: ast.expr) -> Optional[str]:
        """Canonical final name of a call target (Name or Attribute)."""
        if isinstance(func, ast.Name):
            return self.canonical(func.id)
        if isinstance(func, ast.Attribute):
            return func.attr
        return None


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def collect_symbols(tree: ast.Module, component_decorators: Iterable[str]) -> ModuleSymbols:
    """
    Gather module-level declarations.

    Args:
        tree: Parsed module.
        component_decorators: Decorator names that mark function components.

    Returns:
        ModuleSymbols: Aliases, classes, functions, components and memo registrations.
    """
    symbols = ModuleSymbols()
    decorators = set(component_decorators)

    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom):
            for alias in node.names:
                if alias.asname:
                    symbols.aliases[alias.asname] = alias.name

    for node in tree.body:
        if isinstance(node, ast.ClassDef):
            info = _collect_class(node, symbols)
            symbols.classes[node.name] = info
            if info.is_component:
                symbols.components.add(node.name)
            _collect_decorator_registration(node, symbols)

        elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            symbols.functions[node.name] = node
            names = {_decorator_name(d, symbols) for d in node.decorator_list}
            if names & decorators:
                symbols.components.add(node.name)
            _collect_decorator_registration(node, symbols)

        elif isinstance(node, ast.Assign) and isinstance(node.value, ast.Call):
            _collect_assignment_registration(node, symbols, decorators)

    for reg in symbols.registrations:
        symbols.components.add(reg.target)
        symbols.components.add(reg.bound_name)

    logger.debug(
        f"Collected {len(symbols.classes)} classes, {len(symbols.functions)} functions, "
        f"{len(symbols.registrations)} memo registrations"
    )
    return symbols


def is_memo_call(node: ast.AST, symbols: ModuleSymbols) -> bool:
    return isinstance(node, ast.Call) and symbols.call_name(node.func) in MEMO_WRAPPER_NAMES


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _decorator_name(node: ast.expr, symbols: ModuleSymbols) -> Optional[str]:
    if isinstance(node, ast.Call):
        node = node.func
    return symbols.call_name(node)


def _collect_class(node: ast.ClassDef, symbols: ModuleSymbols) -> ClassInfo:
    info = ClassInfo(name=node.name, node=node)

    base_names = {symbols.call_name(b) for b in node.bases}
    info.is_enum = bool(base_names & ENUM_BASES)

    total = True
    for kw in node.keywords:
        if kw.arg == "total" and isinstance(kw.value, ast.Constant):
            total = bool(kw.value.value)

    for child in node.body:
        if isinstance(child, ast.AnnAssign) and isinstance(child.target, ast.Name):
            has_default = child.value is not None
            required = total and not has_default and not _is_not_required(child.annotation, symbols)
            info.fields.append(FieldDecl(child.target.id, child.annotation, has_default, required))
        elif isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef)):
            if child.name == "__call__":
                info.is_callable = True
            elif child.name == "render":
                info.is_component = True

    decorators = {_decorator_name(d, symbols) for d in node.decorator_list}
    info.stabilized_props = STABILIZED_PROPS_DECORATOR in decorators
    return info


def _is_not_required(annotation: ast.expr, symbols: ModuleSymbols) -> bool:
    return (
        isinstance(annotation, ast.Subscript)
        and symbols.call_name(annotation.value) == "NotRequired"
    )


def _collect_decorator_registration(
        node: Union[ast.ClassDef, FunctionNode],
        symbols: ModuleSymbols,
) -> None:
    for dec in node.decorator_list:
        if _decorator_name(dec, symbols) not in MEMO_WRAPPER_NAMES:
            continue
        comparator = _comparator_of(dec, positional_offset=0) if isinstance(dec, ast.Call) else None
        symbols.registrations.append(MemoRegistration(node.name, node.name, comparator, dec))


def _collect_assignment_registration(
        node: ast.Assign,
        symbols: ModuleSymbols,
        decorators: Set[str],
) -> None:
    call = node.value
    if not is_memo_call(call, symbols) or not call.args:
        return
    if len(node.targets) != 1 or not isinstance(node.targets[0], ast.Name):
        return

    target = call.args[0]
    # memo(component(render_fn)) wraps the undecorated function.
    if isinstance(target, ast.Call) and symbols.call_name(target.func) in decorators and target.args:
        target = target.args[0]
    if not isinstance(target, ast.Name):
        logger.debug(f"Skipping memo registration with non-name target at line {node.lineno}")
        return

    symbols.registrations.append(MemoRegistration(
        bound_name=node.targets[0].id,
        target=target.id,
        comparator=_comparator_of(call, positional_offset=1),
        node=call,
    ))


def _comparator_of(call: ast.Call, positional_offset: int) -> Optional[ast.expr]:
    for kw in call.keywords:
        if kw.arg in COMPARATOR_KEYWORDS:
            return kw.value
    if len(call.args) > positional_offset:
        return call.args[positional_offset]
    return None
