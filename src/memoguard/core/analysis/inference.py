from __future__ import annotations

"""
Expression Type Inference.

Infers descriptors for the value expressions that reach component props
and dependency lists: literals, lambdas, local bindings, hook results,
element construction and calls with annotated returns. Inference is local
and flow-insensitive within a scope (the latest binding wins); anything it
cannot establish is None.
"""

import ast
import logging
from typing import Dict, Iterable, List, Optional, Tuple, Union

from memoguard.core.analysis.annotations import NONE_TYPE, AnnotationResolver
from memoguard.core.analysis.symbols import ModuleSymbols
from memoguard.core.stability.brand import (
    HOOK_CONTRACTS,
    stabilize_callback,
    stabilize_value,
    unbrand,
)
from memoguard.domain.constants import (
    CAST_NAMES,
    MEMO_WRAPPER_NAMES,
    PRIMITIVE_BUILTIN_CALLS,
    STATE_HOOK,
)
from memoguard.domain.errors import ContractViolation
from memoguard.domain.types import (
    ElementType,
    FunctionType,
    ObjectType,
    PrimitiveType,
    TypeDescriptor,
)

logger = logging.getLogger(__name__)

FunctionLike = Union[ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda]

_CONSTRUCTOR_CALLS = {"dict": "dict", "list": "list", "set": "set", "tuple": "tuple",
                      "frozenset": "frozenset", "object": "object"}


# -----------------------------------------------------------------------------
# SCOPES
# -----------------------------------------------------------------------------

class Scope:
    """
    Name bindings of one function, lambda, class or module body.

    `sequences` remembers the element descriptors of names bound to list or
    tuple literals so that `deps = [a, b]; use_effect(fn, deps)` is checked.
    """

    def __init__(self, parent: Optional["Scope"] = None) -> None:
        self.parent = parent
        self.bindings: Dict[str, Optional[TypeDescriptor]] = {}
        self.sequences: Dict[str, List[Tuple[ast.expr, Optional[TypeDescriptor]]]] = {}

    def bind(self, name: str, descriptor: Optional[TypeDescriptor]) -> None:
        self.bindings[name] = descriptor
        self.sequences.pop(name, None)

    def bind_sequence(self, name: str, elements: List[Tuple[ast.expr, Optional[TypeDescriptor]]]) -> None:
        self.sequences[name] = elements

    def lookup(self, name: str) -> Tuple[bool, Optional[TypeDescriptor]]:
        scope: Optional[Scope] = self
        while scope is not None:
            if name in scope.bindings:
                return True, scope.bindings[name]
            scope = scope.parent
        return False, None

    def lookup_sequence(self, name: str) -> Optional[List[Tuple[ast.expr, Optional[TypeDescriptor]]]]:
        scope: Optional[Scope] = self
        while scope is not None:
            if name in scope.bindings:
                return scope.sequences.get(name)
            scope = scope.parent
        return None


# -----------------------------------------------------------------------------
# INFERENCE
# -----------------------------------------------------------------------------

class ExpressionTyper:
    """
    Infer descriptors for expressions within a module.

    Args:
        symbols: Module declarations.
        resolver: Annotation resolver for the same module.
        element_modules: Names whose attribute calls build elements (html.div).
        element_factories: Calls that build elements from a component (create_element).
    """

    def __init__(
            self,
            symbols: ModuleSymbols,
            resolver: AnnotationResolver,
            element_modules: Iterable[str],
            element_factories: Iterable[str],
    ) -> None:
        self.symbols = symbols
        self.resolver = resolver
        self.element_modules = set(element_modules)
        self.element_factories = set(element_factories)

    def infer(self, node: Optional[ast.expr], scope: Scope) -> Optional[TypeDescriptor]:
        """Infer the descriptor of an expression; None when unknown."""
        if node is None:
            return None
        method = getattr(self, f"_infer_{type(node).__name__}", None)
        if method is None:
            return None
        return method(node, scope)

    def function_descriptor(self, node: FunctionLike, scope: Scope) -> FunctionType:
        """Descriptor of a def or lambda: positional arity range and return type."""
        arity, min_arity = _positional_range(node.args)

        if isinstance(node, ast.Lambda):
            inner = Scope(scope)
            for name in _param_names(node.args):
                inner.bind(name, None)
            returns = self.infer(node.body, inner)
        elif node.returns is not None:
            returns = self.resolver.resolve(node.returns)
        else:
            returns = self._infer_returns(node, scope)
        return FunctionType(arity=arity, returns=returns, min_arity=min_arity)

    def sequence_elements(
            self,
            node: ast.expr,
            scope: Scope,
    ) -> Optional[List[Tuple[ast.expr, Optional[TypeDescriptor]]]]:
        """Elements of a list/tuple literal, or of a name bound to one."""
        if isinstance(node, (ast.List, ast.Tuple)):
            return [(e, None if isinstance(e, ast.Starred) else self.infer(e, scope)) for e in node.elts]
        if isinstance(node, ast.Name):
            return scope.lookup_sequence(node.id)
        return None

    def state_pair(self, call: ast.Call, scope: Scope) -> Tuple[Optional[TypeDescriptor], FunctionType]:
        """Descriptors of (value, setter) returned by use_state(initial)."""
        initial = call.args[0] if call.args else None
        value = self.infer(initial, scope)
        if isinstance(initial, ast.Lambda):
            value = self.function_descriptor(initial, scope).returns
        return value, FunctionType(arity=1)

    # -------------------------------------------------------------------------
    # NODE HANDLERS
    # -------------------------------------------------------------------------

    def _infer_Constant(self, node: ast.Constant, scope: Scope) -> Optional[TypeDescriptor]:
        if node.value is None:
            return NONE_TYPE
        if node.value is Ellipsis:
            return None
        return PrimitiveType(type(node.value).__name__)

    def _infer_JoinedStr(self, node: ast.JoinedStr, scope: Scope) -> TypeDescriptor:
        return PrimitiveType("str")

    def _infer_Dict(self, node: ast.Dict, scope: Scope) -> TypeDescriptor:
        fields: List[Tuple[str, TypeDescriptor]] = []
        for key, value in zip(node.keys, node.values):
            if isinstance(key, ast.Constant) and isinstance(key.value, str):
                inferred = self.infer(value, scope)
                if inferred is not None:
                    fields.append((key.value, inferred))
        return ObjectType(name="dict", fields=tuple(fields))

    def _infer_List(self, node: ast.List, scope: Scope) -> TypeDescriptor:
        return ObjectType(name="list", items=self._common(node.elts, scope))

    def _infer_Set(self, node: ast.Set, scope: Scope) -> TypeDescriptor:
        return ObjectType(name="set", items=self._common(node.elts, scope))

    def _infer_Tuple(self, node: ast.Tuple, scope: Scope) -> TypeDescriptor:
        fields = []
        for i, e in enumerate(node.elts):
            inferred = self.infer(e, scope)
            if inferred is not None:
                fields.append((str(i), inferred))
        return ObjectType(name="tuple", fields=tuple(fields))

    def _infer_ListComp(self, node: ast.ListComp, scope: Scope) -> TypeDescriptor:
        return ObjectType(name="list")

    def _infer_SetComp(self, node: ast.SetComp, scope: Scope) -> TypeDescriptor:
        return ObjectType(name="set")

    def _infer_DictComp(self, node: ast.DictComp, scope: Scope) -> TypeDescriptor:
        return ObjectType(name="dict")

    def _infer_GeneratorExp(self, node: ast.GeneratorExp, scope: Scope) -> TypeDescriptor:
        return ObjectType(name="generator")

    def _infer_Lambda(self, node: ast.Lambda, scope: Scope) -> TypeDescriptor:
        return self.function_descriptor(node, scope)

    def _infer_Name(self, node: ast.Name, scope: Scope) -> Optional[TypeDescriptor]:
        found, descriptor = scope.lookup(node.id)
        if found:
            return descriptor

        func = self.symbols.functions.get(node.id)
        if func is not None:
            return self.function_descriptor(func, scope)
        if node.id in self.symbols.classes:
            return ObjectType(name="type", callable=True)
        return None

    def _infer_Attribute(self, node: ast.Attribute, scope: Scope) -> Optional[TypeDescriptor]:
        owner = self.infer(node.value, scope)
        if owner is None:
            return None
        # Members of a stabilized object are not themselves stabilized.
        inner = unbrand(owner)
        if isinstance(inner, ObjectType):
            return inner.field(node.attr)
        return None

    def _infer_Subscript(self, node: ast.Subscript, scope: Scope) -> Optional[TypeDescriptor]:
        owner = self.infer(node.value, scope)
        inner = unbrand(owner) if owner is not None else None
        if not isinstance(inner, ObjectType):
            return None
        key = node.slice
        if isinstance(key, ast.Constant) and isinstance(key.value, (str, int)):
            found = inner.field(str(key.value))
            if found is not None:
                return found
        if isinstance(key, ast.Slice):
            return inner
        return inner.items

    def _infer_BinOp(self, node: ast.BinOp, scope: Scope) -> Optional[TypeDescriptor]:
        left = self.infer(node.left, scope)
        right = self.infer(node.right, scope)
        if isinstance(left, PrimitiveType) and isinstance(right, PrimitiveType):
            if left.kind == right.kind:
                return left
            if {left.kind, right.kind} <= {"int", "float", "bool"}:
                return PrimitiveType("float" if "float" in (left.kind, right.kind) else "int")
            return None
        if isinstance(node.op, ast.Add) and isinstance(unbrand(left) if left else None, ObjectType):
            # Concatenation builds a fresh container.
            return ObjectType(name=unbrand(left).name)
        return None

    def _infer_UnaryOp(self, node: ast.UnaryOp, scope: Scope) -> Optional[TypeDescriptor]:
        if isinstance(node.op, ast.Not):
            return PrimitiveType("bool")
        operand = self.infer(node.operand, scope)
        return operand if isinstance(operand, PrimitiveType) else None

    def _infer_BoolOp(self, node: ast.BoolOp, scope: Scope) -> Optional[TypeDescriptor]:
        values = [self.infer(v, scope) for v in node.values]
        if all(isinstance(v, PrimitiveType) for v in values):
            return _merge_primitives(values)
        return None

    def _infer_Compare(self, node: ast.Compare, scope: Scope) -> TypeDescriptor:
        return PrimitiveType("bool")

    def _infer_IfExp(self, node: ast.IfExp, scope: Scope) -> Optional[TypeDescriptor]:
        body = self.infer(node.body, scope)
        orelse = self.infer(node.orelse, scope)
        if body is not None and body == orelse:
            return body
        if isinstance(body, PrimitiveType) and isinstance(orelse, PrimitiveType):
            return _merge_primitives([body, orelse])
        return None

    def _infer_NamedExpr(self, node: ast.NamedExpr, scope: Scope) -> Optional[TypeDescriptor]:
        return self.infer(node.value, scope)

    def _infer_Await(self, node: ast.Await, scope: Scope) -> None:
        return None

    def _infer_Call(self, node: ast.Call, scope: Scope) -> Optional[TypeDescriptor]:
        name = self.symbols.call_name(node.func)
        if name is None:
            return None

        if name in CAST_NAMES and len(node.args) == 2:
            # A cast never certifies stability; the value keeps its own type.
            return self.infer(node.args[1], scope)

        contract = HOOK_CONTRACTS.get(name)
        if contract is not None and contract.stabilizes:
            return self.hook_result(node, contract.stabilizes, scope)
        if contract is not None:
            return NONE_TYPE

        if name == STATE_HOOK:
            value, setter = self.state_pair(node, scope)
            fields = (("0", value), ("1", setter)) if value is not None else (("1", setter),)
            return ObjectType(name="tuple", fields=fields)

        if name in MEMO_WRAPPER_NAMES:
            return ObjectType(name="MemoizedComponent", callable=True)

        if self._builds_element(node, name):
            return ElementType()

        if isinstance(node.func, ast.Name):
            return self._infer_named_call(node.func.id, name, scope)
        return None

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def hook_result(self, node: ast.Call, kind: str, scope: Scope) -> Optional[TypeDescriptor]:
        """Result descriptor of use_memo/use_callback; None on contract violation."""
        fn_node = node.args[0] if node.args else _keyword(node, ("function", "callback", "compute", "fn"))
        deps_node = node.args[1] if len(node.args) > 1 else _keyword(node, ("dependencies", "deps"))

        fn = self.infer(fn_node, scope) if fn_node is not None else None
        if fn is None:
            fn = FunctionType(arity=0 if kind == "value" else None)

        deps: Optional[List[Optional[TypeDescriptor]]] = None
        if deps_node is not None and not _is_none(deps_node):
            elements = self.sequence_elements(deps_node, scope)
            deps = [d for _, d in elements] if elements is not None else []

        try:
            if kind == "value":
                return stabilize_value(fn, deps)
            return stabilize_callback(fn, deps)
        except ContractViolation as e:
            logger.debug(f"Hook contract violation at line {node.lineno}: {e}")
            return None

    def _builds_element(self, node: ast.Call, name: str) -> bool:
        if name in self.element_factories:
            return True
        if name in self.symbols.components:
            return True
        func = node.func
        return (
            isinstance(func, ast.Attribute)
            and isinstance(func.value, ast.Name)
            and func.value.id in self.element_modules
        )

    def _infer_named_call(self, local: str, name: str, scope: Scope) -> Optional[TypeDescriptor]:
        found, bound = scope.lookup(local)
        if found:
            inner = unbrand(bound) if bound is not None else None
            if isinstance(inner, FunctionType):
                return inner.returns
            return None

        if name in PRIMITIVE_BUILTIN_CALLS:
            return PrimitiveType(PRIMITIVE_BUILTIN_CALLS[name])
        if name in _CONSTRUCTOR_CALLS:
            return ObjectType(name=_CONSTRUCTOR_CALLS[name])
        if name in self.symbols.classes:
            return self.resolver.resolve(ast.Name(id=name, ctx=ast.Load()))

        func = self.symbols.functions.get(name)
        if func is not None and func.returns is not None:
            return self.resolver.resolve(func.returns)
        return None

    def _infer_returns(self, node: FunctionLike, scope: Scope) -> Optional[TypeDescriptor]:
        inner = Scope(scope)
        for name in _param_names(node.args):
            inner.bind(name, None)

        found: List[Optional[TypeDescriptor]] = []
        for ret in _own_returns(node):
            found.append(self.infer(ret.value, inner) if ret.value is not None else NONE_TYPE)
        if not found:
            return NONE_TYPE
        first = found[0]
        if first is not None and all(f == first for f in found):
            return first
        return None

    def _common(self, elts: List[ast.expr], scope: Scope) -> Optional[TypeDescriptor]:
        if not elts or any(isinstance(e, ast.Starred) for e in elts):
            return None
        inferred = [self.infer(e, scope) for e in elts]
        first = inferred[0]
        if first is not None and all(i == first for i in inferred):
            return first
        return None


# -----------------------------------------------------------------------------
# MODULE HELPERS
# -----------------------------------------------------------------------------

def _positional_range(args: ast.arguments) -> Tuple[Optional[int], Optional[int]]:
    """(arity, min_arity) of a parameter list; min_arity is None when no defaults apply."""
    positional = len(args.posonlyargs) + len(args.args)
    required = positional - len(args.defaults)
    if args.vararg is not None:
        return None, required or None
    if required == positional:
        return positional, None
    return positional, required


def _param_names(args: ast.arguments) -> List[str]:
    names = [a.arg for a in args.posonlyargs + args.args + args.kwonlyargs]
    if args.vararg:
        names.append(args.vararg.arg)
    if args.kwarg:
        names.append(args.kwarg.arg)
    return names


def _own_returns(node: FunctionLike) -> List[ast.Return]:
    """Return statements of a def, excluding nested defs, lambdas and classes."""
    out: List[ast.Return] = []
    stack: List[ast.AST] = list(getattr(node, "body", []))
    while stack:
        current = stack.pop()
        if isinstance(current, ast.Return):
            out.append(current)
            continue
        if isinstance(current, (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda, ast.ClassDef)):
            continue
        stack.extend(ast.iter_child_nodes(current))
    return out


def _keyword(node: ast.Call, names: Tuple[str, ...]) -> Optional[ast.expr]:
    for kw in node.keywords:
        if kw.arg in names:
            return kw.value
    return None


def _is_none(node: ast.expr) -> bool:
    return isinstance(node, ast.Constant) and node.value is None


def _merge_primitives(values: List[Optional[TypeDescriptor]]) -> PrimitiveType:
    kinds: List[str] = []
    for v in values:
        for k in v.kind.split(" | "):
            if k not in kinds:
                kinds.append(k)
    return PrimitiveType(" | ".join(kinds))
