from __future__ import annotations

"""
Module Checker.

Walks a parsed module scope by scope, infers the types of values flowing
into render-skip components, hook dependency lists and Stabilized[...]
parameters, and converts verifier mismatches into located diagnostics.
This is the single enforcement point of the stability contract.
"""

import ast
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from memoguard.core.analysis.annotations import AnnotationResolver
from memoguard.core.analysis.inference import ExpressionTyper, Scope
from memoguard.core.analysis.symbols import ModuleSymbols, collect_symbols, is_memo_call
from memoguard.core.stability.brand import HOOK_CONTRACTS, Branded, HookContract
from memoguard.core.stability.classifier import classify
from memoguard.core.stability.schema import (
    ComponentSignature,
    TransformPolicy,
    register_render_skip,
)
from memoguard.core.stability.verifier import (
    UNRESOLVED,
    Mismatch,
    check_comparator,
    check_dependency_list,
    check_props,
    is_assignable,
)
from memoguard.domain.diagnostics import SEVERITY_ERROR, SEVERITY_WARNING, Diagnostic
from memoguard.domain.errors import FileError
from memoguard.domain.types import Category, FunctionType, ObjectType, describe

logger = logging.getLogger(__name__)

_DEPS_EXPECTED = "Sequence[Primitive | Stabilized[object]]"


@dataclass(frozen=True)
class CheckedComponent:
    """A component whose call sites are verified, with its required schema."""
    signature: ComponentSignature
    schema: Dict[str, Any]


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def analyze_source(
        source: str,
        path: str = "<string>",
        config: Optional[Mapping[str, Any]] = None,
) -> List[Diagnostic]:
    """
    Check one module's source text.

    Args:
        source: Python source code.
        path: Label used in diagnostics.
        config: Validated configuration (defaults when None).

    Returns:
        List[Diagnostic]: Findings in source order.

    Raises:
        SyntaxError: If the source cannot be parsed.
    """
    cfg = _effective(config)
    tree = ast.parse(source, filename=path)
    checker = ModuleChecker(tree, path, cfg)
    return checker.run()


def analyze_file(
        file_path: str,
        rel_path: str,
        config: Optional[Mapping[str, Any]] = None,
) -> Tuple[List[Diagnostic], Optional[FileError]]:
    """
    Check a file on disk. Read and parse failures are reported, not raised.

    Returns:
        Tuple[List[Diagnostic], Optional[FileError]]: Findings and the file error, if any.
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Could not read '{os.path.basename(file_path)}': {e}")
        return [], FileError(rel_path, f"Could not read file: {e}")

    try:
        return analyze_source(source, rel_path, config), None
    except SyntaxError as e:
        logger.debug(f"Syntax error in {file_path}: {e}")
        where = f" (line {e.lineno})" if e.lineno is not None else ""
        return [], FileError(rel_path, f"Invalid syntax: {e.msg}{where}")
    except (RecursionError, MemoryError, ValueError) as e:
        # Deeply nested expressions exhaust the parser or the visitor.
        logger.debug(f"Could not analyze {file_path}: {e!r}")
        return [], FileError(rel_path, f"Could not analyze file: {type(e).__name__}: {e}")


# -----------------------------------------------------------------------------
# MODULE CHECKER
# -----------------------------------------------------------------------------

class ModuleChecker(ast.NodeVisitor):
    """
    Scope-aware walker over one module.

    Module-level bindings are established before any function body is
    walked, since bodies run after the module has been fully executed.
    """

    def __init__(self, tree: ast.Module, path: str, cfg: Mapping[str, Any]) -> None:
        self.tree = tree
        self.path = path
        self.policy = TransformPolicy.parse(cfg.get("policy", "strict"))
        self.unresolved = str(cfg.get("unresolved", "warning"))

        self.symbols: ModuleSymbols = collect_symbols(tree, cfg.get("component_decorators", ["component"]))
        self.resolver = AnnotationResolver(self.symbols, cfg.get("element_types", []), self.policy)
        self.typer = ExpressionTyper(
            self.symbols,
            self.resolver,
            cfg.get("element_modules", []),
            cfg.get("element_factories", []),
        )
        self.element_factories = set(cfg.get("element_factories", []))

        self.scope = Scope()
        self.diagnostics: List[Diagnostic] = []
        self.checked: Dict[str, CheckedComponent] = {}
        self.stabilized_params: Dict[str, ComponentSignature] = {}

    def run(self) -> List[Diagnostic]:
        self._register_components()
        self.visit(self.tree)
        self.diagnostics.sort(key=lambda d: (d.line, d.column))
        return self.diagnostics

    # -------------------------------------------------------------------------
    # COMPONENT REGISTRY
    # -------------------------------------------------------------------------

    def _register_components(self) -> None:
        for reg in self.symbols.registrations:
            signature = self._signature_of(reg.target)
            if signature is None:
                logger.debug(f"memo target '{reg.target}' is not a module component; skipped")
                continue

            memoized = register_render_skip(signature, self.policy)
            checked = CheckedComponent(signature, memoized.props)
            self.checked[reg.bound_name] = checked

            if reg.comparator is not None:
                self._check_comparator(memoized.props, reg.comparator, reg.node)

        # Library-author path: props classes marked for stabilization.
        for name in sorted(self.symbols.components):
            if name in self.checked:
                continue
            signature = self._signature_of(name)
            if signature is not None and self._declares_stabilized_props(name):
                self.checked[name] = CheckedComponent(signature, dict(signature.props))

        for name, func in self.symbols.functions.items():
            if name in self.checked:
                continue
            signature = self._function_signature(name, func, "function")
            if any(isinstance(d, Branded) for d in signature.props.values()):
                self.stabilized_params[name] = signature

    def _signature_of(self, name: str) -> Optional[ComponentSignature]:
        func = self.symbols.functions.get(name)
        if func is not None:
            return self._function_signature(name, func, "function")

        info = self.symbols.classes.get(name)
        if info is None:
            return None
        init = info.method("__init__")
        if init is not None:
            return self._function_signature(name, init, "class", skip_first=True)

        shape = self.resolver.props_shape(name)
        if shape is None:
            return ComponentSignature(name=name, kind="class")
        return ComponentSignature(
            name=name,
            kind="class",
            props=dict(shape.schema),
            field_names=shape.field_names,
            required=shape.required,
            nullable=shape.nullable,
        )

    def _function_signature(
            self,
            name: str,
            func: ast.AST,
            kind: str,
            skip_first: bool = False,
    ) -> ComponentSignature:
        args: ast.arguments = func.args
        positional = list(args.posonlyargs) + list(args.args)
        defaults_start = len(positional) - len(args.defaults)
        if skip_first and positional:
            positional = positional[1:]
            defaults_start -= 1

        params: List[Tuple[ast.arg, bool]] = [
            (a, i >= defaults_start) for i, a in enumerate(positional)
        ]
        params += [(a, d is not None) for a, d in zip(args.kwonlyargs, args.kw_defaults)]

        # A single `props: PropsClass` parameter spreads the class fields.
        if len(params) == 1 and params[0][0].arg == "props":
            props_class = self.resolver.props_class_of(params[0][0].annotation)
            if props_class is not None:
                shape = self.resolver.props_shape(*props_class)
                if shape is not None:
                    return ComponentSignature(
                        name=name,
                        kind=kind,
                        props=dict(shape.schema),
                        field_names=shape.field_names,
                        required=shape.required,
                        accepts_extra=args.kwarg is not None,
                        nullable=shape.nullable,
                    )

        props: Dict[str, Any] = {}
        nullable = set()
        for arg, _ in params:
            resolved = self.resolver.resolve(arg.annotation)
            if resolved is not None:
                props[arg.arg] = resolved
            if self.resolver.is_optional(arg.annotation):
                nullable.add(arg.arg)

        return ComponentSignature(
            name=name,
            kind=kind,
            props=props,
            field_names=tuple(a.arg for a, _ in params),
            required=frozenset(a.arg for a, has_default in params if not has_default),
            accepts_extra=args.kwarg is not None,
            nullable=frozenset(nullable),
        )

    def _declares_stabilized_props(self, name: str) -> bool:
        func = self.symbols.functions.get(name)
        if func is None:
            return False
        all_args = func.args.posonlyargs + func.args.args + func.args.kwonlyargs
        if len(all_args) != 1 or all_args[0].arg != "props":
            return False
        props_class = self.resolver.props_class_of(all_args[0].annotation)
        if props_class is None:
            return False
        class_name, explicit = props_class
        return explicit or self.symbols.classes[class_name].stabilized_props

    # -------------------------------------------------------------------------
    # SCOPES AND BINDINGS
    # -------------------------------------------------------------------------

    def visit_Module(self, node: ast.Module) -> None:
        deferred: List[ast.stmt] = []
        for stmt in node.body:
            if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
                self._bind_definition(stmt)
                deferred.append(stmt)
            else:
                self.visit(stmt)

        for stmt in deferred:
            self._walk_definition(stmt)

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        self._bind_definition(node)
        self._walk_definition(node)

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:
        self._bind_definition(node)
        self._walk_definition(node)

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        self._bind_definition(node)
        self._walk_definition(node)

    def visit_Lambda(self, node: ast.Lambda) -> None:
        for default in node.args.defaults + [d for d in node.args.kw_defaults if d is not None]:
            self.visit(default)
        outer = self.scope
        self.scope = Scope(outer)
        for arg in node.args.posonlyargs + node.args.args + node.args.kwonlyargs:
            self.scope.bind(arg.arg, None)
        try:
            self.visit(node.body)
        finally:
            self.scope = outer

    def visit_ListComp(self, node: ast.ListComp) -> None:
        self._visit_comprehension(node, [node.elt])

    def visit_SetComp(self, node: ast.SetComp) -> None:
        self._visit_comprehension(node, [node.elt])

    def visit_GeneratorExp(self, node: ast.GeneratorExp) -> None:
        self._visit_comprehension(node, [node.elt])

    def visit_DictComp(self, node: ast.DictComp) -> None:
        self._visit_comprehension(node, [node.key, node.value])

    def visit_Assign(self, node: ast.Assign) -> None:
        self.visit(node.value)
        for target in node.targets:
            self._bind_target(target, node.value)

    def visit_AnnAssign(self, node: ast.AnnAssign) -> None:
        if node.value is not None:
            self.visit(node.value)
        if not isinstance(node.target, ast.Name):
            return

        declared = self.resolver.resolve(node.annotation)
        actual = self.typer.infer(node.value, self.scope) if node.value is not None else None

        # Annotating a value as Stabilized[...] does not make it so.
        if isinstance(declared, Branded) and node.value is not None:
            if actual is None:
                self._emit(node.value, Mismatch(node.target.id, describe(declared), "unknown", "unresolved"), "assignment")
            elif not is_assignable(actual, declared):
                self._emit(node.value, Mismatch(node.target.id, describe(declared), describe(actual)), "assignment")
                self.scope.bind(node.target.id, actual)
                return

        self.scope.bind(node.target.id, declared if declared is not None else actual)

    def visit_NamedExpr(self, node: ast.NamedExpr) -> None:
        self.visit(node.value)
        self._bind_target(node.target, node.value)

    def visit_For(self, node: ast.For) -> None:
        self.visit(node.iter)
        owner = self.typer.infer(node.iter, self.scope)
        item = owner.items if isinstance(owner, ObjectType) else None
        self._bind_names(node.target, item)
        for stmt in node.body + node.orelse:
            self.visit(stmt)

    visit_AsyncFor = visit_For

    def visit_With(self, node: ast.With) -> None:
        for item in node.items:
            self.visit(item.context_expr)
            if item.optional_vars is not None:
                self._bind_names(item.optional_vars, None)
        for stmt in node.body:
            self.visit(stmt)

    visit_AsyncWith = visit_With

    def visit_ExceptHandler(self, node: ast.ExceptHandler) -> None:
        if node.name:
            self.scope.bind(node.name, None)
        self.generic_visit(node)

    # -------------------------------------------------------------------------
    # CALL SITES
    # -------------------------------------------------------------------------

    def visit_Call(self, node: ast.Call) -> None:
        name = self.symbols.call_name(node.func)

        if name in HOOK_CONTRACTS:
            self._check_hook(node, HOOK_CONTRACTS[name])
        elif isinstance(node.func, ast.Name) and node.func.id in self.checked and not self._shadowed(node.func.id):
            self._check_component_call(node, self.checked[node.func.id])
        elif name in self.element_factories and node.args:
            self._check_element_factory(node)
        elif isinstance(node.func, ast.Name) and node.func.id in self.stabilized_params:
            self._check_stabilized_arguments(node, self.stabilized_params[node.func.id])

        if is_memo_call(node, self.symbols):
            # Registration is handled up front; only walk the comparator and extras.
            for arg in node.args[1:]:
                self.visit(arg)
            for kw in node.keywords:
                self.visit(kw.value)
            return

        self.generic_visit(node)

    def _check_hook(self, node: ast.Call, contract: HookContract) -> None:
        deps_node = _argument(node, contract.deps_index, contract.deps_keywords)

        if contract.stabilizes:
            fn_node = _argument(node, 0, ("function", "callback", "compute", "fn"))
            self._check_stabilizer_argument(node, fn_node, contract)

        if deps_node is None or (isinstance(deps_node, ast.Constant) and deps_node.value is None):
            if contract.deps_required:
                self._emit(node, Mismatch("deps", _DEPS_EXPECTED, "None"), "dependency-list")
            return

        elements = self.typer.sequence_elements(deps_node, self.scope)
        if elements is None:
            owner = self.typer.infer(deps_node, self.scope)
            if isinstance(owner, ObjectType) and owner.items is not None:
                for m in check_dependency_list([owner.items]):
                    self._emit(deps_node, m, "dependency-list")
            else:
                self._emit(deps_node, Mismatch("deps", _DEPS_EXPECTED, describe(owner), "unresolved"),
                           "dependency-list")
            return

        descriptors = [d for _, d in elements]
        for mismatch in check_dependency_list(descriptors):
            index = int(mismatch.field[5:-1])
            self._emit(elements[index][0], mismatch, "dependency-list")

    def _check_stabilizer_argument(
            self,
            call: ast.Call,
            fn_node: Optional[ast.expr],
            contract: HookContract,
    ) -> None:
        if fn_node is None:
            self._emit(call, Mismatch("fn", "Callable[..., Any]", "missing", "missing"), "callback")
            return
        fn = self.typer.infer(fn_node, self.scope)
        if fn is None:
            return
        if classify(fn) != Category.FUNCTION:
            self._emit(fn_node, Mismatch("fn", "Callable[..., Any]", describe(fn)), "callback")
        elif contract.stabilizes == "value" and isinstance(fn, FunctionType) and not fn.accepts(0):
            self._emit(fn_node, Mismatch("compute", "Callable[[], Any]", describe(fn)), "callback")

    def _check_component_call(self, node: ast.Call, component: CheckedComponent) -> None:
        sig = component.signature
        supplied: Dict[str, Tuple[ast.expr, Any]] = {}
        splat = False

        positional = list(node.args)
        # `Comp({"a": ...})` for props-class components.
        if (
                len(positional) == 1
                and isinstance(positional[0], ast.Dict)
                and "props" not in sig.field_names
        ):
            supplied.update(self._dict_entries(positional[0]))
            splat = None in positional[0].keys
            positional = []

        for value, field_name in zip(positional, sig.field_names):
            if isinstance(value, ast.Starred):
                splat = True
                break
            supplied[field_name] = (value, self.typer.infer(value, self.scope))

        for kw in node.keywords:
            if kw.arg is None:
                splat = True
                continue
            supplied[kw.arg] = (kw.value, self.typer.infer(kw.value, self.scope))

        self._verify_props(node, sig, component.schema, supplied, splat)

    def _check_element_factory(self, node: ast.Call) -> None:
        target = node.args[0]
        if not isinstance(target, ast.Name) or target.id not in self.checked or self._shadowed(target.id):
            return
        component = self.checked[target.id]

        supplied: Dict[str, Tuple[ast.expr, Any]] = {}
        splat = False
        props_node = node.args[1] if len(node.args) > 1 else None
        if isinstance(props_node, ast.Dict):
            supplied.update(self._dict_entries(props_node))
            splat = None in props_node.keys
        elif props_node is not None and not (isinstance(props_node, ast.Constant) and props_node.value is None):
            inferred = self.typer.infer(props_node, self.scope)
            if isinstance(inferred, ObjectType) and inferred.fields:
                supplied.update({k: (props_node, v) for k, v in inferred.fields})
            else:
                splat = True

        for kw in node.keywords:
            if kw.arg is None:
                splat = True
                continue
            supplied[kw.arg] = (kw.value, self.typer.infer(kw.value, self.scope))

        self._verify_props(node, component.signature, component.schema, supplied, splat)

    def _check_stabilized_arguments(self, node: ast.Call, sig: ComponentSignature) -> None:
        schema = {k: v for k, v in sig.props.items() if isinstance(v, Branded)}
        supplied: Dict[str, Tuple[ast.expr, Any]] = {}
        for value, field_name in zip(node.args, sig.field_names):
            if isinstance(value, ast.Starred):
                break
            if field_name in schema:
                supplied[field_name] = (value, self.typer.infer(value, self.scope))
        for kw in node.keywords:
            if kw.arg in schema:
                supplied[kw.arg] = (kw.value, self.typer.infer(kw.value, self.scope))

        actual = {k: v for k, (_, v) in supplied.items()}
        for mismatch in check_props(schema, actual, field_names=sig.field_names, accepts_extra=True):
            self._emit(supplied[mismatch.field][0], mismatch, "argument")

    def _verify_props(
            self,
            node: ast.Call,
            sig: ComponentSignature,
            schema: Mapping[str, Any],
            supplied: Dict[str, Tuple[ast.expr, Any]],
            splat: bool,
    ) -> None:
        actual = {k: v for k, (_, v) in supplied.items()}
        mismatches = check_props(
            schema,
            actual,
            field_names=sig.field_names,
            required=() if splat else sig.required,
            accepts_extra=sig.accepts_extra or splat,
            nullable=sig.nullable,
            component=sig.name,
        )
        for mismatch in mismatches:
            located = supplied[mismatch.field][0] if mismatch.field in supplied else node
            self._emit(located, mismatch, "props")

    def _check_comparator(self, schema: Mapping[str, Any], comparator: ast.expr, node: ast.AST) -> None:
        func: Optional[ast.AST] = comparator
        if isinstance(comparator, ast.Name):
            func = self.symbols.functions.get(comparator.id)
        if not isinstance(func, (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda)):
            return

        args = func.args
        params = list(args.posonlyargs) + list(args.args)
        annotations = [self._comparator_param(a) for a in params]
        names = tuple(a.arg for a in params) if len(params) == 2 else ("prev_props", "next_props")
        for mismatch in check_comparator(schema, annotations, names):
            self._emit(comparator, mismatch, "comparator")

    def _comparator_param(self, arg: ast.arg) -> Optional[Any]:
        if arg.annotation is None:
            return None
        props_class = self.resolver.props_class_of(arg.annotation)
        if props_class is not None:
            shape = self.resolver.props_shape(*props_class)
            if shape is not None:
                return ObjectType(name=props_class[0], fields=tuple(shape.schema.items()))
        resolved = self.resolver.resolve(arg.annotation)
        return resolved if resolved is not None else ObjectType(name="object")

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _bind_definition(self, node: ast.stmt) -> None:
        if isinstance(node, ast.ClassDef):
            self.scope.bind(node.name, ObjectType(name="type", callable=True))
        elif node.name in self.checked and self.scope.parent is None:
            self.scope.bind(node.name, ObjectType(name="MemoizedComponent", callable=True))
        else:
            self.scope.bind(node.name, self.typer.function_descriptor(node, self.scope))

    def _walk_definition(self, node: ast.stmt) -> None:
        for dec in node.decorator_list:
            if not (isinstance(dec, ast.Call) and is_memo_call(dec, self.symbols)):
                self.visit(dec)

        outer = self.scope
        if isinstance(node, ast.ClassDef):
            for base in node.bases:
                self.visit(base)
            self.scope = Scope(outer)
            try:
                for stmt in node.body:
                    self.visit(stmt)
            finally:
                self.scope = outer
            return

        args = node.args
        for default in args.defaults + [d for d in args.kw_defaults if d is not None]:
            self.visit(default)

        self.scope = Scope(outer)
        try:
            for arg in args.posonlyargs + args.args + args.kwonlyargs:
                self.scope.bind(arg.arg, self._parameter_type(arg))
            if args.vararg:
                self.scope.bind(args.vararg.arg, ObjectType(name="tuple"))
            if args.kwarg:
                self.scope.bind(args.kwarg.arg, ObjectType(name="dict"))
            for stmt in node.body:
                self.visit(stmt)
        finally:
            self.scope = outer

    def _parameter_type(self, arg: ast.arg) -> Optional[Any]:
        if arg.annotation is None:
            return None
        props_class = self.resolver.props_class_of(arg.annotation)
        if props_class is not None:
            shape = self.resolver.props_shape(*props_class)
            if shape is not None:
                return ObjectType(name=props_class[0], fields=tuple(shape.schema.items()))
        return self.resolver.resolve(arg.annotation)

    def _visit_comprehension(self, node: ast.AST, results: List[ast.expr]) -> None:
        outer = self.scope
        self.scope = Scope(outer)
        try:
            for gen in node.generators:
                self.visit(gen.iter)
                owner = self.typer.infer(gen.iter, self.scope)
                self._bind_names(gen.target, owner.items if isinstance(owner, ObjectType) else None)
                for cond in gen.ifs:
                    self.visit(cond)
            for expr in results:
                self.visit(expr)
        finally:
            self.scope = outer

    def _bind_target(self, target: ast.expr, value: ast.expr) -> None:
        if isinstance(target, ast.Name):
            self.scope.bind(target.id, self.typer.infer(value, self.scope))
            elements = self.typer.sequence_elements(value, self.scope) if isinstance(value, (ast.List, ast.Tuple)) else None
            if elements is not None:
                self.scope.bind_sequence(target.id, elements)
            return

        if isinstance(target, (ast.Tuple, ast.List)):
            if (
                    isinstance(value, ast.Call)
                    and self.symbols.call_name(value.func) == "use_state"
                    and len(target.elts) == 2
            ):
                state, setter = self.typer.state_pair(value, self.scope)
                self._bind_names(target.elts[0], state)
                self._bind_names(target.elts[1], setter)
                return

            if isinstance(value, (ast.Tuple, ast.List)) and len(value.elts) == len(target.elts):
                for sub_target, sub_value in zip(target.elts, value.elts):
                    self._bind_target(sub_target, sub_value)
                return

            owner = self.typer.infer(value, self.scope)
            for idx, sub_target in enumerate(target.elts):
                member = owner.field(str(idx)) if isinstance(owner, ObjectType) else None
                self._bind_names(sub_target, member)

    def _bind_names(self, target: ast.expr, descriptor: Optional[Any]) -> None:
        if isinstance(target, ast.Name):
            self.scope.bind(target.id, descriptor)
        elif isinstance(target, (ast.Tuple, ast.List)):
            for elt in target.elts:
                self._bind_names(elt, None)
        elif isinstance(target, ast.Starred):
            self._bind_names(target.value, None)

    def _dict_entries(self, node: ast.Dict) -> Dict[str, Tuple[ast.expr, Any]]:
        entries: Dict[str, Tuple[ast.expr, Any]] = {}
        for key, value in zip(node.keys, node.values):
            if isinstance(key, ast.Constant) and isinstance(key.value, str):
                entries[key.value] = (value, self.typer.infer(value, self.scope))
        return entries

    def _shadowed(self, name: str) -> bool:
        scope = self.scope
        while scope is not None and scope.parent is not None:
            if name in scope.bindings:
                return True
            scope = scope.parent
        return False

    def _emit(self, node: ast.AST, mismatch: Mismatch, site: str) -> None:
        if mismatch.code == UNRESOLVED:
            if self.unresolved == "ignore":
                return
            severity = SEVERITY_ERROR if self.unresolved == "error" else SEVERITY_WARNING
        else:
            severity = SEVERITY_ERROR

        self.diagnostics.append(Diagnostic(
            path=self.path,
            line=getattr(node, "lineno", 0),
            column=getattr(node, "col_offset", -1) + 1,
            code=mismatch.code,
            severity=severity,
            site=site,
            field=mismatch.field,
            expected=mismatch.expected,
            actual=mismatch.actual,
            message=mismatch.message_for(site),
        ))


# -----------------------------------------------------------------------------
# MODULE HELPERS
# -----------------------------------------------------------------------------

def _argument(node: ast.Call, index: int, keywords: Tuple[str, ...]) -> Optional[ast.expr]:
    for kw in node.keywords:
        if kw.arg in keywords:
            return kw.value
    if len(node.args) > index and not isinstance(node.args[index], ast.Starred):
        return node.args[index]
    return None


def _effective(config: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if config is not None:
        return config
    from memoguard.domain.config import get_default_config
    return get_default_config()


__all__ = [
    "ModuleChecker",
    "analyze_file",
    "analyze_source",
]
