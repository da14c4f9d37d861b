from __future__ import annotations

"""
Annotation Resolution.

Turns Python type annotations found in analyzed source into type
descriptors. Resolution is best effort: anything the resolver cannot pin
down (Any, mixed unions, unknown generics) resolves to None, which marks
the field as unchecked rather than guessing a category.
"""

import ast
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from memoguard.core.stability.brand import OPAQUE_VALUE, name_stabilized
from memoguard.core.stability.schema import TransformPolicy, transform
from memoguard.core.analysis.symbols import ClassInfo, ModuleSymbols
from memoguard.domain.constants import (
    BRAND_ANNOTATION,
    CALLABLE_NAMES,
    CONTAINER_NAMES,
    MAPPING_NAMES,
    OPTIONAL_NAMES,
    PRIMITIVE_NAMES,
    PROPS_ANNOTATION,
    TRANSPARENT_WRAPPERS,
    UNION_NAMES,
    UNKNOWN_NAMES,
)
from memoguard.domain.types import (
    ElementType,
    FunctionType,
    ObjectType,
    PrimitiveType,
    Schema,
    TypeDescriptor,
)

logger = logging.getLogger(__name__)

NONE_TYPE = PrimitiveType("None")

_CONTAINER_ALIASES: Dict[str, str] = {
    "List": "list", "Tuple": "tuple", "Set": "set", "FrozenSet": "frozenset",
    "Dict": "dict", "DefaultDict": "dict", "OrderedDict": "dict",
}


@dataclass(frozen=True)
class PropsShape:
    """Schema of a props class plus the bookkeeping call-site checks need."""
    schema: Schema
    field_names: Tuple[str, ...]
    required: FrozenSet[str]
    nullable: FrozenSet[str]


class AnnotationResolver:
    """
    Resolve annotation expressions against one module's declarations.

    Args:
        symbols: Declarations collected from the module.
        element_types: Annotation names denoting renderable nodes.
        policy: Policy used when expanding StabilizedProps[...].
    """

    def __init__(
            self,
            symbols: ModuleSymbols,
            element_types: Iterable[str],
            policy: TransformPolicy,
    ) -> None:
        self._symbols = symbols
        self._element_types = set(element_types)
        self._policy = policy
        self._resolving: Set[str] = set()

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------

    def resolve(self, node: Optional[ast.expr]) -> Optional[TypeDescriptor]:
        """Resolve an annotation expression; None when it cannot be pinned down."""
        if node is None:
            return None

        if isinstance(node, ast.Constant):
            if node.value is None:
                return NONE_TYPE
            if isinstance(node.value, str):
                return self._resolve_forward_ref(node.value)
            return None

        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            return self._union(self._flatten_bitor(node))

        if isinstance(node, (ast.Name, ast.Attribute)):
            name = self._symbols.call_name(node)
            return self._resolve_name(name) if name else None

        if isinstance(node, ast.Subscript):
            return self._resolve_subscript(node)

        return None

    def is_optional(self, node: Optional[ast.expr]) -> bool:
        """True when the annotation admits None."""
        if node is None:
            return False
        if isinstance(node, ast.Constant):
            if node.value is None:
                return True
            if isinstance(node.value, str):
                parsed = _parse_forward_ref(node.value)
                return parsed is not None and self.is_optional(parsed)
            return False
        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            return any(self.is_optional(n) for n in self._flatten_bitor(node))
        if isinstance(node, ast.Subscript):
            base = self._symbols.call_name(node.value)
            if base in OPTIONAL_NAMES:
                return True
            if base in UNION_NAMES:
                return any(self.is_optional(n) for n in _slice_elements(node))
            if base in TRANSPARENT_WRAPPERS:
                args = _slice_elements(node)
                return bool(args) and self.is_optional(args[0])
        return False

    def props_shape(self, class_name: str, stabilized: bool = False) -> Optional[PropsShape]:
        """
        Schema of a props class (TypedDict, dataclass or plain annotated class).

        Args:
            class_name: Module class name.
            stabilized: Apply the transform to the schema.

        Returns:
            Optional[PropsShape]: None when the class is unknown or has no fields.
        """
        info = self._symbols.classes.get(class_name)
        if info is None or not info.fields:
            return None

        schema: Schema = {}
        nullable: Set[str] = set()
        for decl in info.fields:
            resolved = self.resolve(decl.annotation)
            if resolved is not None:
                schema[decl.name] = resolved
            if self.is_optional(decl.annotation):
                nullable.add(decl.name)

        if stabilized or info.stabilized_props:
            schema = transform(schema, self._policy)

        return PropsShape(
            schema=schema,
            field_names=tuple(d.name for d in info.fields),
            required=frozenset(d.name for d in info.fields if d.required),
            nullable=frozenset(nullable),
        )

    def props_class_of(self, node: Optional[ast.expr]) -> Optional[Tuple[str, bool]]:
        """
        Identify a props-class annotation.

        Returns:
            Optional[Tuple[str, bool]]: (class name, explicitly stabilized) for
            `Cls` or `StabilizedProps[Cls]`, else None.
        """
        if isinstance(node, ast.Constant) and isinstance(node.value, str):
            node = _parse_forward_ref(node.value)
        if isinstance(node, ast.Subscript) and self._symbols.call_name(node.value) == PROPS_ANNOTATION:
            args = _slice_elements(node)
            name = self._symbols.call_name(args[0]) if args else None
            if name in self._symbols.classes:
                return name, True
            return None
        if isinstance(node, (ast.Name, ast.Attribute)):
            name = self._symbols.call_name(node)
            if name in self._symbols.classes and self._symbols.classes[name].fields:
                return name, False
        return None

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _resolve_forward_ref(self, text: str) -> Optional[TypeDescriptor]:
        parsed = _parse_forward_ref(text)
        return self.resolve(parsed) if parsed is not None else None

    def _resolve_name(self, name: str) -> Optional[TypeDescriptor]:
        if name in PRIMITIVE_NAMES:
            return NONE_TYPE if name in ("None", "NoneType") else PrimitiveType(name)
        if name in self._element_types:
            return ElementType(name)
        if name in CALLABLE_NAMES:
            return FunctionType()
        if name in UNKNOWN_NAMES or name in (BRAND_ANNOTATION, PROPS_ANNOTATION):
            return None
        if name in CONTAINER_NAMES:
            return ObjectType(name=_CONTAINER_ALIASES.get(name, name))
        if name in ("type", "Type"):
            return ObjectType(name="type", callable=True)

        info = self._symbols.classes.get(name)
        if info is not None:
            return self._resolve_class(info)
        return ObjectType(name=name)

    def _resolve_class(self, info: ClassInfo) -> TypeDescriptor:
        # Enum members are singletons compared by identity-stable value.
        if info.is_enum:
            return PrimitiveType(info.name)
        if info.name in self._resolving:
            return ObjectType(name=info.name, callable=info.is_callable)

        self._resolving.add(info.name)
        try:
            fields: List[Tuple[str, TypeDescriptor]] = []
            for decl in info.fields:
                resolved = self.resolve(decl.annotation)
                if resolved is not None:
                    fields.append((decl.name, resolved))
        finally:
            self._resolving.discard(info.name)
        return ObjectType(name=info.name, fields=tuple(fields), callable=info.is_callable)

    def _resolve_subscript(self, node: ast.Subscript) -> Optional[TypeDescriptor]:
        base = self._symbols.call_name(node.value)
        args = _slice_elements(node)
        if not base or not args:
            return None

        if base in OPTIONAL_NAMES:
            return self._union([args[0], ast.Constant(value=None)])
        if base in UNION_NAMES:
            return self._union(args)
        if base == "Literal":
            return _literal(args)
        if base in TRANSPARENT_WRAPPERS:
            return self.resolve(args[0])

        if base in CALLABLE_NAMES:
            return self._callable(args)

        if base == BRAND_ANNOTATION:
            inner = self.resolve(args[0])
            return name_stabilized(inner if inner is not None else OPAQUE_VALUE)

        if base == PROPS_ANNOTATION:
            name = self._symbols.call_name(args[0])
            shape = self.props_shape(name, stabilized=True) if name else None
            if shape is None:
                return None
            return ObjectType(name=name, fields=tuple(shape.schema.items()))

        if base in ("type", "Type"):
            return ObjectType(name="type", callable=True)

        if base in MAPPING_NAMES:
            return ObjectType(name=_CONTAINER_ALIASES.get(base, base), items=self.resolve(args[-1]))

        if base in CONTAINER_NAMES:
            return self._sequence(_CONTAINER_ALIASES.get(base, base), args)

        if base in self._symbols.classes:
            return self._resolve_class(self._symbols.classes[base])
        return None

    def _callable(self, args: List[ast.expr]) -> FunctionType:
        arity: Optional[int] = None
        if isinstance(args[0], ast.List):
            arity = len(args[0].elts)
        returns = self.resolve(args[1]) if len(args) > 1 else None
        return FunctionType(arity=arity, returns=returns)

    def _sequence(self, name: str, args: List[ast.expr]) -> ObjectType:
        if name == "tuple":
            if len(args) == 2 and isinstance(args[1], ast.Constant) and args[1].value is Ellipsis:
                return ObjectType(name=name, items=self.resolve(args[0]))
            members = [self.resolve(a) for a in args]
            fields = tuple((str(i), m) for i, m in enumerate(members) if m is not None)
            return ObjectType(name=name, fields=fields)
        return ObjectType(name=name, items=self.resolve(args[0]))

    def _union(self, members: List[ast.expr]) -> Optional[TypeDescriptor]:
        resolved = [self.resolve(m) for m in members]
        if any(r is None for r in resolved):
            return None

        non_none = [r for r in resolved if r != NONE_TYPE]
        if not non_none:
            return NONE_TYPE

        if all(isinstance(r, PrimitiveType) for r in resolved):
            kinds: List[str] = []
            for r in resolved:
                for k in r.kind.split(" | "):
                    if k not in kinds:
                        kinds.append(k)
            return PrimitiveType(" | ".join(kinds))

        distinct = []
        for r in non_none:
            if r not in distinct:
                distinct.append(r)
        if len(distinct) == 1:
            return distinct[0]
        if all(isinstance(r, ElementType) for r in distinct):
            return distinct[0]

        # Mixed unions are left unchecked.
        return None

    def _flatten_bitor(self, node: ast.expr) -> List[ast.expr]:
        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            return self._flatten_bitor(node.left) + self._flatten_bitor(node.right)
        return [node]


# -----------------------------------------------------------------------------
# MODULE HELPERS
# -----------------------------------------------------------------------------

def _slice_elements(node: ast.Subscript) -> List[ast.expr]:
    sl = node.slice
    if isinstance(sl, ast.Tuple):
        return list(sl.elts)
    return [sl]


def _parse_forward_ref(text: str) -> Optional[ast.expr]:
    try:
        return ast.parse(text.strip(), mode="eval").body
    except SyntaxError:
        logger.debug(f"Unparseable forward reference: {text!r}")
        return None


def _literal(args: List[ast.expr]) -> Optional[PrimitiveType]:
    kinds: List[str] = []
    for a in args:
        if not isinstance(a, ast.Constant):
            return None
        kind = "None" if a.value is None else type(a.value).__name__
        if kind not in kinds:
            kinds.append(kind)
    return PrimitiveType(" | ".join(kinds))
