from __future__ import annotations

"""
Analyzer Vocabulary.

Names the analyzer recognizes in analyzed source code. Hook and wrapper
names are matched on the final segment of the call target after import
aliases are resolved, so `reactpy.use_memo` and `from x import use_memo as
um` both count.
"""

from typing import Dict, FrozenSet

CONFIG_FILE_NAME = "memoguard.json"
CURRENT_CONFIG_VERSION = "1.0.0"

# Framework primitives
STATE_HOOK = "use_state"
MEMO_WRAPPER_NAMES: FrozenSet[str] = frozenset({"memo"})
COMPARATOR_KEYWORDS: FrozenSet[str] = frozenset({"are_equal", "props_are_equal", "compare"})

# Declaration surface (memoguard.declarations)
BRAND_ANNOTATION = "Stabilized"
PROPS_ANNOTATION = "StabilizedProps"
STABILIZED_PROPS_DECORATOR = "require_stabilized_props"

# Typing helpers
CAST_NAMES: FrozenSet[str] = frozenset({"cast"})
OPTIONAL_NAMES: FrozenSet[str] = frozenset({"Optional"})
UNION_NAMES: FrozenSet[str] = frozenset({"Union"})
TRANSPARENT_WRAPPERS: FrozenSet[str] = frozenset({
    "Annotated", "Final", "ClassVar", "Required", "NotRequired", "ReadOnly",
})

PRIMITIVE_NAMES: FrozenSet[str] = frozenset({
    "str", "int", "float", "bool", "bytes", "complex", "None", "NoneType",
})
PRIMITIVE_BUILTIN_CALLS: Dict[str, str] = {
    "str": "str", "int": "int", "float": "float", "bool": "bool", "bytes": "bytes",
    "complex": "complex", "len": "int", "repr": "str", "ord": "int", "chr": "str",
    "hash": "int", "id": "int", "round": "int", "format": "str",
}
CONTAINER_NAMES: FrozenSet[str] = frozenset({
    "list", "List", "tuple", "Tuple", "set", "Set", "frozenset", "FrozenSet",
    "Sequence", "MutableSequence", "Iterable", "Collection",
    "dict", "Dict", "Mapping", "MutableMapping", "DefaultDict", "OrderedDict",
})
MAPPING_NAMES: FrozenSet[str] = frozenset({
    "dict", "Dict", "Mapping", "MutableMapping", "DefaultDict", "OrderedDict",
})
SEQUENCE_NAMES: FrozenSet[str] = frozenset({
    "list", "List", "tuple", "Tuple", "Sequence", "MutableSequence", "Iterable",
})
CALLABLE_NAMES: FrozenSet[str] = frozenset({"Callable"})
ENUM_BASES: FrozenSet[str] = frozenset({"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"})
UNKNOWN_NAMES: FrozenSet[str] = frozenset({"Any"})
