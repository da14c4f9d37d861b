from __future__ import annotations

"""
Stability Declarations.

Annotation helpers consumed by the memoguard analyzer. They have no
runtime behavior: `Stabilized[T]` evaluates to `T` with an inert marker
attached, and `require_stabilized_props` returns the class unchanged.

    from memoguard.declarations import Stabilized, StabilizedProps

    def on_select(handler: Stabilized[Callable[[str], None]]) -> None: ...

    def are_equal(prev: StabilizedProps[RowProps], nxt: StabilizedProps[RowProps]) -> bool: ...
"""

from typing import Annotated, TypeVar

T = TypeVar("T")
P = TypeVar("P")


class _Marker:
    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<memoguard {self.name}>"


_BRAND = _Marker("stabilized")
_PROPS = _Marker("stabilized-props")

# Value produced by use_memo/use_callback (or another Stabilized[...] value).
Stabilized = Annotated[T, _BRAND]

# Props class with every function/object field required to be Stabilized.
StabilizedProps = Annotated[P, _PROPS]


def require_stabilized_props(cls: type) -> type:
    """Mark a props class so every component taking it is checked at call sites."""
    return cls


MEMOGUARD_LOADED = True

__all__ = [
    "MEMOGUARD_LOADED",
    "Stabilized",
    "StabilizedProps",
    "require_stabilized_props",
]
