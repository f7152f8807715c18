"""Roblox tree paths (virtual paths)."""

import enum
import itertools


class Parent(enum.Enum):
    """Step-up marker inside a relative tree path."""

    PARENT = ".."

    def __repr__(self) -> str:
        return "PARENT"


PARENT = Parent.PARENT

RbxPath = tuple[str, ...]
RelativeRbxPath = tuple[str | Parent, ...]


def starts_with(a: RbxPath, b: RbxPath) -> bool:
    """Compare element-wise up to the shorter length."""
    return all(x == y for x, y in zip(a, b))


def common_length(a: RbxPath, b: RbxPath) -> int:
    return sum(1 for _ in itertools.takewhile(lambda pair: pair[0] == pair[1], zip(a, b)))


def relative(rbx_from: RbxPath, rbx_to: RbxPath) -> RelativeRbxPath:
    """Address `rbx_to` from `rbx_from`: PARENT markers, then a descent."""
    diff = common_length(rbx_from, rbx_to)
    ups: RelativeRbxPath = (PARENT,) * (len(rbx_from) - diff)
    return ups + tuple(rbx_to[diff:])
