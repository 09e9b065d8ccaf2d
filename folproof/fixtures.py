"""Concrete finite groups (and non-groups) for model checks."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .group_theory import G, H, star
from .helpers import var
from .models import Structure, set_theory_structure
from .terms import Var


def table(carrier: Iterable[Hashable], law: Callable[[Any, Any], Any]) -> frozenset:
    """The graph {((a, b), a·b)} of ``law`` on ``carrier``."""
    elements = tuple(carrier)
    return frozenset(((a, b), law(a, b)) for a in elements for b in elements)


@dataclass(frozen=True)
class GroupFixture:
    name: str
    carrier: frozenset
    operation: frozenset
    identity: Hashable | None = None
    subgroup: frozenset | None = None

    @property
    def is_group(self) -> bool:
        return self.identity is not None

    def structure(self) -> Structure:
        return set_theory_structure(self.carrier)

    def env(self, **elements: Any) -> dict[Var, Any]:
        """An assignment of G and * (and H, if any) plus named elements."""
        env: dict[Var, Any] = {G: self.carrier, star: self.operation}
        if self.subgroup is not None:
            env[H] = self.subgroup
        env.update({var(name): value for name, value in elements.items()})
        return env

    def op(self, a: Hashable, b: Hashable) -> Hashable:
        for (x, y), result in self.operation:
            if (x, y) == (a, b):
                return result
        raise KeyError((a, b))


def cyclic_group(n: int) -> GroupFixture:
    carrier = frozenset(range(n))
    return GroupFixture(f"Z{n}", carrier, table(carrier, lambda a, b: (a + b) % n), identity=0)


def klein_four() -> GroupFixture:
    carrier = frozenset(range(4))
    return GroupFixture("V4", carrier, table(carrier, lambda a, b: a ^ b), identity=0)


def two_element_group() -> GroupFixture:
    """{a, b} with a·a = a, a·b = b, b·a = b, b·b = a."""
    law: Mapping[tuple[str, str], str] = {
        ("a", "a"): "a",
        ("a", "b"): "b",
        ("b", "a"): "b",
        ("b", "b"): "a",
    }
    carrier = frozenset({"a", "b"})
    return GroupFixture("two_element", carrier, table(carrier, lambda x, y: law[x, y]), identity="a")


def two_element_non_group() -> GroupFixture:
    """{a, b} with the constant law x·y = a: associative, but without identity."""
    carrier = frozenset({"a", "b"})
    return GroupFixture("constant_law", carrier, table(carrier, lambda x, y: "a"))


def cyclic_with_subgroup() -> GroupFixture:
    """Z4 together with its subgroup {0, 2}."""
    z4 = cyclic_group(4)
    return GroupFixture(
        "Z4>{0,2}", z4.carrier, z4.operation, identity=0, subgroup=frozenset({0, 2})
    )


def all_groups() -> tuple[GroupFixture, ...]:
    return (
        cyclic_group(1),
        cyclic_group(3),
        cyclic_group(4),
        klein_four(),
        two_element_group(),
    )
