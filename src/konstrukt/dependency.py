"""
Records the dependencies that users declare between constructs. Declarations are stored as-is; expanding them into
dependencies between resources is the job of :mod:`konstrukt.resolver`.
"""

from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from konstrukt.tree import Construct

Declaration = tuple["Construct", "Construct"]
""" A declared dependency as a `(source, target)` pair. The source depends on the target. """


class DependencyStore:
    """
    An insertion-ordered set of declared dependencies between arbitrary constructs.

    Nothing is validated here. A declaration may point at the source itself, at a construct that contains no
    resources or at a construct of another tree; such declarations simply contribute nothing once resolved.
    """

    def __init__(self) -> None:
        self._declarations: dict[Declaration, None] = {}

    def __len__(self) -> int:
        return len(self._declarations)

    def __iter__(self) -> Iterator[Declaration]:
        return iter(self._declarations)

    def __contains__(self, declaration: object) -> bool:
        return declaration in self._declarations

    def declare(self, source: "Construct", target: "Construct") -> None:
        """
        Record that *source* depends on *target*. Declaring the same pair again has no effect.
        """

        self._declarations.setdefault((source, target), None)

    def list(self) -> list[Declaration]:
        """
        Return all declarations in the order they were first declared.
        """

        return list(self._declarations)


def declare_dependency(source: "Construct", target: "Construct") -> None:
    """
    Declare that *source* depends on *target*. The declaration is recorded in the store of the source's tree.
    """

    source.dependencies.declare(source, target)
