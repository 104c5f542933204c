"""
The construct tree. Every member of the tree is a :class:`Construct` with at most one parent (its *scope*), which is
assigned at construction time and never changes afterwards.
"""

import itertools
from collections.abc import Iterator
from typing import ClassVar

from konstrukt.dependency import DependencyStore

PATH_SEPARATOR = "/"

_insertion_counter = itertools.count()


class Construct:
    """
    Base class for all members of the construct tree. A construct without a scope is the root of a tree.
    """

    is_resource: ClassVar[bool] = False
    """ Whether the construct represents exactly one emittable manifest entry. """

    is_output_unit: ClassVar[bool] = False
    """ Whether the resources below the construct are synthesized together into one manifest. """

    def __init__(self, scope: "Construct | None", id: str) -> None:
        if scope is not None:
            if not id:
                raise ValueError(f"Only the root construct can have an empty id (scope: '{scope}')")
            if PATH_SEPARATOR in id:
                raise ValueError(f"Construct id {id!r} must not contain {PATH_SEPARATOR!r}")
            if id in scope._children:
                raise ValueError(f"There is already a construct with id {id!r} in '{scope}'")

        self._scope = scope
        self._id = id
        self._children: dict[str, Construct] = {}
        self._dependencies: DependencyStore | None = None

        self.insertion_index = next(_insertion_counter)
        """ A creation-time counter, used to break ties when ordering constructs. """

        if scope is not None:
            scope._children[id] = self

    def __str__(self) -> str:
        return self.path or "<root>"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"

    @property
    def id(self) -> str:
        return self._id

    @property
    def scope(self) -> "Construct | None":
        return self._scope

    @property
    def children(self) -> list["Construct"]:
        """
        The direct children of this construct, in the order they were added.
        """

        return list(self._children.values())

    @property
    def scopes(self) -> list["Construct"]:
        """
        All constructs from the root down to (and including) this construct.
        """

        result: list[Construct] = []
        current: Construct | None = self
        while current is not None:
            result.append(current)
            current = current._scope
        result.reverse()
        return result

    @property
    def root(self) -> "Construct":
        return self.scopes[0]

    @property
    def path(self) -> str:
        """
        The path of the construct relative to the root, e.g. `my-chart/web/Deployment`. The root's path is empty.
        """

        return PATH_SEPARATOR.join(c.id for c in self.scopes if c._scope is not None)

    def find_child(self, id: str) -> "Construct":
        try:
            return self._children[id]
        except KeyError:
            raise KeyError(f"No child with id {id!r} in '{self}'") from None

    def try_find_child(self, id: str) -> "Construct | None":
        return self._children.get(id)

    def walk(self) -> Iterator["Construct"]:
        """
        Iterate over this construct and all of its descendants in pre-order.
        """

        yield self
        for child in self._children.values():
            yield from child.walk()

    @property
    def dependencies(self) -> DependencyStore:
        """
        The dependency declarations of the tree this construct belongs to. There is one store per tree, owned by the
        root construct.
        """

        root = self.root
        if root._dependencies is None:
            root._dependencies = DependencyStore()
        return root._dependencies

    def add_dependency(self, *targets: "Construct") -> None:
        """
        Declare that all resources below this construct depend on all resources below each of the *targets*.
        """

        for target in targets:
            self.dependencies.declare(self, target)
