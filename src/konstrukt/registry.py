"""
Finds the resources (:class:`ApiObject`s) and output units (:class:`Chart`s) in a construct tree. All functions here
are pure functions of the tree at the time they are called.
"""

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, cast

from konstrukt.tree import Construct

if TYPE_CHECKING:
    from konstrukt.apiobject import ApiObject
    from konstrukt.chart import Chart


def resources_of(construct: Construct) -> list["ApiObject"]:
    """
    Return all resources at or below *construct* in pre-order, children in insertion order. A resource is listed
    before the resources below it. Resources of nested output units are included.
    """

    return [cast("ApiObject", c) for c in _walk(construct, descend=lambda c: True) if c.is_resource]


def unit_resources(unit: "Chart") -> list["ApiObject"]:
    """
    Return the resources owned by the output unit *unit*. Unlike :func:`resources_of`, this does not descend into
    nested output units, as those own their resources themselves.
    """

    return [
        cast("ApiObject", c)
        for c in _walk(unit, descend=lambda c: c is unit or not c.is_output_unit)
        if c.is_resource
    ]


def output_units(root: Construct) -> list["Chart"]:
    """
    Return all output units at or below *root* in pre-order.
    """

    return [cast("Chart", c) for c in root.walk() if c.is_output_unit]


def owner_of(construct: Construct) -> "Chart | None":
    """
    Return the output unit that owns *construct*, i.e. its nearest output unit ancestor.
    """

    scope = construct.scope
    while scope is not None:
        if scope.is_output_unit:
            return cast("Chart", scope)
        scope = scope.scope
    return None


def _walk(construct: Construct, descend: Callable[[Construct], bool]) -> Iterator[Construct]:
    if not descend(construct):
        return
    yield construct
    for child in construct.children:
        yield from _walk(child, descend)
