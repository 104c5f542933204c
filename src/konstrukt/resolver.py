"""
Resolves the dependencies declared between arbitrary constructs into dependencies between resources, and infers the
dependencies between output units from those.

Resolution happens in two separate phases:

1. :func:`expand_dependencies` turns every declaration `(A, B)` into edges from every resource below `A` to every
   resource below `B`.
2. :func:`partition_edges` splits the resulting resource edges into edges within an output unit and infers an edge
   between two output units for every resource edge that crosses from one unit into another.

All edges point from the dependent to its dependency, i.e. an edge `(a, b)` means that `a` depends on `b`.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from itertools import product

from loguru import logger

from konstrukt.apiobject import ApiObject
from konstrukt.chart import Chart
from konstrukt.dependency import Declaration
from konstrukt.registry import output_units, resources_of, unit_resources
from konstrukt.tree import Construct

ResourceEdge = tuple[ApiObject, ApiObject]
UnitEdge = tuple[Chart, Chart]


@dataclass
class ResolvedGraph:
    """
    The dependency graphs of a construct tree, ready to be ordered.
    """

    units: list[Chart]
    """ All output units of the tree, in tree order. """

    resources: dict[Chart, list[ApiObject]]
    """ The resources owned by each output unit, in tree order. """

    owners: dict[ApiObject, Chart]
    """ Maps every resource of the tree to the output unit that owns it. """

    resource_edges: dict[Chart, list[ResourceEdge]]
    """ For each output unit, the edges between its own resources. """

    unit_edges: list[UnitEdge]
    """ The edges between output units, inferred from resource edges that cross output units. """


def resolve(root: Construct) -> ResolvedGraph:
    """
    Resolve the dependencies declared in the tree of *root*.
    """

    units = output_units(root)
    resources = {unit: unit_resources(unit) for unit in units}
    owners = {resource: unit for unit, owned in resources.items() for resource in owned}

    edges = expand_dependencies(root.dependencies.list())
    resource_edges, unit_edges = partition_edges(edges, owners)

    logger.debug(
        "Resolved {} declaration(s) into {} resource edge(s) and {} output unit edge(s) across {} output unit(s)",
        len(root.dependencies),
        len(edges),
        len(unit_edges),
        len(units),
    )

    return ResolvedGraph(
        units=units,
        resources=resources,
        owners=owners,
        resource_edges={unit: resource_edges.get(unit, []) for unit in units},
        unit_edges=unit_edges,
    )


def expand_dependencies(declarations: Iterable[Declaration]) -> list[ResourceEdge]:
    """
    Expand each declared dependency `(A, B)` into edges from every resource below `A` to every resource below `B`.

    Pairs of a resource with itself (possible if `A` and `B` overlap) are dropped, as are duplicate edges. A
    declaration where either side contains no resources expands to nothing.
    """

    edges: dict[ResourceEdge, None] = {}
    for source, target in declarations:
        sources = resources_of(source)
        targets = resources_of(target)
        if not sources or not targets:
            logger.debug(
                "Dependency of '{}' on '{}' has no effect, {} contains no resources",
                source,
                target,
                "the former" if not sources else "the latter",
            )
            continue
        for edge in product(sources, targets):
            if edge[0] is not edge[1]:
                edges.setdefault(edge, None)
    return list(edges)


def partition_edges(
    edges: Iterable[ResourceEdge],
    owners: dict[ApiObject, Chart],
) -> tuple[dict[Chart, list[ResourceEdge]], list[UnitEdge]]:
    """
    Split resource edges into the edges within each output unit and the inferred edges between output units.

    An edge between two resources of the same unit is kept for that unit only. An edge between resources of different
    units is represented solely by an edge between the two units. Edges that involve a resource without an owner in
    *owners* (e.g. a resource of another tree) are dropped.
    """

    resource_edges: dict[Chart, list[ResourceEdge]] = {}
    unit_edges: dict[UnitEdge, None] = {}

    for source, target in edges:
        source_unit = owners.get(source)
        target_unit = owners.get(target)
        if source_unit is None or target_unit is None:
            logger.trace("Ignoring edge '{}' -> '{}' to a resource outside of the tree", source, target)
            continue
        if source_unit is target_unit:
            resource_edges.setdefault(source_unit, []).append((source, target))
        else:
            unit_edges.setdefault((source_unit, target_unit), None)

    return resource_edges, list(unit_edges)
