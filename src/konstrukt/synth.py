from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from operator import attrgetter
from typing import TypeVar

from loguru import logger

from konstrukt.apiobject import ApiObject
from konstrukt.chart import Chart
from konstrukt.resolver import ResolvedGraph, resolve
from konstrukt.tools.types import Manifests
from konstrukt.toposort import CycleError, stable_toposort
from konstrukt.tree import Construct

C = TypeVar("C", bound=Construct)

_by_insertion_index = attrgetter("insertion_index")


@dataclass
class SynthesizedChart:
    """
    A chart and its objects in the order they are to be written.
    """

    index: int
    """ The position of the chart in the global order of all charts. """

    chart: Chart
    api_objects: list[ApiObject]

    def to_manifests(self) -> Manifests:
        return Manifests([obj.to_manifest() for obj in self.api_objects])


@dataclass
class Synthesis:
    """
    The result of synthesizing a construct tree.
    """

    charts: list[SynthesizedChart]
    """ All charts of the tree, dependencies first. """

    def to_manifests(self) -> Manifests:
        """
        Return the manifests of all charts, concatenated in chart order.
        """

        return Manifests([manifest for chart in self.charts for manifest in chart.to_manifests()])


def synthesize(root: Construct) -> Synthesis:
    """
    Synthesize the tree of *root*: resolve the declared dependencies, then order the charts and each chart's objects
    such that dependencies come first. Where dependencies don't dictate an order, the order in which the constructs
    were created is kept.

    Raises:
        CycleError: If the dependencies between the charts, or between the objects within one chart, form a cycle.
    """

    graph = resolve(root)
    charts = order_units(graph)
    logger.debug("Synthesized chart order: {}", [str(chart) for chart in charts])

    return Synthesis(
        [SynthesizedChart(index, chart, order_resources(graph, chart)) for index, chart in enumerate(charts)]
    )


def order_units(graph: ResolvedGraph) -> list[Chart]:
    """
    Order the output units of the graph by their inferred dependencies.
    """

    return _dependencies_first(graph.units, graph.unit_edges)


def order_resources(graph: ResolvedGraph, unit: Chart) -> list[ApiObject]:
    """
    Order the resources of a single output unit. Only the edges between the unit's own resources are considered.
    """

    return _dependencies_first(graph.resources[unit], graph.resource_edges[unit])


def _dependencies_first(nodes: Sequence[C], edges: Iterable[tuple[C, C]]) -> list[C]:
    """
    Sort *nodes* given edges that point from the dependent to its dependency. A :class:`CycleError` lists the cycle in
    that same direction, starting with the construct that was created first.
    """

    # The dependency has to come first, so the edges are reversed for sorting.
    try:
        return stable_toposort(nodes, [(target, source) for source, target in edges], key=_by_insertion_index)
    except CycleError as exc:
        cycle = exc.cycle[::-1]
        start = cycle.index(min(cycle, key=_by_insertion_index))
        raise CycleError(cycle[start:] + cycle[:start]) from None

