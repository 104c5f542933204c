from typing import TYPE_CHECKING

from konstrukt.tools.types import Manifests
from konstrukt.tree import Construct

if TYPE_CHECKING:
    from konstrukt.apiobject import ApiObject


class Chart(Construct):
    """
    An output unit. All :class:`ApiObject`s below a chart are synthesized together into one manifest file, except for
    those that belong to a nested chart.

    Charts are never ordered explicitly. If an object in one chart depends on an object in another chart, the other
    chart is synthesized first.
    """

    is_output_unit = True

    def __init__(
        self,
        scope: Construct,
        id: str,
        *,
        namespace: str | None = None,
        labels: dict[str, str] | None = None,
    ) -> None:
        super().__init__(scope, id)

        self.namespace = namespace
        """ The namespace to apply to all objects in the chart that do not specify one. """

        self.labels: dict[str, str] = dict(labels or {})
        """ Labels to apply to all objects in the chart. Labels set on an object take precedence. """

    @property
    def api_objects(self) -> list["ApiObject"]:
        """
        The objects owned by this chart, in tree order.
        """

        from konstrukt.registry import unit_resources

        return unit_resources(self)

    def to_manifests(self) -> Manifests:
        """
        Render the chart's objects in the order they are synthesized in.
        """

        from konstrukt.synth import synthesize

        for synthesized in synthesize(self.root).charts:
            if synthesized.chart is self:
                return synthesized.to_manifests()
        raise AssertionError(f"Chart '{self}' was not synthesized")
