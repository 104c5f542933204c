from copy import deepcopy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, cast

from konstrukt.names import to_dns_label
from konstrukt.registry import owner_of
from konstrukt.tools.types import Manifest
from konstrukt.tree import Construct

if TYPE_CHECKING:
    from konstrukt.chart import Chart

RESERVED_KEYS = frozenset({"apiVersion", "kind", "metadata"})
""" Top-level manifest keys that are managed by the :class:`ApiObject` and can not be part of its body. """


@dataclass
class ObjectMetadata:
    """
    Kubernetes object metadata.
    """

    name: str | None = None
    namespace: str | None = None
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None

    extra: dict[str, Any] = field(default_factory=dict)
    """ Any other metadata fields (e.g. `finalizers`, `ownerReferences`), passed through verbatim. """

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "ObjectMetadata":
        data = dict(data)
        return ObjectMetadata(
            name=data.pop("name", None),
            namespace=data.pop("namespace", None),
            labels=data.pop("labels", None),
            annotations=data.pop("annotations", None),
            extra=data,
        )

    def add_label(self, key: str, value: str) -> None:
        if self.labels is None:
            self.labels = {}
        self.labels[key] = value

    def add_annotation(self, key: str, value: str) -> None:
        if self.annotations is None:
            self.annotations = {}
        self.annotations[key] = value

    def dump(self) -> dict[str, Any]:
        """
        Dump the metadata into its manifest representation, omitting unset fields.
        """

        result: dict[str, Any] = {}
        if self.name is not None:
            result["name"] = self.name
        if self.namespace is not None:
            result["namespace"] = self.namespace
        if self.labels:
            result["labels"] = dict(self.labels)
        if self.annotations:
            result["annotations"] = dict(self.annotations)
        result.update(deepcopy(self.extra))
        return result


class ApiObject(Construct):
    """
    A construct that represents exactly one Kubernetes manifest. Every object belongs to the nearest :class:`Chart`
    above it and is synthesized into that chart's manifest.

    The object's name is taken from the metadata if given, otherwise it is generated from the construct path (see
    :func:`konstrukt.names.to_dns_label`). Either way it is assigned once and does not change afterwards.

    Everything except the `apiVersion`, `kind` and `metadata` is kept in the :attr:`body` and is emitted verbatim.
    """

    is_resource = True

    def __init__(
        self,
        scope: Construct,
        id: str,
        *,
        api_version: str,
        kind: str,
        metadata: ObjectMetadata | dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> None:
        chart = cast("Chart", scope) if scope.is_output_unit else owner_of(scope)
        if chart is None:
            raise ValueError(f"ApiObject '{scope}/{id}' must be defined within a Chart")

        if body is not None and (reserved := RESERVED_KEYS & body.keys()):
            raise ValueError(f"ApiObject '{scope}/{id}' body must not contain the reserved keys {sorted(reserved)}")

        super().__init__(scope, id)

        if metadata is None:
            metadata = ObjectMetadata()
        elif isinstance(metadata, dict):
            metadata = ObjectMetadata.from_dict(metadata)
        else:
            metadata = deepcopy(metadata)
        if metadata.name is None:
            metadata.name = to_dns_label(self)

        self.chart: "Chart" = chart
        self.api_version = api_version
        self.kind = kind
        self.metadata = metadata
        self.body: dict[str, Any] = deepcopy(body) if body is not None else {}

    def __repr__(self) -> str:
        return f"ApiObject({self.path!r}, kind={self.kind!r}, name={self.name!r})"

    @classmethod
    def from_manifest(cls, scope: Construct, id: str, manifest: Manifest) -> "ApiObject":
        """
        Create an object from an existing manifest. The name in the manifest's metadata is preserved as-is.
        """

        if not isinstance(manifest, dict):
            raise ValueError(f"Expected a mapping for '{scope}/{id}', got {type(manifest).__name__}")
        if not manifest.get("apiVersion") or not manifest.get("kind"):
            raise ValueError(f"Manifest for '{scope}/{id}' must have an 'apiVersion' and a 'kind'")

        return cls(
            scope,
            id,
            api_version=manifest["apiVersion"],
            kind=manifest["kind"],
            metadata=ObjectMetadata.from_dict(manifest.get("metadata") or {}),
            body={key: value for key, value in manifest.items() if key not in RESERVED_KEYS},
        )

    @property
    def name(self) -> str:
        assert self.metadata.name is not None
        return self.metadata.name

    def to_manifest(self) -> Manifest:
        """
        Render the object into a manifest. The namespace and labels of the owning chart are applied to the metadata,
        unless the object sets them itself.
        """

        metadata = self.metadata.dump()
        if self.chart.namespace is not None:
            metadata.setdefault("namespace", self.chart.namespace)
        if self.chart.labels:
            metadata["labels"] = {**self.chart.labels, **metadata.get("labels", {})}

        return Manifest(
            {
                "apiVersion": self.api_version,
                "kind": self.kind,
                "metadata": metadata,
                **deepcopy(self.body),
            }
        )

