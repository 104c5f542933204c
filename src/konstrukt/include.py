from pathlib import Path
from typing import cast

import yaml
from loguru import logger

from konstrukt.apiobject import ApiObject
from konstrukt.registry import owner_of
from konstrukt.tools.types import Manifest, Manifests
from konstrukt.tree import PATH_SEPARATOR, Construct

HTTP_TIMEOUT_SECONDS = 30


class Include(Construct):
    """
    Includes existing Kubernetes manifests from a local YAML file or an HTTP(S) URL. Every document is turned into an
    :class:`ApiObject` below this construct, so other constructs can depend on the whole set of included objects by
    depending on the :class:`Include` itself.

    Names from the documents are kept as they are. Including the same document twice therefore results in two objects
    with the same name; this is not checked.
    """

    def __init__(self, scope: Construct, id: str, *, url: str | Path) -> None:
        if not scope.is_output_unit and owner_of(scope) is None:
            raise ValueError(f"Include '{scope}/{id}' must be defined within a Chart")

        # All documents are loaded and checked before anything is attached to the tree.
        manifests = load_manifests(url)
        child_ids: list[str] = []
        for index, manifest in enumerate(manifests):
            child_id = _child_id(manifest, index)
            while child_id in child_ids:
                child_id = f"{child_id}-{index}"
            child_ids.append(child_id)

        super().__init__(scope, id)
        self.url = str(url)
        logger.debug("Including {} manifest(s) from '{}' into '{}'", len(manifests), self.url, self)

        for child_id, manifest in zip(child_ids, manifests):
            ApiObject.from_manifest(self, child_id, manifest)

    @property
    def api_objects(self) -> list[ApiObject]:
        return [cast(ApiObject, child) for child in self.children if child.is_resource]


def load_manifests(url: str | Path) -> Manifests:
    """
    Load all non-empty YAML documents from a local file or an HTTP(S) URL. Every document must be a mapping with an
    `apiVersion` and a `kind`.
    """

    if isinstance(url, str) and url.startswith(("http://", "https://")):
        import requests

        logger.debug("Downloading manifests from '{}'", url)
        response = requests.get(url, timeout=HTTP_TIMEOUT_SECONDS)
        response.raise_for_status()
        text = response.text
    else:
        text = Path(url).read_text()

    result = Manifests([])
    for document in yaml.safe_load_all(text):
        if document is None:
            continue
        if not isinstance(document, dict):
            raise ValueError(f"Expected a mapping in '{url}', got {type(document).__name__}")
        if not document.get("apiVersion") or not document.get("kind"):
            raise ValueError(f"Manifest #{len(result)} in '{url}' must have an 'apiVersion' and a 'kind'")
        if not isinstance(document.get("metadata") or {}, dict):
            raise ValueError(f"Manifest #{len(result)} in '{url}' has a 'metadata' that is not a mapping")
        result.append(Manifest(document))
    return result


def _child_id(manifest: Manifest, index: int) -> str:
    kind = str(manifest.get("kind", "object")).lower()
    metadata = manifest.get("metadata") or {}
    name = metadata.get("name")
    if name is None:
        child_id = f"{kind}-{index}"
    elif namespace := metadata.get("namespace"):
        child_id = f"{namespace}-{name}-{kind}"
    else:
        child_id = f"{name}-{kind}"
    return child_id.replace(PATH_SEPARATOR, "-")
