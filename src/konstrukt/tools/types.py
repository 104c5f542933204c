from typing import Any, NewType


Manifest = NewType("Manifest", dict[str, Any])
""" A Kubernetes manifest as it is written to the output, i.e. a single YAML document. """

Manifests = NewType("Manifests", list[Manifest])
""" An ordered list of Kubernetes manifests. """
