"""
Generates Kubernetes object names from construct paths.
"""

import hashlib
import re

from konstrukt.tree import Construct

MAX_DNS_LABEL_LENGTH = 63
HASH_LENGTH = 8

HIDDEN_IDS = frozenset({"Default", "Resource"})
""" Construct ids that are left out of generated names. """


def to_dns_label(construct: Construct, max_length: int = MAX_DNS_LABEL_LENGTH, delimiter: str = "-") -> str:
    """
    Generate a name for the construct that is a valid DNS label (RFC 1123) and unique within the tree.

    The name is made up of the normalized ids along the construct's path, followed by a short hash of the full path.
    Ids named `Default` or `Resource` are omitted, as are repeated neighbouring components. If the result exceeds
    *max_length*, the human readable prefix is truncated while the hash is always kept.

    Example: the construct at `my-chart/Web Server/Deployment` is named `my-chart-web-server-deployment-<hash>`.
    """

    if max_length <= HASH_LENGTH:
        raise ValueError(f"max_length must be greater than {HASH_LENGTH}, got {max_length}")

    components: list[str] = []
    for scope in construct.scopes:
        if not scope.id or scope.id in HIDDEN_IDS:
            continue
        component = _normalize(scope.id, delimiter)
        if component and (not components or components[-1] != component):
            components.append(component)

    digest = hashlib.sha256(construct.path.encode()).hexdigest()[:HASH_LENGTH]
    if not components:
        return digest

    prefix = delimiter.join(components)
    available = max_length - HASH_LENGTH - len(delimiter)
    if len(prefix) > available:
        prefix = prefix[:available].rstrip(delimiter)
    return f"{prefix}{delimiter}{digest}"


def _normalize(value: str, delimiter: str) -> str:
    return re.sub(r"[^a-z0-9]+", delimiter, value.lower()).strip(delimiter)
