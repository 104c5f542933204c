import hashlib
import re

import pytest

from konstrukt.names import to_dns_label
from konstrukt.tree import Construct


def _hash(path: str) -> str:
    return hashlib.sha256(path.encode()).hexdigest()[:8]


def test__to_dns_label__joins_normalized_path_components() -> None:
    root = Construct(None, "")
    construct = Construct(Construct(root, "My Chart"), "Web_Server")

    assert to_dns_label(construct) == f"my-chart-web-server-{_hash('My Chart/Web_Server')}"


def test__to_dns_label__omits_hidden_and_repeated_ids() -> None:
    root = Construct(None, "")
    chart = Construct(root, "web")
    construct = Construct(Construct(Construct(chart, "Default"), "web"), "Resource")

    assert to_dns_label(construct) == f"web-{_hash('web/Default/web/Resource')}"


def test__to_dns_label__truncates_but_keeps_the_hash() -> None:
    root = Construct(None, "")
    construct = Construct(Construct(root, "a" * 50), "b" * 50)

    label = to_dns_label(construct)
    assert len(label) == 63
    assert label.endswith("-" + _hash(construct.path))
    assert re.fullmatch(r"[a-z0-9]([a-z0-9-]*[a-z0-9])?", label)


def test__to_dns_label__is_unique_for_different_paths() -> None:
    root = Construct(None, "")
    a = Construct(Construct(root, "a"), "b-c")
    b = Construct(Construct(root, "a-b"), "c")

    assert to_dns_label(a) != to_dns_label(b)


def test__to_dns_label__rejects_too_small_max_length() -> None:
    with pytest.raises(ValueError):
        to_dns_label(Construct(Construct(None, ""), "a"), max_length=8)
