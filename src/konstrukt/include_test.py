from pathlib import Path
from textwrap import dedent
from unittest.mock import MagicMock, patch

import pytest

from konstrukt.apiobject import ApiObject
from konstrukt.app import App
from konstrukt.chart import Chart
from konstrukt.include import Include, load_manifests
from konstrukt.synth import synthesize

MANIFESTS = dedent(
    """
    apiVersion: v1
    kind: Namespace
    metadata:
      name: monitoring
    ---
    apiVersion: apps/v1
    kind: Deployment
    metadata:
      name: grafana
      namespace: monitoring
    spec:
      replicas: 1
    ---
    ---
    apiVersion: v1
    kind: ConfigMap
    metadata:
      generateName: dashboards-
    """
)


@pytest.fixture
def manifests_file(tmp_path: Path) -> Path:
    file = tmp_path / "manifests.yaml"
    file.write_text(MANIFESTS)
    return file


def test__Include__creates_an_object_per_document(manifests_file: Path) -> None:
    app = App()
    include = Include(Chart(app, "monitoring"), "upstream", url=manifests_file)

    assert [child.id for child in include.children] == [
        "monitoring-namespace",
        "monitoring-grafana-deployment",
        "configmap-2",
    ]
    assert [obj.name for obj in include.api_objects] == ["monitoring", "grafana", include.api_objects[2].name]
    assert include.api_objects[2].name.startswith("monitoring-upstream-configmap-2-")
    assert include.api_objects[1].to_manifest() == {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": "grafana", "namespace": "monitoring"},
        "spec": {"replicas": 1},
    }


def test__Include__same_document_twice_keeps_duplicate_names(manifests_file: Path) -> None:
    app = App()
    chart = Chart(app, "chart")
    first = Include(chart, "first", url=str(manifests_file))
    second = Include(chart, "second", url=str(manifests_file))

    names = [obj.name for obj in synthesize(app).charts[0].api_objects]
    assert names.count("grafana") == 2
    assert first.api_objects[1].name == second.api_objects[1].name


def test__Include__is_a_dependency_target(manifests_file: Path) -> None:
    app = App()
    chart = Chart(app, "chart")
    app_config = ApiObject(chart, "app-config", api_version="v1", kind="ConfigMap")
    include = Include(chart, "upstream", url=manifests_file)
    app_config.add_dependency(include)

    (synthesized,) = synthesize(app).charts
    assert synthesized.api_objects == [*include.api_objects, app_config]


def test__Include__suffixes_colliding_ids(tmp_path: Path) -> None:
    file = tmp_path / "dupes.yaml"
    file.write_text("kind: Secret\napiVersion: v1\nmetadata: {name: a}\n---\n" * 2)

    include = Include(Chart(App(), "chart"), "dupes", url=file)

    assert [child.id for child in include.children] == ["a-secret", "a-secret-1"]


def test__load_manifests__from_url() -> None:
    response = MagicMock(text=MANIFESTS)
    with patch("requests.get", return_value=response) as get:
        manifests = load_manifests("https://example.com/manifests.yaml")

    get.assert_called_once_with("https://example.com/manifests.yaml", timeout=30)
    response.raise_for_status.assert_called_once_with()
    assert [m["kind"] for m in manifests] == ["Namespace", "Deployment", "ConfigMap"]


def test__load_manifests__rejects_non_mappings(tmp_path: Path) -> None:
    file = tmp_path / "list.yaml"
    file.write_text("- a\n- b\n")

    with pytest.raises(ValueError, match="Expected a mapping"):
        load_manifests(file)


def test__Include__leaves_no_partial_subtree_for_an_invalid_document(tmp_path: Path) -> None:
    file = tmp_path / "broken.yaml"
    file.write_text("apiVersion: v1\nkind: ConfigMap\nmetadata: {name: ok}\n---\nkind: Broken\nmetadata: {name: x}\n")
    chart = Chart(App(), "chart")

    with pytest.raises(ValueError, match="must have an 'apiVersion' and a 'kind'"):
        Include(chart, "inc", url=file)

    assert chart.try_find_child("inc") is None
    assert chart.children == []


def test__Include__must_be_defined_within_a_chart(manifests_file: Path) -> None:
    app = App()

    with pytest.raises(ValueError, match="must be defined within a Chart"):
        Include(app, "upstream", url=manifests_file)

    assert app.children == []


def test__Include__replaces_path_separators_in_ids(tmp_path: Path) -> None:
    file = tmp_path / "slash.yaml"
    file.write_text("apiVersion: v1\nkind: ConfigMap\nmetadata: {name: a/b}\n")

    include = Include(Chart(App(), "chart"), "inc", url=file)

    assert [child.id for child in include.children] == ["a-b-configmap"]
    assert include.api_objects[0].name == "a/b"


def test__load_manifests__rejects_documents_without_kind(tmp_path: Path) -> None:
    file = tmp_path / "nokind.yaml"
    file.write_text("apiVersion: v1\nmetadata: {name: a}\n")

    with pytest.raises(ValueError, match="Manifest #0 .* must have an 'apiVersion' and a 'kind'"):
        load_manifests(file)
