import sys
from collections.abc import Iterator
from pathlib import Path
from textwrap import dedent

import pytest
import yaml
from loguru import logger
from typer.testing import CliRunner

from konstrukt.commands import app

APP_FILE = dedent(
    """
    from konstrukt import ApiObject, App, Chart

    app = App()
    web = Chart(app, "web")
    database = Chart(app, "database")
    server = ApiObject(web, "server", api_version="apps/v1", kind="Deployment", metadata={"name": "server"})
    postgres = ApiObject(database, "postgres", api_version="apps/v1", kind="StatefulSet", metadata={"name": "pg"})
    server.add_dependency(postgres)
    """
)


@pytest.fixture(autouse=True)
def reset_logger() -> Iterator[None]:
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "main.py").write_text(APP_FILE)
    (tmp_path / "konstrukt.yaml").write_text("app: main.py\noutdir: out\n")
    return tmp_path


def test__synth__writes_files(project: Path) -> None:
    result = CliRunner().invoke(app, ["synth", "--config", str(project / "konstrukt.yaml")])

    assert result.exit_code == 0, result.output
    assert sorted(file.name for file in (project / "out").iterdir()) == [
        "0000-database.k8s.yaml",
        "0001-web.k8s.yaml",
    ]


def test__synth__overrides(project: Path, tmp_path: Path) -> None:
    outdir = tmp_path / "other"
    result = CliRunner().invoke(
        app,
        [
            "--log-level",
            "debug",
            "synth",
            "-c",
            str(project / "konstrukt.yaml"),
            "--outdir",
            str(outdir),
            "--output-type",
            "FilePerApp",
        ],
    )

    assert result.exit_code == 0, result.output
    assert [file.name for file in outdir.iterdir()] == ["app.k8s.yaml"]


def test__synth__stdout(project: Path) -> None:
    result = CliRunner().invoke(app, ["synth", "-c", str(project / "konstrukt.yaml"), "--stdout"])

    assert result.exit_code == 0, result.output
    assert [m["metadata"]["name"] for m in yaml.safe_load_all(result.stdout)] == ["pg", "server"]
    assert not (project / "out").exists()


def test__synth__exits_on_cycle(project: Path) -> None:
    (project / "main.py").write_text(APP_FILE + "postgres.add_dependency(web)\n")

    result = CliRunner().invoke(app, ["synth", "-c", str(project / "konstrukt.yaml")])

    assert result.exit_code == 1
    assert not (project / "out").exists()


def test__graph(project: Path) -> None:
    result = CliRunner().invoke(app, ["graph", "-c", str(project / "konstrukt.yaml")])

    assert result.exit_code == 0, result.output
    assert "database" in result.stdout
    assert "Deployment/server" in result.stdout
