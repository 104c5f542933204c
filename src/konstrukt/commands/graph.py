from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from konstrukt.project.config import ProjectConfig
from konstrukt.project.entrypoint import load_app
from konstrukt.resolver import resolve

from . import app
from .synth import APP_OPTION, CONFIG_OPTION, synthesize_or_exit


@app.command()
def graph(
    config: Optional[Path] = CONFIG_OPTION,
    app_file: Optional[Path] = APP_OPTION,
) -> None:
    """
    Show the order in which charts and their objects are synthesized, and which charts depend on each other.
    """

    project = ProjectConfig.load(config).config
    konstrukt_app = load_app(app_file or project.app)
    synthesis = synthesize_or_exit(konstrukt_app)

    depends_on: dict[str, list[str]] = {}
    for source, target in resolve(konstrukt_app).unit_edges:
        depends_on.setdefault(source.path, []).append(target.path)

    table = Table()
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Chart")
    table.add_column("Objects")
    table.add_column("Depends on")

    for chart in synthesis.charts:
        table.add_row(
            f"{chart.index:04d}",
            chart.chart.path,
            "\n".join(f"{obj.kind}/{obj.name}" for obj in chart.api_objects),
            ", ".join(depends_on.get(chart.chart.path, [])),
        )

    Console().print(table)
