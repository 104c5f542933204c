from pathlib import Path
from typing import Optional

from loguru import logger
from typer import Option

from konstrukt.app import App
from konstrukt.project.config import ProjectConfig
from konstrukt.project.entrypoint import load_app
from konstrukt.synth import Synthesis, synthesize
from konstrukt.toposort import CycleError
from konstrukt.writer import ManifestWriter, OutputType, dump_yaml

from . import app

CONFIG_OPTION = Option(
    None,
    "--config",
    "-c",
    help="Path to the `konstrukt.yaml` to use. If not set, it is searched in the current directory and its parents.",
)
APP_OPTION = Option(
    None, "--app", "-a", help="The Python file that defines the app. Overrides the `app` from the configuration."
)


@app.command()
def synth(
    config: Optional[Path] = CONFIG_OPTION,
    app_file: Optional[Path] = APP_OPTION,
    outdir: Optional[Path] = Option(
        None, "--outdir", "-o", help="The output directory. Overrides the `outdir` from the configuration."
    ),
    output_type: Optional[OutputType] = Option(
        None, help="How to split manifests into files. Overrides the `output_type` from the configuration."
    ),
    stdout: bool = Option(False, help="Print all manifests to stdout instead of writing files."),
) -> None:
    """
    Synthesize the app into Kubernetes manifest files, ordered by their dependencies.
    """

    project = ProjectConfig.load(config).config
    konstrukt_app = load_app(app_file or project.app)
    synthesis = synthesize_or_exit(konstrukt_app)

    if stdout:
        print(dump_yaml(synthesis.to_manifests()), end="")
        return

    writer = ManifestWriter(
        outdir=outdir or project.outdir,
        output_type=output_type or project.get_output_type(),
        file_extension=project.file_extension,
    )
    files = writer.write(synthesis)
    logger.info("Synthesized {} chart(s) into {} file(s) in '{}'", len(synthesis.charts), len(files), writer.outdir)


def synthesize_or_exit(konstrukt_app: App) -> Synthesis:
    """
    Synthesize the app, reporting a dependency cycle as an error and exiting.
    """

    try:
        return synthesize(konstrukt_app)
    except CycleError as exc:
        logger.error("{}", exc)
        exit(1)
