from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import yaml
from loguru import logger

from konstrukt.synth import Synthesis, SynthesizedChart
from konstrukt.tools.types import Manifests

DEFAULT_FILE_EXTENSION = ".k8s.yaml"


class OutputType(str, Enum):
    """
    How the synthesized manifests are split into files.
    """

    FILE_PER_CHART = "FilePerChart"
    """ One file per chart, prefixed with the chart's position in the global order. """

    FILE_PER_APP = "FilePerApp"
    """ A single file that contains all charts in order. """


@dataclass
class ManifestWriter:
    """
    Writes the result of a synthesis to an output directory.
    """

    outdir: Path
    output_type: OutputType = OutputType.FILE_PER_CHART
    file_extension: str = DEFAULT_FILE_EXTENSION
    """ Appended to every written file. Files in the output directory that end with it are considered stale. """

    def __post_init__(self) -> None:
        if not self.file_extension:
            raise ValueError("The file extension must not be empty")

    def file_name(self, chart: SynthesizedChart) -> str:
        """
        Return the file name for a chart when writing one file per chart, e.g. `0001-my-chart.k8s.yaml`. The index
        ensures that the files sort in the same order that the charts have to be applied in.
        """

        return f"{chart.index:04d}-{chart.chart.path.replace('/', '-')}{self.file_extension}"

    def write(self, synthesis: Synthesis) -> list[Path]:
        """
        Write the synthesized charts into the output directory and return the written files in order. Files with
        the same extension that were left over from a previous run are removed first.
        """

        self.outdir.mkdir(parents=True, exist_ok=True)
        for stale in sorted(self.outdir.glob(f"*{self.file_extension}")):
            if not stale.is_file():
                continue
            logger.trace("Removing stale file '{}'", stale)
            stale.unlink()

        files: list[Path] = []
        match self.output_type:
            case OutputType.FILE_PER_CHART:
                for chart in synthesis.charts:
                    file = self.outdir / self.file_name(chart)
                    file.write_text(dump_yaml(chart.to_manifests()))
                    files.append(file)
            case OutputType.FILE_PER_APP:
                file = self.outdir / f"app{self.file_extension}"
                file.write_text(dump_yaml(synthesis.to_manifests()))
                files.append(file)
            case _:
                raise ValueError(f"Unsupported output type: {self.output_type!r}")

        for file in files:
            logger.info("Wrote '{}'", file)
        return files


def dump_yaml(manifests: Manifests) -> str:
    """
    Serialize manifests into a multi-document YAML string. Keys are kept in the order they appear in.
    """

    return yaml.safe_dump_all(manifests, sort_keys=False)
