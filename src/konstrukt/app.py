from pathlib import Path

from konstrukt.chart import Chart
from konstrukt.registry import output_units
from konstrukt.synth import synthesize
from konstrukt.tree import Construct
from konstrukt.writer import DEFAULT_FILE_EXTENSION, ManifestWriter, OutputType, dump_yaml


class App(Construct):
    """
    The root of a construct tree. Charts are added to the app, and :meth:`synth` writes them out as manifest files.
    """

    def __init__(
        self,
        *,
        outdir: Path | str = Path("dist"),
        output_type: OutputType = OutputType.FILE_PER_CHART,
        file_extension: str = DEFAULT_FILE_EXTENSION,
    ) -> None:
        super().__init__(None, "")
        self.outdir = Path(outdir)
        self.output_type = output_type
        self.file_extension = file_extension

    @property
    def charts(self) -> list[Chart]:
        return output_units(self)

    def declare_dependency(self, source: Construct, target: Construct) -> None:
        """
        Declare that *source* depends on *target*. Both may be any construct of the app.
        """

        self.dependencies.declare(source, target)

    def synth(self) -> list[Path]:
        """
        Synthesize the app and write the manifests into the output directory. Returns the written files.
        """

        writer = ManifestWriter(self.outdir, self.output_type, self.file_extension)
        return writer.write(synthesize(self))

    def synth_yaml(self) -> str:
        """
        Synthesize the app and return all charts as a single multi-document YAML string.
        """

        return dump_yaml(synthesize(self).to_manifests())
