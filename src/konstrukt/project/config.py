from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from konstrukt.tools.fs import find_config_file
from konstrukt.writer import DEFAULT_FILE_EXTENSION, OutputType


@dataclass
class Project:
    """
    Configuration for a konstrukt project that is stored in a `konstrukt.yaml` file.
    """

    app: Path = field(default_factory=lambda: Path("main.py"))
    """
    The Python file that defines the construct tree. It must define a global `app` variable that is either an
    :class:`~konstrukt.app.App` or a function returning one.
    """

    outdir: Path = field(default_factory=lambda: Path("dist"))
    """ The directory to write the synthesized manifests to. """

    output_type: str = OutputType.FILE_PER_CHART.value
    """ How manifests are split into files, either `FilePerChart` or `FilePerApp`. """

    file_extension: str = DEFAULT_FILE_EXTENSION
    """ The extension of the synthesized manifest files. """

    def get_output_type(self) -> OutputType:
        try:
            return OutputType(self.output_type)
        except ValueError:
            choices = ", ".join(repr(t.value) for t in OutputType)
            raise ValueError(f"Invalid output_type {self.output_type!r}, expected one of {choices}") from None


@dataclass
class ProjectConfig:
    """
    Wrapper for the project configuration file.
    """

    FILENAMES = ("konstrukt.yaml", "konstrukt.yml")

    file: Path | None
    config: Project

    @staticmethod
    def load(file: Path | None = None, /, cwd: Path | None = None) -> "ProjectConfig":
        """
        Load the project configuration from the given or the default configuration file. If the configuration file does
        not exist, a default project configuration is returned. Relative paths in the configuration are resolved
        against the directory that contains the configuration file.
        """

        from databind.json import load as deser
        from yaml import safe_load

        if file is None:
            file = find_config_file(ProjectConfig.FILENAMES, cwd, required=False)
        if file is None:
            logger.debug("No project configuration found, using defaults")
            return ProjectConfig(None, Project())

        logger.debug("Loading project configuration from '{}'", file)
        project = deser(safe_load(file.read_text()) or {}, Project, filename=str(file))
        project.get_output_type()
        if not project.file_extension:
            raise ValueError(f"Invalid file_extension in '{file}', it must not be empty")

        if not project.app.is_absolute():
            project.app = file.parent / project.app
        if not project.outdir.is_absolute():
            project.outdir = file.parent / project.outdir

        return ProjectConfig(file, project)
