"""
konstrukt synthesizes Kubernetes manifests from a tree of Python constructs. Dependencies between constructs determine
the order of the manifests within a file and the order of the files.
"""

from enum import Enum
import sys
from loguru import logger
from typer import Option, Typer


app = Typer(no_args_is_help=True, pretty_exceptions_enable=False, help=__doc__)


from . import graph  # noqa: F401,E402
from . import synth  # noqa: F401,E402


class LogLevel(str, Enum):
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@app.callback()
def _callback(
    log_level: LogLevel = Option(LogLevel.INFO, "--log-level", "-l", help="The log level to use."),
) -> None:
    logger.remove()
    logger.add(sys.stderr, level=log_level.name)


def main() -> None:
    app()
