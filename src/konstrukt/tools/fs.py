from collections.abc import Sequence
from pathlib import Path
from typing import Literal, overload


@overload
def find_config_file(
    filenames: Sequence[str], cwd: Path | None = None, required: Literal[False] = False
) -> Path | None: ...


@overload
def find_config_file(filenames: Sequence[str], cwd: Path | None = None, required: Literal[True] = True) -> Path: ...


def find_config_file(filenames: Sequence[str], cwd: Path | None = None, required: bool = True) -> Path | None:
    """
    Find the first file matching any of the *filenames* in the given *cwd* or the closest of its parent directories.
    Within one directory, the *filenames* are tried in order.
    """

    if cwd is None:
        cwd = Path.cwd()

    for directory in [cwd, *cwd.parents]:
        for filename in filenames:
            file = directory / filename
            if file.is_file():
                return file

    if required:
        names = " or ".join(repr(name) for name in filenames)
        raise FileNotFoundError(f"Could not find {names} in '{cwd}' or any of its parent directories.")

    return None
