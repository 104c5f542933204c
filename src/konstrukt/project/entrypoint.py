from pathlib import Path
from types import ModuleType

from loguru import logger

from konstrukt.app import App


def load_app(file: Path) -> App:
    """
    Execute the Python file *file* and return the :class:`App` it defines in its global `app` variable. If `app` is a
    callable, it is called to create the app.
    """

    if not file.is_file():
        raise FileNotFoundError(f"App file not found: {file}")

    logger.debug("Loading app from '{}'", file)
    module = ModuleType("konstrukt-app")
    module.__file__ = str(file)
    exec(compile(file.read_text(), file, "exec"), vars(module))

    if not hasattr(module, "app"):
        raise AttributeError(f"No 'app' defined in {file}")

    app = module.app() if callable(module.app) else module.app
    if not isinstance(app, App):
        raise TypeError(f"Expected 'app' in {file} to be an App, got {type(app).__name__}")
    return app
