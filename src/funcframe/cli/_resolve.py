"""Target resolution — loads the user function from a source file."""

import importlib.util
import sys
from pathlib import Path
from typing import Any

from funcframe.errors import ConfigurationError


def load_function(source: str | Path, target: str) -> Any:
    """Import *source* as a module and return its attribute *target*.

    The source's directory is put on ``sys.path`` first so the function's
    own sibling imports resolve.

    Raises:
        ConfigurationError: If the file is missing, fails to import, or
            has no callable named *target*.
    """
    path = Path(source).resolve()
    if not path.is_file():
        msg = f"Function source file {str(path)!r} does not exist."
        raise ConfigurationError(msg)

    module_name = path.stem
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        msg = f"Cannot import {str(path)!r} as a Python module."
        raise ConfigurationError(msg)

    module = importlib.util.module_from_spec(spec)
    source_dir = str(path.parent)
    if source_dir not in sys.path:
        sys.path.insert(0, source_dir)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        msg = f"Importing {str(path)!r} raised {type(exc).__name__}: {exc}"
        raise ConfigurationError(msg) from exc

    func = getattr(module, target, None)
    if func is None:
        msg = f"File {str(path)!r} is expected to contain a function named {target!r}."
        raise ConfigurationError(msg)
    if not callable(func):
        msg = f"{target!r} in {str(path)!r} is a {type(func).__name__}, not a function."
        raise ConfigurationError(msg)
    return func
