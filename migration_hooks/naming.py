"""Step file path and step identifier normalization."""

from __future__ import annotations

import inspect
import logging
import os
from pathlib import Path, PurePosixPath
from typing import Any

logger = logging.getLogger(__name__)


def step_file_path(step: Any) -> str | None:
    """Best-effort location of the file that defines ``step``.

    Accepts a path, an object exposing ``file_path`` or ``__file__``, a module,
    a class, or an instance of a class defined in a file. Never raises.
    """
    if step is None:
        return None
    if isinstance(step, (str, os.PathLike)):
        return os.fspath(step)

    for attribute in ("file_path", "__file__"):
        explicit = getattr(step, attribute, None)
        if isinstance(explicit, (str, os.PathLike)):
            return os.fspath(explicit)

    target = step if inspect.ismodule(step) or inspect.isclass(step) else type(step)
    try:
        return inspect.getfile(target)
    except (TypeError, OSError):
        logger.debug("Could not resolve a source file for step %r", step)
        return None


def step_identifier_from_path(file_path: str | None) -> str | None:
    """Base name of ``file_path`` without extension.

    ``None`` stays ``None`` and ``""`` stays ``""``; callers rely on the two
    being distinct.
    """
    if file_path is None or file_path == "":
        return file_path
    return PurePosixPath(file_path.replace("\\", "/")).stem


def handler_file_path(handlers_path: str | Path, step_identifier: str, extension: str = ".py") -> Path:
    return Path(handlers_path) / f"{step_identifier}{extension}"


def strip_extension(name: str, extension: str = ".py") -> str:
    if extension and name.endswith(extension):
        return name[: -len(extension)]
    return name
