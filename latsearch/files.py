"""
File helpers that translate OS failures into latsearch errors
"""

import logging
from pathlib import Path
from typing import Union

from .errors import FileAccessError, MalformedInputError

logger = logging.getLogger(__name__)

def read_text(path: Union[str, Path]) -> str:
    """Read a whole UTF-8 text file"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as err:
        raise FileAccessError(path) from err
    except UnicodeDecodeError as err:
        raise MalformedInputError(path, "file is not valid UTF-8") from err

def write_text(path: Union[str, Path], text: str) -> None:
    """Write text to a file, replacing any previous content"""
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as err:
        raise FileAccessError(path, mode="writing") from err
    logger.debug("Wrote %d characters to %s", len(text), path)
