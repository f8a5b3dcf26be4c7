"""
Sources — Locating and reading corpus files
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union


logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".cypher"


def discover(path: Union[str, Path], extension: str = DEFAULT_EXTENSION) -> List[Path]:
    """
    Files to process under `path`.

    A file is returned as-is whatever its extension; a directory yields its
    direct children with the extension, sorted by name. Missing paths yield
    nothing.
    """
    path = Path(path)
    if path.is_file():
        return [path]
    if not path.is_dir():
        return []
    return sorted(p for p in path.iterdir() if p.is_file() and p.name.endswith(extension))


def read_source(path: Union[str, Path]) -> Tuple[Optional[str], Optional[str]]:
    """
    Read a corpus file as UTF-8.

    Returns:
        (text, None) on success, (None, reason) when the file cannot be read
    """
    try:
        return Path(path).read_text(encoding="utf-8"), None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", path, e)
        return None, str(e)
