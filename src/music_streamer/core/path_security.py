"""
Path security validation utilities for Music Streamer.

Provides pure functions to validate stream paths stay within their
category directory, preventing directory traversal attacks and symlink escapes.
"""

from pathlib import Path
from typing import Optional


def is_path_within_root(file_path: Path, root: Path) -> bool:
    """Pure function - validates path resolves to somewhere under root.

    Uses Path.resolve() to handle symlinks and relative paths.

    Args:
        file_path: The file path to validate
        root: Allowed root directory

    Returns:
        True if path is within root, False otherwise
    """
    try:
        resolved_path = file_path.resolve()
        resolved_path.relative_to(root.resolve())
        return True
    except ValueError:
        # relative_to raises ValueError if path is not a subpath
        return False
    except (OSError, RuntimeError):
        # Path.resolve() can raise OSError for invalid paths or RuntimeError for recursion
        return False


def validate_track_path(file_path: Path, root: Path) -> Optional[Path]:
    """Pure function - returns validated path or None.

    Checks the path stays within root before checking it exists, so a
    traversal attempt is never reported as "not found".

    Args:
        file_path: The file path to validate
        root: Category root directory

    Returns:
        The validated Path object if valid, None if outside root

    Raises:
        FileNotFoundError: If the path is inside root but no longer a file
    """
    if not is_path_within_root(file_path, root):
        return None

    if not file_path.is_file():
        raise FileNotFoundError(str(file_path))

    return file_path
