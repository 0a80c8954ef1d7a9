"""
Project root discovery for verseboard.

A project root is the nearest directory (searching upward) that holds a
.verseboard/ directory, a .verseboard.json file, or a .git/ directory.
"""

from pathlib import Path

# Markers that indicate a project root, in order of priority
PROJECT_ROOT_MARKERS = [
    ".verseboard",  # Store and selection directory
    ".verseboard.json",  # Project configuration file
    ".git",  # Git repository
]


def find_project_root(start: Path | None = None) -> Path | None:
    """
    Find the project root directory by searching upward for marker files.

    Args:
        start: Directory to start searching from. Defaults to current working directory.

    Returns:
        Path to the project root directory, or None if not found.

    Example:
        >>> find_project_root(Path("/project/deep/nested/dir"))
        PosixPath('/project')
    """
    if start is None:
        start = Path.cwd()

    current = start.resolve()
    for directory in (current, *current.parents):
        if any((directory / marker).exists() for marker in PROJECT_ROOT_MARKERS):
            return directory

    return None


def get_project_dir(start: Path | None = None) -> Path:
    """
    Get the project root, falling back to the start directory.

    verseboard works outside a project too; the store then lives under
    the current directory.
    """
    root = find_project_root(start)
    if root is not None:
        return root
    return (start or Path.cwd()).resolve()
