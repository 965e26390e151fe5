import os
from pathlib import Path

from image_utils.errors import CollisionError, DirectoryError


TILE_NAME_FORMAT = "{stem}-r{row}c{col}.{ext}"


def tile_filename(stem: str, row: int, col: int, ext: str) -> str:
    return TILE_NAME_FORMAT.format(stem=stem, row=row, col=col, ext=ext)


def resolve_output_path(output_dir, stem: str, row: int, col: int, ext: str) -> Path:
    """
    Destination of the tile at (row, col). Builds a new path on every
    call, so concurrent tile writers never share state.
    """
    return Path(output_dir) / tile_filename(stem, row, col, ext)


def ensure_output_dir(output_dir) -> Path:
    """
    Creates `output_dir` and its parents. An existing directory is fine.

    Raises:
        DirectoryError: if the directory can't be created.
    """
    output_dir = Path(output_dir)
    try:
        os.makedirs(output_dir, exist_ok=True)
    except OSError as exc:
        raise DirectoryError(f"Failed to create directory {output_dir}: {exc}") from exc
    return output_dir


def clear_destination(path: Path) -> bool:
    """
    Removes a file left at `path` by an earlier run.
    Returns True if something was removed.

    Raises:
        CollisionError: if the existing file can't be removed.
    """
    if not os.path.lexists(path):
        return False

    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise CollisionError(f"Failed to remove existing image {path.stem}: {exc}") from exc
    return True
