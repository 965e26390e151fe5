import os
import sys
from pathlib import Path
from typing import Iterator, Optional


def _walk_error(err):
    print(f"[MASTER] Cannot read directory {err.filename}: {err.strerror}", file=sys.stderr)


def _nested_output(root: Path, exclude) -> Optional[Path]:
    """
    Returns the resolved output directory when it sits strictly below
    `root`. An output directory equal to or above the root excludes
    nothing, otherwise every source file would be dropped.
    """
    if exclude is None:
        return None
    root = root.resolve()
    exclude = Path(exclude).resolve()
    if exclude == root:
        return None
    try:
        exclude.relative_to(root)
    except ValueError:
        return None
    return exclude


def iter_candidates(root, recursive: bool = False, exclude=None) -> Iterator[Path]:
    """
    Yields the files that may be images under `root`.

    A file root yields itself. A directory yields its own files, or the
    files of the whole tree when `recursive` is set. When `exclude`
    (usually the output directory) is a subdirectory of `root`, the
    recursive walk doesn't descend into it, so a run never splits its
    own tiles.
    """
    root = Path(root)

    if root.is_file():
        yield root
        return

    if not recursive:
        try:
            entries = sorted(os.scandir(root), key=lambda e: e.name)
        except OSError as err:
            _walk_error(err)
            return
        for entry in entries:
            try:
                if entry.is_file():
                    yield Path(entry.path)
            except OSError:
                continue
        return

    skip = _nested_output(root, exclude)
    for dirpath, dirnames, filenames in os.walk(root, onerror=_walk_error):
        if skip is not None:
            dirnames[:] = [
                d for d in dirnames
                if (Path(dirpath) / d).resolve() != skip
            ]
        dirnames.sort()
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if path.is_file():
                yield path
