import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from image_utils.codec import SourceImage, decode_image, encode_image
from image_utils.cropper import Tile, crop
from image_utils.errors import DecodeError, DirectoryError, EncodeError, SplitError
from image_utils.grid import TileRect, plan_grid
from image_utils.naming import clear_destination, ensure_output_dir, resolve_output_path


# -----------------------------
# File states
# -----------------------------

DISCOVERED = "discovered"
DONE = "done"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass
class FileReport:
    path: Path
    state: str = DISCOVERED
    tiles_planned: int = 0
    tiles_written: int = 0
    tiles_skipped: int = 0
    outputs: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def report_error(message):
    print(f"splix: {message}", file=sys.stderr)


# -----------------------------
# Per-tile write
# -----------------------------

def write_tile(tile: Tile, source: SourceImage, output_dir) -> Path:
    """
    Names, clears and writes a single tile.

    Raises:
        CollisionError: an old file at the destination can't be removed.
        EncodeError: the tile can't be saved.
    """
    path = resolve_output_path(
        output_dir, source.stem, tile.rect.row, tile.rect.col, source.extension
    )

    # an old tile at this position goes even if the new one is empty
    clear_destination(path)

    if tile.rect.is_empty:
        raise EncodeError(
            f"Failed to save image {path.stem}: "
            f"tile is {tile.rect.width}x{tile.rect.height} px"
        )

    encode_image(tile.image, source.format, path)
    return path


def _process_rect(rect: TileRect, source: SourceImage, output_dir):
    # the Tile only lives for the duration of its write
    tile = Tile(rect=rect, image=crop(source.image, rect))
    try:
        return write_tile(tile, source, output_dir)
    finally:
        tile.image.close()


# -----------------------------
# Per-file pipeline
# -----------------------------

def process_file(path, request, tile_workers: int = 1, verbose: bool = False) -> FileReport:
    """
    Runs decode -> plan -> crop -> name -> write for one source file.

    Never raises for a per-file or per-tile failure: those end up in the
    returned report. A file that isn't an image is skipped silently.
    """
    report = FileReport(path=Path(path))

    try:
        source = decode_image(path)
    except DecodeError:
        report.state = SKIPPED
        return report

    rects = plan_grid(source.width, source.height, request.rows, request.cols)
    report.tiles_planned = len(rects)

    try:
        output_dir = ensure_output_dir(request.output_dir)
    except DirectoryError as exc:
        report_error(exc)
        report.errors.append(str(exc))
        report.tiles_skipped = len(rects)
        report.state = FAILED
        source.image.close()
        return report

    lock = threading.Lock()

    def run(rect):
        try:
            written = _process_rect(rect, source, output_dir)
        except SplitError as exc:
            report_error(exc)
            with lock:
                report.errors.append(str(exc))
                report.tiles_skipped += 1
            return
        with lock:
            report.outputs.append(written)
            report.tiles_written += 1

    try:
        if tile_workers > 1 and len(rects) > 1:
            with ThreadPoolExecutor(max_workers=tile_workers) as pool:
                list(pool.map(run, rects))
        else:
            for rect in rects:
                run(rect)
    finally:
        source.image.close()

    report.outputs.sort()
    report.state = DONE

    if verbose:
        print(
            f"[WORKER] {report.path.name}: {report.tiles_written}/{len(rects)} tiles "
            f"written to {output_dir}"
        )

    return report
