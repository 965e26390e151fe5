import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from image_utils.errors import ValidationError
from image_utils.grid import GridSpec


DEFAULT_OUTPUT_DIR = "splixed-images"
DEFAULT_WORKERS = os.cpu_count() or 1

AXIS_NAMES = {"rows": "row", "cols": "column"}


@dataclass(frozen=True)
class SplitRequest:
    source: Path
    rows: GridSpec
    cols: GridSpec
    output_dir: Path
    recursive: bool = False
    workers: int = DEFAULT_WORKERS


def parse_grid_spec(text: str, axis: str = "rows") -> GridSpec:
    """
    Parses "4" or "2,3,1,5" into a GridSpec.
    """
    items = [item.strip() for item in str(text).split(",")]
    weights = []
    for item in items:
        if not item:
            raise ValidationError(f"{axis}: Empty size in '{text}'")
        try:
            value = int(item)
        except ValueError:
            raise ValidationError(f"{axis}: '{item}' is not an integer") from None
        if value <= 0:
            raise ValidationError(f"{axis}: All {AXIS_NAMES.get(axis, axis)} sizes must be greater than zero")
        weights.append(value)

    return GridSpec(tuple(weights))


def _as_spec(value, axis):
    if value is None or isinstance(value, GridSpec):
        return value
    if isinstance(value, (list, tuple)):
        value = ",".join(str(v) for v in value)
    return parse_grid_spec(value, axis)


def build_request(
    source,
    rows: Union[str, GridSpec, None] = None,
    cols: Union[str, GridSpec, None] = None,
    output_dir=None,
    recursive: bool = False,
    workers: Optional[int] = None,
) -> SplitRequest:
    """
    Validates user input and turns it into a SplitRequest.

    Raises:
        ValidationError: on a missing source, a missing grid, a
            non-positive weight, or a worker count below 1.
    """
    source = Path(source)
    if not source.exists():
        raise ValidationError(f"image: The provided path '{source}' does not exist")

    row_spec = _as_spec(rows, "rows")
    col_spec = _as_spec(cols, "cols")
    if row_spec is None and col_spec is None:
        raise ValidationError("At least one of '--rows', '--cols' needs to be specified")

    if workers is None:
        workers = DEFAULT_WORKERS
    elif workers < 1:
        raise ValidationError(f"workers: Must be at least 1, got {workers}")

    return SplitRequest(
        source=source,
        rows=row_spec if row_spec is not None else GridSpec.of(1),
        cols=col_spec if col_spec is not None else GridSpec.of(1),
        output_dir=Path(output_dir) if output_dir is not None else Path(DEFAULT_OUTPUT_DIR),
        recursive=recursive,
        workers=workers,
    )
