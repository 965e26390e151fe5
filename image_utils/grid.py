from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class GridSpec:
    """
    Ordered weights for one axis.

    A single weight n means "n equal partitions". Several weights mean
    one partition per weight, sized proportionally to it.
    """
    weights: Tuple[int, ...]

    def __post_init__(self):
        if not self.weights:
            raise ValueError("GridSpec needs at least one weight")
        for w in self.weights:
            if isinstance(w, bool) or not isinstance(w, int) or w <= 0:
                raise ValueError(f"Weights must be positive integers, got {w!r}")

    @classmethod
    def of(cls, *weights: int) -> "GridSpec":
        return cls(tuple(weights))

    @property
    def is_shorthand(self) -> bool:
        return len(self.weights) == 1

    def __len__(self):
        return len(self.weights)

    def __str__(self):
        return ",".join(str(w) for w in self.weights)


@dataclass(frozen=True)
class TileRect:
    x: int
    y: int
    width: int
    height: int
    row: int
    col: int

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """(left, upper, right, lower) as Pillow expects it."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0


def effective_weights(extent: int, spec: GridSpec) -> List[int]:
    """
    Resolves the weights actually used on an axis of `extent` pixels.
    Shorthand specs become min(n, extent) unit weights.
    """
    if spec.is_shorthand:
        return [1] * min(spec.weights[0], extent)
    return list(spec.weights)


def plan_axis(extent: int, spec: GridSpec) -> List[int]:
    """
    Splits `extent` pixels into segment lengths.

    Every segment but the last is weight * unit, where
    unit = max(1, extent // total_weight). The last one takes whatever is
    left, so the lengths always add up to `extent`. When the weights
    overrun the extent, segments are clipped at the edge and the ones past
    it get length 0.
    """
    if extent <= 0:
        raise ValueError(f"Extent must be positive, got {extent}")

    weights = effective_weights(extent, spec)
    unit = max(1, extent // sum(weights))

    lengths = []
    offset = 0
    for i, w in enumerate(weights):
        start = min(offset, extent)
        if i == len(weights) - 1:
            length = extent - start
        else:
            length = min(w * unit, extent - start)
        lengths.append(length)
        offset += w * unit

    return lengths


def _offsets(lengths):
    offsets = []
    pos = 0
    for length in lengths:
        offsets.append(pos)
        pos += length
    return offsets


def plan_grid(width: int, height: int, rows: GridSpec, cols: GridSpec) -> List[TileRect]:
    """
    Returns the tile rectangles of a width x height image, row-major.
    """
    row_heights = plan_axis(height, rows)
    col_widths = plan_axis(width, cols)
    row_offsets = _offsets(row_heights)
    col_offsets = _offsets(col_widths)

    rects = []
    for r, (y, h) in enumerate(zip(row_offsets, row_heights)):
        for c, (x, w) in enumerate(zip(col_offsets, col_widths)):
            rects.append(TileRect(x=x, y=y, width=w, height=h, row=r, col=c))

    return rects
