import pytest

from image_utils.grid import GridSpec, TileRect, effective_weights, plan_axis, plan_grid


EXTENTS = [1, 2, 3, 7, 16, 99, 100, 1024]
SPECS = [
    GridSpec.of(1),
    GridSpec.of(3),
    GridSpec.of(17),
    GridSpec.of(2, 3, 1, 5),
    GridSpec.of(1, 1),
    GridSpec.of(50, 50, 50),
]


@pytest.mark.parametrize("extent", EXTENTS)
@pytest.mark.parametrize("spec", SPECS, ids=str)
def test_segments_cover_extent_exactly(extent, spec):
    lengths = plan_axis(extent, spec)

    assert sum(lengths) == extent
    assert all(length >= 0 for length in lengths)


@pytest.mark.parametrize("n,extent,expected", [
    (4, 16, 4),
    (16, 16, 16),
    (17, 16, 16),
    (5, 1, 1),
])
def test_shorthand_is_clamped_to_extent(n, extent, expected):
    assert len(plan_axis(extent, GridSpec.of(n))) == expected


def test_shorthand_on_single_pixel_axis():
    assert plan_axis(1, GridSpec.of(8)) == [1]


def test_weighted_segments_get_their_share():
    weights = (2, 3, 1, 5)
    lengths = plan_axis(100, GridSpec(weights))

    unit = 100 // sum(weights)
    assert lengths[:-1] == [w * unit for w in weights[:-1]]
    assert lengths[-1] == 100 - sum(lengths[:-1])
    for w, length in zip(weights[:-1], lengths[:-1]):
        assert length >= unit * w


def test_last_segment_absorbs_remainder():
    assert plan_axis(16, GridSpec.of(3)) == [5, 5, 6]
    assert plan_axis(16, GridSpec.of(5)) == [3, 3, 3, 3, 4]


def test_weighted_sum_over_extent_is_clamped_not_rejected():
    # unit floors at 1 pixel, so the weights run past the edge
    lengths = plan_axis(3, GridSpec.of(2, 2, 2))

    assert lengths == [2, 1, 0]
    assert len(lengths) == 3


def test_weighted_overrun_collapses_trailing_segments():
    lengths = plan_axis(4, GridSpec.of(5, 1, 1))

    assert lengths == [4, 0, 0]


def test_weighted_spec_is_not_treated_as_shorthand():
    assert effective_weights(10, GridSpec.of(1, 1)) == [1, 1]
    assert effective_weights(10, GridSpec.of(2)) == [1, 1]


def test_plan_axis_rejects_empty_extent():
    with pytest.raises(ValueError):
        plan_axis(0, GridSpec.of(2))


@pytest.mark.parametrize("weights", [(), (0,), (3, -1), (1.5,), (True,)])
def test_gridspec_rejects_bad_weights(weights):
    with pytest.raises(ValueError):
        GridSpec(weights)


def test_gridspec_is_immutable():
    spec = GridSpec.of(1, 2)
    with pytest.raises(AttributeError):
        spec.weights = (3,)


def test_grid_16x16_three_rows_five_cols():
    rects = plan_grid(16, 16, GridSpec.of(3), GridSpec.of(5))

    assert len(rects) == 15
    heights = sorted({(r.row, r.height) for r in rects})
    assert heights == [(0, 5), (1, 5), (2, 6)]
    widths = sorted({(r.col, r.width) for r in rects})
    assert widths == [(0, 3), (1, 3), (2, 3), (3, 3), (4, 4)]


def test_grid_single_tile_covers_image():
    assert plan_grid(16, 16, GridSpec.of(1), GridSpec.of(1)) == [
        TileRect(x=0, y=0, width=16, height=16, row=0, col=0)
    ]


def test_grid_oversized_shorthand_gives_pixel_tiles():
    rects = plan_grid(16, 16, GridSpec.of(17), GridSpec.of(17))

    assert len(rects) == 256
    assert all(r.width == 1 and r.height == 1 for r in rects)


def test_grid_is_row_major_and_tiles_the_image():
    rects = plan_grid(10, 7, GridSpec.of(2, 1), GridSpec.of(3))

    assert [(r.row, r.col) for r in rects] == [
        (0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)
    ]
    covered = set()
    for r in rects:
        assert r.x + r.width <= 10 and r.y + r.height <= 7
        for y in range(r.y, r.y + r.height):
            for x in range(r.x, r.x + r.width):
                assert (x, y) not in covered
                covered.add((x, y))
    assert len(covered) == 70


def test_rect_box_matches_pillow_convention():
    rect = TileRect(x=3, y=5, width=4, height=2, row=1, col=1)
    assert rect.box == (3, 5, 7, 7)
    assert not rect.is_empty
    assert TileRect(x=3, y=5, width=0, height=2, row=0, col=2).is_empty
