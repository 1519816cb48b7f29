import pytest
from shapely.geometry import Polygon, box

from polyshaper import (
    ClipOperation,
    ClippingError,
    FillRule,
    GeometryConfig,
    PyclipperEngine,
    ValidationError,
    differences,
    fit_among,
    fit_most,
    fit_to,
    fit_within,
    fits,
    intersections,
    intersects,
    merge,
    non_intersecting,
    signed_area,
)


def _u_shape():
    return Polygon([
        (0, 0), (40, 0), (40, 40), (30, 40),
        (30, 10), (10, 10), (10, 40), (0, 40),
    ])


def _assert_ccw(polygons):
    for polygon in polygons:
        assert signed_area(polygon) > 0


class RecordingEngine(PyclipperEngine):
    """Engine that remembers the operations it was asked to run."""

    def __init__(self):
        self.operations = []

    def execute(self, operation, subject_paths, clip_paths, fill_rule):
        self.operations.append(operation)
        return super().execute(operation, subject_paths, clip_paths, fill_rule)


class TestMerge:
    """Tests for merge()."""

    def test_disjoint_polygons(self):
        """Disjoint polygons stay separate."""
        result = merge([box(0, 0, 1, 1), box(5, 5, 6, 6)])
        assert len(result) == 2
        _assert_ccw(result)

    def test_overlapping_polygons(self):
        """Overlapping polygons become one."""
        result = merge([box(0, 0, 2, 2), box(1, 1, 3, 3)])
        assert len(result) == 1
        assert result[0].area == pytest.approx(7.0)
        _assert_ccw(result)

    def test_original_merge_scenario(self):
        """An L of two rectangles plus a separate rectangle gives two polygons."""
        polygons = [
            Polygon([(0, 0), (8, 0), (8, 3), (0, 3)]),
            Polygon([(5, 0), (8, 0), (8, 20), (5, 20)]),
            Polygon([(10, 0), (20, 0), (20, 3), (10, 3)]),
        ]
        result = merge(polygons)
        assert len(result) == 2
        assert sorted(p.area for p in result) == pytest.approx([30.0, 75.0])

    def test_idempotent(self):
        """Merging a merged set changes nothing."""
        polygons = [box(0, 0, 2, 2), box(1, 1, 3, 3), box(10, 0, 11, 1)]
        once = merge(polygons)
        twice = merge(once)
        assert len(once) == len(twice)
        for a, b in zip(sorted(once, key=lambda p: p.area), sorted(twice, key=lambda p: p.area)):
            assert a.symmetric_difference(b).area == pytest.approx(0.0, abs=1e-9)

    def test_merge_with_itself(self):
        """A polygon merged with itself is itself."""
        square = box(0, 0, 4, 4)
        result = merge([square, square])
        assert len(result) == 1
        assert result[0].area == pytest.approx(16.0)

    def test_clockwise_input_normalized(self):
        """Clockwise input comes back counter-clockwise."""
        cw = Polygon([(0, 0), (0, 4), (4, 4), (4, 0)])
        result = merge([cw])
        assert len(result) == 1
        _assert_ccw(result)

    def test_empty_and_none(self):
        """No polygons in, no polygons out."""
        assert merge([]) == []
        assert merge(None) == []

    def test_even_odd_fill_rule(self):
        """With even-odd the doubly covered region is outside."""
        result = merge([box(0, 0, 2, 2), box(1, 1, 3, 3)], fill_rule='even_odd')
        assert sum(p.area for p in result) == pytest.approx(6.0)

    def test_unknown_fill_rule(self):
        """An unknown fill rule name is rejected."""
        with pytest.raises(ValueError):
            merge([box(0, 0, 1, 1)], fill_rule='winding')

    def test_tolerance_simplifies(self):
        """A positive tolerance simplifies each merged polygon."""
        bumpy = Polygon([(0, 0), (5, 0.001), (10, 0), (10, 10), (0, 10)])
        result = merge([bumpy], tolerance=0.1)
        assert len(result) == 1
        assert result[0].is_valid
        assert result[0].area == pytest.approx(100.0, abs=0.1)
        assert len(result[0].exterior.coords) <= len(bumpy.exterior.coords)

    def test_negative_tolerance(self):
        """Negative tolerance is an invalid argument."""
        with pytest.raises(ValidationError):
            merge([box(0, 0, 1, 1)], tolerance=-1.0)

    def test_coarse_precision(self):
        """Precision can be set per call."""
        result = merge([box(0, 0, 2, 2), box(1, 1, 3, 3)], config=GeometryConfig(scale=1e6))
        assert result[0].area == pytest.approx(7.0)

    def test_coordinates_beyond_engine_range(self):
        """Coordinates too large for the default scale raise ClippingError."""
        far = box(0, 5e6, 10, 5e6 + 10)
        with pytest.raises(ClippingError):
            merge([far])
        with pytest.raises(ClippingError):
            differences([far], [box(5, 5e6, 15, 5e6 + 10)])

    def test_large_coordinates_with_smaller_scale(self):
        """A smaller scale brings large coordinates back into range."""
        result = merge([box(0, 5e6, 10, 5e6 + 10)], config=GeometryConfig(scale=1e6))
        assert len(result) == 1
        assert result[0].area == pytest.approx(100.0)

    def test_engine_injection(self):
        """A caller-supplied engine is used for the union."""
        engine = RecordingEngine()
        merge([box(0, 0, 2, 2), box(1, 1, 3, 3)], engine=engine)
        assert engine.operations == [ClipOperation.UNION]


class TestDifferences:
    """Tests for differences()."""

    def test_bar_splits_square(self):
        """A bar across a square leaves two halves, largest first."""
        square = box(0, 0, 10, 10)
        bar = box(4, -1, 6, 11)
        result = differences(square, [bar])
        assert [p.area for p in result] == pytest.approx([40.0, 40.0])
        _assert_ccw(result)

    def test_original_difference_scenario(self):
        """A 12x12 square minus six rectangles leaves four regions."""
        square = box(0, 0, 12, 12)
        among = [
            box(0, 0, 7, 4),
            box(0, 6, 3, 12),
            box(3, 4, 7, 9),
            box(5, 9, 8, 12),
            box(7, 2, 12, 7),
            box(9, 7, 12, 12),
        ]
        result = differences([square], among)
        assert len(result) == 4
        assert [p.area for p in result] == pytest.approx([10.0, 7.0, 6.0, 6.0])

    def test_soundness(self):
        """Every result lies inside the subject and outside every obstacle."""
        subject = box(0, 0, 10, 10)
        obstacles = [box(2, 2, 4, 4), box(6, -1, 8, 5), box(-1, 7, 3, 8)]
        result = differences(subject, obstacles)
        assert result
        for polygon in result:
            assert polygon.difference(subject).area == pytest.approx(0.0, abs=1e-9)
            for obstacle in obstacles:
                assert polygon.intersection(obstacle).area == pytest.approx(0.0, abs=1e-9)

    def test_interior_obstacle_becomes_hole(self):
        """An obstacle strictly inside the subject is cut out as a hole."""
        result = differences(box(0, 0, 10, 10), [box(4, 4, 6, 6)])
        assert len(result) == 1
        assert len(result[0].interiors) == 1
        assert result[0].area == pytest.approx(96.0)
        assert not result[0].interiors[0].is_ccw

    def test_slivers_dropped(self):
        """Fragments below the tolerance are discarded."""
        result = differences(box(0, 0, 10, 10), [box(0.05, -1, 11, 11)], tolerance=1.0)
        assert result == []

    def test_empty_subtract(self):
        """Nothing to subtract returns the subject."""
        result = differences(box(0, 0, 3, 3), [])
        assert len(result) == 1
        assert result[0].area == pytest.approx(9.0)

    def test_fully_covered(self):
        """A fully covered subject leaves nothing."""
        assert differences(box(1, 1, 2, 2), [box(0, 0, 3, 3)]) == []

    def test_none_subject(self):
        """A missing subject is an invalid argument."""
        with pytest.raises(ValidationError):
            differences(None, [box(0, 0, 1, 1)])

    def test_negative_tolerance(self):
        """Negative tolerance is an invalid argument."""
        with pytest.raises(ValidationError):
            differences(box(0, 0, 1, 1), [], tolerance=-0.1)


class TestIntersections:
    """Tests for intersections() and fit_within()."""

    def test_intersection_area(self):
        """Overlap of two squares."""
        result = intersections(box(0, 0, 2, 2), [box(1, 1, 3, 3)])
        assert len(result) == 1
        assert result[0].area == pytest.approx(1.0)

    def test_empty_clips(self):
        """Nothing to intersect with gives nothing."""
        assert intersections(box(0, 0, 2, 2), []) == []

    def test_fit_within_u_shape(self):
        """A bar across a U is cut into its two arms."""
        bar = box(-10, 20, 50, 30)
        result = fit_within(bar, _u_shape())
        assert len(result) == 2
        vertices = {tuple(c) for p in result for c in p.exterior.coords}
        for corner in [(0, 20), (0, 30), (10, 20), (10, 30), (30, 20), (30, 30), (40, 20), (40, 30)]:
            assert corner in vertices
        _assert_ccw(result)

    def test_fit_within_disjoint(self):
        """Disjoint polygons have no fragments."""
        assert fit_within(box(0, 0, 1, 1), box(5, 5, 6, 6)) == []


class TestFit:
    """Tests for the fit_* family."""

    within = box(1, 1, 8, 8)
    among = [box(3, 1, 7, 5), box(1, 3, 2, 6)]

    def test_fit_most(self):
        """The polygon is clipped to the boundary."""
        result = fit_most(box(0, 0, 4, 4), self.within)
        assert result.area == pytest.approx(9.0)
        assert signed_area(result) > 0

    def test_fit_most_keeps_largest_fragment(self):
        """A polygon split across two arms keeps the larger piece."""
        result = fit_most(box(5, 20, 32, 30), _u_shape())
        assert result.area == pytest.approx(50.0)
        assert result.bounds == pytest.approx((5.0, 20.0, 10.0, 30.0))

    def test_fit_most_without_boundary(self):
        """Without a boundary the polygon is only re-oriented."""
        cw = Polygon([(0, 0), (0, 4), (4, 4), (4, 0)])
        result = fit_most(cw, None)
        assert result.area == pytest.approx(16.0)
        assert signed_area(result) > 0

    def test_fit_most_outside(self):
        """No overlap with the boundary means no fit."""
        assert fit_most(box(20, 20, 21, 21), self.within) is None

    def test_fit_among(self):
        """Obstacles are cut away and the largest piece kept."""
        result = fit_among(box(1, 1, 4, 4), self.among)
        assert result.area == pytest.approx(5.0)

    def test_fit_among_keeps_largest_fragment(self):
        """An obstacle splitting the polygon leaves the larger side."""
        result = fit_among(box(0, 0, 10, 1), [box(2, 0, 3, 1)])
        assert result.area == pytest.approx(7.0)
        assert result.bounds == pytest.approx((3.0, 0.0, 10.0, 1.0))

    def test_fit_among_clear(self):
        """A polygon clear of obstacles is returned as is."""
        square = box(10, 10, 11, 11)
        assert fit_among(square, self.among).equals(square)

    def test_fit_among_covered(self):
        """A polygon buried under an obstacle has no fit."""
        assert fit_among(box(4, 2, 5, 3), self.among) is None

    def test_fit_to(self):
        """Boundary then obstacles."""
        result = fit_to(box(0, 0, 4, 4), self.within, self.among)
        assert result.area == pytest.approx(5.0)
        assert self.within.buffer(1e-9).covers(result)
        assert not intersects(result, self.among)

    def test_fit_to_boundary_only(self):
        """Without obstacles fit_to matches fit_most."""
        result = fit_to(box(0, 0, 4, 4), self.within)
        assert result.area == pytest.approx(9.0)


class TestPredicates:
    """Tests for intersects(), fits() and non_intersecting()."""

    def test_overlap_intersects(self):
        """Shared area counts."""
        assert intersects(box(0, 0, 2, 2), [box(1, 1, 3, 3)])

    def test_touching_does_not_intersect(self):
        """Sharing an edge or a vertex does not count."""
        assert not intersects(box(0, 0, 2, 2), [box(2, 0, 4, 2)])
        assert not intersects(box(0, 0, 2, 2), [box(2, 2, 4, 4)])

    def test_contained_intersects(self):
        """A polygon inside another intersects it."""
        assert intersects(box(1, 1, 2, 2), [box(0, 0, 3, 3)])

    def test_no_candidates(self):
        """None or empty candidates never intersect."""
        assert not intersects(box(0, 0, 1, 1), None)
        assert not intersects(box(0, 0, 1, 1), [])

    def test_fits(self):
        """fits() checks both the boundary and the obstacles."""
        within = box(0, 0, 10, 10)
        assert fits(box(1, 1, 2, 2), within=within)
        assert fits(box(0, 0, 10, 10), within=within)
        assert not fits(box(9, 9, 11, 11), within=within)
        assert not fits(box(1, 1, 2, 2), within=within, among=[box(1.5, 1.5, 3, 3)])
        assert fits(box(1, 1, 2, 2), among=[box(2, 2, 3, 3)])

    def test_non_intersecting(self):
        """Only polygons clear of the placed ones are returned."""
        placed = [box(0, 0, 8, 3)]
        candidates = [box(5, 0, 8, 20), box(8, 0, 10, 3), box(20, 20, 21, 21)]
        result = non_intersecting(placed, candidates)
        assert [p.bounds for p in result] == [(8.0, 0.0, 10.0, 3.0), (20.0, 20.0, 21.0, 21.0)]
