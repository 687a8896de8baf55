"""
Unit tests for distance functions and their derivatives.
"""

import pytest
import numpy as np
from numpy.testing import assert_almost_equal, assert_allclose

from covdist.core.exceptions import UnsupportedAxisError
from covdist.core.point import DimsContext, PairPoint, Point
from covdist.distance import metrics
from covdist.distance.geo import dist_km
from covdist.distance.metrics import (
    sqdist_euclidean,
    dist_euclidean,
    dist_euclidean_deriv_wrt_xi,
    dist_euclidean_deriv_wrt_theta,
    pair_dist_euclidean,
    distsq_3d_km,
    dist_3d_km,
    dist3d_deriv_wrt_xi,
    dist3d_deriv_wrt_theta,
    pair_dist_3d_km,
    distsq_6d_km,
    dist_6d_km,
    dist6d_deriv_wrt_xi,
    dist6d_deriv_wrt_theta,
    pair_dist_6d_km,
    dist_geo_km,
    dist_geo_deriv_wrt_xi,
    dist_geo_deriv_wrt_theta,
)


class TestEuclideanDistance:
    """Tests for the scaled Euclidean distance."""

    def test_zero_distance(self):
        """Same points have zero distance."""
        assert dist_euclidean([1.0, 2.0], [1.0, 2.0], None, [1.0, 1.0], DimsContext(2)) == 0.0

    def test_known_distance(self):
        """3-4-5 triangle."""
        d = dist_euclidean([0.0, 0.0], [3.0, 4.0], None, [1.0, 1.0], DimsContext(2))
        assert_almost_equal(d, 5.0)

    def test_scaling(self):
        d = dist_euclidean([0.0, 0.0], [3.0, 4.0], None, [3.0, 4.0], DimsContext(2))
        assert_almost_equal(d, np.sqrt(2.0))

    def test_dimensionality_limits_sum(self):
        """Only the first ``dimensionality`` coordinates contribute."""
        d = dist_euclidean([0.0, 0.0, 0.0], [3.0, 4.0, 12.0], None, [1.0, 1.0, 1.0], DimsContext(1))
        assert_almost_equal(d, 3.0)

    def test_without_context_uses_all_coordinates(self):
        d = dist_euclidean([0.0, 0.0, 0.0], [3.0, 4.0, 12.0], None, [1.0, 1.0, 1.0], None)
        assert_almost_equal(d, 13.0)

    def test_squared_vs_regular(self):
        a, b, s, dims = [0.5, 1.0], [2.0, -3.0], [0.7, 1.3], DimsContext(2)
        assert_almost_equal(
            sqdist_euclidean(a, b, None, s, dims), dist_euclidean(a, b, None, s, dims) ** 2
        )

    def test_symmetry(self, rng):
        a, b = rng.normal(size=4), rng.normal(size=4)
        s, dims = [1.0, 2.0, 0.5, 3.0], DimsContext(4)
        assert_almost_equal(dist_euclidean(a, b, None, s, dims), dist_euclidean(b, a, None, s, dims))

    def test_bound_is_ignored(self):
        dims = DimsContext(2)
        assert dist_euclidean([0.0, 0.0], [3.0, 4.0], 1e-9, [1.0, 1.0], dims) == \
            dist_euclidean([0.0, 0.0], [3.0, 4.0], None, [1.0, 1.0], dims)


class TestEuclideanInstrumentation:
    """Tests for the call counter side effect."""

    def test_point_inputs_record_calls(self, dims2, counter):
        p1, p2 = Point([0.0, 0.0]), Point([3.0, 4.0])
        dist_euclidean(p1, p2, None, [1.0, 1.0], dims2)
        dist_euclidean(p1, p2, None, [1.0, 1.0], dims2)
        assert counter.value == 2

    def test_raw_inputs_do_not_record(self, dims2, counter):
        dist_euclidean(np.array([0.0, 0.0]), np.array([3.0, 4.0]), None, [1.0, 1.0], dims2)
        sqdist_euclidean([0.0, 0.0], [3.0, 4.0], None, [1.0, 1.0], dims2)
        assert counter.value == 0

    def test_same_value_either_way(self, dims2):
        raw = dist_euclidean([1.0, 2.0], [4.0, 6.0], None, [1.0, 2.0], dims2)
        inst = dist_euclidean(Point([1.0, 2.0]), Point([4.0, 6.0]), None, [1.0, 2.0], dims2)
        assert raw == inst

    def test_context_without_counter(self):
        dims = DimsContext(2)
        d = dist_euclidean(Point([0.0, 0.0]), Point([3.0, 4.0]), None, [1.0, 1.0], dims)
        assert_almost_equal(d, 5.0)
        assert dims.calls == 0


class TestEuclideanDerivatives:
    """Tests for Euclidean derivatives."""

    p1 = np.array([1.0, 2.0, 3.0])
    p2 = np.array([0.5, -1.0, 2.0])
    scales = np.array([1.0, 2.0, 0.5])
    dims = DimsContext(3)

    def test_wrt_xi_matches_finite_difference(self, numeric_diff):
        d = dist_euclidean(self.p1, self.p2, None, self.scales, self.dims)
        for i in range(3):
            analytic = dist_euclidean_deriv_wrt_xi(self.p1, self.p2, i, d, None, self.scales, self.dims)
            numeric = numeric_diff(
                lambda x: dist_euclidean(x, self.p2, None, self.scales, self.dims), self.p1, i
            )
            assert_allclose(analytic, numeric, rtol=1e-6, atol=1e-8)

    def test_wrt_theta_matches_finite_difference(self, numeric_diff):
        d = dist_euclidean(self.p1, self.p2, None, self.scales, self.dims)
        for i in range(3):
            analytic = dist_euclidean_deriv_wrt_theta(self.p1, self.p2, i, d, None, self.scales, self.dims)
            numeric = numeric_diff(
                lambda s: dist_euclidean(self.p1, self.p2, None, s, self.dims), self.scales, i
            )
            assert_allclose(analytic, numeric, rtol=1e-6, atol=1e-8)

    def test_zero_distance_derivatives(self):
        p = [1.0, 2.0]
        assert dist_euclidean_deriv_wrt_xi(p, p, 0, 0.0, None, [1.0, 1.0], DimsContext(2)) == 0.0
        assert dist_euclidean_deriv_wrt_theta(p, p, 1, 0.0, None, [1.0, 1.0], DimsContext(2)) == 0.0

    def test_theta_derivative_non_positive(self, rng):
        """Growing a lengthscale can only shrink the distance."""
        for _ in range(20):
            a, b = rng.normal(size=3), rng.normal(size=3)
            d = dist_euclidean(a, b, None, self.scales, self.dims)
            for i in range(3):
                assert dist_euclidean_deriv_wrt_theta(a, b, i, d, None, self.scales, self.dims) <= 0


class TestPairEuclidean:
    """Tests for the pair-point Euclidean distance."""

    def test_known_distance(self):
        pp1 = PairPoint([0.0, 0.0], [0.0, 0.0])
        pp2 = PairPoint([3.0, 0.0], [0.0, 4.0])
        assert_almost_equal(pair_dist_euclidean(pp1, pp2, None, [1.0, 1.0], DimsContext(2)), 5.0)

    def test_sums_squared_distances(self, rng):
        a1, a2, b1, b2 = (rng.normal(size=2) for _ in range(4))
        s, dims = [1.5, 0.5], DimsContext(2)
        expected = np.sqrt(sqdist_euclidean(a1, b1, None, s, dims) + sqdist_euclidean(a2, b2, None, s, dims))
        assert_almost_equal(pair_dist_euclidean(PairPoint(a1, a2), PairPoint(b1, b2), None, s, dims), expected)


class TestGreatCircleMetric:
    """Tests for the scaled great-circle metric."""

    def test_scaled(self):
        d = dist_geo_km((0.0, 0.0), (0.0, 1.0), None, [dist_km((0.0, 0.0), (0.0, 1.0))])
        assert_almost_equal(d, 1.0)

    def test_derivatives(self, numeric_diff):
        p1, p2, s = np.array([3.0, 4.0]), np.array([5.0, 1.0]), np.array([50.0])
        d = dist_geo_km(p1, p2, None, s)
        for i in (0, 1):
            numeric = numeric_diff(lambda x: dist_geo_km(x, p2, None, s), p1, i)
            assert_allclose(dist_geo_deriv_wrt_xi(p1, p2, i, d, None, s), numeric, rtol=1e-5)
        numeric = numeric_diff(lambda x: dist_geo_km(p1, p2, None, x), s, 0)
        assert_allclose(dist_geo_deriv_wrt_theta(p1, p2, 0, d, None, s), numeric, rtol=1e-6)

    def test_unsupported_theta_axis(self):
        with pytest.raises(UnsupportedAxisError):
            dist_geo_deriv_wrt_theta((0.0, 0.0), (1.0, 1.0), 1, 1.0, None, [1.0])


class TestDist3d:
    """Tests for the great-circle + depth distance."""

    def test_quadrature(self):
        p1, p2 = [0.0, 0.0, 0.0], [0.0, 1.0, 10.0]
        s0 = dist_km(p1, p2)
        assert_almost_equal(distsq_3d_km(p1, p2, None, [s0, 10.0]), 2.0)
        assert_almost_equal(dist_3d_km(p1, p2, None, [s0, 10.0]), np.sqrt(2.0))

    def test_zero_distance(self):
        p = [10.0, 45.0, 5.0]
        assert dist_3d_km(p, p, None, [100.0, 20.0]) == 0.0

    def test_depth_only(self):
        d = dist_3d_km([10.0, 45.0, 5.0], [10.0, 45.0, 25.0], None, [100.0, 20.0])
        assert_almost_equal(d, 1.0)

    def test_point_objects(self, lld_points, lld_scales):
        p1, p2 = lld_points
        assert dist_3d_km(Point(p1), Point(p2), None, lld_scales) == dist_3d_km(p1, p2, None, lld_scales)

    def test_wrt_xi_matches_finite_difference(self, lld_points, lld_scales, numeric_diff):
        p1, p2 = lld_points
        d = dist_3d_km(p1, p2, None, lld_scales)
        for i in range(3):
            analytic = dist3d_deriv_wrt_xi(p1, p2, i, d, None, lld_scales)
            numeric = numeric_diff(lambda x: dist_3d_km(x, p2, None, lld_scales), p1, i)
            assert_allclose(analytic, numeric, rtol=1e-5, atol=1e-8)

    def test_wrt_theta_matches_finite_difference(self, lld_points, lld_scales, numeric_diff):
        p1, p2 = lld_points
        d = dist_3d_km(p1, p2, None, lld_scales)
        for i in range(2):
            analytic = dist3d_deriv_wrt_theta(p1, p2, i, d, None, lld_scales)
            numeric = numeric_diff(lambda s: dist_3d_km(p1, p2, None, s), lld_scales, i)
            assert_allclose(analytic, numeric, rtol=1e-5, atol=1e-10)

    def test_zero_distance_derivatives(self):
        p = [10.0, 45.0, 5.0]
        for i in range(3):
            assert dist3d_deriv_wrt_xi(p, p, i, 0.0, None, [100.0, 20.0]) == 0.0
        for i in range(2):
            assert dist3d_deriv_wrt_theta(p, p, i, 0.0, None, [100.0, 20.0]) == 0.0

    def test_coincident_horizontal_position(self):
        """Same (lon, lat), different depth: geodesic derivative stays finite."""
        p1, p2 = [10.0, 45.0, 5.0], [10.0, 45.0, 25.0]
        d = dist_3d_km(p1, p2, None, [100.0, 20.0])
        for i in range(2):
            assert np.isfinite(dist3d_deriv_wrt_xi(p1, p2, i, d, None, [100.0, 20.0]))

    @pytest.mark.parametrize("i", [3, -1, 7])
    def test_unsupported_xi_axis(self, lld_points, lld_scales, i):
        p1, p2 = lld_points
        with pytest.raises(UnsupportedAxisError):
            dist3d_deriv_wrt_xi(p1, p2, i, 1.0, None, lld_scales)

    @pytest.mark.parametrize("i", [2, -1])
    def test_unsupported_theta_axis(self, lld_points, lld_scales, i):
        p1, p2 = lld_points
        with pytest.raises(UnsupportedAxisError):
            dist3d_deriv_wrt_theta(p1, p2, i, 1.0, None, lld_scales)

    def test_unstable_derivative_is_clamped(self, lld_points, lld_scales, monkeypatch):
        """Chain-rule results below the instability threshold become 0."""
        p1, p2 = lld_points
        d = dist_3d_km(p1, p2, None, lld_scales)
        monkeypatch.setattr(metrics, "dist_km_deriv_wrt_xi", lambda *args: -1e12)
        assert dist3d_deriv_wrt_xi(p1, p2, 0, d, None, lld_scales) == 0.0

    def test_moderate_negative_derivative_not_clamped(self, lld_points, lld_scales, monkeypatch):
        p1, p2 = lld_points
        d = dist_3d_km(p1, p2, None, lld_scales)
        monkeypatch.setattr(metrics, "dist_km_deriv_wrt_xi", lambda *args: -1.0)
        assert dist3d_deriv_wrt_xi(p1, p2, 0, d, None, lld_scales) < 0


class TestPair3d:
    """Tests for the pair-point 3D distance."""

    def test_matches_sum_of_squares(self, lld_points, lld_scales):
        a, b = lld_points
        c, e = a + [1.0, 1.0, 3.0], b + [0.5, -2.0, 1.0]
        expected = np.sqrt(distsq_3d_km(a, b, None, lld_scales) + distsq_3d_km(c, e, None, lld_scales))
        assert_almost_equal(pair_dist_3d_km(PairPoint(a, c), PairPoint(b, e), None, lld_scales), expected)

    def test_zero(self, lld_points, lld_scales):
        a, b = lld_points
        assert pair_dist_3d_km(PairPoint(a, b), PairPoint(a, b), None, lld_scales) == 0.0


class TestDist6d:
    """Tests for the two-body distance."""

    def test_sum_of_3d_distances(self, two_body_points, two_body_scales):
        p1, p2 = two_body_points
        expected = (distsq_3d_km(p1[:3], p2[:3], None, two_body_scales[:2])
                    + distsq_3d_km(p1[3:], p2[3:], None, two_body_scales[2:]))
        assert_almost_equal(distsq_6d_km(p1, p2, None, two_body_scales), expected)
        assert_almost_equal(dist_6d_km(p1, p2, None, two_body_scales), np.sqrt(expected))

    def test_zero_distance(self, two_body_points, two_body_scales):
        p1, _ = two_body_points
        assert dist_6d_km(p1, p1, None, two_body_scales) == 0.0

    def test_wrt_theta_matches_finite_difference(self, two_body_points, two_body_scales, numeric_diff):
        p1, p2 = two_body_points
        d = dist_6d_km(p1, p2, None, two_body_scales)
        for i in range(4):
            analytic = dist6d_deriv_wrt_theta(p1, p2, i, d, None, two_body_scales)
            numeric = numeric_diff(lambda s: dist_6d_km(p1, p2, None, s), two_body_scales, i)
            assert_allclose(analytic, numeric, rtol=1e-5, atol=1e-10)

    def test_wrt_xi_matches_finite_difference(self, two_body_points, two_body_scales, numeric_diff):
        p1, p2 = two_body_points
        d = dist_6d_km(p1, p2, None, two_body_scales)
        for i in range(6):
            analytic = dist6d_deriv_wrt_xi(p1, p2, i, d, None, two_body_scales)
            numeric = numeric_diff(lambda x: dist_6d_km(x, p2, None, two_body_scales), p1, i)
            assert_allclose(analytic, numeric, rtol=1e-5, atol=1e-8)

    def test_zero_distance_derivatives(self, two_body_points, two_body_scales):
        p1, _ = two_body_points
        for i in range(4):
            assert dist6d_deriv_wrt_theta(p1, p1, i, 0.0, None, two_body_scales) == 0.0
        for i in range(6):
            assert dist6d_deriv_wrt_xi(p1, p1, i, 0.0, None, two_body_scales) == 0.0

    @pytest.mark.parametrize("i", [4, -1, 10])
    def test_unsupported_theta_axis(self, two_body_points, two_body_scales, i):
        p1, p2 = two_body_points
        with pytest.raises(UnsupportedAxisError):
            dist6d_deriv_wrt_theta(p1, p2, i, 1.0, None, two_body_scales)

    def test_unsupported_xi_axis(self, two_body_points, two_body_scales):
        p1, p2 = two_body_points
        with pytest.raises(UnsupportedAxisError):
            dist6d_deriv_wrt_xi(p1, p2, 6, 1.0, None, two_body_scales)


class TestPair6d:
    """Tests for the pair-point 6D distance."""

    pp1 = PairPoint([0.0, 0.0, 0.0], [1.0, 1.0, 5.0])
    pp2 = PairPoint([0.0, 1.0, 2.0], [1.0, 2.0, 9.0])

    def test_eight_term_combination(self):
        s = [100.0, 3.0, 400.0, 50.0]
        g1 = dist_km(self.pp1.pt1, self.pp2.pt1)
        g2 = dist_km(self.pp1.pt2, self.pp2.pt2)
        dd1, dd2 = 2.0, 4.0
        expected = np.sqrt(
            (g1 ** 2 + g2 ** 2) / s[0] ** 2
            + (g1 ** 2 + g2 ** 2) / s[2] ** 2
            + 2 * (dd1 ** 2 + dd2 ** 2) / s[1] ** 2
        )
        assert_almost_equal(pair_dist_6d_km(self.pp1, self.pp2, None, s), expected)

    def test_fourth_scale_unused(self):
        """Both depth terms use scales[1]; scales[3] has no effect."""
        a = pair_dist_6d_km(self.pp1, self.pp2, None, [100.0, 3.0, 400.0, 50.0])
        b = pair_dist_6d_km(self.pp1, self.pp2, None, [100.0, 3.0, 400.0, 0.001])
        assert a == b

    def test_non_negative(self):
        assert pair_dist_6d_km(self.pp1, self.pp1, None, [1.0, 1.0, 1.0, 1.0]) == 0.0
