import unittest

import numpy as np

from vectorchart import ConfigurationError
from vectorchart.scales import NiceScale, compute_nice_scale, decimals_for_interval, map_domain_to_range


class NiceScaleTests(unittest.TestCase):
    def test_scale_contains_range_and_steps_evenly(self) -> None:
        ranges = [
            (0.0, 100.0),
            (-7.0, 23.0),
            (0.003, 0.0171),
            (12.5, 13.1),
            (-1500.0, -20.0),
            (1e6, 4.2e6),
            (-0.3, 0.7),
        ]
        for vmin, vmax in ranges:
            for ticks in range(2, 11):
                for include_zero in (True, False):
                    with self.subTest(vmin=vmin, vmax=vmax, ticks=ticks, include_zero=include_zero):
                        scale = compute_nice_scale(vmin, vmax, ticks, include_zero)
                        self.assertLessEqual(scale.min, vmin)
                        self.assertGreaterEqual(scale.max, vmax)
                        self.assertGreater(scale.tick_interval, 0)
                        steps = (scale.max - scale.min) / scale.tick_interval
                        self.assertAlmostEqual(steps, round(steps), places=6)
                        self.assertEqual(scale.tick_count, round(steps) + 1)

    def test_equal_bounds_are_widened(self) -> None:
        scale = compute_nice_scale(5, 5, 5, True)
        self.assertLessEqual(scale.min, 4)
        self.assertGreaterEqual(scale.max, 6)
        self.assertGreater(scale.tick_interval, 0)
        self.assertEqual(scale, NiceScale(min=0.0, max=6.0, tick_interval=2.0, tick_count=4))

    def test_equal_bounds_without_zero(self) -> None:
        scale = compute_nice_scale(5, 5, 5, False)
        self.assertEqual(scale, NiceScale(min=4.0, max=6.0, tick_interval=0.5, tick_count=5))

    def test_interval_snaps_to_one_two_five(self) -> None:
        self.assertEqual(compute_nice_scale(0, 100, 5, True), NiceScale(0.0, 100.0, 20.0, 6))
        self.assertEqual(compute_nice_scale(-7, 23, 6, False), NiceScale(-10.0, 25.0, 5.0, 8))
        self.assertEqual(compute_nice_scale(0, 90, 10, True).tick_interval, 10.0)

    def test_include_zero_extends_negative_range_up(self) -> None:
        scale = compute_nice_scale(-50, -10, 5, True)
        self.assertEqual(scale, NiceScale(-50.0, 0.0, 10.0, 6))

    def test_include_zero_extends_positive_range_down(self) -> None:
        self.assertEqual(compute_nice_scale(40, 90, 5, True).min, 0.0)
        self.assertGreater(compute_nice_scale(40, 90, 5, False).min, 0.0)

    def test_tick_count_must_exceed_one(self) -> None:
        for ticks in (1, 0, -3):
            with self.assertRaisesRegex(ConfigurationError, "tick count"):
                compute_nice_scale(0, 10, ticks, True)

    def test_inverted_bounds_are_rejected(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "greater than max"):
            compute_nice_scale(10, 0, 5, True)

    def test_ticks_land_on_interval_multiples(self) -> None:
        ticks = compute_nice_scale(0, 100, 5, True).ticks()
        np.testing.assert_allclose(ticks, [0, 20, 40, 60, 80, 100])

    def test_decimals_follow_interval(self) -> None:
        self.assertEqual(decimals_for_interval(20.0), 0)
        self.assertEqual(decimals_for_interval(0.5), 1)
        self.assertEqual(decimals_for_interval(0.25), 2)


class DomainMappingTests(unittest.TestCase):
    def test_linear_interpolation(self) -> None:
        self.assertEqual(map_domain_to_range(5, 0, 10, 0, 100), 50.0)
        self.assertEqual(map_domain_to_range(0, 0, 10, 50, 750), 50.0)
        self.assertEqual(map_domain_to_range(10, 0, 10, 50, 750), 750.0)

    def test_mapping_is_monotonic_increasing(self) -> None:
        values = np.linspace(-20.0, 20.0, 41)
        pixels = [map_domain_to_range(v, -20, 20, 50, 750) for v in values]
        self.assertTrue(all(b >= a for a, b in zip(pixels, pixels[1:])))

    def test_mapping_is_monotonic_decreasing_for_inverted_range(self) -> None:
        values = np.linspace(0.0, 60.0, 31)
        pixels = [map_domain_to_range(v, 0, 60, 450, 50) for v in values]
        self.assertTrue(all(b <= a for a, b in zip(pixels, pixels[1:])))
        self.assertEqual(pixels[0], 450.0)
        self.assertEqual(pixels[-1], 50.0)

    def test_zero_width_domain_is_rejected(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "zero-width"):
            map_domain_to_range(3, 3, 3, 0, 100)


if __name__ == "__main__":
    unittest.main()
