import unittest

import numpy as np

from vectorchart import ConfigurationError
from vectorchart.colors import RGBA, alpha_blend, contrast_color, hex_to_rgb, interpolate_color, rgb_to_css
from vectorchart.numeric import (
    auto_decimals,
    average,
    find_max,
    find_min,
    format_date,
    format_number,
    format_template,
    total,
)


class AggregationTests(unittest.TestCase):
    def test_min_max_skip_null_and_non_numeric(self) -> None:
        values = [3, "2", None, "x", 7.5, ""]
        self.assertEqual(find_min(values), 2.0)
        self.assertEqual(find_max(values), 7.5)

    def test_min_max_span_several_collections(self) -> None:
        self.assertEqual(find_min([5, 9], [1, None]), 1.0)
        self.assertEqual(find_max(np.array([1.0, np.nan]), [4]), 4.0)

    def test_no_valid_values_returns_none_not_zero(self) -> None:
        for values in ([], [None, "", "abc"], [float("nan")]):
            with self.subTest(values=values):
                self.assertIsNone(find_min(values))
                self.assertIsNone(find_max(values))

    def test_zero_is_valid_data(self) -> None:
        self.assertEqual(find_min([0, None]), 0.0)
        self.assertEqual(find_max([0]), 0.0)

    def test_sum_and_average_skip_invalid_values(self) -> None:
        self.assertEqual(total([1, "2.5", None, "n/a"]), 3.5)
        self.assertEqual(average([1, 2, "3", None]), 2.0)

    def test_average_of_nothing_is_zero(self) -> None:
        self.assertEqual(average([]), 0.0)
        self.assertEqual(average([None, "a"]), 0.0)
        self.assertEqual(total([]), 0.0)


class NumberFormatTests(unittest.TestCase):
    def test_auto_decimals_by_magnitude(self) -> None:
        self.assertEqual(auto_decimals(150), 0)
        self.assertEqual(auto_decimals(15), 1)
        self.assertEqual(auto_decimals(1.5), 2)
        self.assertEqual(auto_decimals(0.5), 2)
        self.assertEqual(auto_decimals(0.0012), 4)

    def test_auto_decimals_stop_at_ten(self) -> None:
        self.assertEqual(auto_decimals(1e-12), 10)

    def test_format_with_auto_decimals(self) -> None:
        self.assertEqual(format_number(1234.5), "1,235")
        self.assertEqual(format_number(12.345), "12.3")
        self.assertEqual(format_number(1.5), "1.50")
        self.assertEqual(format_number(0.0012), "0.0012")

    def test_zero_and_tiny_values_format_as_zero(self) -> None:
        self.assertEqual(format_number(0), "0")
        self.assertEqual(format_number(5e-8), "0")
        self.assertEqual(format_number(0, 3, prefix="$", suffix="%"), "$0%")

    def test_custom_separators_and_fixed_decimals(self) -> None:
        out = format_number(1234567.891, 2, decimal_point=",", thousands_sep=".")
        self.assertEqual(out, "1.234.567,89")

    def test_negative_values_round_half_away_from_zero(self) -> None:
        self.assertEqual(format_number(-1234.5), "-1,235")
        self.assertEqual(format_number(-0.001, 2), "0.00")

    def test_prefix_and_suffix(self) -> None:
        self.assertEqual(format_number(99.5, 0, prefix="$"), "$100")
        self.assertEqual(format_number(12.5, 1, suffix=" kg"), "12.5 kg")

    def test_non_numeric_formats_empty(self) -> None:
        self.assertEqual(format_number("abc"), "")
        self.assertEqual(format_number(None), "")

    def test_format_date_is_utc(self) -> None:
        self.assertEqual(format_date(0), "01/01/1970")
        self.assertEqual(format_date(86400 * 365, "%Y-%m-%d"), "1971-01-01")

    def test_template_fields(self) -> None:
        self.assertEqual(format_template("{x}: {y}", x="Jan", y="12.0"), "Jan: 12.0")


class ColorTests(unittest.TestCase):
    def test_hex_to_css_round_trip_without_alpha(self) -> None:
        rgb = hex_to_rgb("#4572A7")
        self.assertEqual(rgb, RGBA(69, 114, 167, 1.0))
        self.assertEqual(rgb_to_css(rgb), "rgb(69, 114, 167)")

    def test_hex_to_css_uses_alpha_form_when_translucent(self) -> None:
        self.assertEqual(rgb_to_css(hex_to_rgb("#4572A7", 0.5)), "rgba(69, 114, 167, 0.5)")

    def test_three_digit_hex(self) -> None:
        self.assertEqual(hex_to_rgb("#fff"), RGBA(255, 255, 255))
        self.assertEqual(hex_to_rgb("0a0"), RGBA(0, 170, 0))

    def test_invalid_hex_is_rejected(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "hex color"):
            hex_to_rgb("#12345")

    def test_interpolation_is_clamped(self) -> None:
        self.assertEqual(interpolate_color("#000000", "#ffffff", 0.5), "#808080")
        self.assertEqual(interpolate_color("#000000", "#ffffff", 0.0), "#000000")
        self.assertEqual(interpolate_color("#000000", "#ffffff", 2.0), "#ffffff")
        self.assertEqual(interpolate_color("#000000", "#ffffff", -1.0), "#000000")

    def test_contrast_picks_black_or_white(self) -> None:
        self.assertEqual(contrast_color("#ffffff"), "#000000")
        self.assertEqual(contrast_color("#000000"), "#ffffff")
        self.assertEqual(contrast_color("#4572A7"), "#ffffff")
        self.assertEqual(contrast_color("#F8D871"), "#000000")

    def test_alpha_blend_against_white(self) -> None:
        self.assertEqual(alpha_blend("#000000", 0.5), "#808080")
        self.assertEqual(alpha_blend("#ff0000", 1.0), "#ff0000")
        self.assertEqual(alpha_blend("#ff0000", 0.0), "#ffffff")


if __name__ == "__main__":
    unittest.main()
