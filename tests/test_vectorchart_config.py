import unittest
import xml.etree.ElementTree as ET

from vectorchart import Chart, ConfigurationError
from vectorchart.config import (
    DEFAULT_PALETTE,
    AxisOptions,
    ChartConfig,
    SeriesOptions,
    apply_override,
    option_name,
)


class ApplyOverrideTests(unittest.TestCase):
    def test_no_override_returns_defaults(self) -> None:
        config = apply_override(ChartConfig(), None)
        self.assertEqual(config, ChartConfig())
        self.assertEqual(config.width, 800.0)
        self.assertEqual(config.colors, DEFAULT_PALETTE)

    def test_partial_nested_override(self) -> None:
        base = ChartConfig()
        config = apply_override(base, {"width": 640, "legend": {"position": "top"}})
        self.assertEqual(config.width, 640.0)
        self.assertIsInstance(config.width, float)
        self.assertEqual(config.legend.position, "top")
        self.assertEqual(config.legend.font_size, base.legend.font_size)
        self.assertEqual(base.width, 800.0)
        self.assertEqual(base.legend.position, "bottom")

    def test_camel_case_keys_are_accepted(self) -> None:
        opts = apply_override(SeriesOptions(), {"fillOpacity": 0.5, "showInLegend": False, "bar": {"maxWidth": 20}})
        self.assertEqual(opts.fill_opacity, 0.5)
        self.assertFalse(opts.show_in_legend)
        self.assertEqual(opts.bar.max_width, 20.0)
        self.assertEqual(option_name("xAxisId"), "x_axis_id")

    def test_unknown_option_is_rejected_with_path(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, r"Unknown option: legend\.bogus"):
            apply_override(ChartConfig(), {"legend": {"bogus": 1}})

    def test_invalid_hex_color_is_rejected(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "hex color"):
            apply_override(ChartConfig(), {"background": {"color": "red"}})

    def test_empty_color_means_automatic(self) -> None:
        self.assertEqual(apply_override(SeriesOptions(), {"color": ""}).color, "")

    def test_palette_must_hold_hex_colors(self) -> None:
        config = apply_override(ChartConfig(), {"colors": ["#111111", "#222"]})
        self.assertEqual(config.colors, ("#111111", "#222"))
        with self.assertRaisesRegex(ConfigurationError, "hex colors"):
            apply_override(ChartConfig(), {"colors": ["#111111", "blue"]})

    def test_choice_fields_are_checked(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "must be one of"):
            apply_override(ChartConfig(), {"legend": {"position": "middle"}})

    def test_positive_fields_are_checked(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "positive number"):
            apply_override(ChartConfig(), {"width": 0})

    def test_value_types_are_checked(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "boolean"):
            apply_override(ChartConfig(), {"legend": {"enabled": "yes"}})
        with self.assertRaisesRegex(ConfigurationError, "integer"):
            apply_override(SeriesOptions(), {"x_axis_id": 1.5})
        with self.assertRaisesRegex(ConfigurationError, "must be a mapping"):
            apply_override(ChartConfig(), {"legend": 5})

    def test_optional_numbers(self) -> None:
        opts = apply_override(AxisOptions(), {"min": 0, "max": 12, "labels": {"decimals": 2}})
        self.assertEqual(opts.min, 0.0)
        self.assertEqual(opts.max, 12.0)
        self.assertEqual(opts.labels.decimals, 2)

    def test_gradient_options(self) -> None:
        opts = apply_override(SeriesOptions(), {"gradient": {"enabled": True, "stops": [0, 40], "angle": 45}})
        self.assertEqual(opts.gradient.stops, (0.0, 40.0))
        self.assertEqual(opts.gradient.angle, 45.0)
        with self.assertRaisesRegex(ConfigurationError, "must contain numbers"):
            apply_override(SeriesOptions(), {"gradient": {"stops": ["a"]}})
        with self.assertRaisesRegex(ConfigurationError, "must be one of"):
            apply_override(SeriesOptions(), {"gradient": {"type": "conic"}})


class NumberFormatTests(unittest.TestCase):
    def _texts(self, c: Chart) -> set[str]:
        root = ET.fromstring(c.render().encode("utf-8"))
        return {el.text for el in root.iter() if el.tag.endswith("text") and el.text}

    def test_defaults_use_point_decimals_and_comma_thousands(self) -> None:
        nf = ChartConfig().number_format
        self.assertEqual((nf.decimal_point, nf.thousands_sep), (".", ","))
        texts = self._texts(Chart().add_y_values([1000, 2000], "a", options={"data_labels": {"enabled": True}}))
        self.assertIn("2,000", texts)

    def test_comma_decimals_can_be_configured(self) -> None:
        c = (
            Chart()
            .update_config({"numberFormat": {"decimalPoint": ",", "thousandsSep": "."}})
            .add_y_values([1000, 2000], "a", options={"data_labels": {"enabled": True}})
        )
        texts = self._texts(c)
        self.assertIn("2.000", texts)
        self.assertNotIn("2,000", texts)


if __name__ == "__main__":
    unittest.main()
