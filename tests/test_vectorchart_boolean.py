import unittest
import xml.etree.ElementTree as ET

import numpy as np

from vectorchart import Chart, DataGapError
from vectorchart.renderers.boolean import StateRun, coerce_bool, state_runs
from vectorchart.series import SeriesData


def _data(times, values, name="door") -> SeriesData:
    return SeriesData(
        name=name,
        x_raw=tuple(times),
        y_raw=tuple(values),
        x=np.asarray(times, dtype=np.float64),
        y=np.asarray([1.0 if coerce_bool(v) else 0.0 for v in values]),
        has_x=True,
    )


def _state_rects(document: str) -> list[ET.Element]:
    root = ET.fromstring(document.encode("utf-8"))
    return [el for el in root.iter() if el.tag.endswith("rect") and (el.get("class") or "").startswith("state-")]


class CoerceBoolTests(unittest.TestCase):
    def test_truthy_strings_are_case_insensitive(self) -> None:
        for value in ("true", "TRUE", "1", "yes", "Y", "on", " On "):
            with self.subTest(value=value):
                self.assertTrue(coerce_bool(value))

    def test_everything_else_is_false(self) -> None:
        for value in ("false", "0", "no", "off", "", "maybe", None, [], 0, 0.0, float("nan"), False):
            with self.subTest(value=value):
                self.assertFalse(coerce_bool(value))

    def test_numbers_use_non_zero(self) -> None:
        self.assertTrue(coerce_bool(2))
        self.assertTrue(coerce_bool(-0.5))
        self.assertTrue(coerce_bool(np.float64(1.0)))
        self.assertTrue(coerce_bool(True))


class StateRunTests(unittest.TestCase):
    def test_runs_cover_the_span_with_a_closing_run(self) -> None:
        runs = state_runs(_data([0, 1, 2, 3, 4], [True, True, False, False, True]))
        self.assertEqual(
            runs,
            [
                StateRun(state=True, start=0.0, end=2.0),
                StateRun(state=False, start=2.0, end=4.0),
                StateRun(state=True, start=4.0, end=4.0),
            ],
        )

    def test_samples_are_sorted_by_time(self) -> None:
        runs = state_runs(_data([4, 0, 2, 1, 3], [True, True, False, True, False]))
        self.assertEqual([(r.state, r.start, r.end) for r in runs], [(True, 0.0, 2.0), (False, 2.0, 4.0), (True, 4.0, 4.0)])

    def test_equal_timestamps_keep_input_order(self) -> None:
        runs = state_runs(_data([0, 1, 1, 2], [False, True, False, False]))
        self.assertEqual([(r.state, r.start, r.end) for r in runs], [(False, 0.0, 1.0), (True, 1.0, 1.0), (False, 1.0, 2.0)])

    def test_constant_signal_is_one_run(self) -> None:
        runs = state_runs(_data([0, 5, 10], ["on", "yes", 1]))
        self.assertEqual(runs, [StateRun(state=True, start=0.0, end=10.0)])

    def test_runs_are_minimal_and_contiguous(self) -> None:
        rng = np.random.default_rng(7)
        values = rng.integers(0, 2, size=200).astype(bool).tolist()
        times = list(range(200))
        runs = state_runs(_data(times, values))
        changes = sum(1 for a, b in zip(values, values[1:]) if a != b)
        self.assertEqual(len(runs), changes + 1)
        for a, b in zip(runs, runs[1:]):
            self.assertNotEqual(a.state, b.state)
            self.assertEqual(a.end, b.start)
        self.assertEqual(runs[0].start, 0.0)
        self.assertEqual(runs[-1].end, 199.0)

    def test_fewer_than_two_samples_is_a_data_gap(self) -> None:
        with self.assertRaisesRegex(DataGapError, "at least 2 samples"):
            state_runs(_data([3], [True]))

    def test_non_numeric_timestamps_are_dropped(self) -> None:
        data = SeriesData(
            name="door",
            x_raw=(0, "bad", 2),
            y_raw=(True, False, True),
            x=np.array([0.0, np.nan, 2.0]),
            y=np.array([1.0, 0.0, 1.0]),
            has_x=True,
        )
        self.assertEqual(state_runs(data), [StateRun(state=True, start=0.0, end=2.0)])

    def test_missing_values_are_dropped_not_read_as_false(self) -> None:
        runs = state_runs(_data([0, 1, 2, 3], [True, None, True, False]))
        self.assertEqual(runs, [StateRun(state=True, start=0.0, end=3.0), StateRun(state=False, start=3.0, end=3.0)])

    def test_blank_strings_count_as_missing(self) -> None:
        runs = state_runs(_data([0, 1, 2], ["on", "  ", "on"]))
        self.assertEqual(runs, [StateRun(state=True, start=0.0, end=2.0)])


class BooleanRendererTests(unittest.TestCase):
    def _chart(self, values, options=None) -> Chart:
        return (
            Chart()
            .add_values("t", [0, 1, 2, 3, 4])
            .add_values("door", values)
            .add_series("door", "door", x="t", type="boolean", options=options)
        )

    def test_horizontal_timeline_emits_three_rectangles(self) -> None:
        rects = _state_rects(self._chart([True, True, False, False, True]).render())
        self.assertEqual(len(rects), 3)
        self.assertEqual([r.get("class") for r in rects], ["state-true", "state-false", "state-true"])
        self.assertEqual([r.get("x") for r in rects], ["50", "400", "750"])
        self.assertEqual([r.get("width") for r in rects], ["350", "350", "0"])
        self.assertEqual({r.get("y") for r in rects}, {"50"})
        self.assertEqual({r.get("height") for r in rects}, {"30"})
        self.assertEqual([r.get("fill") for r in rects], ["#4CAF50", "#F44336", "#4CAF50"])
        self.assertTrue(all(r.get("stroke") is None for r in rects))

    def test_vertical_timeline_grows_upwards(self) -> None:
        rects = _state_rects(self._chart([True, True, False, False, True], {"boolean": {"horizontal": False}}).render())
        self.assertEqual([(r.get("y"), r.get("height")) for r in rects], [("250", "200"), ("50", "200"), ("50", "0")])
        self.assertEqual({r.get("x") for r in rects}, {"50"})
        self.assertEqual({r.get("width") for r in rects}, {"30"})

    def test_position_stacks_timelines(self) -> None:
        rects = _state_rects(self._chart([True, True, True, True, True], {"boolean": {"position": 2}}).render())
        self.assertEqual(len(rects), 1)
        self.assertEqual(rects[0].get("y"), "130")

    def test_label_is_placed_beside_the_bar(self) -> None:
        document = self._chart(
            [True, False, True, False, True],
            {"boolean": {"label": {"enabled": True, "text": "Door open"}}},
        ).render()
        root = ET.fromstring(document.encode("utf-8"))
        labels = [el for el in root.iter() if el.tag.endswith("text") and el.text == "Door open"]
        self.assertEqual(len(labels), 1)
        self.assertEqual(labels[0].get("x"), "760")
        self.assertEqual(labels[0].get("y"), "65")
        self.assertEqual(labels[0].get("dominant-baseline"), "middle")

    def test_vertical_label_sits_on_top_unless_bottom_is_requested(self) -> None:
        for position, y in (("top", "40"), ("left", "40"), ("right", "40"), ("bottom", "470")):
            with self.subTest(position=position):
                document = self._chart(
                    [True, False, True, False, True],
                    {"boolean": {"horizontal": False, "label": {"enabled": True, "text": "Door", "position": position}}},
                ).render()
                root = ET.fromstring(document.encode("utf-8"))
                labels = [el for el in root.iter() if el.tag.endswith("text") and el.text == "Door"]
                self.assertEqual(len(labels), 1)
                self.assertEqual(labels[0].get("x"), "65")
                self.assertEqual(labels[0].get("y"), y)

    def test_single_sample_series_is_skipped(self) -> None:
        chart = (
            Chart()
            .add_values("t", [0, 1, 2])
            .add_values("ok", [True, False, False])
            .add_values("lonely", [True])
            .add_series("ok", "ok", x="t", type="boolean")
            .add_series("lonely", "lonely", x="t", type="boolean", options={"boolean": {"position": 1}})
        )
        with self.assertLogs("vectorchart.renderers.base", level="WARNING") as logs:
            rects = _state_rects(chart.render())
        self.assertEqual(len(rects), 2)
        self.assertIn("lonely", "\n".join(logs.output))


if __name__ == "__main__":
    unittest.main()
