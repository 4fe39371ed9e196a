import unittest
from datetime import datetime, timezone

from tpfeed.markdown_report import render_markdown
from tpfeed.models import CanonicalWorkout, WorkoutResult

CAPTURED_AT = datetime(2024, 3, 5, 6, 0, tzinfo=timezone.utc)


class TestRenderMarkdown(unittest.TestCase):
    def test_single_completed_workout(self) -> None:
        result = WorkoutResult(
            account="alice",
            workouts=(
                CanonicalWorkout(
                    title="Run",
                    date="2024-03-05",
                    duration="0:55:12",
                    is_planned=False,
                    description="easy",
                ),
            ),
            captured_at=CAPTURED_AT,
        )
        self.assertEqual(
            render_markdown(result),
            "# TrainingPeaks Workouts - Alice\n\n"
            "_Last updated: 2024-03-05T06:00:00.000Z_\n"
            "_Total: 1 workouts (0 planned, 1 completed)_\n\n"
            "## 2024-03-05\n\n"
            "### ✅ Run\n\n"
            "- **Duration:** 0:55:12\n"
            "\neasy\n"
            "\n"
            "---\n\n",
        )

    def test_planned_workout_with_all_fields_and_steps(self) -> None:
        result = WorkoutResult(
            account="bob",
            workouts=(
                CanonicalWorkout(
                    title="Intervals",
                    date="2024-03-06",
                    duration="1:00:00",
                    distance="12.0 km",
                    tss="80 TSS",
                    description="Hard day",
                    steps=["Warm up (600s)", "5x active (400m)"],
                ),
            ),
            captured_at=CAPTURED_AT,
        )
        text = render_markdown(result)
        self.assertIn(
            "### ⏳ Intervals\n\n"
            "- **Duration:** 1:00:00\n"
            "- **Distance:** 12.0 km\n"
            "- **TSS:** 80 TSS\n"
            "\nHard day\n"
            "\n**Steps:**\n\n"
            "1. Warm up (600s)\n\n"
            "2. 5x active (400m)\n"
            "\n",
            text,
        )
        self.assertIn("_Total: 1 workouts (1 planned, 0 completed)_", text)

    def test_groups_by_date_and_places_no_date_by_sort_order(self) -> None:
        result = WorkoutResult(
            account="alice",
            workouts=(
                CanonicalWorkout(title="Run", date="2024-03-05"),
                CanonicalWorkout(title="Bike", date="2024-03-05"),
                CanonicalWorkout(title="Swim", date="2024-03-07"),
                CanonicalWorkout(title="Yoga"),
            ),
            captured_at=CAPTURED_AT,
        )
        text = render_markdown(result)
        headings = [line for line in text.splitlines() if line.startswith("## ")]
        self.assertEqual(headings, ["## 2024-03-05", "## 2024-03-07", "## No Date"])
        self.assertLess(text.index("### ⏳ Run"), text.index("### ⏳ Bike"))
        self.assertEqual(text.count("---\n\n"), 3)

    def test_empty_result(self) -> None:
        result = WorkoutResult(account="alice", workouts=(), captured_at=CAPTURED_AT)
        self.assertTrue(render_markdown(result).endswith("_Total: 0 workouts (0 planned, 0 completed)_\n\n"))


if __name__ == "__main__":
    unittest.main()
