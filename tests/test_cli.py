import re
import tempfile
import unittest
from pathlib import Path

from typer.testing import CliRunner

from funcsamp.ui.cli import app

from sample_data import BILINEAR_POINTS, INSIDE_QUARTERDISK, OUTSIDE_QUARTERDISK, write_table

REPORT_LINE = re.compile(r"^\d+ -?\d+\.\d{6}( -?\d+\.\d{6})?$")


def _report_lines(text: str):
    return [line for line in text.splitlines() if REPORT_LINE.match(line.strip())]


class CliRunTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmp.name)
        self.bilinear = write_table(self.tmpdir / "bilinear.data", [BILINEAR_POINTS])
        self.quarterdisk = write_table(
            self.tmpdir / "quarterdisk.data", [INSIDE_QUARTERDISK, OUTSIDE_QUARTERDISK]
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_bilinear_scenario_prints_single_line(self) -> None:
        result = self.runner.invoke(app, ["run", "bilinear", str(self.bilinear), "4", "1"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.stdout, "4 0.125000\n")

    def test_quarterdisk_scenario_with_max_column(self) -> None:
        result = self.runner.invoke(app, ["run", "quarterdisk", str(self.quarterdisk), "4", "2", "--max"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.stdout, "4 0.500000 0.500000\n")

    def test_report_covers_multiples_of_four(self) -> None:
        path = write_table(self.tmpdir / "long.data", [BILINEAR_POINTS * 4] * 3)
        result = self.runner.invoke(app, ["run", "bilinear", str(path), "16", "3"])
        self.assertEqual(result.exit_code, 0, result.output)
        counts = [int(line.split()[0]) for line in _report_lines(result.stdout)]
        self.assertEqual(counts, [4, 8, 12, 16])

    def test_unknown_integrand_exits_nonzero_without_report(self) -> None:
        result = self.runner.invoke(app, ["run", "nosuchfunction", str(self.bilinear), "4", "1"])
        self.assertEqual(result.exit_code, 1)
        self.assertEqual(_report_lines(result.stdout), [])
        self.assertIn("nosuchfunction", result.output)

    def test_missing_source_exits_nonzero(self) -> None:
        result = self.runner.invoke(app, ["run", "bilinear", str(self.tmpdir / "missing.data"), "4", "1"])
        self.assertEqual(result.exit_code, 1)
        self.assertEqual(_report_lines(result.stdout), [])

    def test_truncated_source_exits_nonzero_without_report(self) -> None:
        result = self.runner.invoke(app, ["run", "bilinear", str(self.bilinear), "8", "1"])
        self.assertEqual(result.exit_code, 1)
        self.assertEqual(_report_lines(result.stdout), [])

    def test_strict_flag_rejects_truncation_while_loading(self) -> None:
        result = self.runner.invoke(app, ["run", "bilinear", str(self.bilinear), "4", "2", "--strict"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("truncated", result.output)

    def test_non_finite_point_exits_nonzero_without_report(self) -> None:
        path = write_table(self.tmpdir / "nan.data", [[(float("nan"), 0.5)] + BILINEAR_POINTS[1:]])
        result = self.runner.invoke(app, ["run", "bilinear", str(path), "4", "1"])
        self.assertEqual(result.exit_code, 1)
        self.assertIsInstance(result.exception, SystemExit)
        self.assertEqual(_report_lines(result.stdout), [])

    def test_undecodable_source_exits_nonzero(self) -> None:
        path = self.tmpdir / "binary.data"
        path.write_bytes(b"// header\n// header\n// Sequence 0:\n\xff\xfe 0.5\n")
        result = self.runner.invoke(app, ["run", "bilinear", str(path), "4", "1"])
        self.assertEqual(result.exit_code, 1)
        self.assertIsInstance(result.exception, SystemExit)
        self.assertIn("UTF-8", result.output)

    def test_unknown_log_level_is_usage_error(self) -> None:
        result = self.runner.invoke(app, ["--log-level", "LOUD", "run", "bilinear", str(self.bilinear), "4", "1"])
        self.assertEqual(result.exit_code, 2)
        self.assertIsInstance(result.exception, SystemExit)
        self.assertEqual(_report_lines(result.stdout), [])

    def test_csv_export(self) -> None:
        csv_path = self.tmpdir / "out" / "bilinear.csv"
        result = self.runner.invoke(
            app, ["run", "bilinear", str(self.bilinear), "4", "1", "--csv", str(csv_path)]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue(csv_path.exists())
        self.assertTrue(csv_path.with_suffix(".json").exists())


class CliCatalogTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()

    def test_list_shows_integrands(self) -> None:
        result = self.runner.invoke(app, ["list"])
        self.assertEqual(result.exit_code, 0, result.output)
        for name in ("quarterdisk", "sininvr", "sin2x"):
            self.assertIn(name, result.stdout)

    def test_verify_selected_integrands(self) -> None:
        result = self.runner.invoke(app, ["verify", "bilinear", "lineary"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("PASS", result.stdout)

    def test_verify_unknown_integrand(self) -> None:
        result = self.runner.invoke(app, ["verify", "nosuchfunction"])
        self.assertEqual(result.exit_code, 1)


class CliCompareTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmp.name)
        write_table(self.tmpdir / "inside.data", [INSIDE_QUARTERDISK * 2] * 2)
        write_table(self.tmpdir / "mixed.data", [INSIDE_QUARTERDISK * 2, OUTSIDE_QUARTERDISK * 2])
        self.plan = self.tmpdir / "plan.yaml"
        self.plan.write_text(
            "integrand: quarterdisk\n"
            "sample_count: 8\n"
            "sequence_count: 2\n"
            "sources:\n"
            "  inside: inside.data\n"
            "  mixed: mixed.data\n",
            encoding="utf-8",
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_compare_exports_table(self) -> None:
        output_dir = self.tmpdir / "output"
        result = self.runner.invoke(app, ["compare", str(self.plan), "--output-dir", str(output_dir)])
        self.assertEqual(result.exit_code, 0, result.output)
        lines = (output_dir / "comparison.csv").read_text(encoding="utf-8").splitlines()
        self.assertEqual(lines[0], "sample_count,inside,mixed")
        self.assertEqual(lines[-1], "8,0.500000,0.500000")


if __name__ == "__main__":
    unittest.main()
