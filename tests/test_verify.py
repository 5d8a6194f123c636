import tempfile
import unittest
from pathlib import Path

from fuzdur.core.verify import load_verify_manifest, run_verify
from tools.make_demo_fuz import make_demo_fuz


def _write_manifest(directory: Path, body: str) -> Path:
    manifest_path = directory / "expected.yaml"
    manifest_path.write_text(body, encoding="utf-8")
    return manifest_path


class TestVerify(unittest.TestCase):
    def test_cases_pass_within_tolerance(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            make_demo_fuz(root / "data")
            manifest_path = _write_manifest(
                root,
                "\n".join(
                    [
                        'schema_version: "0.1.0"',
                        "tolerance_s: 0.05",
                        "cases:",
                        "  - path: data/hello_mono.fuz",
                        "    expected_duration_s: 1.02",
                        "  - path: data/idle_stereo.fuz",
                        "    expected_duration_s: 2.5",
                        "    locator_mode: prefixed",
                        "  - path: data/quest_line.xwm",
                        "    expected_duration_s: 0.9",
                    ]
                )
                + "\n",
            )
            manifest = load_verify_manifest(manifest_path)
            rows = run_verify(manifest)

        self.assertEqual([row["path"] for row in rows], [
            "data/hello_mono.fuz",
            "data/idle_stereo.fuz",
            "data/quest_line.xwm",
        ])
        self.assertEqual([row["passed"] for row in rows], [True, True, False])
        self.assertEqual(rows[0]["locator_mode"], "scan")
        self.assertEqual(rows[1]["locator_mode"], "prefixed")
        self.assertAlmostEqual(rows[2]["delta_s"], -0.15, places=9)

    def test_tolerance_override(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            make_demo_fuz(root)
            manifest_path = _write_manifest(
                root,
                'schema_version: "0.1.0"\n'
                "cases:\n"
                "  - path: quest_line.xwm\n"
                "    expected_duration_s: 0.9\n",
            )
            manifest = load_verify_manifest(manifest_path)
            self.assertIsNone(manifest["tolerance_s"])
            rows = run_verify(manifest, tolerance_s=0.2)
        self.assertTrue(rows[0]["passed"])

    def test_scan_config_tolerance_used_when_manifest_omits_it(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            make_demo_fuz(root)
            manifest_path = _write_manifest(
                root,
                'schema_version: "0.1.0"\n'
                "cases:\n"
                "  - path: quest_line.xwm\n"
                "    expected_duration_s: 0.9\n",
            )
            manifest = load_verify_manifest(manifest_path)
            default_rows = run_verify(manifest)
            relaxed_rows = run_verify(manifest, config={"tolerance_s": 0.2})
            pinned_rows = run_verify(
                manifest, tolerance_s=0.05, config={"tolerance_s": 0.2}
            )
        self.assertFalse(default_rows[0]["passed"])
        self.assertTrue(relaxed_rows[0]["passed"])
        self.assertFalse(pinned_rows[0]["passed"])

    def test_manifest_tolerance_wins_over_scan_config(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            make_demo_fuz(root)
            manifest_path = _write_manifest(
                root,
                'schema_version: "0.1.0"\n'
                "tolerance_s: 0.01\n"
                "cases:\n"
                "  - path: quest_line.xwm\n"
                "    expected_duration_s: 0.9\n",
            )
            rows = run_verify(
                load_verify_manifest(manifest_path),
                config={"tolerance_s": 0.2, "locator_mode": "auto"},
            )
        self.assertFalse(rows[0]["passed"])
        self.assertEqual(rows[0]["locator_mode"], "auto")

    def test_parse_errors_are_reported_per_case(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            make_demo_fuz(root)
            manifest_path = _write_manifest(
                root,
                'schema_version: "0.1.0"\n'
                "locator_mode: prefixed\n"
                "cases:\n"
                "  - path: quest_line.xwm\n"
                "    expected_duration_s: 0.75\n"
                "  - path: missing.fuz\n"
                "    expected_duration_s: 1.0\n",
            )
            rows = run_verify(load_verify_manifest(manifest_path))
        self.assertEqual(rows[0]["error_kind"], "NotContainerFormat")
        self.assertEqual(rows[1]["error_kind"], "IoError")
        self.assertFalse(any(row["passed"] for row in rows))

    def test_manifest_schema_errors(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            manifest_path = _write_manifest(
                Path(temp_dir),
                'schema_version: "0.1.0"\ncases:\n  - path: a.fuz\n',
            )
            with self.assertRaises(ValueError) as ctx:
                load_verify_manifest(manifest_path)
        self.assertIn("expected_duration_s", str(ctx.exception))

    def test_negative_tolerance_rejected(self) -> None:
        manifest = {"tolerance_s": 0.05, "locator_mode": "scan", "cases": []}
        with self.assertRaises(ValueError):
            run_verify(manifest, tolerance_s=-0.1)


if __name__ == "__main__":
    unittest.main()
