import json
import tempfile
import unittest
from pathlib import Path

from fuzdur.core.scan_config import (
    SCAN_CONFIG_SCHEMA_VERSION,
    default_scan_config,
    load_scan_config,
    merge_scan_config,
    normalize_scan_config,
    resolve_scan_config,
)


class TestScanConfig(unittest.TestCase):
    def test_load_yaml_normalizes(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "scan.yaml"
            config_path.write_text(
                "\n".join(
                    [
                        'schema_version: "0.1.0"',
                        "locator_mode: auto",
                        "extensions: [.XWM, .fuz]",
                        "recursive: true",
                        "tolerance_s: 0.1",
                    ]
                )
                + "\n",
                encoding="utf-8",
            )
            loaded = load_scan_config(config_path)

        self.assertEqual(
            loaded,
            {
                "schema_version": SCAN_CONFIG_SCHEMA_VERSION,
                "locator_mode": "auto",
                "extensions": [".fuz", ".xwm"],
                "recursive": True,
                "tolerance_s": 0.1,
            },
        )

    def test_load_json(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "scan.json"
            config_path.write_text(
                json.dumps({"schema_version": "0.1.0", "include_hashes": True}),
                encoding="utf-8",
            )
            loaded = load_scan_config(config_path)
        self.assertEqual(loaded, {"schema_version": "0.1.0", "include_hashes": True})

    def test_schema_rejects_unknown_field(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "scan.yaml"
            config_path.write_text(
                'schema_version: "0.1.0"\nmeters: truth\n',
                encoding="utf-8",
            )
            with self.assertRaises(ValueError) as ctx:
                load_scan_config(config_path)
        self.assertIn("Scan config schema validation failed", str(ctx.exception))

    def test_schema_rejects_bad_mode(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "scan.yaml"
            config_path.write_text(
                'schema_version: "0.1.0"\nlocator_mode: guess\n',
                encoding="utf-8",
            )
            with self.assertRaises(ValueError) as ctx:
                load_scan_config(config_path)
        self.assertIn("- locator_mode:", str(ctx.exception))

    def test_invalid_yaml(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "scan.yaml"
            config_path.write_text("schema_version: [unclosed\n", encoding="utf-8")
            with self.assertRaises(ValueError) as ctx:
                load_scan_config(config_path)
        self.assertIn("not valid YAML", str(ctx.exception))

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with self.assertRaises(ValueError):
                load_scan_config(Path(temp_dir) / "absent.yaml")

    def test_normalize_rejects_unknown_fields(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            normalize_scan_config({"b_field": 1, "a_field": 2})
        self.assertEqual(str(ctx.exception), "Unknown scan config field(s): a_field, b_field")

    def test_normalize_rejects_other_schema_version(self) -> None:
        with self.assertRaises(ValueError):
            normalize_scan_config({"schema_version": "9.9.9"})

    def test_normalize_coerces_values(self) -> None:
        normalized = normalize_scan_config(
            {
                "extensions": "fuz, .XWM,,fuz",
                "recursive": "yes",
                "include_hashes": "0",
                "tolerance_s": " 0.25 ",
                "locator_mode": " Prefixed ",
            }
        )
        self.assertEqual(normalized["extensions"], [".fuz", ".xwm"])
        self.assertIs(normalized["recursive"], True)
        self.assertIs(normalized["include_hashes"], False)
        self.assertEqual(normalized["tolerance_s"], 0.25)
        self.assertEqual(normalized["locator_mode"], "prefixed")

    def test_normalize_rejects_negative_tolerance(self) -> None:
        with self.assertRaises(ValueError):
            normalize_scan_config({"tolerance_s": -1})

    def test_merge_skips_none_overrides(self) -> None:
        merged = merge_scan_config(
            default_scan_config(),
            {"locator_mode": None, "recursive": True},
        )
        self.assertEqual(merged["locator_mode"], "scan")
        self.assertIs(merged["recursive"], True)

    def test_resolve_fills_defaults(self) -> None:
        resolved = resolve_scan_config({"locator_mode": "auto"})
        self.assertEqual(resolved["locator_mode"], "auto")
        self.assertEqual(resolved["extensions"], [".fuz", ".xwm"])
        self.assertIs(resolved["include_hashes"], False)
        self.assertEqual(resolved["tolerance_s"], 0.05)


if __name__ == "__main__":
    unittest.main()
