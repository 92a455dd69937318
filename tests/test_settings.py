from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from stepplot_core.collisions import LabelLayoutConfig
from stepplot_core.sampler import SamplerConfig
from stepplot_ui.settings import DiagramSettings, load_settings, settings_from_dict
from stepplot_ui.style.theme import DEFAULT_THEME


class LoadSettingsTests(unittest.TestCase):
    def _write(self, root: Path, body: str) -> Path:
        path = root / "stepplot.toml"
        path.write_text(body, encoding="utf-8")
        return path

    def test_load_full_settings(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = self._write(
                Path(td),
                "\n".join(
                    [
                        "[sampler]",
                        "resolution = 400",
                        "out_of_range_slack = 1.0",
                        "",
                        "[labels]",
                        "min_spacing = 12",
                        "",
                        "[theme]",
                        'subject = "geometry"',
                        'language = "he"',
                        "dark_mode = true",
                    ]
                ),
            )
            settings = load_settings(path)
        self.assertEqual(settings.sampler.resolution, 400)
        self.assertEqual(settings.sampler.out_of_range_slack, 1.0)
        self.assertEqual(settings.sampler.pixel_clamp_margin, SamplerConfig().pixel_clamp_margin)
        self.assertEqual(settings.labels.min_spacing, 12)
        self.assertEqual(settings.labels.label_offset, LabelLayoutConfig().label_offset)
        self.assertEqual(settings.theme.subject, "geometry")
        self.assertTrue(settings.theme.rtl)
        self.assertTrue(settings.theme.dark_mode)

    def test_empty_file_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            settings = load_settings(self._write(Path(td), ""))
        self.assertEqual(settings, DiagramSettings())
        self.assertEqual(settings.theme, DEFAULT_THEME)

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FileNotFoundError):
                load_settings(Path(td) / "absent.toml")

    def test_unknown_keys_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "unknown settings table"):
            settings_from_dict({"render": {}})
        with self.assertRaisesRegex(ValueError, r"unknown setting in \[sampler\]"):
            settings_from_dict({"sampler": {"samples": 10}})
        with self.assertRaisesRegex(ValueError, "Unknown theme token"):
            settings_from_dict({"theme": {"accent": "#ffffff"}})

    def test_invalid_values_rejected(self) -> None:
        with self.assertRaises(ValueError):
            settings_from_dict({"sampler": {"resolution": 0}})
        with self.assertRaisesRegex(ValueError, "must be a table"):
            settings_from_dict({"labels": 3})
        with self.assertRaisesRegex(ValueError, "hex color"):
            settings_from_dict({"theme": {"axis_color": "black"}})


if __name__ == "__main__":
    unittest.main()
