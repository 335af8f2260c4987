"""Unit tests for page configuration module."""

import unittest

from pageflow.page_config import (
    DEFAULT_PAGE_CONFIG,
    PAGE_CONFIGS,
    POINTS_PER_INCH,
    ConfigurationError,
    PageConfig,
    get_page_config,
)


class TestPageConfig(unittest.TestCase):
    """Test page geometry presets and validation."""

    def test_default_screen_config(self):
        """Test the default A4 screen configuration."""
        config = DEFAULT_PAGE_CONFIG
        self.assertEqual(config.name, "screen-a4")
        self.assertEqual(config.width, 794)
        self.assertEqual(config.height, 1123)
        self.assertEqual(config.margin_top, 72)
        self.assertEqual(config.margin_left, 72)
        self.assertEqual(config.line_height, 24)
        self.assertEqual(config.font_size, 16)
        self.assertEqual(config.content_width, 650)
        self.assertEqual(config.content_height, 979)
        self.assertEqual(config.content_bottom, 1051)
        self.assertEqual(config.lines_per_page, 40)

    def test_letter_config(self):
        """Test the US Letter print configuration in points."""
        config = get_page_config("letter")
        self.assertIsNotNone(config)
        self.assertEqual(config.width, 612)
        self.assertEqual(config.height, 792)
        self.assertEqual(config.margin_left, POINTS_PER_INCH)
        self.assertEqual(config.font_size, 12)
        self.assertAlmostEqual(config.line_height, 14.4)

    def test_a4_config(self):
        """Test the A4 print configuration in points."""
        config = get_page_config("a4")
        self.assertEqual(config.width, 595)
        self.assertEqual(config.height, 842)

    def test_get_invalid_config(self):
        """Test getting an unknown preset."""
        self.assertIsNone(get_page_config("Tabloid"))

    def test_all_presets_valid(self):
        """Test that every preset validates."""
        for name, config in PAGE_CONFIGS.items():
            self.assertEqual(config.name, name)
            self.assertIs(config.validate(), config)

    def test_replace_returns_copy(self):
        """Test that replace leaves the original unchanged."""
        config = DEFAULT_PAGE_CONFIG.replace(font_size=12)
        self.assertEqual(config.font_size, 12)
        self.assertEqual(DEFAULT_PAGE_CONFIG.font_size, 16)

    def test_config_immutable(self):
        """Test that configurations are frozen."""
        with self.assertRaises(AttributeError):
            DEFAULT_PAGE_CONFIG.width = 100

    def test_invalid_configs(self):
        """Test geometry that cannot lay out a line."""
        bad = [
            {"margin_left": 400, "margin_right": 400},
            {"margin_top": 600, "margin_bottom": 600},
            {"line_height": 0},
            {"line_height": 980},
            {"font_size": -1},
            {"font_family": ""},
        ]
        for changes in bad:
            with self.subTest(changes=changes):
                with self.assertRaises(ConfigurationError):
                    DEFAULT_PAGE_CONFIG.replace(**changes).validate()

    def test_configuration_error_is_value_error(self):
        """Test the ConfigurationError base class."""
        self.assertTrue(issubclass(ConfigurationError, ValueError))

    def test_single_line_page(self):
        """Test a page with room for exactly one line."""
        config = PageConfig("one-line", 100, 30, 3, 3, 5, 5, 24, 10, "Courier")
        self.assertEqual(config.validate().lines_per_page, 1)


if __name__ == "__main__":
    unittest.main()
