# tests/test_config.py
import tempfile
import unittest
from pathlib import Path

from fragnav.config import DEFAULT_STYLE_RULES, DEFAULT_WAIT_MS, Config


class TestConfig(unittest.TestCase):

    def setUp(self):
        Config.reset()
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "fragnav.yaml"

    def tearDown(self):
        Config.reset()
        self.tmp.cleanup()

    def test_loads_yaml_file(self):
        self.path.write_text(
            "log_level: DEBUG\n"
            "navigation:\n"
            "  wait_ms: 50\n"
            "  style_rules: 'display: grid;'\n"
            "fetch:\n"
            "  base_url: http://store.test/\n"
            "  timeout: 3\n",
            encoding="utf-8",
        )
        config = Config(config_file=str(self.path))

        self.assertEqual(config.source, "file")
        self.assertEqual(config.resolved_config_path, self.path.resolve())
        self.assertEqual(config.get("log_level"), "DEBUG")
        self.assertEqual(config.wait_ms, 50)
        self.assertEqual(config.style_rules, "display: grid;")
        self.assertEqual(config.base_url, "http://store.test/")
        self.assertEqual(config.fetch_timeout, 3.0)

    def test_is_a_singleton_until_reset(self):
        first = Config(config_file=str(self.path))
        self.assertIs(Config(), first)
        Config.reset()
        self.assertIsNot(Config(config_file=str(self.path)), first)

    def test_missing_file_falls_back_to_defaults(self):
        config = Config(config_file=str(Path(self.tmp.name) / "absent.yaml"))
        self.assertIsNone(config.source)
        self.assertEqual(config.as_dict(), {})
        self.assertEqual(config.wait_ms, DEFAULT_WAIT_MS)
        self.assertEqual(config.style_rules, DEFAULT_STYLE_RULES)
        self.assertIsNone(config.base_url)

    def test_get_nested_stops_at_non_mappings(self):
        self.path.write_text("navigation: 5\nwindow:\n  title: Shop\n", encoding="utf-8")
        config = Config(config_file=str(self.path))
        self.assertEqual(config.get_nested("window.title"), "Shop")
        self.assertEqual(config.get_nested("navigation.wait_ms", "dflt"), "dflt")
        self.assertEqual(config.get_nested("", "dflt"), "dflt")

    def test_reload_picks_up_changes(self):
        self.path.write_text("log_level: INFO\n", encoding="utf-8")
        config = Config(config_file=str(self.path))
        self.path.write_text("log_level: ERROR\n", encoding="utf-8")
        config.reload()
        self.assertEqual(config.get("log_level"), "ERROR")

    def test_non_mapping_yaml_is_kept_under_root_key(self):
        self.path.write_text("- a\n- b\n", encoding="utf-8")
        config = Config(config_file=str(self.path))
        self.assertEqual(config.get("__root__"), ["a", "b"])


if __name__ == "__main__":
    unittest.main()
