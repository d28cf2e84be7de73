# tests/test_surface.py
import unittest

from fragnav.memory import InMemorySurface
from fragnav.surface import apply_style, build_style_block, clear


class TestStyleAndCleanup(unittest.TestCase):

    def setUp(self):
        self.surface = InMemorySurface(["A", "B"])

    def test_style_block_is_scoped_to_the_container(self):
        record = apply_style(self.surface, "A", "flex: 1;")
        self.assertEqual(record.container_id, "A")
        self.assertTrue(record.css.startswith("#A {"))
        self.assertIn("flex: 1;", record.css)
        self.assertEqual(self.surface.styles_for("A"), [record])

    def test_apply_style_is_additive(self):
        apply_style(self.surface, "A", "flex: 1;")
        apply_style(self.surface, "A", "flex: 2;")
        self.assertEqual(len(self.surface.styles_for("A")), 2)

    def test_clear_removes_styles_and_content(self):
        self.surface.get("A").replace_content("<p>A</p>")
        self.surface.get("B").replace_content("<p>B</p>")
        apply_style(self.surface, "A", "flex: 1;")
        apply_style(self.surface, "A", "flex: 2;")
        apply_style(self.surface, "B", "flex: 1;")

        clear(self.surface, "A")

        self.assertEqual(self.surface.styles_for("A"), [])
        self.assertEqual(self.surface.get("A").content, "")
        self.assertEqual(len(self.surface.styles_for("B")), 1)
        self.assertEqual(self.surface.get("B").content, "<p>B</p>")

    def test_clear_is_safe_on_empty_and_missing_containers(self):
        clear(self.surface, "A")
        clear(self.surface, "A")
        clear(self.surface, "nowhere")
        self.assertEqual(self.surface.get("A").content, "")

    def test_build_style_block(self):
        self.assertEqual(build_style_block("box", "  color: red;  "), "#box {\n    color: red;\n}")


if __name__ == "__main__":
    unittest.main()
