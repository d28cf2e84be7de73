# tests/test_callbacks.py
import unittest

from fragnav.callbacks import CallbackTable, dispatch


class TestCallbackTable(unittest.TestCase):

    def setUp(self):
        self.table = CallbackTable()
        self.table.clear()
        self.calls = []

    def tearDown(self):
        self.table.clear()

    def test_is_shared(self):
        self.assertIs(CallbackTable(), self.table)

    def test_register_and_unregister(self):
        self.table.register("hook", lambda: None)
        self.assertIn("hook", self.table)
        self.table.unregister("hook")
        self.table.unregister("hook")
        self.assertNotIn("hook", self.table)

    def test_nothing_to_dispatch(self):
        self.assertEqual(dispatch(None, self.table), 0)
        self.assertEqual(dispatch([], self.table), 0)

    def test_single_name(self):
        self.table.register("showHomeIcon", lambda: self.calls.append("home"))
        self.assertEqual(dispatch("showHomeIcon", self.table), 1)
        self.assertEqual(self.calls, ["home"])

    def test_names_and_callables_run_in_order(self):
        self.table.register("first", lambda: self.calls.append("first"))
        self.table.register("third", lambda: self.calls.append("third"))
        invoked = dispatch(["first", lambda: self.calls.append("second"), "third"], self.table)
        self.assertEqual(invoked, 3)
        self.assertEqual(self.calls, ["first", "second", "third"])

    def test_unknown_names_are_skipped(self):
        self.table.register("known", lambda: self.calls.append("known"))
        self.assertEqual(dispatch(["missing", "known"], self.table), 1)
        self.assertEqual(self.calls, ["known"])

    def test_non_callable_entry_is_treated_as_missing(self):
        self.table.register("broken", "not a function")
        self.assertEqual(dispatch("broken", self.table), 0)

    def test_raising_hook_does_not_stop_later_hooks(self):
        def explode():
            raise RuntimeError("hook failed")

        self.table.register("explode", explode)
        self.table.register("after", lambda: self.calls.append("after"))
        with self.assertLogs("fragnav.callbacks", level="ERROR"):
            invoked = dispatch(["explode", "after"], self.table)
        self.assertEqual(invoked, 1)
        self.assertEqual(self.calls, ["after"])

    def test_single_callable(self):
        self.assertEqual(dispatch(lambda: self.calls.append("direct")), 1)
        self.assertEqual(self.calls, ["direct"])

    def test_fallback_resolves_names_missing_from_the_table(self):
        asked = []

        def resolve(name):
            asked.append(name)
            return (lambda: self.calls.append(name)) if name == "pageHook" else None

        self.table.register("known", lambda: self.calls.append("known"))
        invoked = dispatch(["known", "pageHook", "nowhere"], self.table, resolve)
        self.assertEqual(invoked, 2)
        self.assertEqual(self.calls, ["known", "pageHook"])
        self.assertEqual(asked, ["pageHook", "nowhere"])


if __name__ == "__main__":
    unittest.main()
