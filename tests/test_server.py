# tests/test_server.py
import tempfile
import unittest
from pathlib import Path

import httpx

from fragnav.fetcher import ContentFetcher
from fragnav.server import FragmentServer


class TestFragmentServer(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        root = Path(self.tmp.name)
        (root / "viewA.frag").write_text("<section>A</section>", encoding="utf-8")
        self.server = FragmentServer(root).start()

    def tearDown(self):
        self.server.stop()
        self.tmp.cleanup()

    def test_picks_a_free_port(self):
        self.assertNotEqual(self.server.port, 0)
        self.assertTrue(self.server.base_url.endswith(f":{self.server.port}/"))

    def test_responses_forbid_caching(self):
        response = httpx.get(self.server.base_url + "viewA.frag")
        self.assertEqual(response.status_code, 200)
        self.assertIn("no-store", response.headers["Cache-Control"])

    async def test_fetcher_reads_served_fragments(self):
        async with ContentFetcher(base_url=self.server.base_url) as fetcher:
            self.assertEqual(await fetcher.fetch("viewA.frag"), "<section>A</section>")
            with self.assertLogs("fragnav.fetcher", level="ERROR"):
                self.assertIsNone(await fetcher.fetch("nope.frag"))

    async def test_edits_on_disk_are_seen_on_the_next_fetch(self):
        async with ContentFetcher(base_url=self.server.base_url) as fetcher:
            await fetcher.fetch("viewA.frag")
            (Path(self.tmp.name) / "viewA.frag").write_text("<section>A2</section>", encoding="utf-8")
            self.assertEqual(await fetcher.fetch("viewA.frag"), "<section>A2</section>")


if __name__ == "__main__":
    unittest.main()
