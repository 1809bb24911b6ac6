"""Tests for the command-line entry point.

Validates:
  - export refuses orders that are not approved and writes nothing
  - --force skips the approval check
"""

from __future__ import annotations

import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr
from pathlib import Path
from unittest import mock

from storymap.__main__ import main
from storymap.config.env import FEATURES_KEY_VAR, FEATURES_URL_VAR, ORDERS_DIR_VAR
from storymap.orders.store import JsonOrderStore
from tests.story_fixture import make_order


class TestExportCommand(unittest.TestCase):

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name)
        self.out = self.root / "exports"
        self.order = make_order()
        JsonOrderStore(self.root / "orders").put(self.order)
        env = mock.patch.dict(os.environ, {
            ORDERS_DIR_VAR: str(self.root / "orders"),
            FEATURES_URL_VAR: "",
            FEATURES_KEY_VAR: "",
        })
        env.start()
        self.addCleanup(env.stop)

    def _run(self, *extra: str) -> tuple[int, str]:
        err = io.StringIO()
        with redirect_stderr(err):
            code = main(["export", self.order.id, "--out", str(self.out), *extra])
        return code, err.getvalue()

    def test_pending_order_refused(self):
        code, err = self._run()
        self.assertEqual(code, 1)
        self.assertIn("pending", err)
        self.assertIn("--force", err)
        self.assertFalse(self.out.exists())

    def test_force_skips_approval(self):
        # Gets past the approval check and stops at the unconfigured feature service
        code, err = self._run("--force")
        self.assertEqual(code, 1)
        self.assertIn("missing_credential", err)
        self.assertNotIn("--force", err)


if __name__ == "__main__":
    unittest.main()
