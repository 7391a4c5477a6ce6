"""Tests for ledger backend selection."""

import os
from unittest.mock import patch

from riskgate.common.config import Config, LedgerStorageType, reset_config
from riskgate.ledger import FileLedger, InMemoryLedger, create_ledger


class TestCreateLedger:

    def setup_method(self):
        reset_config()

    def teardown_method(self):
        reset_config()

    def test_memory_is_default(self):
        with patch.dict(os.environ, {}, clear=True):
            ledger = create_ledger()
        assert isinstance(ledger, InMemoryLedger)

    def test_file_backend_from_config(self, tmp_path):
        config = Config(
            ledger_storage_type=LedgerStorageType.FILE,
            ledger_dir=tmp_path / "ledger",
            ledger_fsync=True,
        )

        ledger = create_ledger(config)

        assert isinstance(ledger, FileLedger)
        assert ledger.ledger_dir == tmp_path / "ledger"
        assert ledger.fsync_on_write is True

    def test_file_backend_from_environment(self, tmp_path):
        env = {
            "RISKGATE_LEDGER_STORAGE_TYPE": "file",
            "RISKGATE_LEDGER_DIR": str(tmp_path / "env-ledger"),
        }
        with patch.dict(os.environ, env, clear=True):
            ledger = create_ledger()

        assert isinstance(ledger, FileLedger)
        assert (tmp_path / "env-ledger").is_dir()
