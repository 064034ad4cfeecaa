"""Tests for the command-line helpers."""
from __future__ import annotations

import os
from unittest.mock import patch

from word_quiz import __main__ as cli


class TestFlags:
    def test_pairs(self):
        assert cli._flags(["--port", "9000", "--host", "0.0.0.0"]) == {
            "--port": "9000", "--host": "0.0.0.0",
        }

    def test_flag_without_value_ignored(self):
        assert cli._flags(["--port", "--host", "h"]) == {"--host": "h"}
        assert cli._flags(["--port"]) == {}


class TestPidFile:
    def test_missing(self, tmp_path):
        with patch.object(cli, "PID_FILE", tmp_path / ".server.pid"):
            assert cli._running_pid() is None

    def test_own_process_is_running(self, tmp_path):
        pid_file = tmp_path / ".server.pid"
        pid_file.write_text(str(os.getpid()))
        with patch.object(cli, "PID_FILE", pid_file):
            assert cli._running_pid() == os.getpid()

    def test_garbage_removed(self, tmp_path):
        pid_file = tmp_path / ".server.pid"
        pid_file.write_text("not a pid")
        with patch.object(cli, "PID_FILE", pid_file):
            assert cli._running_pid() is None
        assert not pid_file.exists()

    def test_stop_without_server(self, tmp_path, capsys):
        with patch.object(cli, "PID_FILE", tmp_path / ".server.pid"):
            assert cli._stop() is False
        assert "not running" in capsys.readouterr().out
