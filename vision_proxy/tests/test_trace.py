"""Tests for trace file logging."""

import os
import tempfile
import threading
from unittest.mock import patch

from vision_proxy.trace import (
    DEFAULT_TRACE_FILENAME,
    TRACE_ENV_VAR,
    resolve_trace_path,
    trace,
    trace_write,
)


class TestResolveTracePath:
    """Tests for trace path resolution."""

    def test_default_in_temp_dir(self):
        with patch.dict('os.environ', {}, clear=True):
            assert resolve_trace_path() == os.path.join(
                tempfile.gettempdir(), DEFAULT_TRACE_FILENAME
            )

    def test_from_env_var(self):
        with patch.dict('os.environ', {TRACE_ENV_VAR: '/var/log/vp.log'}):
            assert resolve_trace_path() == '/var/log/vp.log'

    def test_empty_disables(self):
        with patch.dict('os.environ', {TRACE_ENV_VAR: ''}):
            assert resolve_trace_path() is None


class TestTraceWrite:
    """Tests for writing trace lines."""

    def test_writes_component_and_message(self, tmp_path):
        path = tmp_path / "nested" / "trace.log"

        trace_write("image_summary", "hello", str(path))

        line = path.read_text()
        assert "[image_summary] hello" in line

    def test_appends(self, tmp_path):
        path = tmp_path / "trace.log"

        trace_write("a", "one", str(path))
        trace_write("a", "two", str(path))

        assert len(path.read_text().splitlines()) == 2

    def test_lines_name_the_calling_thread(self, tmp_path):
        path = tmp_path / "trace.log"
        worker = threading.Thread(
            target=trace_write, args=("image_summary", "spawned pi", str(path)), name="readFile"
        )
        worker.start()
        worker.join(5)

        assert "[readFile] [image_summary] spawned pi" in path.read_text()

    def test_none_path_is_noop(self):
        trace_write("a", "ignored", None)

    def test_never_raises(self, tmp_path):
        # A directory cannot be opened for appending
        trace_write("a", "msg", str(tmp_path))

    def test_includes_traceback(self, tmp_path):
        path = tmp_path / "trace.log"
        try:
            raise ValueError("kaboom")
        except ValueError:
            trace_write("a", "failed", str(path), include_traceback=True)

        assert "ValueError: kaboom" in path.read_text()

    def test_trace_uses_env_path(self, tmp_path):
        path = tmp_path / "env.log"
        with patch.dict('os.environ', {TRACE_ENV_VAR: str(path)}):
            trace("FILE_READ", "readFile: path=a.txt")

        assert "[FILE_READ] readFile: path=a.txt" in path.read_text()
