"""Pytest fixtures for image summary plugin tests.

The analysis CLI is replaced by a small Python script run with the current
interpreter, so subprocess handling is exercised against real processes
without needing the real CLI or a model.
"""

import json
import sys
import textwrap

import pytest


FAKE_CLI_SOURCE = textwrap.dedent('''
    import json
    import os
    import sys
    import time

    args_file = os.environ.get("FAKE_CLI_ARGS_FILE")
    if args_file:
        with open(args_file, "w") as f:
            json.dump(sys.argv[1:], f)

    mode = os.environ.get("FAKE_CLI_MODE", "json")
    text = os.environ.get("FAKE_CLI_TEXT", "**Category**: general\\nA picture.")

    if mode == "json":
        print(json.dumps({"messages": [
            {"role": "user", "content": [{"type": "text", "text": "prompt"}]},
            {"role": "assistant", "content": [{"type": "text", "text": text}]},
        ]}))
    elif mode == "raw":
        sys.stdout.write(text)
    elif mode == "stdin":
        sys.stdout.write(repr(sys.stdin.read()))
    elif mode == "env":
        sys.stdout.write(os.environ.get("FAKE_CLI_MARKER", "<unset>"))
    elif mode == "fail":
        sys.stderr.write(text)
        sys.exit(int(os.environ.get("FAKE_CLI_EXIT", "2")))
    elif mode == "hang":
        ready_file = os.environ.get("FAKE_CLI_READY_FILE")
        if ready_file:
            open(ready_file, "w").close()
        time.sleep(60)
''')


class FakeCli:
    """Handle on the fake analysis CLI.

    Behaviour is selected through environment variables, which the
    analysis subprocess inherits.
    """

    def __init__(self, script_path, tmp_path, monkeypatch):
        self.command = [sys.executable, str(script_path)]
        self.args_file = tmp_path / "fake_cli_args.json"
        self.ready_file = tmp_path / "fake_cli_ready"
        self._monkeypatch = monkeypatch
        monkeypatch.setenv("FAKE_CLI_ARGS_FILE", str(self.args_file))
        monkeypatch.setenv("FAKE_CLI_READY_FILE", str(self.ready_file))

    def configure(self, mode="json", text=None, exit_code=None):
        self._monkeypatch.setenv("FAKE_CLI_MODE", mode)
        if text is not None:
            self._monkeypatch.setenv("FAKE_CLI_TEXT", text)
        if exit_code is not None:
            self._monkeypatch.setenv("FAKE_CLI_EXIT", str(exit_code))
        return self

    @property
    def received_args(self):
        """Arguments the last run received, after the script path."""
        return json.loads(self.args_file.read_text())


@pytest.fixture
def fake_cli(tmp_path, monkeypatch):
    """Fake analysis CLI that prints a JSON transcript by default."""
    script = tmp_path / "fake_cli.py"
    script.write_text(FAKE_CLI_SOURCE)
    for var in ("FAKE_CLI_MODE", "FAKE_CLI_TEXT", "FAKE_CLI_EXIT", "FAKE_CLI_MARKER"):
        monkeypatch.delenv(var, raising=False)
    return FakeCli(script, tmp_path, monkeypatch)


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch, tmp_path):
    """Keep analysis configuration and tracing out of the developer's env."""
    for var in ("IMAGE_SUMMARY_CLI", "IMAGE_SUMMARY_PROVIDER", "IMAGE_SUMMARY_MODEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("VISION_PROXY_TRACE_LOG", "")


@pytest.fixture
def image_file(tmp_path):
    """A small PNG-named file in the temp directory."""
    path = tmp_path / "shot.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake")
    return path
