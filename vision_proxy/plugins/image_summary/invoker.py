"""Out-of-process image analysis.

Each request spawns one analysis CLI process, for example::

    pi @/abs/shot.png --provider zai --model glm-4.6v --print --json \\
        --no-extensions -p "<analysis prompt>"

and waits for exactly one of: the process exiting, the process failing to
start, or the caller's CancelToken firing. There is no pooling and no retry;
concurrent requests spawn independent processes.
"""

import logging
import os
import subprocess
import threading
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from ..types import CancelledException, CancelToken
from .env import resolve_cli_command, resolve_vision_model, resolve_vision_provider
from .output import extract_text
from .prompts import ANALYSIS_PROMPT

logger = logging.getLogger(__name__)


ABORTED_MESSAGE = "Operation aborted"


class AnalysisError(Exception):
    """Image analysis subprocess failed.

    Attributes:
        exit_code: Process exit code, or None when it never produced one.
        stderr: Accumulated standard error text of the process.
    """

    def __init__(self, message: str, exit_code: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class AnalysisLaunchError(AnalysisError):
    """The analysis CLI could not be started (e.g. executable not found)."""

    pass


class AnalysisExitError(AnalysisError):
    """The analysis CLI ran but exited unsuccessfully."""

    pass


class AnalysisAbortedError(AnalysisError, CancelledException):
    """The caller cancelled the analysis before it completed."""

    def __init__(self, message: str = ABORTED_MESSAGE):
        super().__init__(message)


@dataclass(frozen=True)
class ProcessOutcome:
    """Final state of one analysis process.

    Attributes:
        exit_code: Exit status, or None when the process was killed by a signal.
        stdout: Everything the process wrote to standard output.
        stderr: Everything the process wrote to standard error.
        signal: Terminating signal number, when there was one.
    """

    exit_code: Optional[int]
    stdout: str
    stderr: str
    signal: Optional[int] = None

    @classmethod
    def from_returncode(cls, returncode: Optional[int], stdout: str, stderr: str) -> "ProcessOutcome":
        if returncode is not None and returncode < 0:
            return cls(exit_code=None, stdout=stdout, stderr=stderr, signal=-returncode)
        return cls(exit_code=returncode, stdout=stdout, stderr=stderr)

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    def describe_exit(self) -> str:
        if self.exit_code is not None:
            return str(self.exit_code)
        if self.signal is not None:
            return f"signal {self.signal}"
        return "no exit code"


class ImageAnalyzer:
    """Runs vision-model analyses through the analysis CLI.

    Attributes:
        cli_command: Command prefix used to start the CLI.
        vision_provider: Value passed as --provider.
        vision_model: Value passed as --model.
    """

    def __init__(
        self,
        cli_command: Optional[Union[str, Sequence[str]]] = None,
        vision_provider: Optional[str] = None,
        vision_model: Optional[str] = None,
        prompt: str = ANALYSIS_PROMPT,
    ) -> None:
        self.cli_command: List[str] = resolve_cli_command(cli_command)
        self.vision_provider: str = resolve_vision_provider(vision_provider)
        self.vision_model: str = resolve_vision_model(vision_model)
        self.prompt = prompt

    def build_args(self, absolute_path: str) -> List[str]:
        """Build the full argv for analysing one image."""
        return [
            *self.cli_command,
            f"@{absolute_path}",
            "--provider", self.vision_provider,
            "--model", self.vision_model,
            "--print",  # Non-interactive mode
            "--json",  # Transcript record on stdout
            "--no-extensions",  # Keep this proxy out of the child session
            "-p", self.prompt,
        ]

    def analyze(self, absolute_path: str, cancel_token: Optional[CancelToken] = None) -> str:
        """Analyze one image and return the extracted analysis text.

        Args:
            absolute_path: Absolute path of the image file.
            cancel_token: Optional token; cancelling kills the process.

        Returns:
            The analysis text (see output.extract_text).

        Raises:
            AnalysisLaunchError: The CLI could not be started.
            AnalysisExitError: The CLI exited with a non-zero or missing code.
            AnalysisAbortedError: The token was cancelled before completion.
        """
        outcome = self.run(absolute_path, cancel_token)
        if not outcome.succeeded:
            raise AnalysisExitError(
                f"Analysis subprocess failed ({outcome.describe_exit()}): {outcome.stderr}",
                exit_code=outcome.exit_code,
                stderr=outcome.stderr,
            )
        return extract_text(outcome.stdout.strip())

    def run(self, absolute_path: str, cancel_token: Optional[CancelToken] = None) -> ProcessOutcome:
        """Run the CLI for one image and collect its outcome.

        Raises:
            AnalysisLaunchError: The CLI could not be started.
            AnalysisAbortedError: The token was cancelled before completion.
        """
        if cancel_token is not None and cancel_token.is_cancelled:
            raise AnalysisAbortedError()

        args = self.build_args(absolute_path)
        logger.debug(f"Spawning analysis CLI: {' '.join(args[:-2])} -p <prompt>")

        try:
            process = subprocess.Popen(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=os.environ.copy(),
            )
        except OSError as e:
            raise AnalysisLaunchError(str(e)) from e

        aborted = threading.Event()

        def on_abort() -> None:
            aborted.set()
            _kill(process)

        if cancel_token is not None:
            cancel_token.on_cancel(on_abort)

        try:
            # communicate() drains both pipes as data arrives
            stdout, stderr = process.communicate()
        except BaseException:
            _kill(process)
            process.wait()
            raise
        finally:
            if cancel_token is not None:
                cancel_token.remove_callback(on_abort)

        outcome = ProcessOutcome.from_returncode(process.returncode, stdout or "", stderr or "")

        if aborted.is_set():
            logger.info(f"Analysis of {absolute_path} aborted")
            raise AnalysisAbortedError()

        if not outcome.succeeded:
            logger.warning(
                f"Analysis CLI exited with {outcome.describe_exit()}: {outcome.stderr.strip()[:200]}"
            )
        return outcome


def _kill(process: subprocess.Popen) -> None:
    """Forcibly terminate a process that may already have exited."""
    try:
        process.kill()
    except OSError:
        pass


def analyze_image(
    absolute_path: str,
    cancel_token: Optional[CancelToken] = None,
    analyzer: Optional[ImageAnalyzer] = None,
) -> str:
    """Analyze one image with the default (environment-configured) analyzer."""
    return (analyzer or ImageAnalyzer()).analyze(absolute_path, cancel_token)
