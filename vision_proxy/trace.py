"""File tracing for proxied reads.

The analysis runs while a host UI owns the terminal, so routing decisions
and subprocess launches are appended to a trace file instead of printed:

    [14:02:11.512] [readFile] [image_summary] proxying read of /tmp/shot.png

VISION_PROXY_TRACE_LOG names the file. Set it to an empty string to turn
tracing off; left unset, vision_proxy_trace.log in the temp directory is used.
"""

import os
import tempfile
import threading
import traceback
from datetime import datetime
from typing import Optional

TRACE_ENV_VAR = "VISION_PROXY_TRACE_LOG"
DEFAULT_TRACE_FILENAME = "vision_proxy_trace.log"


def resolve_trace_path() -> Optional[str]:
    """Return the trace file path, or None when tracing is turned off."""
    value = os.environ.get(TRACE_ENV_VAR)
    if value is None:
        return os.path.join(tempfile.gettempdir(), DEFAULT_TRACE_FILENAME)
    return value or None


def trace_write(
    component: str,
    msg: str,
    trace_path: Optional[str],
    *,
    include_traceback: bool = False,
) -> None:
    """Append one line for ``component`` to ``trace_path``.

    Tracing must never fail a read, so I/O errors are dropped.
    """
    if not trace_path:
        return
    stamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    prefix = f"[{stamp}] [{threading.current_thread().name}] [{component}]"
    lines = [f"{prefix} {msg}\n"]
    if include_traceback:
        tb = traceback.format_exc()
        if tb.strip() != "NoneType: None":
            lines.append(f"{prefix} Traceback:\n{tb}")
    try:
        os.makedirs(os.path.dirname(os.path.abspath(trace_path)), exist_ok=True)
        with open(trace_path, "a", encoding="utf-8") as f:
            f.writelines(lines)
    except OSError:
        pass


def trace(component: str, msg: str, *, include_traceback: bool = False) -> None:
    trace_write(component, msg, resolve_trace_path(), include_traceback=include_traceback)
