# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Call-stack capture in the Sentry stacktrace interface format."""

import linecache
import sys
from types import FrameType
from typing import Any

from sentry_sdk.utils import serialize_frame as sdk_serialize_frame

PLATFORM = "python"
TRACE_SKIP_FRAMES = 2
TRACE_CONTEXT_LINES = 3

_PACKAGE = __name__.split(".")[0]


def _is_plumbing(frame: FrameType) -> bool:
    module = frame.f_globals.get("__name__") or ""
    return module.split(".")[0] == _PACKAGE


def serialize_frame(frame: FrameType, context_lines: int = TRACE_CONTEXT_LINES) -> dict[str, Any]:
    """Convert a live frame to a Sentry frame dictionary.

    The frame shape comes from the SDK; only the source context is added
    here, limited to ``context_lines`` lines on each side.

    Args:
        frame: Frame to serialize
        context_lines: Number of source lines kept before and after the
            current line

    Returns:
        Frame dictionary; source context keys are omitted when the
        source file is unavailable
    """
    serialized: dict[str, Any] = sdk_serialize_frame(
        frame,
        include_local_variables=False,
        include_source_context=False,
    )
    lineno = serialized["lineno"]

    lines = linecache.getlines(frame.f_code.co_filename, frame.f_globals)
    if lines and 0 < lineno <= len(lines):
        index = lineno - 1
        start = max(0, index - context_lines)
        serialized["pre_context"] = [line.rstrip("\r\n") for line in lines[start:index]]
        serialized["context_line"] = lines[index].rstrip("\r\n")
        serialized["post_context"] = [
            line.rstrip("\r\n") for line in lines[index + 1:index + 1 + context_lines]
        ]

    return serialized


def capture_stacktrace(
    skip: int = TRACE_SKIP_FRAMES,
    context_lines: int = TRACE_CONTEXT_LINES,
) -> dict[str, Any] | None:
    """Capture the current call stack.

    The ``skip`` innermost frames are dropped, counting this function's
    own frame as the first. Remaining innermost frames that belong to
    this package are dropped as well, so the trace starts at the code
    that emitted the log record.

    Args:
        skip: Number of innermost frames to drop
        context_lines: Source lines kept around each frame's current line

    Returns:
        ``{"frames": [...]}`` ordered oldest call first, or None when no
        frame is left
    """
    frame: FrameType | None = sys._getframe(0)
    for _ in range(skip):
        if frame is None:
            return None
        frame = frame.f_back

    while frame is not None and _is_plumbing(frame):
        frame = frame.f_back

    frames = []
    while frame is not None:
        frames.append(serialize_frame(frame, context_lines))
        frame = frame.f_back

    if not frames:
        return None

    frames.reverse()
    return {"frames": frames}
