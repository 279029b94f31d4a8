"""Call-stack capture and selection of the first frame of interest."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from dataclasses import dataclass
from types import FrameType, TracebackType
from typing import Protocol, runtime_checkable

from bizcode.lib.types import QualifiedName

_MAX_DEPTH = 32


@dataclass(frozen=True, slots=True)
class Frame:
    """One call-stack entry: `<module>.<qualname>` plus source line."""

    function: QualifiedName
    line: int


@runtime_checkable
class StackTracer(Protocol):
    """Errors that carry their own captured stack, innermost frame first."""

    def stack_trace(self) -> Sequence[Frame]: ...


def _qualified_name(frame: FrameType) -> QualifiedName:
    module = frame.f_globals.get("__name__", "")
    return QualifiedName(f"{module}.{frame.f_code.co_qualname}")


def capture_stack(skip: int, *, limit: int = _MAX_DEPTH) -> list[Frame]:
    """Capture the current stack, innermost first, starting `skip` frames up.

    `skip=0` is this function, `1` its caller, `2` the caller's caller.
    """

    if skip < 0:
        raise ValueError("skip must be >= 0")
    frames: list[Frame] = []
    try:
        current: FrameType | None = sys._getframe(skip)
    except ValueError:
        # Asked to skip past the outermost frame.
        return frames
    while current is not None and len(frames) < limit:
        frames.append(Frame(function=_qualified_name(current), line=current.f_lineno))
        current = current.f_back
    return frames


def frames_from_traceback(tb: TracebackType | None, *, limit: int = _MAX_DEPTH) -> list[Frame]:
    """Frames carried by a traceback, raise site first."""

    frames: list[Frame] = []
    while tb is not None:
        frames.append(Frame(function=_qualified_name(tb.tb_frame), line=tb.tb_lineno))
        tb = tb.tb_next
    frames.reverse()
    return frames[:limit]


def error_stack(error: BaseException) -> list[Frame] | None:
    """Return the stack an error carries, or None when it has none."""

    if isinstance(error, StackTracer):
        return list(error.stack_trace())
    if error.__traceback__ is not None:
        return frames_from_traceback(error.__traceback__)
    return None


def resolve_frame(frames: Sequence[Frame], package_name: str = "") -> Frame:
    """Pick the first frame whose qualified name contains `package_name`.

    Without a package name the innermost frame wins. When nothing matches,
    the last frame examined (the outermost one) is returned.
    """

    if not frames:
        raise ValueError("Cannot resolve a frame from an empty stack.")
    if not package_name:
        return frames[0]
    for frame in frames:
        if package_name in frame.function:
            return frame
    return frames[-1]
