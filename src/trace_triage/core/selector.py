"""Choose the most relevant trace and the most relevant frame within it."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from trace_triage.models.trace import Frame, TraceBlock

log = structlog.get_logger()

# Framework, runtime and tooling frames that rarely point at the real bug.
# Matched as substrings of the frame's raw text.
DEFAULT_IGNORE_PACKAGES: frozenset[str] = frozenset(
    {
        # JVM runtime and reflection internals
        "java.base/",
        "java.lang.reflect.",
        "java.lang.Thread.run",
        "java.util.concurrent.",
        "jdk.internal.",
        "sun.reflect.",
        "kotlin.coroutines.",
        "kotlinx.coroutines.",
        "scala.concurrent.",
        # JVM web frameworks, servers and test runners
        "org.springframework.",
        "org.apache.catalina.",
        "org.apache.tomcat.",
        "org.eclipse.jetty.",
        "io.netty.",
        "org.junit.",
        "junit.framework.",
        "org.gradle.",
        # IDE-injected frames
        "com.intellij.",
        "org.jetbrains.",
        # Node runtime and dependencies
        "node:internal",
        "internal/modules/",
        "internal/process/",
        "node_modules",
        # Python runtime and dependencies
        "site-packages",
        "dist-packages",
        "<frozen ",
        "/lib/python",
    }
)


def is_noise_frame(frame: Frame, ignore_packages: Iterable[str] = DEFAULT_IGNORE_PACKAGES) -> bool:
    """Check if a frame belongs to framework, runtime or dependency code."""
    return any(marker in frame.raw_text for marker in ignore_packages)


def select_trace(blocks: Sequence[TraceBlock]) -> TraceBlock | None:
    """Pick the block with the most parsed frames.

    Blocks without frames are never selected. Ties go to the block that
    appears first.

    Args:
        blocks: Candidate blocks, already enriched with frames

    Returns:
        The richest block, or None if no block has a frame
    """
    candidates = [block for block in blocks if block.frames]
    if not candidates:
        return None
    # max() keeps the first of several equal maxima
    return max(candidates, key=lambda block: block.frame_count)


def select_frame(
    frames: Sequence[Frame],
    ignore_packages: Iterable[str] = DEFAULT_IGNORE_PACKAGES,
) -> Frame | None:
    """Pick the first frame that is not framework noise.

    Falls back to the first frame when every frame is noise.

    Args:
        frames: Frames of the selected trace, in printed order
        ignore_packages: Markers identifying noise frames

    Returns:
        The selected frame, or None if there are no frames
    """
    if not frames:
        return None

    markers = tuple(ignore_packages)
    for frame in frames:
        if not is_noise_frame(frame, markers):
            return frame

    log.debug("all_frames_ignored", frame_count=len(frames))
    return frames[0]
