"""Tests for trace and frame selection."""

from trace_triage.core.frame_parsers import parse_frames
from trace_triage.core.selector import (
    DEFAULT_IGNORE_PACKAGES,
    is_noise_frame,
    select_frame,
    select_trace,
)
from trace_triage.models.trace import Frame, TraceBlock


def make_block(header: str, frame_lines: list[str], start: int = 0) -> TraceBlock:
    lines = (header, *frame_lines)
    return TraceBlock(header_line=header, raw_lines=lines, start=start).with_frames(
        parse_frames(lines)
    )


def jvm_lines(count: int, package: str = "com.example") -> list[str]:
    return [f"\tat {package}.C{i}.run(C{i}.java:{i + 1})" for i in range(count)]


class TestSelectTrace:
    """Tests for select_trace."""

    def test_no_blocks(self) -> None:
        """Test that nothing is selected from an empty list."""
        assert select_trace([]) is None

    def test_frameless_blocks_dropped(self) -> None:
        """Test that blocks without frames are never selected."""
        block = make_block("java.lang.IllegalStateException: no frames", [])

        assert select_trace([block]) is None

    def test_richest_block_wins(self) -> None:
        """Test that the block with most frames is selected."""
        small = make_block("IOException: a", jvm_lines(1), start=0)
        large = make_block("IOException: b", jvm_lines(5), start=10)

        assert select_trace([small, large]) is large

    def test_tie_goes_to_first(self) -> None:
        """Test that equal frame counts keep the earlier block."""
        first = make_block("IOException: a", jvm_lines(2), start=0)
        second = make_block("IOException: b", jvm_lines(2), start=10)

        assert select_trace([first, second]) is first


class TestSelectFrame:
    """Tests for select_frame."""

    def test_no_frames(self) -> None:
        """Test that nothing is selected without frames."""
        assert select_frame(()) is None

    def test_first_non_noise_frame(self) -> None:
        """Test that framework frames are skipped."""
        frames = parse_frames(
            [
                "\tat org.springframework.web.servlet.FrameworkServlet.service(FrameworkServlet.java:1)",
                "\tat com.example.web.Controller.get(Controller.java:20)",
                "\tat com.example.web.Service.load(Service.java:30)",
            ]
        )

        frame = select_frame(frames)

        assert frame is not None
        assert frame.function == "com.example.web.Controller.get"

    def test_all_noise_falls_back_to_first(self) -> None:
        """Test the fallback when every frame is noise."""
        frames = parse_frames(
            [
                "    at Module._compile (node:internal/modules/cjs/loader:1256:14)",
                "    at require (/app/node_modules/express/lib/router.js:10:3)",
            ]
        )

        frame = select_frame(frames)

        assert frame is not None
        assert frame.index == 0

    def test_custom_prefix_skips_frame(self) -> None:
        """Test that an extra prefix moves selection to the next frame."""
        frames = parse_frames(jvm_lines(3))

        frame = select_frame(frames, DEFAULT_IGNORE_PACKAGES | {"com.example.C0."})

        assert frame is not None
        assert frame.index == 1

    def test_custom_prefix_excluding_everything(self) -> None:
        """Test the fallback when custom prefixes exclude every frame."""
        frames = parse_frames(jvm_lines(3))

        frame = select_frame(frames, {"com.example."})

        assert frame is not None
        assert frame.index == 0


class TestIsNoiseFrame:
    """Tests for is_noise_frame."""

    def test_default_markers(self) -> None:
        """Test that runtime and dependency frames are noise."""
        noisy = [
            Frame("Method.java", 1, "at java.lang.reflect.Method.invoke(Method.java:1)"),
            Frame("loader", 1, "at Module._load (node:internal/modules/cjs/loader:1:1)"),
            Frame(
                "/venv/lib/python3.11/site-packages/flask/app.py",
                1,
                'File "/venv/lib/python3.11/site-packages/flask/app.py", line 1, in wsgi_app',
            ),
        ]

        for frame in noisy:
            assert is_noise_frame(frame), frame.raw_text

    def test_project_frame_is_not_noise(self) -> None:
        """Test that application frames are kept."""
        frame = Frame("Foo.java", 42, "at com.example.Foo.bar(Foo.java:42)")

        assert not is_noise_frame(frame)
