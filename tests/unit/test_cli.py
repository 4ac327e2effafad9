"""Tests for the headway CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from headway.cli.__main__ import main
from headway.cli.demo import parse_size, run_demo, simulated_progress

if TYPE_CHECKING:
    from tests.conftest import CapturedStream


class TestParseSize:
    """Tests for parse_size."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1024", 1024),
            ("10B", 10),
            ("64KiB", 64 * 1024),
            ("542MiB", 542 * 1024 * 1024),
            ("1.5GiB", 3 * 1024**3 // 2),
            ("2tb", 2 * 1024**4),
            (" 3 MB ", 3 * 1024**2),
        ],
    )
    def test_valid_sizes(self, text: str, expected: int) -> None:
        """Sizes with and without binary units are parsed."""
        assert parse_size(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "12 parsecs", "-5MiB", "0"])
    def test_invalid_sizes(self, text: str) -> None:
        """Malformed or empty sizes raise ValueError."""
        with pytest.raises(ValueError):
            parse_size(text)


class TestSimulatedProgress:
    """Tests for the simulated download schedule."""

    def test_increasing_and_complete(self) -> None:
        """Values increase strictly and end at exactly 1.0."""
        values = list(simulated_progress())

        assert values[0] == pytest.approx(0.002 * 1.07)
        assert all(a < b for a, b in zip(values, values[1:]))
        assert values[-1] == 1.0

    def test_speed_reverses(self) -> None:
        """Step sizes grow, then shrink after the configured rounds."""
        values = [0.0, *simulated_progress(rounds_per_direction=5)]
        deltas = [b - a for a, b in zip(values, values[1:])]

        assert deltas[4] > deltas[0]
        assert deltas[7] < deltas[5]


class TestRunDemo:
    """Tests for the demo command."""

    def test_run_demo(self, stream: CapturedStream) -> None:
        """The demo draws a bar, prints milestones and a summary."""
        result = run_demo(
            size=2048,
            duration=0,
            show_speed=True,
            show_time_left=True,
            postfix="Fake download",
            stream=stream,
            sleep=lambda _: None,
        )

        output = stream.getvalue()
        assert result == 0
        assert "Already 10% done!\n" in output
        assert "Almost there!\n" in output
        assert output.index("Already 10% done!") < output.index("Almost there!")
        assert output.endswith(" on average\n")
        assert "Fake-downloaded 2.00 KiB in " in output

    def test_main_demo(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The demo subcommand runs end to end."""
        result = main(["demo", "--size", "1KiB", "--duration", "0"])

        captured = capsys.readouterr()
        assert result == 0
        assert "Fake-downloaded 1024 B in " in captured.out

    def test_main_without_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Without a command, help is printed."""
        assert main([]) == 0
        assert "demo" in capsys.readouterr().out

    def test_main_invalid_size(self) -> None:
        """An invalid size is a usage error."""
        with pytest.raises(SystemExit) as exc_info:
            main(["demo", "--size", "lots"])
        assert exc_info.value.code == 2
