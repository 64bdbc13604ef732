"""Tests for the installed distribution metadata."""

from __future__ import annotations

from importlib.metadata import requires


class TestDependencies:
    """Tests for declared dependency ranges."""

    def test_mcp_stays_on_the_1x_line(self) -> None:
        """The low-level Server decorators used by the server are 1.x API."""
        declared = [
            req for req in requires("things3-mcp") or [] if req.startswith("mcp")
        ]

        assert len(declared) == 1
        assert "<2" in declared[0]
        assert ">=1.10" in declared[0]
