"""Tests for the StringIO-backed Rich console."""

from rich.text import Text

from cmdgate.output.console import GATE_THEME, create_console, get_output


class TestConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console()
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_theme_styles_resolve(self) -> None:
        console = create_console(no_color=True)
        console.print(Text("OK", style="gate.ok"))
        assert get_output(console) == "OK\n"
        assert "gate.error" in GATE_THEME.styles

    def test_width_override(self) -> None:
        assert create_console(width=40).width == 40
