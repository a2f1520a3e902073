"""Tests for the Rich console factory."""

from notereap.output.console import create_console, get_output


class TestConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console(width=40)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_no_ansi_when_not_a_terminal(self) -> None:
        console = create_console()
        console.print("[nr.ok]OK[/nr.ok]")
        assert "\x1b[" not in get_output(console)
