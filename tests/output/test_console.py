"""Tests for Rich Console factory and theme."""

from io import StringIO

from keyguide.output.console import KEYGUIDE_THEME, create_console, get_output, style_for_scope


class TestCreateConsole:
    def test_returns_console_with_stringio(self) -> None:
        assert isinstance(create_console().file, StringIO)

    def test_no_color_disables_ansi(self) -> None:
        console = create_console(no_color=True)
        console.print("[kg.combo]Ctrl + C[/kg.combo]")
        output = get_output(console)
        assert "\x1b" not in output
        assert "Ctrl + C" in output

    def test_widths(self) -> None:
        assert create_console().width == 120
        assert create_console(width=80).width == 80


class TestTheme:
    def test_scope_styles_defined(self) -> None:
        for scope in ("app", "os", "wildcard"):
            style = style_for_scope(scope)
            assert style == f"kg.scope.{scope}"
            assert style in KEYGUIDE_THEME.styles

    def test_unknown_scope(self) -> None:
        assert style_for_scope("other") == ""
