"""Tests for the markup colorizer."""

from finger_strings.markup import (
    COLOR_RESET,
    Token,
    TokenKind,
    colorize,
    decolorize,
    escape,
    highlight_tags,
    style_sequence,
    tokenize,
)

RED = "\033[31m"


class TestTokenize:
    """Test the markup lexer."""

    def test_plain_text_is_one_token(self):
        """Test that text without markup is a single token."""
        assert tokenize("hello") == [Token(TokenKind.TEXT, "hello")]

    def test_empty_string(self):
        """Test that an empty string has no tokens."""
        assert tokenize("") == []

    def test_span(self):
        """Test a style, text, reset token sequence."""
        assert tokenize("a {r b} c") == [
            Token(TokenKind.TEXT, "a "),
            Token(TokenKind.STYLE, "r"),
            Token(TokenKind.TEXT, "b"),
            Token(TokenKind.RESET),
            Token(TokenKind.TEXT, " c"),
        ]

    def test_escaped_braces_are_text(self):
        """Test that escaped braces lex as text."""
        tokens = tokenize(r"\{r x\}")
        assert all(token.kind is TokenKind.TEXT for token in tokens)
        assert "".join(token.value for token in tokens) == "{r x}"

    def test_unknown_flag_is_literal(self):
        """Test that an unknown flag leaves the opening brace literal."""
        tokens = tokenize("{rx hi}")
        assert tokens[0] == Token(TokenKind.TEXT, "{rx ")
        assert tokens[-1] == Token(TokenKind.RESET)

    def test_brace_without_space_is_literal(self):
        """Test that a brace not followed by flags and a space is literal."""
        assert tokenize("{r")[0] == Token(TokenKind.TEXT, "{r")


class TestColorize:
    """Test translation to ANSI escapes."""

    def test_red_span(self):
        """Test rendering a single colored span."""
        result = colorize("{r hello}")
        assert RED + "hello" + COLOR_RESET in result

    def test_escaped_braces_render_literally(self):
        """Test that escaped braces render without backslashes."""
        assert colorize("\\{literal\\}") == COLOR_RESET + "{literal}" + COLOR_RESET

    def test_no_markup_is_only_wrapped(self):
        """Test that plain text is only wrapped in resets."""
        assert colorize("just text") == COLOR_RESET + "just text" + COLOR_RESET

    def test_reset_after_every_newline(self):
        """Test that every line ends with a reset."""
        assert colorize("one\ntwo") == (
            COLOR_RESET + "one\n" + COLOR_RESET + "two" + COLOR_RESET
        )

    def test_flags_are_sorted_and_deduplicated(self):
        """Test the order of codes in a combined style."""
        assert style_sequence("wi") == "\033[1;37m"
        assert style_sequence("iwi") == "\033[1;37m"
        assert colorize("{iw x}") == colorize("{wi x}")

    def test_nested_spans(self):
        """Test that an inner close resets all styling."""
        result = colorize("{g outer {u inner} tail}")
        assert result == (
            COLOR_RESET
            + "\033[32mouter \033[4minner"
            + COLOR_RESET
            + " tail"
            + COLOR_RESET
            + COLOR_RESET
        )

    def test_escaped_brace_inside_span(self):
        """Test an escaped brace inside a styled span."""
        result = colorize("{b a \\} b}")
        assert "\033[34ma } b" + COLOR_RESET in result


class TestHelpers:
    """Test decolorize, escape and tag highlighting."""

    def test_decolorize(self):
        """Test stripping markup down to plain text."""
        assert decolorize("{wi Today} \\{x\\}") == "Today {x}"

    def test_escape_round_trips_through_colorize(self):
        """Test that escaped user text renders unchanged."""
        text = "call {mom} tomorrow"
        assert colorize(escape(text)) == COLOR_RESET + text + COLOR_RESET

    def test_highlight_tags(self):
        """Test that tags are wrapped in tag markup."""
        assert highlight_tags("buy milk |home") == "buy milk {ig |home}"

    def test_pipe_inside_word_is_not_a_tag(self):
        """Test that a pipe inside a word is left alone."""
        assert highlight_tags("a|b") == "a|b"
