"""Inline markup to ANSI terminal colors.

Display strings embed spans of the form ``{<flags> text}`` where ``<flags>``
is a run of single-letter style codes, e.g. ``{ri Warning}`` for bold red.
A literal brace is written ``\\{`` or ``\\}``.

The translation is split into a lexer, which turns a string into a flat
token stream, and a renderer, which turns tokens into escape sequences.
An opening brace whose flag run contains a letter missing from
``STYLE_CODES`` is not a span; it is rendered as literal text. Every
unescaped ``}`` resets the style, whether or not a span is open.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

COLOR_RESET = "\033[0m"

STYLE_CODES = {
    "n": 0,   # normal
    "i": 1,   # bold (intense)
    "u": 4,   # underline
    "v": 7,   # reverse video
    "r": 31,
    "g": 32,
    "y": 33,
    "b": 34,
    "m": 35,
    "c": 36,
    "w": 37,
}

TOKEN_RE = re.compile(
    r"(?P<escaped_open>\\\{)"
    r"|(?P<open>\{(?P<flags>[a-z]+)\s)"
    r"|(?P<escaped_close>\\\})"
    r"|(?P<close>\})"
)

TAG_RE = re.compile(r"(?<!\S)(\|\S+)")


class TokenKind(Enum):
    """Kinds of markup tokens."""
    TEXT = "text"
    STYLE = "style"
    RESET = "reset"


@dataclass(frozen=True)
class Token:
    """A lexed piece of a markup string.

    ``value`` holds the literal text for TEXT tokens and the flag letters
    for STYLE tokens; it is empty for RESET.
    """
    kind: TokenKind
    value: str = ""


def tokenize(text: str) -> List[Token]:
    """Split a markup string into TEXT, STYLE and RESET tokens.

    Matches are taken leftmost first, so an escaped brace always wins over
    the brace it escapes.
    """
    tokens: List[Token] = []
    position = 0

    for match in TOKEN_RE.finditer(text):
        if match.start() > position:
            tokens.append(Token(TokenKind.TEXT, text[position:match.start()]))

        if match.group("escaped_open") is not None:
            tokens.append(Token(TokenKind.TEXT, "{"))
        elif match.group("escaped_close") is not None:
            tokens.append(Token(TokenKind.TEXT, "}"))
        elif match.group("close") is not None:
            tokens.append(Token(TokenKind.RESET))
        else:
            flags = match.group("flags")
            if set(flags) <= STYLE_CODES.keys():
                tokens.append(Token(TokenKind.STYLE, flags))
            else:
                tokens.append(Token(TokenKind.TEXT, match.group(0)))

        position = match.end()

    if position < len(text):
        tokens.append(Token(TokenKind.TEXT, text[position:]))

    return tokens


def style_sequence(flags: str) -> str:
    """Build the escape sequence for a run of flag letters.

    Codes are deduplicated and sorted so that ``{ir `` and ``{rri `` render
    identically.

    Raises:
        KeyError: If a flag letter has no style code
    """
    codes = sorted({STYLE_CODES[flag] for flag in flags})
    return "\033[" + ";".join(str(code) for code in codes) + "m"


def render(tokens: Iterable[Token]) -> str:
    """Render a token stream to an ANSI string without outer resets."""
    parts = []
    for token in tokens:
        if token.kind is TokenKind.TEXT:
            parts.append(token.value)
        elif token.kind is TokenKind.STYLE:
            parts.append(style_sequence(token.value))
        else:
            parts.append(COLOR_RESET)
    return "".join(parts)


def color_bounded(text: str) -> str:
    """Wrap text in resets and re-apply a reset after every newline."""
    return COLOR_RESET + text.replace("\n", "\n" + COLOR_RESET) + COLOR_RESET


def colorize(text: str) -> str:
    """Translate markup spans in ``text`` to ANSI escapes."""
    return color_bounded(render(tokenize(text)))


def decolorize(text: str) -> str:
    """Strip markup from ``text``, keeping escaped braces as plain braces."""
    return "".join(
        token.value for token in tokenize(text) if token.kind is TokenKind.TEXT
    )


def escape(text: str) -> str:
    """Escape braces so user-supplied text is never read as markup."""
    return text.replace("{", "\\{").replace("}", "\\}")


def highlight_tags(text: str) -> str:
    """Wrap every ``|tag`` token in a bold green span."""
    return TAG_RE.sub(r"{ig \1}", text)
