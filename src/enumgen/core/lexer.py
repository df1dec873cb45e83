"""
Lexer/Tokenizer for Go source files.

Converts raw Go text into a stream of tokens with source location tracking.
Applies Go's automatic semicolon insertion at line ends and collects
comments on the side so the parser can attach doc comments to
declarations.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import make_parse_error


class TokenType(Enum):
    """Token types in Go source."""

    # Literals
    IDENTIFIER = "IDENTIFIER"
    INT = "INT"
    FLOAT = "FLOAT"
    IMAG = "IMAG"
    CHAR = "CHAR"
    STRING = "STRING"

    # Keywords
    BREAK = "break"
    CASE = "case"
    CHAN = "chan"
    CONST = "const"
    CONTINUE = "continue"
    DEFAULT = "default"
    DEFER = "defer"
    ELSE = "else"
    FALLTHROUGH = "fallthrough"
    FOR = "for"
    FUNC = "func"
    GO = "go"
    GOTO = "goto"
    IF = "if"
    IMPORT = "import"
    INTERFACE = "interface"
    MAP = "map"
    PACKAGE = "package"
    RANGE = "range"
    RETURN = "return"
    SELECT = "select"
    STRUCT = "struct"
    SWITCH = "switch"
    TYPE = "type"
    VAR = "var"

    # Delimiters
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LBRACE = "{"
    RBRACE = "}"
    COMMA = ","
    PERIOD = "."
    SEMICOLON = ";"
    ASSIGN = "="

    # Any other operator; the exact text is in Token.value
    OPERATOR = "OPERATOR"

    # Special
    EOF = "EOF"


KEYWORDS = {
    "break",
    "case",
    "chan",
    "const",
    "continue",
    "default",
    "defer",
    "else",
    "fallthrough",
    "for",
    "func",
    "go",
    "goto",
    "if",
    "import",
    "interface",
    "map",
    "package",
    "range",
    "return",
    "select",
    "struct",
    "switch",
    "type",
    "var",
}

# Longest first so that reading is maximal munch
OPERATORS = sorted(
    [
        "+", "-", "*", "/", "%", "&", "|", "^", "<<", ">>", "&^",
        "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "<<=", ">>=", "&^=",
        "&&", "||", "<-", "++", "--", "==", "<", ">", "=", "!", "~",
        "!=", "<=", ">=", ":=", "...", "(", ")", "[", "]", "{", "}",
        ",", ";", ".", ":",
    ],
    key=len,
    reverse=True,
)  # fmt: skip

_DELIMITERS = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ",": TokenType.COMMA,
    ".": TokenType.PERIOD,
    ";": TokenType.SEMICOLON,
    "=": TokenType.ASSIGN,
}

# A line ending after one of these gets an implicit semicolon
_SEMICOLON_TRIGGERS = {
    TokenType.IDENTIFIER,
    TokenType.INT,
    TokenType.FLOAT,
    TokenType.IMAG,
    TokenType.CHAR,
    TokenType.STRING,
    TokenType.BREAK,
    TokenType.CONTINUE,
    TokenType.FALLTHROUGH,
    TokenType.RETURN,
    TokenType.RPAREN,
    TokenType.RBRACKET,
    TokenType.RBRACE,
}

_DIGITS = r"[0-9](?:_?[0-9])*"
_HEX_DIGITS = r"[0-9a-fA-F](?:_?[0-9a-fA-F])*"

_INT_RE = re.compile(
    r"0[xX](?:_?[0-9a-fA-F])+"
    r"|0[bB](?:_?[01])+"
    r"|0[oO]?(?:_?[0-7])*"
    r"|[1-9](?:_?[0-9])*"
)
_FLOAT_RE = re.compile(
    rf"{_DIGITS}\.(?:{_DIGITS})?(?:[eE][+-]?{_DIGITS})?"
    rf"|{_DIGITS}[eE][+-]?{_DIGITS}"
    rf"|\.{_DIGITS}(?:[eE][+-]?{_DIGITS})?"
    rf"|0[xX](?:_?{_HEX_DIGITS})?(?:\.(?:{_HEX_DIGITS})?)?[pP][+-]?{_DIGITS}"
)
_IMAG_DECIMAL_RE = re.compile(rf"{_DIGITS}")


@dataclass
class Token:
    """
    A single token in Go source.

    Attributes:
        type: Type of token
        value: Source text of the token (a newline for implicit semicolons)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    type: TokenType
    value: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.line}:{self.column})"


@dataclass
class Comment:
    """
    A ``//`` or ``/* */`` comment.

    Attributes:
        text: Comment text including the comment markers
        line: Line the comment starts on
        column: Column the comment starts at
        end_line: Line the comment ends on
        token_index: Number of tokens emitted before the comment
    """

    text: str
    line: int
    column: int
    end_line: int
    token_index: int


class Lexer:
    """
    Lexer for Go source.

    Converts source text into a stream of tokens; comments are kept in a
    separate list.
    """

    def __init__(self, text: str, file: Path):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            file: Source file path (for error reporting)
        """
        self.text = text.removeprefix("\ufeff")
        self.file = file
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []
        self.comments: list[Comment] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def skip_whitespace(self) -> None:
        """Skip whitespace characters other than newlines."""
        while self.current_char() in (" ", "\t", "\r"):
            self.advance()

    def needs_semicolon(self) -> bool:
        """Whether a line break here terminates a statement."""
        if not self.tokens:
            return False
        last = self.tokens[-1]
        if last.type in _SEMICOLON_TRIGGERS:
            return True
        return last.type == TokenType.OPERATOR and last.value in ("++", "--")

    def insert_semicolon(self, line: int, column: int) -> None:
        """Emit an implicit semicolon if the last token calls for one."""
        if self.needs_semicolon():
            self.tokens.append(Token(TokenType.SEMICOLON, "\n", line, column))

    def read_line_comment(self) -> str:
        """Read a ``//`` comment up to (not including) the newline."""
        start = self.pos
        while self.current_char() is not None and self.current_char() != "\n":
            self.advance()
        return self.text[start : self.pos].rstrip("\r")

    def read_block_comment(self) -> str:
        """Read a ``/* */`` comment."""
        start = self.pos
        start_line = self.line
        start_col = self.column
        self.advance()
        self.advance()
        while True:
            current = self.current_char()
            if current is None:
                raise make_parse_error(
                    "Comment not terminated",
                    self.file,
                    start_line,
                    start_col,
                )
            if current == "*" and self.peek_char() == "/":
                self.advance()
                self.advance()
                break
            self.advance()
        return self.text[start : self.pos]

    def read_string(self) -> str:
        """Read an interpreted string or rune literal (source text kept)."""
        start = self.pos
        start_line = self.line
        start_col = self.column
        quote = self.current_char()
        self.advance()  # skip opening quote

        while True:
            current = self.current_char()
            if current is None or current == "\n":
                kind = "Rune" if quote == "'" else "String"
                raise make_parse_error(
                    f"{kind} literal not terminated",
                    self.file,
                    start_line,
                    start_col,
                )
            if current == "\\":
                self.advance()
                if self.current_char() is not None:
                    self.advance()
                continue
            self.advance()
            if current == quote:
                break

        literal = self.text[start : self.pos]
        if quote == "'" and len(literal) == 2:
            raise make_parse_error("Empty rune literal", self.file, start_line, start_col)
        return literal

    def read_raw_string(self) -> str:
        """Read a backquoted raw string literal (may span lines)."""
        start = self.pos
        start_line = self.line
        start_col = self.column
        self.advance()
        while True:
            current = self.current_char()
            if current is None:
                raise make_parse_error(
                    "Raw string literal not terminated",
                    self.file,
                    start_line,
                    start_col,
                )
            self.advance()
            if current == "`":
                break
        return self.text[start : self.pos]

    def read_number(self) -> tuple[str, TokenType]:
        """
        Read an integer, floating-point, or imaginary literal.

        Returns:
            Tuple of (literal text, token type)
        """
        start_line = self.line
        start_col = self.column
        start = self.pos
        is_hex = self.current_char() == "0" and self.peek_char() in ("x", "X")
        exponent_chars = ("p", "P") if is_hex else ("e", "E")

        while True:
            current = self.current_char()
            if current is None:
                break
            if current in exponent_chars and self.peek_char() in ("+", "-"):
                self.advance()
                self.advance()
                continue
            if current.isalnum() or current in ("_", "."):
                self.advance()
                continue
            break

        literal = self.text[start : self.pos]
        if literal.endswith("i"):
            body = literal[:-1]
            if _FLOAT_RE.fullmatch(body) or _INT_RE.fullmatch(body) or _IMAG_DECIMAL_RE.fullmatch(body):
                return literal, TokenType.IMAG
        elif _INT_RE.fullmatch(literal):
            return literal, TokenType.INT
        elif _FLOAT_RE.fullmatch(literal):
            return literal, TokenType.FLOAT

        raise make_parse_error(
            f"Invalid number literal: {literal!r}",
            self.file,
            start_line,
            start_col,
        )

    def read_identifier(self) -> str:
        """Read an identifier or keyword."""
        chars = []
        current = self.current_char()
        while current and (current.isalnum() or current == "_"):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def read_operator(self) -> str | None:
        """Read the longest operator at the current position."""
        for op in OPERATORS:
            if self.text.startswith(op, self.pos):
                for _ in op:
                    self.advance()
                return op
        return None

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens including implicit semicolons and EOF

        Raises:
            ParseError: If a lexical error is encountered
        """
        while self.pos < len(self.text):
            self.skip_whitespace()

            ch = self.current_char()
            if ch is None:
                break

            # Save position for token
            token_line = self.line
            token_col = self.column

            # Newlines
            if ch == "\n":
                self.insert_semicolon(token_line, token_col)
                self.advance()

            # Comments
            elif ch == "/" and self.peek_char() == "/":
                text = self.read_line_comment()
                self.comments.append(
                    Comment(text, token_line, token_col, token_line, len(self.tokens))
                )

            elif ch == "/" and self.peek_char() == "*":
                text = self.read_block_comment()
                self.comments.append(
                    Comment(text, token_line, token_col, self.line, len(self.tokens))
                )
                # A block comment spanning lines acts like a newline
                if self.line > token_line:
                    self.insert_semicolon(token_line, token_col)

            # Strings and runes
            elif ch in ('"', "'"):
                value = self.read_string()
                token_type = TokenType.CHAR if ch == "'" else TokenType.STRING
                self.tokens.append(Token(token_type, value, token_line, token_col))

            elif ch == "`":
                value = self.read_raw_string()
                self.tokens.append(Token(TokenType.STRING, value, token_line, token_col))

            # Numbers
            elif ch.isdigit() or (ch == "." and (self.peek_char() or "").isdigit()):
                value, token_type = self.read_number()
                self.tokens.append(Token(token_type, value, token_line, token_col))

            # Identifiers and keywords
            elif ch.isalpha() or ch == "_":
                value = self.read_identifier()
                if value in KEYWORDS:
                    token_type = TokenType(value)
                else:
                    token_type = TokenType.IDENTIFIER
                self.tokens.append(Token(token_type, value, token_line, token_col))

            # Operators and delimiters
            else:
                op = self.read_operator()
                if op is None:
                    raise make_parse_error(
                        f"Unexpected character: {ch!r}",
                        self.file,
                        token_line,
                        token_col,
                    )
                token_type = _DELIMITERS.get(op, TokenType.OPERATOR)
                self.tokens.append(Token(token_type, op, token_line, token_col))

        self.insert_semicolon(self.line, self.column)

        # Add EOF token
        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column))

        return self.tokens


def tokenize(text: str, file: Path) -> list[Token]:
    """
    Convenience function to tokenize Go source text.

    Args:
        text: Source text
        file: Source file path

    Returns:
        List of tokens
    """
    lexer = Lexer(text, file)
    return lexer.tokenize()
