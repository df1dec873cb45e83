"""
Declaration-level parser for Go source files.

Builds a SourceFile from the token stream: the package clause plus every
top-level declaration with its leading doc comment group. Function
bodies and initializer expressions are checked for bracket balance but
otherwise not interpreted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ParseError, make_parse_error
from .lexer import Comment, Lexer, Token, TokenType

logger = logging.getLogger(__name__)

_OPENERS = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACKET: TokenType.RBRACKET,
    TokenType.LBRACE: TokenType.RBRACE,
}
_CLOSERS = set(_OPENERS.values())


# =============================================================================
# AST
# =============================================================================


@dataclass
class CommentGroup:
    """A run of adjacent comments with no tokens or blank lines in between."""

    comments: list[Comment]

    @property
    def line(self) -> int:
        return self.comments[0].line

    @property
    def end_line(self) -> int:
        return self.comments[-1].end_line

    @property
    def token_index(self) -> int:
        return self.comments[0].token_index

    @property
    def text(self) -> str:
        return "\n".join(c.text for c in self.comments)


@dataclass
class Ident:
    """A plain type name such as ``string`` or ``Color``."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass
class QualifiedIdent:
    """A package-qualified type name such as ``time.Duration``."""

    package: str
    name: str

    def __str__(self) -> str:
        return f"{self.package}.{self.name}"


@dataclass
class CompositeType:
    """Any other type expression (struct, slice, map, func, generic ...)."""

    text: str

    def __str__(self) -> str:
        return self.text


TypeExpr = Ident | QualifiedIdent | CompositeType


@dataclass
class ImportSpec:
    path: str
    name: str | None
    line: int


@dataclass
class ValueSpec:
    names: list[str]
    line: int


@dataclass
class TypeSpec:
    """
    One ``Name Type`` or ``Name = Type`` specification.

    Attributes:
        name: Declared type name
        type: Underlying type expression
        assign: True for alias declarations (``type A = B``)
        line: Line of the type name
    """

    name: str
    type: TypeExpr
    assign: bool
    line: int


Spec = ImportSpec | ValueSpec | TypeSpec


@dataclass
class GenDecl:
    """
    An ``import``, ``const``, ``var`` or ``type`` declaration.

    Attributes:
        tok: Declaration keyword
        specs: Specifications, several for a parenthesized group
        doc: Leading comment group, if any
        line: Line of the keyword
        grouped: True for ``keyword ( ... )`` form
    """

    tok: TokenType
    specs: list[Spec]
    doc: CommentGroup | None
    line: int
    grouped: bool = False


@dataclass
class FuncDecl:
    name: str
    receiver: str | None
    doc: CommentGroup | None
    line: int


Decl = GenDecl | FuncDecl


@dataclass
class SourceFile:
    """A parsed Go file."""

    path: Path
    package: str
    decls: list[Decl] = field(default_factory=list)
    comments: list[CommentGroup] = field(default_factory=list)

    def type_decls(self) -> list[GenDecl]:
        """Return the ``type`` declarations in source order."""
        return [d for d in self.decls if isinstance(d, GenDecl) and d.tok == TokenType.TYPE]


# =============================================================================
# Comment grouping
# =============================================================================


def group_comments(comments: list[Comment], tokens: list[Token]) -> list[CommentGroup]:
    """
    Group comments the way the Go toolchain does.

    Comments belong to one group when no token separates them and no
    blank line lies between them. A comment that trails a token on the
    same line only groups with comments on that same line.
    """
    groups: list[CommentGroup] = []
    current: list[Comment] = []
    trailing = False

    for comment in comments:
        if current:
            prev = current[-1]
            same_group = (
                comment.token_index == prev.token_index
                and comment.line <= prev.end_line + 1
                and not (trailing and comment.line != prev.end_line)
            )
            if not same_group:
                groups.append(CommentGroup(current))
                current = []

        if not current:
            before = _last_real_token(tokens, comment.token_index)
            trailing = before is not None and before.line == comment.line
        current.append(comment)

    if current:
        groups.append(CommentGroup(current))
    return groups


def _last_real_token(tokens: list[Token], index: int) -> Token | None:
    """The last token before ``index`` that appears in the source text."""
    for tok in reversed(tokens[:index]):
        if not (tok.type == TokenType.SEMICOLON and tok.value == "\n"):
            return tok
    return None


# =============================================================================
# Parser
# =============================================================================


class Parser:
    """Parses a token stream into a SourceFile."""

    def __init__(self, tokens: list[Token], comments: list[Comment], file: Path):
        self.tokens = tokens
        self.file = file
        self.pos = 0
        self.groups = group_comments(comments, tokens)

    # -- token helpers --------------------------------------------------------

    def current_token(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *types: TokenType) -> bool:
        return self.current_token().type in types

    def expect(self, token_type: TokenType, what: str | None = None) -> Token:
        token = self.current_token()
        if token.type != token_type:
            raise self.error(f"expected {what or repr(token_type.value)}, found {self.describe(token)}")
        return self.advance()

    def error(self, message: str, token: Token | None = None) -> ParseError:
        token = token or self.current_token()
        return make_parse_error(message, self.file, token.line, token.column)

    @staticmethod
    def describe(token: Token) -> str:
        if token.type == TokenType.EOF:
            return "EOF"
        if token.type == TokenType.SEMICOLON and token.value == "\n":
            return "newline"
        return repr(token.value)

    def skip_semicolons(self) -> None:
        while self.match(TokenType.SEMICOLON):
            self.advance()

    def end_of_decl(self) -> None:
        """A top-level declaration ends with a semicolon or EOF."""
        if self.match(TokenType.EOF):
            return
        self.expect(TokenType.SEMICOLON, "';' or newline after declaration")

    def doc_for(self, index: int) -> CommentGroup | None:
        """Return the comment group that documents the token at ``index``."""
        token = self.tokens[index]
        for group in reversed(self.groups):
            if group.token_index > index:
                continue
            if group.token_index < index:
                break
            if group.end_line + 1 == token.line:
                before = _last_real_token(self.tokens, index)
                if before is None or before.line < group.line:
                    return group
            break
        return None

    def collect(self, stops: set[TokenType]) -> list[Token]:
        """
        Collect tokens up to a stop token at bracket depth zero.

        Raises:
            ParseError: On unbalanced or mismatched brackets
        """
        collected: list[Token] = []
        stack: list[Token] = []

        while True:
            token = self.current_token()
            if token.type == TokenType.EOF:
                if stack:
                    opener = stack[-1]
                    raise self.error(
                        f"expected {_OPENERS[opener.type].value!r} to close {opener.value!r} "
                        f"opened at line {opener.line}, found EOF"
                    )
                break
            if not stack and token.type in stops:
                break
            if token.type in _OPENERS:
                stack.append(token)
            elif token.type in _CLOSERS:
                if not stack:
                    raise self.error(f"unexpected {token.value!r}")
                opener = stack.pop()
                if _OPENERS[opener.type] != token.type:
                    raise self.error(
                        f"expected {_OPENERS[opener.type].value!r} to close {opener.value!r} "
                        f"opened at line {opener.line}, found {token.value!r}"
                    )
            collected.append(token)
            self.advance()

        return collected

    # -- grammar --------------------------------------------------------------

    def parse_package_clause(self) -> str:
        self.skip_semicolons()
        self.expect(TokenType.PACKAGE, "'package'")
        name = self.expect(TokenType.IDENTIFIER, "package name").value
        if name == "_":
            raise self.error("invalid package name _", self.tokens[self.pos - 1])
        self.end_of_decl()
        return name

    def parse_file(self) -> SourceFile:
        """
        Parse the whole token stream.

        Returns:
            SourceFile with package name, declarations and comment groups
        """
        package = self.parse_package_clause()
        source = SourceFile(path=self.file, package=package, comments=self.groups)

        while True:
            self.skip_semicolons()
            if self.match(TokenType.EOF):
                break
            source.decls.append(self.parse_decl())

        logger.debug("Parsed %s: package %s, %d declarations", self.file, package, len(source.decls))
        return source

    def parse_decl(self) -> Decl:
        index = self.pos
        token = self.current_token()
        doc = self.doc_for(index)

        if token.type == TokenType.FUNC:
            return self.parse_func_decl(doc)
        if token.type in (TokenType.IMPORT, TokenType.CONST, TokenType.VAR, TokenType.TYPE):
            return self.parse_gen_decl(doc)
        raise self.error(f"expected declaration, found {self.describe(token)}")

    def parse_gen_decl(self, doc: CommentGroup | None) -> GenDecl:
        keyword = self.advance()
        spec_parsers = {
            TokenType.IMPORT: self.parse_import_spec,
            TokenType.CONST: self.parse_value_spec,
            TokenType.VAR: self.parse_value_spec,
            TokenType.TYPE: self.parse_type_spec,
        }
        parse_spec = spec_parsers[keyword.type]
        decl = GenDecl(tok=keyword.type, specs=[], doc=doc, line=keyword.line)

        if self.match(TokenType.LPAREN):
            self.advance()
            decl.grouped = True
            while True:
                self.skip_semicolons()
                if self.match(TokenType.RPAREN):
                    self.advance()
                    break
                decl.specs.append(parse_spec({TokenType.SEMICOLON, TokenType.RPAREN}))
                if not self.match(TokenType.RPAREN):
                    self.expect(TokenType.SEMICOLON, "';' or ')'")
        else:
            decl.specs.append(parse_spec({TokenType.SEMICOLON}))

        self.end_of_decl()
        return decl

    def parse_import_spec(self, stops: set[TokenType]) -> ImportSpec:
        line = self.current_token().line
        name = None
        if self.match(TokenType.IDENTIFIER, TokenType.PERIOD):
            name = self.advance().value
        path = self.expect(TokenType.STRING, "import path").value
        return ImportSpec(path=path.strip('"`'), name=name, line=line)

    def parse_value_spec(self, stops: set[TokenType]) -> ValueSpec:
        first = self.expect(TokenType.IDENTIFIER, "identifier")
        names = [first.value]
        while self.match(TokenType.COMMA):
            self.advance()
            names.append(self.expect(TokenType.IDENTIFIER, "identifier").value)
        self.collect(stops)
        return ValueSpec(names=names, line=first.line)

    def parse_type_spec(self, stops: set[TokenType]) -> TypeSpec:
        name = self.expect(TokenType.IDENTIFIER, "type name")
        assign = False
        if self.match(TokenType.ASSIGN):
            self.advance()
            assign = True

        type_tokens = self.collect(stops)
        if not type_tokens:
            raise self.error(f"expected type, found {self.describe(self.current_token())}")
        return TypeSpec(
            name=name.value,
            type=self.type_expr(type_tokens),
            assign=assign,
            line=name.line,
        )

    @staticmethod
    def type_expr(tokens: list[Token]) -> TypeExpr:
        kinds = [t.type for t in tokens]
        if kinds == [TokenType.IDENTIFIER]:
            return Ident(tokens[0].value)
        if kinds == [TokenType.IDENTIFIER, TokenType.PERIOD, TokenType.IDENTIFIER]:
            return QualifiedIdent(tokens[0].value, tokens[2].value)
        return CompositeType(" ".join(t.value for t in tokens if t.value != "\n"))

    def parse_func_decl(self, doc: CommentGroup | None) -> FuncDecl:
        keyword = self.advance()
        receiver = None
        if self.match(TokenType.LPAREN):
            self.advance()
            receiver_tokens = self.collect({TokenType.RPAREN})
            self.expect(TokenType.RPAREN, "')'")
            receiver = " ".join(t.value for t in receiver_tokens)
        name = self.expect(TokenType.IDENTIFIER, "function name").value
        if not self.match(TokenType.LPAREN, TokenType.LBRACKET):
            raise self.error(f"expected '(', found {self.describe(self.current_token())}")
        self.collect({TokenType.SEMICOLON})
        self.end_of_decl()
        return FuncDecl(name=name, receiver=receiver, doc=doc, line=keyword.line)


def parse_source(text: str, file: Path) -> SourceFile:
    """
    Parse Go source text into a SourceFile.

    Args:
        text: Go source text
        file: Path used in error messages

    Returns:
        SourceFile

    Raises:
        ParseError: If the text is not valid Go at declaration level
    """
    lexer = Lexer(text, file)
    tokens = lexer.tokenize()
    return Parser(tokens, lexer.comments, file).parse_file()


def parse_file(path: Path) -> SourceFile:
    """
    Read and parse a Go source file.

    Raises:
        ParseError: If the file cannot be read or parsed
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"cannot read {path}: {e}") from e
    return parse_source(text, path)


def parse_package_name(path: Path) -> str:
    """
    Read only the package clause of a Go source file.

    Raises:
        ParseError: If the file cannot be read or has no package clause
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"cannot read {path}: {e}") from e
    lexer = Lexer(text, path)
    tokens = lexer.tokenize()
    return Parser(tokens, lexer.comments, path).parse_package_clause()
