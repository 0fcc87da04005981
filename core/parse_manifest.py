"""Parsing and rewriting of line-oriented dependency declarations."""

import re
from dataclasses import dataclass

from .config import DEFAULT_DIRECTIVE

NAME_PATTERN = r"[\w.-]+"


@dataclass
class DeclarationLine:
    """A declaration line split into the parts a rewrite needs."""

    indent: str
    quote: str
    name: str
    constraint: str | None
    options: str | None
    trailing: str
    eol: str


class DeclarationParser:
    """Parser for manifest lines such as ``gem 'rails', '~> 7.0', require: false``."""

    def __init__(self, directive: str = DEFAULT_DIRECTIVE):
        self.directive = directive
        self.skip_patterns = [
            r"^\s*#",  # Comment lines
            r"^\s*$",  # Empty lines
        ]

    def line_regex(self, name: str | None = None) -> re.Pattern:
        """Regex matching a declaration, optionally for one dependency only."""
        name_pattern = re.escape(name) if name else NAME_PATTERN
        return re.compile(
            rf"""^(?P<indent>\s*){re.escape(self.directive)}\s+
            (?P<quote>['"])(?P<name>{name_pattern})(?P=quote)
            (?P<constraints>(?:\s*,\s*['"][^'"]*['"])*)
            (?P<options>\s*[,\#].*?)?
            (?P<trailing>\s*)$""",
            re.VERBOSE,
        )

    def _should_skip_line(self, line: str) -> bool:
        return any(re.match(pattern, line) for pattern in self.skip_patterns)

    def parse_line(self, line: str, name: str | None = None) -> DeclarationLine | None:
        """Parse one line (with or without its line ending)."""
        body = line.rstrip("\r\n")
        eol = line[len(body):]

        if self._should_skip_line(body):
            return None

        match = self.line_regex(name).match(body)
        if not match:
            return None

        constraints = re.findall(r"['\"]([^'\"]*)['\"]", match.group("constraints"))
        return DeclarationLine(
            indent=match.group("indent"),
            quote=match.group("quote"),
            name=match.group("name"),
            constraint=", ".join(constraints) if constraints else None,
            options=match.group("options"),
            trailing=match.group("trailing"),
            eol=eol,
        )

    def parse(self, content: str) -> list[DeclarationLine]:
        """Parse every declaration in ``content``, in file order."""
        declarations: list[DeclarationLine] = []

        for line in content.splitlines(keepends=True):
            declaration = self.parse_line(line)
            if declaration:
                declarations.append(declaration)

        return declarations

    def render(self, declaration: DeclarationLine, version: str) -> str:
        """Render ``declaration`` pinned to ``version``, keeping its options."""
        q = declaration.quote
        return (
            f"{declaration.indent}{self.directive} {q}{declaration.name}{q}, "
            f"{q}{version}{q}{declaration.options or ''}"
            f"{declaration.trailing}{declaration.eol}"
        )

    def rewrite(self, content: str, name: str, version: str) -> str:
        """Pin ``name`` to ``version`` in ``content``.

        Only the declaration line of ``name`` changes; every other line is
        kept byte for byte.
        """
        new_lines = []

        for line in content.splitlines(keepends=True):
            declaration = self.parse_line(line, name)
            if declaration:
                line = self.render(declaration, version)
            new_lines.append(line)

        return "".join(new_lines)


def parse_manifest(content: str, directive: str = DEFAULT_DIRECTIVE) -> list[DeclarationLine]:
    """Parse manifest content into declaration lines.

    Args:
        content: The manifest file content
        directive: The token introducing a declaration

    Returns:
        Parsed declarations in file order
    """
    parser = DeclarationParser(directive)
    return parser.parse(content)
