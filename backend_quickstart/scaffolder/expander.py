"""Conditional template expansion for the mustache subset used by the corpus.

Supported tags:

* ``{{#flag}} ... {{/flag}}``  kept when ``flag`` is truthy
* ``{{^flag}} ... {{/flag}}``  kept when ``flag`` is falsy or missing
* ``{{flag}}``, ``{{{flag}}}``, ``{{& flag}}``  raw substitution
* ``{{! comment }}``  dropped

Text is tokenised, parsed into a block tree with an explicit stack and then
rendered recursively, so nested sections under different flags resolve
correctly.  A line holding nothing but whitespace and one section, close or
comment tag is removed together with its newline, as mustache does.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from ..errors import TemplateSyntaxError, UndefinedVariableError
from .context import TemplateContext

_TAG_RE = re.compile(
    r"\{\{\{\s*(?P<raw>[\w.\-]+)\s*\}\}\}"
    r"|\{\{!.*?\}\}"
    r"|\{\{\s*(?P<sigil>[#^/&]?)\s*(?P<name>[\w.\-]+)\s*\}\}",
    re.DOTALL,
)

_SIGIL_KINDS = {"": "var", "&": "var", "#": "open", "^": "inverted", "/": "close"}

# Tags that vanish together with their line when they stand alone on it.
_STANDALONE_KINDS = frozenset({"open", "inverted", "close", "comment"})


# ---------------------------------------------------------------------------
# Tokens and nodes
# ---------------------------------------------------------------------------


@dataclass
class Token:
    kind: str
    value: str
    line: int


@dataclass
class Text:
    value: str


@dataclass
class Variable:
    name: str
    line: int


@dataclass
class Section:
    name: str
    inverted: bool
    line: int
    children: list["Node"] = field(default_factory=list)


Node = Union[Text, Variable, Section]


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


def tokenize(text: str) -> list[Token]:
    """Split *text* into literal and tag tokens.

    Standalone section/close/comment lines are trimmed here, so the parser
    never sees their indentation or trailing newline.
    """
    tokens: list[Token] = []
    pos = 0
    line = 1
    counted = 0

    def line_at(offset: int) -> int:
        nonlocal line, counted
        line += text.count("\n", counted, offset)
        counted = offset
        return line

    for match in _TAG_RE.finditer(text):
        kind, name = _classify(match)
        start, end = match.span()
        if kind in _STANDALONE_KINDS:
            start, end = _standalone_span(text, pos, start, end)

        if start > pos:
            tokens.append(Token("text", text[pos:start], line_at(pos)))
        tokens.append(Token(kind, name, line_at(match.start())))
        pos = end

    if pos < len(text):
        tokens.append(Token("text", text[pos:], line_at(pos)))
    return tokens


def _classify(match: re.Match[str]) -> tuple[str, str]:
    if match.group("raw") is not None:
        return "var", match.group("raw")
    if match.group("name") is None:
        return "comment", ""
    return _SIGIL_KINDS[match.group("sigil")], match.group("name")


def _standalone_span(text: str, pos: int, start: int, end: int) -> tuple[int, int]:
    """Widen ``[start, end)`` to the whole line if the tag stands alone on it."""
    line_start = text.rfind("\n", 0, start) + 1
    if line_start < pos or not _is_blank(text[line_start:start]):
        return start, end

    newline = text.find("\n", end)
    line_end = len(text) if newline == -1 else newline
    if not _is_blank(text[end:line_end].rstrip("\r")):
        return start, end

    return line_start, line_end if newline == -1 else newline + 1


def _is_blank(chunk: str) -> bool:
    return chunk.strip(" \t") == ""


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def parse(text: str, source: str | Path | None = None) -> list[Node]:
    """Parse template *text* into a block tree.

    Raises:
        TemplateSyntaxError: on a close tag without an open tag, a close tag
            naming a different flag than the innermost open one, or open tags
            left unclosed at the end of the text.
    """
    origin = _source_name(source)
    root: list[Node] = []
    stack: list[Section] = []
    children = root

    for token in tokenize(text):
        if token.kind == "text":
            children.append(Text(token.value))
        elif token.kind == "var":
            children.append(Variable(token.value, token.line))
        elif token.kind in ("open", "inverted"):
            section = Section(token.value, token.kind == "inverted", token.line)
            children.append(section)
            stack.append(section)
            children = section.children
        elif token.kind == "close":
            if not stack:
                raise TemplateSyntaxError(
                    origin,
                    token.line,
                    [token.value],
                    [f"line {token.line}: {_tag('/', token.value)} has no matching open tag"],
                )
            top = stack[-1]
            if top.name != token.value:
                raise TemplateSyntaxError(
                    origin,
                    token.line,
                    [top.name, token.value],
                    [
                        f"line {token.line}: expected {_tag('/', top.name)} to close "
                        f"{_open_tag(top)} from line {top.line}, found {_tag('/', token.value)}"
                    ],
                )
            stack.pop()
            children = stack[-1].children if stack else root

    if stack:
        raise TemplateSyntaxError(
            origin,
            stack[0].line,
            [s.name for s in stack],
            [f"line {s.line}: {_open_tag(s)} is never closed" for s in stack],
        )
    return root


def _tag(sigil: str, name: str) -> str:
    return "{{" + sigil + name + "}}"


def _open_tag(section: Section) -> str:
    return _tag("^" if section.inverted else "#", section.name)


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


def render(
    nodes: list[Node],
    context: TemplateContext,
    *,
    source: str | Path | None = None,
    strict: bool = False,
) -> str:
    """Render a parsed block tree against *context*."""
    out: list[str] = []
    _render_into(nodes, context, out, _source_name(source), strict)
    return "".join(out)


def _render_into(
    nodes: list[Node],
    context: TemplateContext,
    out: list[str],
    source: str,
    strict: bool,
) -> None:
    for node in nodes:
        if isinstance(node, Text):
            out.append(node.value)
        elif isinstance(node, Variable):
            if node.name in context:
                out.append(_stringify(context[node.name]))
            elif strict:
                raise UndefinedVariableError(source, node.line, node.name)
        elif bool(context.get(node.name)) != node.inverted:
            _render_into(node.children, context, out, source, strict)


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_stringify(v) for v in value)
    return str(value)


def _source_name(source: str | Path | None) -> str:
    return "<string>" if source is None else str(source)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def expand(
    text: str,
    context: TemplateContext,
    *,
    source: str | Path | None = None,
    strict: bool = False,
) -> str:
    """Expand template *text* with *context*.

    Pure function: the same text and context always produce the same output.

    Args:
        text: Raw template source.
        context: Flag/value mapping from ``build_context``.
        source: File name used in error messages.
        strict: Raise ``UndefinedVariableError`` for substitutions naming a
            missing key instead of rendering them as an empty string.
    """
    return render(parse(text, source), context, source=source, strict=strict)
