"""Markdown rendering and redirect helpers for the web frontend."""

from __future__ import annotations

import re

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token

_URL_RE = re.compile(r"(?<![\w/@.])(?:https?://|www\.)[^\s<>]*[^\s<>.,:;\"')\]!?*_~]")
_TASK_RE = re.compile(r"\[([ xX])\](?:\s+|$)")
_UNCHECKED = '<input type="checkbox" disabled="" /> '
_CHECKED = '<input type="checkbox" checked="" disabled="" /> '


def _superscript(state: StateInline, silent: bool) -> bool:
    start = state.pos
    if state.src[start] != "^" or silent:
        return False
    end = state.src.find("^", start + 1, state.posMax)
    if end < 0 or end == start + 1:
        return False
    content = state.src[start + 1 : end]
    if any(char.isspace() for char in content):
        return False
    opening = state.push("sup_open", "sup", 1)
    opening.markup = "^"
    text = state.push("text", "", 0)
    text.content = content
    closing = state.push("sup_close", "sup", -1)
    closing.markup = "^"
    state.pos = end + 1
    return True


def _split_links(token: Token) -> list[Token]:
    pieces: list[Token] = []
    pos = 0
    text = token.content
    for match in _URL_RE.finditer(text):
        if match.start() > pos:
            pieces.append(Token("text", "", 0, content=text[pos : match.start()]))
        url = match.group(0)
        href = url if url.startswith(("http://", "https://")) else f"http://{url}"
        link_open = Token("link_open", "a", 1, markup="linkify", info="auto")
        link_open.attrSet("href", href)
        pieces.append(link_open)
        pieces.append(Token("text", "", 0, content=url))
        pieces.append(Token("link_close", "a", -1, markup="linkify", info="auto"))
        pos = match.end()
    if pos < len(text):
        pieces.append(Token("text", "", 0, content=text[pos:]))
    return pieces


def _autolink(state: StateCore) -> None:
    for block in state.tokens:
        if block.type != "inline" or not block.children:
            continue
        children: list[Token] = []
        depth = 0
        for token in block.children:
            if token.type == "link_open":
                depth += 1
            elif token.type == "link_close":
                depth -= 1
            if token.type != "text" or depth > 0 or not _URL_RE.search(token.content):
                children.append(token)
            else:
                children.extend(_split_links(token))
        block.children = children


def _tasklist(state: StateCore) -> None:
    tokens = state.tokens
    for item, paragraph, inline in zip(tokens, tokens[1:], tokens[2:]):
        if (
            item.type != "list_item_open"
            or paragraph.type != "paragraph_open"
            or inline.type != "inline"
            or not inline.children
            or inline.children[0].type != "text"
        ):
            continue
        first = inline.children[0]
        match = _TASK_RE.match(first.content)
        if match is None:
            continue
        first.content = first.content[match.end() :]
        checkbox = _UNCHECKED if match.group(1) == " " else _CHECKED
        inline.children.insert(0, Token("html_inline", "", 0, content=checkbox))


_MARKDOWN = MarkdownIt("commonmark", {"html": False}).enable(["table", "strikethrough"])
_MARKDOWN.inline.ruler.before("emphasis", "superscript", _superscript)
_MARKDOWN.core.ruler.push("autolink", _autolink)
_MARKDOWN.core.ruler.push("tasklist", _tasklist)


def render_markdown(text: str) -> str:
    """Render Markdown to HTML with tables, strikethrough, superscript, autolinks and task lists.

    Raw HTML in the input is escaped rather than passed through.
    """
    return _MARKDOWN.render(text)


def redirect_base(
    scheme: str, host: str, port: int, forwarded_proto: str | None = None
) -> str:
    """Return ``scheme://host[:port]`` for building redirect URLs.

    A forwarded protocol header wins over ``scheme`` when it is ``http`` or
    ``https``; the port is left out when it is 80.
    """
    if forwarded_proto in ("http", "https"):
        scheme = forwarded_proto
    if port == 80:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"