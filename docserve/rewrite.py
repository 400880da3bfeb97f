"""Rewriting generated documentation pages to carry the site's own header and topbar."""

from __future__ import annotations

import html as _html
import re

_TAG_RE = re.compile(
    r"<(/?)([A-Za-z][A-Za-z0-9:_-]*)((?:[^>\"']|\"[^\"]*\"|'[^']*')*)>", re.DOTALL
)
_ATTR_RE = re.compile(
    r"([^\s\"'>/=]+)(?:\s*=\s*(\"[^\"]*\"|'[^']*'|[^\s\"'=<>`]+))?"
)
_RAW_TEXT = {"script", "style", "textarea", "title"}

_BODY_CLASS = "container-rustdoc"
_BODY_OPEN = '<body class="rustdoc-page">'
_BODY_CLOSE = "</body>"


class RewriteError(Exception):
    """Raised when a page cannot be rewritten within the memory limit."""


def _parse_attrs(text: str) -> list[tuple[str, str | None]]:
    attrs = []
    for match in _ATTR_RE.finditer(text):
        name, raw = match.group(1), match.group(2)
        if raw is None:
            value = None
        else:
            if raw[:1] in ("'", '"'):
                raw = raw[1:-1]
            value = _html.unescape(raw)
        attrs.append((name, value))
    return attrs


def _encode_value(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


def _render_tag(name: str, attrs: list[tuple[str, str | None]]) -> str:
    parts = [f"<{name}"]
    for attr, value in attrs:
        parts.append(f" {attr}" if value is None else f' {attr}="{_encode_value(value)}"')
    parts.append(">")
    return "".join(parts)


def _set_attr(attrs: list[tuple[str, str | None]], name: str, value: str) -> None:
    for index, (attr, _) in enumerate(attrs):
        if attr.lower() == name:
            attrs[index] = (attr, value)
            return
    attrs.append((name, value))


def _get_attr(attrs: list[tuple[str, str | None]], name: str) -> str | None:
    for attr, value in attrs:
        if attr.lower() == name:
            return "" if value is None else value
    return None


def _is_rustdoc_css(attrs: list[tuple[str, str | None]]) -> bool:
    return _get_attr(attrs, "type") == "text/css" and "rustdoc" in (
        _get_attr(attrs, "href") or ""
    )


def _body_start(attrs: list[tuple[str, str | None]]) -> str:
    attrs = list(attrs)
    classes = _get_attr(attrs, "class")
    _set_attr(
        attrs, "class", _BODY_CLASS if classes is None else f"{classes} {_BODY_CLASS}"
    )
    _set_attr(attrs, "id", "rustdoc_body_wrapper")
    _set_attr(attrs, "tabindex", "-1")
    return _render_tag("div", attrs)


def rewrite_page(
    html: bytes | str,
    head: str,
    vendored_css: str,
    body: str,
    topbar: str,
    max_allowed_memory_usage: int,
) -> bytes:
    """Insert the rendered templates into a documentation page.

    ``head`` is appended to ``<head>``; ``vendored_css`` goes before the
    rustdoc stylesheet link; ``<body>`` becomes a wrapper ``<div>`` starting
    with ``body``, placed inside a new ``<body>`` after ``topbar``.

    A single piece of markup (tag, comment or declaration) larger than
    ``max_allowed_memory_usage`` bytes raises RewriteError. The output is
    UTF-8 bytes; invalid input bytes are passed through unchanged.
    """
    text = html.decode("utf-8", "surrogateescape") if isinstance(html, bytes) else html
    out: list[str] = []
    head_open = False
    body_open = False
    pos = 0
    length = len(text)

    def check(token: str) -> None:
        if len(token.encode("utf-8", "surrogateescape")) > max_allowed_memory_usage:
            raise RewriteError("the memory limit for rewriting the page was exceeded")

    def close_head() -> None:
        nonlocal head_open
        if head_open:
            out.append(head)
            head_open = False

    while pos < length:
        lt = text.find("<", pos)
        if lt < 0:
            out.append(text[pos:])
            break
        if lt > pos:
            out.append(text[pos:lt])
        pos = lt

        if text.startswith("<!--", pos):
            end = text.find("-->", pos + 4)
            end = length if end < 0 else end + 3
            token = text[pos:end]
            check(token)
            out.append(token)
            pos = end
            continue

        match = _TAG_RE.match(text, pos)
        if match is None:
            if text.startswith(("<!", "<?"), pos):
                end = text.find(">", pos)
                end = length if end < 0 else end + 1
                token = text[pos:end]
                check(token)
                out.append(token)
                pos = end
            else:
                out.append("<")
                pos += 1
            continue

        token = match.group(0)
        check(token)
        pos = match.end()
        closing = bool(match.group(1))
        name = match.group(2).lower()

        if closing:
            if name == "head":
                close_head()
                out.append(token)
            elif name == "body" and body_open:
                out.append("</div>")
                out.append(_BODY_CLOSE)
                body_open = False
            else:
                out.append(token)
            continue

        attrs = _parse_attrs(match.group(3))
        if name == "head":
            out.append(token)
            head_open = True
        elif name == "body":
            close_head()
            out.append(_BODY_OPEN)
            out.append(topbar)
            out.append(_body_start(attrs))
            out.append(body)
            body_open = True
        elif name == "link" and _is_rustdoc_css(attrs):
            out.append(vendored_css)
            out.append(token)
        else:
            out.append(token)

        if name in _RAW_TEXT and not match.group(3).rstrip().endswith("/"):
            end = re.compile(rf"</{name}\s*>", re.IGNORECASE).search(text, pos)
            stop = length if end is None else end.start()
            out.append(text[pos:stop])
            pos = stop

    close_head()
    if body_open:
        out.append("</div>")
        out.append(_BODY_CLOSE)
    return "".join(out).encode("utf-8", "surrogateescape")