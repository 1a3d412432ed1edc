"""
Markdown to HTML conversion.

``convert`` is the only renderer in the project: the persisted ``content_html``
cache and the editor preview endpoint both go through it, so a given input
renders to the same markup wherever it is shown.

Rendering is a line scanner. Each line is classified as a block (code block,
heading, rule, figure, blockquote, list item) or paragraph text, and the open
paragraph is closed before any block is emitted, so a block element never ends
up inside ``<p>``. Code blocks, inline code, images and links are replaced with
placeholders as soon as they are recognised and restored at the very end, so
later passes (emphasis in particular) never rewrite their interior.

The assembled fragment is run through ``nh3`` with an allowlist of the tags
and attributes the scanner emits and of http, https and mailto URLs, so a link
or image pointing anywhere else loses its ``href``/``src``.
"""

import html
import re
from typing import List

import nh3

_INLINE_MARK = "\x00"
_FENCE_MARK = "\x01"

_FENCE = re.compile(r"```(.*?)```", re.DOTALL)
_FENCE_LINE = re.compile(r"^\x01(\d+)\x01$")
_FENCE_LANG = re.compile(r"[\w#+.-]+")
_PLACEHOLDER = re.compile(r"\x00(\d+)\x00")

_HEADING = re.compile(r"^(#{1,4})[ \t]+(\S(?:.*\S)?)[ \t]*$")
_RULES = ("---", "***")
# URLs may hold one level of balanced parentheses: /wiki/Halo_(franchise)
_URL = r"((?:[^()\s]|\([^()\s]*\))+)"
_IMAGE_LINE = re.compile(r"^!\[([^\[\]]*)\]\(" + _URL + r"\)$")
_CAPTION_LINE = re.compile(r"^\*([^*\s](?:[^*]*[^*\s])?)\*$")
_QUOTE_PREFIX = "> "
_LIST_ITEM = re.compile(r"^[ \t]*([-*+]|\d+\.)[ \t]+(\S.*)$")

_CODE_SPAN = re.compile(r"`([^`\n]+)`")
_IMAGE = re.compile(r"!\[([^\[\]]*)\]\(" + _URL + r"\)")
_LINK = re.compile(r"\[([^\[\]]+)\]\(" + _URL + r"\)")

# Longest marker first. Each entry is (marker, open tag, close tag, may sit
# inside a word).
_EMPHASIS = (
    ("***", "<strong><em>", "</em></strong>", True),
    ("**", "<strong>", "</strong>", True),
    ("__", "<strong>", "</strong>", False),
    ("*", "<em>", "</em>", True),
    ("_", "<em>", "</em>", False),
    ("~~", "<del>", "</del>", True),
)

# Everything the scanner emits; anything else is stripped
ALLOWED_TAGS = {
    "p",
    "br",
    "strong",
    "em",
    "del",
    "h1",
    "h2",
    "h3",
    "h4",
    "ul",
    "ol",
    "li",
    "blockquote",
    "hr",
    "pre",
    "code",
    "a",
    "img",
    "figure",
    "figcaption",
}

# nh3 adds rel="noopener noreferrer" to every link itself
ALLOWED_ATTRIBUTES = {
    "a": {"href", "target"},
    "img": {"src", "alt"},
    "ol": {"start"},
    "code": {"class"},
}

ALLOWED_URL_SCHEMES = {"http", "https", "mailto"}


def convert(markdown: str) -> str:
    """Render author markdown to an HTML fragment. Never raises."""
    if not markdown or not markdown.strip():
        return ""

    text = markdown.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace(_INLINE_MARK, "").replace(_FENCE_MARK, "")

    fences: List[str] = []
    text = _FENCE.sub(lambda m: _hold_fence(fences, m.group(1)), text)

    stash: List[str] = []
    blocks = _render_blocks(text.split("\n"), fences, stash)
    rendered = "\n".join(_restore(block, stash) for block in blocks)
    return nh3.clean(
        rendered,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        url_schemes=ALLOWED_URL_SCHEMES,
        link_rel="noopener noreferrer",
    )


def _hold_fence(fences: List[str], body: str) -> str:
    fences.append(_code_block(body))
    # Own line, so the scanner always sees a code block as a standalone block
    return f"\n{_FENCE_MARK}{len(fences) - 1}{_FENCE_MARK}\n"


def _code_block(body: str) -> str:
    first, newline, rest = body.partition("\n")
    language = first.strip()
    if newline and _FENCE_LANG.fullmatch(language):
        body = rest
    else:
        language = ""
    code = _escape(body.strip("\n"))
    if language:
        return f'<pre><code class="language-{language}">{code}</code></pre>'
    return f"<pre><code>{code}</code></pre>"


def _render_blocks(lines: List[str], fences: List[str], stash: List[str]) -> List[str]:
    out: List[str] = []
    paragraph: List[str] = []

    def close_paragraph():
        if not paragraph:
            return
        body = "<br>".join(_render_inline(line, stash) for line in paragraph)
        paragraph.clear()
        if body.strip():
            out.append(f"<p>{body}</p>")

    i = 0
    while i < len(lines):
        line = lines[i]
        stripped = line.strip()

        if not stripped:
            close_paragraph()
            i += 1
            continue

        fence = _FENCE_LINE.match(stripped)
        if fence:
            close_paragraph()
            out.append(fences[int(fence.group(1))])
            i += 1
            continue

        heading = _HEADING.match(line)
        if heading:
            close_paragraph()
            level = len(heading.group(1))
            out.append(f"<h{level}>{_render_inline(heading.group(2), stash)}</h{level}>")
            i += 1
            continue

        if stripped in _RULES:
            close_paragraph()
            out.append("<hr>")
            i += 1
            continue

        # Caption fusion has to win before the caption line is read as italics
        image = _IMAGE_LINE.match(stripped)
        if image and i + 1 < len(lines):
            caption = _CAPTION_LINE.match(lines[i + 1].strip())
            if caption:
                close_paragraph()
                img = _image_tag(image.group(1), image.group(2))
                figcaption = _render_inline(caption.group(1), stash)
                out.append(f"<figure>{img}<figcaption>{figcaption}</figcaption></figure>")
                i += 2
                continue

        if line.startswith(_QUOTE_PREFIX):
            close_paragraph()
            quoted = []
            while i < len(lines) and lines[i].startswith(_QUOTE_PREFIX):
                quoted.append(_render_inline(lines[i][len(_QUOTE_PREFIX):].strip(), stash))
                i += 1
            body = "<br>".join(part for part in quoted if part)
            if body:
                out.append(f"<blockquote>{body}</blockquote>")
            continue

        if _LIST_ITEM.match(line):
            close_paragraph()
            items = []
            while i < len(lines):
                item = _LIST_ITEM.match(lines[i])
                if not item:
                    break
                items.append((item.group(1), item.group(2)))
                i += 1
            out.append(_list_block(items, stash))
            continue

        paragraph.append(stripped)
        i += 1

    close_paragraph()
    return out


def _list_block(items, stash: List[str]) -> str:
    first_marker = items[0][0]
    body = "".join(f"<li>{_render_inline(text, stash)}</li>" for _, text in items)
    if not first_marker[0].isdigit():
        return f"<ul>{body}</ul>"
    start = int(first_marker[:-1])
    if start != 1:
        return f'<ol start="{start}">{body}</ol>'
    return f"<ol>{body}</ol>"


def _render_inline(text: str, stash: List[str]) -> str:
    text = _CODE_SPAN.sub(
        lambda m: _hold(stash, f"<code>{_escape(m.group(1))}</code>"), text
    )
    text = _IMAGE.sub(
        lambda m: _hold(stash, _image_tag(m.group(1), m.group(2))), text
    )
    text = _LINK.sub(
        lambda m: _hold(stash, _link_tag(m.group(1), m.group(2))), text
    )
    return _emphasize(_escape(text))


def _emphasize(text: str) -> str:
    for marker, open_tag, close_tag, intraword in _EMPHASIS:
        text = _pair_markers(text, marker, open_tag, close_tag, intraword)
    return text


def _pair_markers(text: str, marker: str, open_tag: str, close_tag: str, intraword: bool) -> str:
    """
    Wrap the shortest span between an opening and a closing ``marker``.

    An opener is followed by a solid character, a closer is preceded by one.
    Star and underscore markers do not count their own character as solid.
    Markers that may not sit inside a word also need a non-word neighbour
    on the outside. Openers and closers are visited once each, left to right,
    so a long line of unclosed markers costs a single pass.
    """
    width = len(marker)
    edge = marker[0] if marker[0] in "*_" else ""

    def solid(ch: str) -> bool:
        return bool(ch) and not ch.isspace() and ch != edge

    def wordy(ch: str) -> bool:
        return bool(ch) and (ch.isalnum() or ch == "_")

    positions = []
    found = text.find(marker)
    while found != -1:
        positions.append(found)
        found = text.find(marker, found + 1)
    if len(positions) < 2:
        return text

    closers = [
        j
        for j in positions
        if j > 0
        and solid(text[j - 1])
        and (intraword or not wordy(text[j + width : j + width + 1]))
    ]

    out = []
    consumed = 0
    k = 0
    for i in positions:
        if i < consumed or not solid(text[i + width : i + width + 1]):
            continue
        if not intraword and i > 0 and wordy(text[i - 1]):
            continue
        while k < len(closers) and closers[k] <= i + width:
            k += 1
        if k == len(closers):
            break
        j = closers[k]
        out.append(text[consumed:i])
        out.append(f"{open_tag}{text[i + width : j]}{close_tag}")
        consumed = j + width
    out.append(text[consumed:])
    return "".join(out)


def _image_tag(alt: str, url: str) -> str:
    return f'<img src="{_attr(url)}" alt="{_attr(alt)}">'


def _link_tag(label: str, url: str) -> str:
    return (
        f'<a href="{_attr(url)}" target="_blank" '
        f'rel="noopener noreferrer">{_emphasize(_escape(label))}</a>'
    )


def _hold(stash: List[str], markup: str) -> str:
    stash.append(markup)
    return f"{_INLINE_MARK}{len(stash) - 1}{_INLINE_MARK}"


def _restore(text: str, stash: List[str]) -> str:
    # Held markup can itself hold earlier entries (a code span inside a link label)
    while _PLACEHOLDER.search(text):
        text = _PLACEHOLDER.sub(lambda m: stash[int(m.group(1))], text)
    return text


def _escape(text: str) -> str:
    return html.escape(text, quote=False)


def _attr(value: str) -> str:
    return html.escape(value, quote=True)
