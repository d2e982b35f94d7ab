"""Inline span rendering: code, images, links, emphasis, and strikethrough"""

import re

from issueblog.core.render.escape import escape_code, escape_text, quote_attr
from issueblog.core.render.stash import MARKER, Stash


# A backtick run closes only on a run of the same length
CODE_SPAN_RE = re.compile(r'(?<!`)(`+)(?!`)(.+?)(?<!`)\1(?!`)')
# Alt text and URLs stop at the next bracket or paren, so a failed match never rescans the line
IMAGE_RE = re.compile(r'!\[([^\[\]\n]*)\]\(\s*([^()\s]+)(?:\s+"([^"\n]*)")?\s*\)')
LINK_RE = re.compile(r'\[([^\[\]]+)\]\(\s*([^()\s]+)(?:\s+"([^"\n]*)")?\s*\)')

# Applied in order: double markers before single markers of the same character.
# The inner run may not step over a marker that could open or close a span,
# so each attempt ends at the next candidate marker and matching stays linear.
EMPHASIS_RULES: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r'\*\*(?![\s*])((?:[^*\n]|\*(?!\*))+?)(?<![\s*])\*\*'), 'strong'),
    (re.compile(r'__(?![\s_])((?:[^_\n]|_(?!_))+?)(?<![\s_])__'), 'strong'),
    (re.compile(r'\*(?![\s*])((?:[^*\n]|(?<=[ \t])\*(?=[ \t]))+?)(?<![\s*])\*'), 'em'),
    (re.compile(r'(?<!\w)_(?![\s_])((?:[^_\n]|(?<=\w)_(?=\w)|(?<=[ \t])_(?=[ \t]))+?)(?<![\s_])_(?!\w)'), 'em'),
    (re.compile(r'~~(?![\s~])((?:[^~\n]|~(?!~))+?)(?<![\s~])~~'), 'del'),
)


def _title_attr(title: str | None) -> str:
    return f' title="{escape_text(title)}"' if title else ''


def _code_span(code: str) -> str:
    # one padding space on each side is syntax, not content
    if len(code) > 2 and code[0] == ' ' and code[-1] == ' ' and code.strip():
        code = code[1:-1]
    return f'<code>{escape_code(code)}</code>'


def _image(m: re.Match) -> str:
    alt, src, title = m.groups()
    return f'<img src="{quote_attr(src)}" alt="{escape_text(alt)}"{_title_attr(title)}>'


def emphasize(text: str, stash: Stash) -> str:
    """Apply emphasis rules to already-escaped text.

    Each match is rendered recursively and stashed whole, so later rules cannot
    pair a marker inside a finished element with one outside it.
    """
    for pattern, tag in EMPHASIS_RULES:
        def _replace(m: re.Match, tag: str = tag) -> str:
            return stash.put(f'<{tag}>{emphasize(m.group(1), stash)}</{tag}>')
        text = pattern.sub(_replace, text)
    return text


def render_inline(text: str) -> str:
    """Render one text run to HTML; everything that is not markup is escaped once."""
    stash = Stash('I')
    text = text.replace(MARKER, '\ufffd')

    text = CODE_SPAN_RE.sub(lambda m: stash.put(_code_span(m.group(2))), text)
    text = IMAGE_RE.sub(lambda m: stash.put(_image(m)), text)

    def _link(m: re.Match) -> str:
        label, href, title = m.groups()
        inner = emphasize(escape_text(label), stash)
        return stash.put(f'<a href="{quote_attr(href)}"{_title_attr(title)}>{inner}</a>')

    text = LINK_RE.sub(_link, text)
    text = emphasize(escape_text(text), stash)
    return stash.restore(text)
