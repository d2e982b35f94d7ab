"""Plain-text excerpts derived from the original issue markdown via markdown-it tokens"""

import re

from markdown_it import MarkdownIt


WHITESPACE_RE = re.compile(r'\s+')
TEXT_CHILDREN = {'text', 'code_inline'}
BREAK_CHILDREN = {'softbreak', 'hardbreak'}


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def plain_text(markdown: str, preset: str = 'gfm-like') -> str:
    """Return the readable text of markdown: inline text and code, no fences or image alts."""
    parts: list[str] = []
    for tok in _make_parser(preset).parse(markdown):
        if tok.type != 'inline' or not tok.children:
            continue
        # image alt text lives in the image token's own children, so it is skipped here
        for child in tok.children:
            if child.type in TEXT_CHILDREN:
                parts.append(child.content)
            elif child.type in BREAK_CHILDREN:
                parts.append(' ')
        parts.append(' ')
    return WHITESPACE_RE.sub(' ', ''.join(parts)).strip()


def make_excerpt(markdown: str, length: int = 200, preset: str = 'gfm-like') -> str:
    """Truncate plain_text(markdown) at a word boundary; length 0 disables truncation."""
    text = plain_text(markdown, preset)
    if not length or len(text) <= length:
        return text
    cut = text[:length]
    if ' ' in cut:
        cut = cut.rsplit(' ', 1)[0]
    return cut.rstrip(' ,.;:') + '…'
