"""Block segmentation, classification by fixed precedence, and per-kind rendering"""

import re
from typing import Callable, Optional

from issueblog.core.models import Block, BlockKind
from issueblog.core.render.inline import render_inline
from issueblog.core.render.stash import Stash


BLANK_LINES_RE = re.compile(r'\n(?:[ \t]*\n)+')
CLOSING_HASHES_RE = re.compile(r'(?<!\S)#+\s*$')
QUOTE_MARKER_RE = re.compile(r'^\s*> ?')
SEPARATOR_RE = re.compile(r'[\s|:-]+')
PIPE_RE = re.compile(r'(?<!\\)\|')
HR_RE = re.compile(r'-{3,}|\*{3,}|_{3,}')
UNORDERED_ITEM_RE = re.compile(r'[-*+] (.*)')
ORDERED_ITEM_RE = re.compile(r'\d+\. (.*)')


def header_level(line: str) -> Optional[int]:
    """Return 1-6 when line opens with that many '#' and a space, most specific first."""
    for level in range(6, 0, -1):
        if line.startswith('#' * level + ' '):
            return level
    return None


def split_units(text: str) -> list[str]:
    """Split on blank lines, trim, and drop empty units.

    A header line always ends its unit; whatever follows it becomes the next unit.
    """
    units = []
    for chunk in BLANK_LINES_RE.split(text):
        chunk = chunk.strip()
        while chunk:
            first, _, rest = chunk.partition('\n')
            if not rest or header_level(first) is None:
                units.append(chunk)
                break
            units.append(first)
            chunk = rest.strip()
    return units


# --- classifiers: (unit, lines) -> Block | None ---

def _match_header(unit: str, lines: list[str]) -> Optional[Block]:
    level = header_level(lines[0])
    if level is None or len(lines) > 1:
        return None
    text = CLOSING_HASHES_RE.sub('', lines[0][level + 1:]).strip()
    return Block(kind=BlockKind.header, raw=unit, level=level, text=text)


def _match_blockquote(unit: str, lines: list[str]) -> Optional[Block]:
    if not any(line.lstrip().startswith('>') for line in lines):
        return None
    text = '\n'.join(QUOTE_MARKER_RE.sub('', line).strip() for line in lines)
    return Block(kind=BlockKind.blockquote, raw=unit, text=text)


def split_cells(line: str) -> list[str]:
    """Split a table row on unescaped pipes; outer pipes do not make empty cells."""
    line = line.strip()
    cells = PIPE_RE.split(line)
    if line.startswith('|'):
        cells = cells[1:]
    if cells and line.endswith('|') and not line.endswith('\\|'):
        cells = cells[:-1]
    return [c.strip().replace('\\|', '|') for c in cells]


def _alignment(cell: str) -> Optional[str]:
    left, right = cell.startswith(':'), cell.endswith(':')
    if left and right:
        return 'center'
    if right:
        return 'right'
    if left:
        return 'left'
    return None


def _is_separator(line: str) -> bool:
    line = line.strip()
    return bool(SEPARATOR_RE.fullmatch(line)) and '-' in line and '|' in line


def _match_table(unit: str, lines: list[str]) -> Optional[Block]:
    if len(lines) < 2 or not _is_separator(lines[1]):
        return None
    header = split_cells(lines[0])
    if not header:
        return None
    align = [_alignment(c) for c in split_cells(lines[1])]
    align = (align + [None] * len(header))[:len(header)]
    rows = []
    for line in lines[2:]:
        if not line.strip():
            continue
        cells = split_cells(line)
        rows.append(cells + [''] * (len(header) - len(cells)))
    return Block(kind=BlockKind.table, raw=unit, header=header, rows=rows, align=align)


def _match_hr(unit: str, lines: list[str]) -> Optional[Block]:
    if HR_RE.fullmatch(unit):
        return Block(kind=BlockKind.hr, raw=unit)
    return None


def _list_payload(lines: list[str], item_re: re.Pattern) -> Optional[tuple[list[str], list[str]]]:
    """Return (lead, items) when any line is an item; other lines continue the previous item."""
    if not any(item_re.match(line.lstrip()) for line in lines):
        return None
    lead: list[str] = []
    items: list[str] = []
    for line in lines:
        m = item_re.match(line.lstrip())
        if m:
            items.append(m.group(1).strip())
        elif items:
            items[-1] = f'{items[-1]}\n{line.strip()}'
        else:
            lead.append(line.strip())
    return lead, items


def _match_unordered(unit: str, lines: list[str]) -> Optional[Block]:
    payload = _list_payload(lines, UNORDERED_ITEM_RE)
    if payload is None:
        return None
    return Block(kind=BlockKind.unordered_list, raw=unit, lead=payload[0], items=payload[1])


def _match_ordered(unit: str, lines: list[str]) -> Optional[Block]:
    payload = _list_payload(lines, ORDERED_ITEM_RE)
    if payload is None:
        return None
    return Block(kind=BlockKind.ordered_list, raw=unit, lead=payload[0], items=payload[1])


# First match wins; code placeholders are checked before these, paragraph is the fallback.
CLASSIFIERS: tuple[tuple[BlockKind, Callable[[str, list[str]], Optional[Block]]], ...] = (
    (BlockKind.header,         _match_header),
    (BlockKind.blockquote,     _match_blockquote),
    (BlockKind.table,          _match_table),
    (BlockKind.hr,             _match_hr),
    (BlockKind.unordered_list, _match_unordered),
    (BlockKind.ordered_list,   _match_ordered),
)


def classify_block(unit: str, stash: Optional[Stash] = None) -> Block:
    """Classify one trimmed unit into a Block by the fixed precedence order."""
    if stash is not None and stash.is_token(unit):
        return Block(kind=BlockKind.code, raw=unit, text=unit)
    lines = unit.split('\n')
    for _, match in CLASSIFIERS:
        block = match(unit, lines)
        if block is not None:
            return block
    return Block(kind=BlockKind.paragraph, raw=unit, text=unit)


# --- renderers: Block -> HTML ---

def _with_breaks(html: str) -> str:
    return html.replace('\n', '<br>\n')


def _render_code(block: Block) -> str:
    return block.text


def _render_header(block: Block) -> str:
    return f'<h{block.level}>{render_inline(block.text)}</h{block.level}>'


def _render_blockquote(block: Block) -> str:
    return f'<blockquote><p>{_with_breaks(render_inline(block.text))}</p></blockquote>'


def _cell(tag: str, text: str, align: Optional[str]) -> str:
    style = f' style="text-align: {align}"' if align else ''
    return f'<{tag}{style}>{render_inline(text)}</{tag}>'


def _render_table(block: Block) -> str:
    def _row(cells: list[str], tag: str) -> str:
        aligns = block.align + [None] * (len(cells) - len(block.align))
        return '<tr>' + ''.join(_cell(tag, c, a) for c, a in zip(cells, aligns)) + '</tr>'

    parts = ['<table>', '<thead>', _row(block.header, 'th'), '</thead>']
    if block.rows:
        parts += ['<tbody>', *(_row(r, 'td') for r in block.rows), '</tbody>']
    parts.append('</table>')
    return '\n'.join(parts)


def _render_hr(block: Block) -> str:
    return '<hr>'


def _render_list(block: Block) -> str:
    tag = 'ul' if block.kind == BlockKind.unordered_list else 'ol'
    parts = []
    if block.lead:
        lead = '\n'.join(block.lead)
        parts.append(f'<p>{_with_breaks(render_inline(lead))}</p>')
    parts.append(f'<{tag}>')
    parts += [f'<li>{_with_breaks(render_inline(item))}</li>' for item in block.items]
    parts.append(f'</{tag}>')
    return '\n'.join(parts)


def _render_paragraph(block: Block) -> str:
    return f'<p>{_with_breaks(render_inline(block.text))}</p>'


BLOCK_RENDERERS: dict[BlockKind, Callable[[Block], str]] = {
    BlockKind.code:           _render_code,
    BlockKind.header:         _render_header,
    BlockKind.blockquote:     _render_blockquote,
    BlockKind.table:          _render_table,
    BlockKind.hr:             _render_hr,
    BlockKind.unordered_list: _render_list,
    BlockKind.ordered_list:   _render_list,
    BlockKind.paragraph:      _render_paragraph,
}


def render_block(block: Block) -> str:
    return BLOCK_RENDERERS[block.kind](block)
