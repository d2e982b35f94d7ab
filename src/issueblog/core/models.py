"""Intermediate data models for rendering and staging issue posts"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class BlockKind(str, Enum):
    """Block classifications, declared in classification precedence order"""
    code = "code"
    header = "header"
    blockquote = "blockquote"
    table = "table"
    hr = "hr"
    unordered_list = "unordered_list"
    ordered_list = "ordered_list"
    paragraph = "paragraph"


class Block(BaseModel):
    """One blank-line delimited unit of a document, tagged with its kind and payload."""
    kind: BlockKind
    raw: str
    level: Optional[int] = None         # heading level (1-6); None for non-headings
    text: str = ""                      # header/blockquote/paragraph text; placeholder for code
    header: list[str] = []              # table header cells
    rows: list[list[str]] = []          # table body rows, padded to header width
    align: list[Optional[str]] = []     # per-column 'left' | 'center' | 'right' | None
    items: list[str] = []               # list item texts, markers removed
    lead: list[str] = []                # lines ahead of the first list item


class StagedPost(BaseModel):
    """A rendered issue ready to be committed: source fields plus derived page data."""
    number:     int
    title:      str
    author:     str = ""
    markdown:   str
    html:       str
    excerpt:    str = ""
    labels:     list[str] = []
    slug:       str
    filename:   str
    hash:       str
    created_at: datetime            # naive UTC
    updated_at: datetime            # naive UTC
