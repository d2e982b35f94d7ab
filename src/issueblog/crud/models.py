"""Database table definitions for published posts and their version history"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON, Text, String, UniqueConstraint

from issueblog.core.utils.dates import utcnow


class Post(SQLModel, table=True):
    """A published blog post and the issue content it was rendered from"""
    __tablename__ = "posts"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    number: int = Field(..., index=True, unique=True, nullable=False, description="Source issue number")
    slug: str = Field(..., index=True, nullable=False)
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    author: str = Field(default="", sa_column=Column(Text, nullable=False))
    markdown: str = Field(..., sa_column=Column(Text, nullable=False))
    html: str = Field(..., sa_column=Column(Text, nullable=False))
    excerpt: str = Field(default="", sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    labels: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    filename: str = Field(..., sa_column=Column(Text, nullable=False, unique=True))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=False), nullable=False))
    committed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False), nullable=True))


class PostVersion(SQLModel, table=True):
    """Immutable snapshot of a Post at a prior state."""
    __tablename__ = "post_versions"
    __table_args__ = (UniqueConstraint("post_id", "version_num", name="uq_postver_post_num"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    post_id: UUID = Field(..., foreign_key="posts.id", index=True, nullable=False)
    version_num: int = Field(..., nullable=False, description="Monotonically increasing per-post version number")
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    markdown: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    labels: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime(timezone=False), nullable=False))
