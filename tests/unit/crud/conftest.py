"""Shared fixtures for crud unit tests"""

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from issueblog.core.models import StagedPost
from issueblog.core.utils.hashing import sha256
from issueblog.crud.models import Post


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


def _make_staged(number: int = 1, title: str = "Hello", body: str = "Body", **kw) -> StagedPost:
    created = kw.pop("created_at", datetime(2024, 1, 15, 10, 0))
    slug = kw.pop("slug", title.lower().replace(" ", "-"))
    fields = dict(
        number=number,
        title=title,
        author="octocat",
        markdown=body,
        html=f"<p>{body}</p>",
        excerpt=body,
        labels=[],
        slug=slug,
        filename=f"{created.date().isoformat()}-{slug}.html",
        hash=sha256(f"{title}\n{body}"),
        created_at=created,
        updated_at=created,
    )
    fields.update(kw)
    return StagedPost(**fields)


@pytest.fixture(name="make_staged")
def make_staged_fixture():
    """Factory for StagedPost objects with consistent derived fields."""
    return _make_staged


@pytest.fixture(name="post")
def post_fixture(session):
    """A minimal Post persisted to the session."""
    p = Post(
        number=1, slug="hello", title="Hello", markdown="Body", html="<p>Body</p>",
        hash=sha256("Body"), filename="2024-01-15-hello.html",
    )
    session.add(p)
    session.flush()
    return p
