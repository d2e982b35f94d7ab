"""Issue input: the Issue model and its construction from workflow environment variables"""

import json
import os
from datetime import datetime, timezone
from typing import Mapping, Optional

from pydantic import BaseModel, ValidationError


REQUIRED_ENV = ("ISSUE_NUMBER", "ISSUE_TITLE")


class Issue(BaseModel):
    """A GitHub issue as handed over by the publishing workflow."""
    number:     int
    title:      str
    body:       str = ""
    author:     str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None
    labels:     list[str] = []


def parse_labels(raw: str) -> list[str]:
    """Parse ISSUE_LABELS: a JSON array of names or {"name": ...} objects, or comma-separated."""
    raw = (raw or "").strip()
    if not raw:
        return []
    if raw.startswith("["):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid ISSUE_LABELS: {e}") from e
        names = [item.get("name", "") if isinstance(item, dict) else str(item) for item in data]
    else:
        names = raw.split(",")
    return list(dict.fromkeys(n.strip() for n in names if n and n.strip()))


def issue_from_env(environ: Optional[Mapping[str, str]] = None) -> Issue:
    """Build an Issue from ISSUE_* variables. Raises ValueError when required ones are absent."""
    env = os.environ if environ is None else environ
    missing = [name for name in REQUIRED_ENV if not env.get(name)]
    if missing:
        raise ValueError(f"Missing required environment variables: {', '.join(missing)}")

    data = {
        "number":     env["ISSUE_NUMBER"].strip(),
        "title":      env["ISSUE_TITLE"],
        "body":       env.get("ISSUE_BODY") or "",
        "author":     env.get("ISSUE_AUTHOR") or "",
        "created_at": env.get("ISSUE_CREATED_AT") or datetime.now(timezone.utc),
        "updated_at": env.get("ISSUE_UPDATED_AT") or None,
        "labels":     parse_labels(env.get("ISSUE_LABELS", "")),
    }
    try:
        return Issue(**data)
    except ValidationError as e:
        names = ", ".join(sorted({f"ISSUE_{str(err['loc'][0]).upper()}" for err in e.errors()}))
        raise ValueError(f"Invalid value for {names}") from e
