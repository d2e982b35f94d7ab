"""Shared fixtures for core unit tests"""

from datetime import datetime, timezone

import pytest

from issueblog.config import Settings
from issueblog.core.issue import Issue


SAMPLE_BODY = """\
Intro paragraph with **bold** text and a [link](https://example.com).

## Details

- item one
- item two

```python
print("hidden from excerpts")
```
"""


@pytest.fixture(name="issue")
def issue_fixture():
    return Issue(
        number=7,
        title="Hello World",
        body=SAMPLE_BODY,
        author="octocat",
        created_at=datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc),
        labels=["python", "APPROVED"],
    )


@pytest.fixture(name="settings")
def settings_fixture(tmp_path):
    return Settings(repository="octo/blog", output_dir=str(tmp_path / "site"), db_url="sqlite://")
