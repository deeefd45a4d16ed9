import os
from datetime import datetime, timedelta

import pytest

from mneme.domain.models import Card


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir and clears MNEME_* env vars."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config files
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("MNEME_"):
            monkeypatch.delenv(key)
    return home


@pytest.fixture
def now():
    return datetime(2024, 6, 1, 12, 0, 0)


@pytest.fixture
def make_card(now):
    """Factory for cards; ``due_in_days`` sets next_review_date relative to now."""

    def _make(card_id: str, due_in_days: float | None = None, **kwargs) -> Card:
        if due_in_days is not None:
            kwargs.setdefault("next_review_date", now + timedelta(days=due_in_days))
        return Card(id=card_id, **kwargs)

    return _make
