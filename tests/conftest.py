"""Shared pytest fixtures."""

import pytest

from songshelf.domain.library import CatalogStore, SongDraft


@pytest.fixture
def catalog():
    """Open in-memory catalog store."""
    store = CatalogStore(":memory:").open()
    yield store
    store.close()


@pytest.fixture
def make_draft():
    """Factory for song drafts with unique default paths."""

    def _make(title: str, path: str = None, **fields) -> SongDraft:
        return SongDraft(title=title, path=path or f"/music/{title}.mp3", **fields)

    return _make
