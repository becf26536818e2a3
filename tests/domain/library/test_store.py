"""
Tests for the catalog store: lifecycle, song and genre CRUD, and the
uniqueness rules on song paths and genre names.
"""

import threading

import pytest

from songshelf.domain.library import (
    CatalogStore,
    DuplicateError,
    DuplicateNameError,
    Genre,
    InvalidNameError,
    NotFoundError,
    Song,
    SongDraft,
)


# Test: lifecycle


def test_store_persists_between_opens(tmp_path):
    """Should keep songs on disk across close/open."""
    db_path = tmp_path / "catalog.db"

    with CatalogStore(db_path) as store:
        store.insert_song(SongDraft(title="Intro", path="/music/intro.mp3"))

    with CatalogStore(db_path) as store:
        assert [s.title for s in store.list_songs()] == ["Intro"]


def test_closed_store_refuses_operations():
    """Should raise instead of silently opening a connection."""
    store = CatalogStore(":memory:")
    with pytest.raises(RuntimeError):
        store.list_songs()


def test_open_is_idempotent(catalog):
    """Should keep the same connection when opened twice."""
    catalog.insert_song(SongDraft(title="A", path="/a.mp3"))
    catalog.open()
    assert catalog.count_songs() == 1


# Test: songs


def test_insert_song_assigns_id_and_stores_fields(catalog):
    """Should return a new id and store every draft field."""
    draft = SongDraft(
        title="Blue in Green",
        path="/music/blue.mp3",
        duration=337000,
        artist_name="Miles Davis",
        genre_name="Jazz",
    )
    song_id = catalog.insert_song(draft)

    assert catalog.get_song(song_id) == Song(
        id=song_id,
        title="Blue in Green",
        path="/music/blue.mp3",
        duration=337000,
        artist_name="Miles Davis",
        genre_name="Jazz",
    )


def test_insert_same_path_twice_keeps_one_record(catalog, make_draft):
    """Should reject the second insert with DuplicateError."""
    catalog.insert_song(make_draft("Track", path="/music/track.mp3"))

    with pytest.raises(DuplicateError) as exc_info:
        catalog.insert_song(make_draft("Other title", path="/music/track.mp3"))

    assert exc_info.value.path == "/music/track.mp3"
    assert catalog.count_songs() == 1
    assert catalog.list_songs()[0].title == "Track"


def test_relative_paths_are_stored_absolute(catalog, make_draft, tmp_path, monkeypatch):
    """Should store and compare song paths in absolute form."""
    monkeypatch.chdir(tmp_path)
    song_id = catalog.insert_song(make_draft("Track", path="track.mp3"))

    assert catalog.get_song(song_id).path == str(tmp_path / "track.mp3")
    with pytest.raises(DuplicateError):
        catalog.insert_song(make_draft("Again", path=str(tmp_path / "track.mp3")))

    catalog.update_song(song_id, path="moved/track.mp3")
    assert catalog.get_song(song_id).path == str(tmp_path / "moved" / "track.mp3")


def test_insert_blank_title_rejected(catalog):
    """Should refuse whitespace-only titles before touching storage."""
    with pytest.raises(InvalidNameError):
        catalog.insert_song(SongDraft(title="   ", path="/music/x.mp3"))
    assert catalog.count_songs() == 0


def test_list_songs_in_insertion_order(catalog, make_draft):
    """Should list songs in the order they were inserted."""
    for title in ["Zebra", "Apple", "Mango"]:
        catalog.insert_song(make_draft(title))

    assert [s.title for s in catalog.list_songs()] == ["Zebra", "Apple", "Mango"]


def test_list_songs_is_a_materialized_list(catalog, make_draft):
    """Should return a list callers can count and index."""
    catalog.insert_song(make_draft("One"))
    songs = catalog.list_songs()
    assert isinstance(songs, list)
    assert len(songs) == 1


def test_update_song_fields(catalog, make_draft):
    """Should update only the given fields."""
    song_id = catalog.insert_song(make_draft("Old", artist_name="Unknown Artist"))

    catalog.update_song(song_id, title="New", genre_name="Ambient", duration=1500)

    song = catalog.get_song(song_id)
    assert song.title == "New"
    assert song.genre_name == "Ambient"
    assert song.duration == 1500
    assert song.artist_name == "Unknown Artist"


def test_update_song_is_visible_to_next_read(catalog, make_draft):
    """Should expose the change to the very next list call."""
    song_id = catalog.insert_song(make_draft("Before"))
    catalog.update_song(song_id, title="After")
    assert catalog.list_songs()[0].title == "After"


def test_update_missing_song(catalog):
    """Should raise NotFoundError for an unknown id."""
    with pytest.raises(NotFoundError):
        catalog.update_song(999, title="Anything")


def test_update_song_rejects_unknown_fields(catalog, make_draft):
    """Should raise ValueError for fields that are not song fields."""
    song_id = catalog.insert_song(make_draft("One"))
    with pytest.raises(ValueError):
        catalog.update_song(song_id, id=5)


def test_update_song_rejects_negative_duration(catalog, make_draft):
    song_id = catalog.insert_song(make_draft("One"))
    with pytest.raises(ValueError):
        catalog.update_song(song_id, duration=-1)


def test_update_song_blank_title(catalog, make_draft):
    song_id = catalog.insert_song(make_draft("One"))
    with pytest.raises(InvalidNameError):
        catalog.update_song(song_id, title=" ")
    assert catalog.get_song(song_id).title == "One"


def test_update_song_path_to_existing_path(catalog, make_draft):
    """Should raise DuplicateError and leave both songs unchanged."""
    catalog.insert_song(make_draft("One", path="/music/one.mp3"))
    two_id = catalog.insert_song(make_draft("Two", path="/music/two.mp3"))

    with pytest.raises(DuplicateError):
        catalog.update_song(two_id, path="/music/one.mp3")

    assert catalog.get_song(two_id).path == "/music/two.mp3"


def test_update_song_without_fields_is_noop(catalog, make_draft):
    song_id = catalog.insert_song(make_draft("One"))
    catalog.update_song(song_id)
    assert catalog.get_song(song_id).title == "One"


def test_delete_song_twice(catalog, make_draft):
    """Should delete once and report NotFoundError on the second call."""
    song_id = catalog.insert_song(make_draft("One"))

    catalog.delete_song(song_id)
    with pytest.raises(NotFoundError) as exc_info:
        catalog.delete_song(song_id)

    assert exc_info.value.record_id == song_id
    assert catalog.list_songs() == []


def test_deleted_path_can_be_inserted_again(catalog, make_draft):
    song_id = catalog.insert_song(make_draft("One", path="/music/one.mp3"))
    catalog.delete_song(song_id)

    new_id = catalog.insert_song(make_draft("One", path="/music/one.mp3"))
    assert new_id != song_id


def test_concurrent_inserts_of_same_path_have_one_winner(tmp_path):
    """Should let exactly one thread insert a path; the rest get DuplicateError."""
    outcomes = []
    outcomes_lock = threading.Lock()

    with CatalogStore(tmp_path / "catalog.db") as store:
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            try:
                store.insert_song(SongDraft(title="Race", path="/music/race.mp3"))
                result = "inserted"
            except DuplicateError:
                result = "duplicate"
            with outcomes_lock:
                outcomes.append(result)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert outcomes.count("inserted") == 1
        assert outcomes.count("duplicate") == 7
        assert store.count_songs() == 1


# Test: genres


def test_create_genre(catalog):
    """Should store a trimmed name and optional cover."""
    genre_id = catalog.create_genre("  Jazz ", "/covers/jazz.png")
    assert catalog.get_genre(genre_id) == Genre(
        id=genre_id, name="Jazz", cover_image_path="/covers/jazz.png"
    )


def test_create_genre_twice_keeps_one(catalog):
    """Should reject the second create with DuplicateNameError."""
    catalog.create_genre("Jazz")

    with pytest.raises(DuplicateNameError) as exc_info:
        catalog.create_genre("Jazz")

    assert exc_info.value.name == "Jazz"
    assert [g.name for g in catalog.list_genres()] == ["Jazz"]


def test_genre_names_are_case_sensitive(catalog):
    """Should treat names differing only in case as distinct."""
    catalog.create_genre("Jazz")
    catalog.create_genre("jazz")
    assert [g.name for g in catalog.list_genres()] == ["Jazz", "jazz"]


@pytest.mark.parametrize("name", ["", "   ", "\t\n", None])
def test_create_genre_blank_name(catalog, name):
    with pytest.raises(InvalidNameError):
        catalog.create_genre(name)
    assert catalog.list_genres() == []


def test_rename_genre(catalog):
    genre_id = catalog.create_genre("Rock")
    catalog.update_genre(genre_id, "Classic Rock", "/covers/rock.png")

    genre = catalog.get_genre(genre_id)
    assert genre.name == "Classic Rock"
    assert genre.cover_image_path == "/covers/rock.png"


def test_rename_genre_to_own_name(catalog):
    """Should allow saving a genre without changing its name."""
    genre_id = catalog.create_genre("Rock")
    catalog.update_genre(genre_id, "Rock", "/covers/new.png")
    assert catalog.get_genre(genre_id).cover_image_path == "/covers/new.png"


def test_rename_genre_to_existing_name(catalog):
    """Should raise DuplicateNameError and keep the old name."""
    catalog.create_genre("Rock")
    pop_id = catalog.create_genre("Pop")

    with pytest.raises(DuplicateNameError):
        catalog.update_genre(pop_id, "Rock")

    assert catalog.get_genre(pop_id).name == "Pop"


def test_rename_missing_genre(catalog):
    with pytest.raises(NotFoundError):
        catalog.update_genre(42, "Anything")


def test_delete_genre_twice(catalog):
    genre_id = catalog.create_genre("Jazz")
    catalog.delete_genre(genre_id)
    with pytest.raises(NotFoundError):
        catalog.delete_genre(genre_id)
    with pytest.raises(NotFoundError):
        catalog.get_genre(genre_id)


def test_delete_genre_leaves_songs_untouched(catalog, make_draft):
    """Should not alter songs whose genre text matches the deleted genre."""
    genre_id = catalog.create_genre("Jazz")
    song_id = catalog.insert_song(make_draft("So What", genre_name="Jazz"))
    before = catalog.get_song(song_id)

    catalog.delete_genre(genre_id)

    assert catalog.get_song(song_id) == before
    assert catalog.get_song(song_id).genre_name == "Jazz"
