"""
Tests for the track library: analysis bookkeeping, mix status and persistence.
"""

import json

import pytest
from mixflow.analysis.analyzer import AnalysisResult
from mixflow.errors import DECODE_FAILED, AnalysisError
from mixflow.library import TrackLibrary
from mixflow.ordering.models import AnalysisStatus, MixStatus
from mixflow.theory.camelot import resolve_key

RESULTS = {
    "a.mp3": ("C major", 128.0),
    "b.mp3": ("G major", 130.0),
    "c.mp3": ("D major", 132.0),
    "far.mp3": ("F# major", 90.0),
}


def fake_analyze(file_path):
    name = file_path.rsplit("/", 1)[-1]
    if name == "broken.mp3":
        raise AnalysisError(DECODE_FAILED, "Could not decode audio file.")
    if name == "crash.mp3":
        raise RuntimeError("boom")
    key, bpm = RESULTS[name]
    return AnalysisResult(bpm=bpm, key=key, camelot=resolve_key(key), duration=180.0)


@pytest.fixture
def library():
    return TrackLibrary(storage_path="")


class TestTrackManagement:
    """Test adding and removing tracks."""

    def test_add_files_creates_pending_tracks(self, library):
        tracks = library.add_files(["/music/a.mp3", "/music/b.mp3"])

        assert [t.filename for t in tracks] == ["a.mp3", "b.mp3"]
        assert all(t.status is AnalysisStatus.PENDING for t in library.tracks)
        assert len({t.id for t in tracks}) == 2
        assert library.file_path(tracks[0].id) == "/music/a.mp3"

    def test_remove_track(self, library):
        first, second = library.add_files(["/music/a.mp3", "/music/b.mp3"])
        library.remove_track(first.id)

        assert [t.id for t in library.tracks] == [second.id]
        assert library.get(first.id) is None
        assert library.file_path(first.id) is None

    def test_clear(self, library):
        library.add_files(["/music/a.mp3"])
        library.clear()

        assert library.tracks == []
        assert library.ordering is None

    def test_stats(self, library):
        library.add_files(["/music/a.mp3", "/music/broken.mp3", "/music/b.mp3"])
        library.analyze_all(fake_analyze)

        assert library.stats() == {"total": 3, "pending": 0, "analyzing": 0, "complete": 2, "error": 1}
        assert not library.all_analyzed
        assert not library.is_analyzing


class TestAnalysis:
    """Test analysis bookkeeping."""

    def test_analyze_all_stores_results(self, library):
        (track,) = library.add_files(["/music/a.mp3"])
        library.analyze_all(fake_analyze)

        analyzed = library.get(track.id)
        assert analyzed.status is AnalysisStatus.COMPLETE
        assert analyzed.bpm == 128.0
        assert analyzed.key == "C major"
        assert str(analyzed.camelot) == "8B"
        assert library.all_analyzed

    def test_analysis_error_is_recorded(self, library):
        (track,) = library.add_files(["/music/broken.mp3"])
        library.analyze_all(fake_analyze)

        failed = library.get(track.id)
        assert failed.status is AnalysisStatus.ERROR
        assert failed.error_message == "Could not decode audio file."

    def test_unexpected_error_does_not_stop_batch(self, library):
        crash, good = library.add_files(["/music/crash.mp3", "/music/a.mp3"])
        library.analyze_all(fake_analyze)

        assert library.get(crash.id).status is AnalysisStatus.ERROR
        assert library.get(crash.id).error_message == "boom"
        assert library.get(good.id).status is AnalysisStatus.COMPLETE

    def test_completed_tracks_are_not_reanalyzed(self, library):
        library.add_files(["/music/a.mp3"])
        library.analyze_all(fake_analyze)

        calls = []
        library.analyze_all(lambda path: calls.append(path))
        assert calls == []


class TestMixing:
    """Test ordering and mix status."""

    def test_mix_marks_tracks(self, library):
        a, b, c, far = library.add_files(
            ["/music/a.mp3", "/music/b.mp3", "/music/c.mp3", "/music/far.mp3"]
        )
        result = library.mix(fake_analyze)

        assert result is not None
        assert result.ordered_ids == [a.id, b.id, c.id] or result.ordered_ids == [c.id, b.id, a.id]
        assert result.rejected_ids == [far.id]
        assert library.ordering is result

        positions = {library.get(t.id).mix_order for t in (a, b, c)}
        assert positions == {1, 2, 3}
        assert all(library.get(t.id).mix_status is MixStatus.MIXED for t in (a, b, c))
        assert library.get(far.id).mix_status is MixStatus.ORPHAN
        assert library.get(far.id).mix_order is None

    def test_error_tracks_are_left_out(self, library):
        a, b, broken = library.add_files(["/music/a.mp3", "/music/b.mp3", "/music/broken.mp3"])
        result = library.mix(fake_analyze)

        assert sorted(result.ordered_ids) == sorted([a.id, b.id])
        assert result.rejected == []
        assert result.is_complete
        assert library.get(broken.id).mix_status is MixStatus.NONE

    def test_fewer_than_two_analyzed_tracks(self, library):
        library.add_files(["/music/a.mp3", "/music/broken.mp3"])

        assert library.mix(fake_analyze) is None
        assert library.ordering is None

    def test_clear_order(self, library):
        library.add_files(["/music/a.mp3", "/music/b.mp3"])
        library.mix(fake_analyze)
        library.clear_order()

        assert library.ordering is None
        assert all(t.mix_status is MixStatus.NONE for t in library.tracks)
        assert all(t.mix_order is None for t in library.tracks)


class TestPersistence:
    """Test saving and restoring a session."""

    def test_round_trip(self, tmp_path):
        storage = tmp_path / "session" / "library.json"
        library = TrackLibrary(storage_path=str(storage))
        a, b = library.add_files(["/music/a.mp3", "/music/b.mp3"])
        library.mix(fake_analyze)

        restored = TrackLibrary(storage_path=str(storage))

        assert restored.tracks == library.tracks
        assert restored.file_path(a.id) == "/music/a.mp3"
        assert restored.get(b.id).camelot == resolve_key("G major")

    def test_analyzing_is_stored_as_pending(self, tmp_path):
        storage = tmp_path / "library.json"
        library = TrackLibrary(storage_path=str(storage))
        (track,) = library.add_files(["/music/a.mp3"])
        library.update_status(track.id, AnalysisStatus.ANALYZING)

        records = json.loads(storage.read_text())
        assert records[0]["status"] == "pending"
        assert records[0]["path"] == "/music/a.mp3"

        restored = TrackLibrary(storage_path=str(storage))
        assert restored.get(track.id).status is AnalysisStatus.PENDING

    def test_unreadable_file_starts_empty(self, tmp_path):
        storage = tmp_path / "library.json"
        storage.write_text("{not json")

        assert TrackLibrary(storage_path=str(storage)).tracks == []

    @pytest.mark.parametrize(
        "content",
        ['{"tracks": []}', "[1, 2]", '["x"]', '[{"id": "1", "camelot": 5}]', '[{"id": "1", "status": "lost"}]'],
    )
    def test_wrong_shape_starts_empty(self, tmp_path, content):
        """Valid JSON that is not a list of track records is ignored."""
        storage = tmp_path / "library.json"
        storage.write_text(content)

        library = TrackLibrary(storage_path=str(storage))

        assert library.tracks == []
        library.add_files(["/music/a.mp3"])
        assert len(json.loads(storage.read_text())) == 1

    def test_missing_file_starts_empty(self, tmp_path):
        assert TrackLibrary(storage_path=str(tmp_path / "missing.json")).tracks == []

    def test_in_memory_library_writes_nothing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        library = TrackLibrary(storage_path="")
        library.add_files(["/music/a.mp3"])

        assert list(tmp_path.iterdir()) == []
