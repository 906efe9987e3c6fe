"""
Tests for resolved path caches (dtls_resolver/cache.py).
"""

import json

from dtls_resolver.cache import PathCache, StatePathCache


class TestPathCache:
    """Tests for the in-memory PathCache."""

    def test_empty(self):
        assert PathCache().get() is None

    def test_set_and_get(self, tmp_path):
        binary = tmp_path / "server"
        binary.write_text("x")
        cache = PathCache()
        cache.set(str(binary))
        assert cache.get() == str(binary)

    def test_vanished_file_invalidates(self, tmp_path):
        """Test a deleted binary is dropped at lookup time."""
        binary = tmp_path / "server"
        binary.write_text("x")
        cache = PathCache(str(binary))
        binary.unlink()
        assert cache.get() is None
        binary.write_text("x")
        assert cache.get() is None

    def test_directory_is_not_a_hit(self, tmp_path):
        cache = PathCache(str(tmp_path))
        assert cache.get() is None

    def test_clear(self, tmp_path):
        binary = tmp_path / "server"
        binary.write_text("x")
        cache = PathCache(str(binary))
        cache.clear()
        assert cache.get() is None


class TestStatePathCache:
    """Tests for the JSON-backed StatePathCache."""

    def test_missing_state_file(self, tmp_path):
        cache = StatePathCache(tmp_path / "state.json")
        assert cache.get() is None

    def test_persists_between_instances(self, tmp_path):
        binary = tmp_path / "server"
        binary.write_text("x")
        state_file = tmp_path / "nested" / "state.json"

        StatePathCache(state_file).set(str(binary))

        assert StatePathCache(state_file).get() == str(binary)
        data = json.loads(state_file.read_text())
        assert data["binary_path"] == str(binary)
        assert data["__meta__"]["schema_version"] == 1
        assert data["__meta__"]["updated_at"].endswith("Z")

    def test_vanished_file_is_forgotten_on_disk(self, tmp_path):
        binary = tmp_path / "server"
        binary.write_text("x")
        state_file = tmp_path / "state.json"
        StatePathCache(state_file).set(str(binary))
        binary.unlink()

        assert StatePathCache(state_file).get() is None
        assert json.loads(state_file.read_text())["binary_path"] is None

    def test_malformed_state_file(self, tmp_path):
        state_file = tmp_path / "state.json"
        state_file.write_text("{not json")
        assert StatePathCache(state_file).get() is None

    def test_non_dict_state_file(self, tmp_path):
        state_file = tmp_path / "state.json"
        state_file.write_text("[1, 2]")
        assert StatePathCache(state_file).get() is None

    def test_clear_writes_state(self, tmp_path):
        binary = tmp_path / "server"
        binary.write_text("x")
        state_file = tmp_path / "state.json"
        cache = StatePathCache(state_file)
        cache.set(str(binary))
        cache.clear()
        assert StatePathCache(state_file).get() is None
        assert not (tmp_path / "state.tmp").exists()

    def test_unwritable_state_file_keeps_entry(self, tmp_path):
        """Test a failed state write does not undo a successful resolution."""
        binary = tmp_path / "server"
        binary.write_text("x")
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        cache = StatePathCache(blocker / "state.json")

        cache.set(str(binary))

        assert cache.get() == str(binary)
        assert not (blocker / "state.json").exists()
