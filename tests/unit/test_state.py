"""Unit tests for UI session state and the pending-call tracker."""

from nanostudio.core.credentials import FileCredentialCache
from nanostudio.core.gemini_client import GeminiClient
from nanostudio.core.image_store import SQLiteImageStore
from nanostudio.core.studio_client import StudioClient
from nanostudio.ui.state import PendingTracker, build_generator, initialize_session


class TestPendingTracker:
    """Tests for PendingTracker."""

    def test_start_registers_call(self):
        tracker = PendingTracker()
        call_id = tracker.start("cat", "Nano")
        assert call_id in tracker
        assert len(tracker) == 1
        assert tracker.active()[0].prompt == "cat"

    def test_ids_are_distinct(self):
        tracker = PendingTracker()
        assert tracker.start("a", "Nano") != tracker.start("b", "Nano")

    def test_resolve_out_of_order(self):
        """Resolving one call leaves the others untouched."""
        tracker = PendingTracker()
        first = tracker.start("first", "Nano")
        second = tracker.start("second", "Nano Pro")

        tracker.resolve(second)
        assert first in tracker
        assert second not in tracker

        tracker.resolve(first)
        assert len(tracker) == 0

    def test_resolve_unknown_is_noop(self):
        tracker = PendingTracker()
        tracker.resolve("missing")
        assert len(tracker) == 0

    def test_active_oldest_first(self):
        tracker = PendingTracker()
        tracker.start("a", "Nano")
        tracker.start("b", "Nano")
        assert [pending.prompt for pending in tracker.active()] == ["a", "b"]


class TestInitializeSession:
    """Tests for building the session from configuration."""

    def test_direct_mode(self, test_config):
        session = initialize_session(test_config)
        assert isinstance(session.orchestrator.generator, GeminiClient)
        assert isinstance(session.orchestrator.store, SQLiteImageStore)
        assert session.credentials is None
        assert session.requires_access_code is False
        assert test_config.gallery_db.exists()

    def test_server_mode(self, test_config):
        test_config.server_url = "http://studio.test"
        session = initialize_session(test_config)
        assert isinstance(session.orchestrator.generator, StudioClient)
        assert isinstance(session.credentials, FileCredentialCache)
        assert session.orchestrator.generator.credentials is session.credentials
        assert session.requires_access_code is True

    def test_build_generator_direct(self, test_config):
        assert isinstance(build_generator(test_config, None), GeminiClient)
