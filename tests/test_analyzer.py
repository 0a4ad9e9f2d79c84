"""Tests for the analyzer session state machine."""

import threading

import pytest

from analyzer import AnalyzerSession, AnalyzerState
from errors import AnalysisFailed, InvalidImage, WorkspaceBusy
from stores import MethodologyStore


@pytest.fixture
def session():
    return AnalyzerSession()


class TestAnalyzerSession:
    """Tests for AnalyzerSession transitions."""

    def test_starts_idle(self, session):
        assert session.state is AnalyzerState.IDLE

    def test_select_image(self, session, png_data_url):
        session.select_image(png_data_url)
        assert session.state is AnalyzerState.IMAGE_READY
        assert session.image == png_data_url

    def test_select_invalid_image(self, session):
        with pytest.raises(InvalidImage):
            session.select_image("not a data url")
        assert session.state is AnalyzerState.IDLE

    def test_analyze_without_image_is_noop(self, session):
        calls = []
        assert session.analyze(calls.append) is None
        assert calls == []

    def test_analyze_success(self, session, png_data_url, analysis):
        session.select_image(png_data_url)
        assert session.analyze(lambda image: analysis) is analysis
        assert session.state is AnalyzerState.RESULT_READY

    def test_analyze_failure_keeps_image(self, session, png_data_url):
        """Test that a failed analysis returns to IMAGE_READY with the image retained."""
        def boom(image):
            raise RuntimeError("bad key")

        session.select_image(png_data_url)
        with pytest.raises(AnalysisFailed):
            session.analyze(boom)

        assert session.state is AnalyzerState.IMAGE_READY
        assert session.image == png_data_url
        assert session.result is None

    def test_analyzing_state_and_busy(self, session, png_data_url, analysis):
        """Test that a second analysis is rejected while one is pending."""
        started = threading.Event()
        release = threading.Event()

        def slow(image):
            started.set()
            release.wait(5)
            return analysis

        session.select_image(png_data_url)
        worker = threading.Thread(target=session.analyze, args=(slow,))
        worker.start()
        assert started.wait(5)

        assert session.state is AnalyzerState.ANALYZING
        with pytest.raises(WorkspaceBusy):
            session.analyze(lambda image: analysis)
        with pytest.raises(WorkspaceBusy):
            session.select_image(png_data_url)

        release.set()
        worker.join(5)
        assert session.state is AnalyzerState.RESULT_READY

    def test_new_image_discards_result(self, session, png_data_url, analysis):
        session.select_image(png_data_url)
        session.analyze(lambda image: analysis)
        session.select_image(png_data_url)
        assert session.state is AnalyzerState.IMAGE_READY
        assert session.result is None

    def test_save_returns_to_idle(self, session, storage, png_data_url, analysis):
        store = MethodologyStore(storage)
        session.select_image(png_data_url)
        session.analyze(lambda image: analysis)

        methodology = session.save_to(store)

        assert methodology.analysis == analysis
        assert store.list() == [methodology]
        assert session.state is AnalyzerState.IDLE
        assert session.image is None

    def test_save_without_result_is_noop(self, session, storage, png_data_url):
        store = MethodologyStore(storage)
        session.select_image(png_data_url)
        assert session.save_to(store) is None
        assert len(store) == 0
        assert session.state is AnalyzerState.IMAGE_READY

    def test_snapshot(self, session, png_data_url, analysis, analysis_payload):
        session.select_image(png_data_url)
        session.analyze(lambda image: analysis)
        snap = session.snapshot()
        assert snap["state"] == "RESULT_READY"
        assert snap["result"] == analysis_payload
