import pytest

from src.errors import (
    ApiError,
    FileTooLarge,
    InvalidEndpoint,
    NoData,
    PipelineError,
    ServerError,
    TransportFailure,
    describe_error,
)
from src.models import PipelineStage, StageTracker


# ── stage tracker ─────────────────────────────────────────────────────────────


def test_tracker_starts_validating():
    assert StageTracker().current is PipelineStage.VALIDATING


def test_tracker_walks_forward_through_refinement():
    tracker = StageTracker()
    for stage in (
        PipelineStage.UPLOADING,
        PipelineStage.AWAITING_TRANSCRIPTION,
        PipelineStage.AWAITING_REFINEMENT,
        PipelineStage.COMPLETED,
    ):
        tracker.advance(stage)

    assert tracker.history[-1] is PipelineStage.COMPLETED
    assert len(tracker.history) == 5


def test_tracker_rejects_going_back():
    tracker = StageTracker()
    tracker.advance(PipelineStage.UPLOADING)
    tracker.advance(PipelineStage.AWAITING_TRANSCRIPTION)

    with pytest.raises(RuntimeError):
        tracker.advance(PipelineStage.UPLOADING)


def test_tracker_can_fail_from_any_live_stage():
    tracker = StageTracker()
    tracker.advance(PipelineStage.FAILED)

    assert tracker.current is PipelineStage.FAILED


def test_tracker_terminal_states_are_final():
    tracker = StageTracker()
    tracker.advance(PipelineStage.FAILED)

    with pytest.raises(RuntimeError):
        tracker.advance(PipelineStage.COMPLETED)


# ── error taxonomy ────────────────────────────────────────────────────────────


def test_all_kinds_share_the_pipeline_base():
    for error in (ApiError("x"), ServerError(500), FileTooLarge(30.0), NoData(), InvalidEndpoint("u")):
        assert isinstance(error, PipelineError)


def test_errors_support_match_on_payload():
    match ServerError(503):
        case ServerError(status_code):
            assert status_code == 503


def test_transport_failure_detects_timeout_from_text():
    assert TransportFailure("The request timed out").timed_out
    assert TransportFailure("anything", timed_out=True).timed_out
    assert not TransportFailure("connection refused").timed_out


def test_describe_error_messages():
    assert "30.0 MB" in describe_error(FileTooLarge(30.0))
    assert describe_error(ApiError("rate limited")).endswith("rate limited")
    assert "HTTP 500" in describe_error(ServerError(500))
    assert describe_error(TransportFailure("slow", timed_out=True)).startswith("Request timed out")
    assert describe_error(NoData()) == "No data received from server"
