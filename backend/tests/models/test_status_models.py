"""
Tests for darkmaker.models
"""

from pathlib import Path

from darkmaker.models import (
    PIPELINE_ORDER,
    FileHandle,
    JobRequest,
    PipelineState,
    RemoteAudio,
)


class TestPipelineState:
    def test_terminal_states(self):
        assert PipelineState.DELIVERED.is_terminal()
        assert PipelineState.FAILED.is_terminal()
        assert not PipelineState.MUXED.is_terminal()

    def test_forward_only(self):
        for current, following in zip(PIPELINE_ORDER, PIPELINE_ORDER[1:]):
            assert current.can_advance_to(following)
        assert not PipelineState.INTAKE.can_advance_to(PipelineState.TRANSCRIBED)
        assert not PipelineState.MUXED.can_advance_to(PipelineState.AUDIO_RESOLVED)

    def test_failed_reachable_from_any_running_state(self):
        for state in PIPELINE_ORDER[:-1]:
            assert state.can_advance_to(PipelineState.FAILED)

    def test_no_transition_out_of_terminal(self):
        assert not PipelineState.FAILED.can_advance_to(PipelineState.DELIVERED)
        assert not PipelineState.DELIVERED.can_advance_to(PipelineState.FAILED)


def test_file_handle_for_path():
    handle = FileHandle.for_path("/tmp/work/video-final-1-abc.mp4")
    assert handle.path == Path("/tmp/work/video-final-1-abc.mp4")
    assert handle.display_name == "video-final-1-abc.mp4"


def test_job_request_defaults():
    job = JobRequest(audio_source=RemoteAudio("https://example.com/v"))
    assert job.images == []
    assert job.synthesize_voice is False
    assert job.image_duration is None
    assert job.extra_uploads == []
