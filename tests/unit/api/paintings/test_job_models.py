"""Tests for provider wire/domain models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from wxpaint.core.api.paintings import (
    GenerationImage,
    GenerationJob,
    GenerationRequest,
    ImageModel,
    JobStatus,
)
from wxpaint.core.errors import InvalidTransition


def _job(status: JobStatus, *urls: str) -> GenerationJob:
    images = [GenerationImage(url=u) for u in urls] if urls else None
    return GenerationJob(id="job-1", status=status, images=images)


class TestJobStatus:
    def test_terminal_statuses(self):
        assert {s for s in JobStatus if s.is_terminal} == {
            JobStatus.SUCCEEDED,
            JobStatus.FAILED,
            JobStatus.CANCELLED,
        }

    def test_rank_order(self):
        assert JobStatus.STARTING.rank < JobStatus.PROCESSING.rank < JobStatus.SUCCEEDED.rank


class TestAdvance:
    """Status only moves forward."""

    def test_moves_forward(self):
        job = _job(JobStatus.STARTING).advance(_job(JobStatus.PROCESSING))
        assert job.status is JobStatus.PROCESSING

    def test_stale_status_ignored(self):
        job = _job(JobStatus.PROCESSING).advance(_job(JobStatus.STARTING))
        assert job.status is JobStatus.PROCESSING

    def test_success_carries_images(self):
        job = _job(JobStatus.PROCESSING).advance(_job(JobStatus.SUCCEEDED, "u1", "u2"))
        assert job.urls == ["u1", "u2"]

    def test_terminal_cannot_change(self):
        with pytest.raises(InvalidTransition):
            _job(JobStatus.FAILED).advance(_job(JobStatus.SUCCEEDED))

    def test_terminal_same_status_is_noop(self):
        done = _job(JobStatus.SUCCEEDED, "u1")
        assert done.advance(_job(JobStatus.SUCCEEDED)) is done

    def test_urls_empty_without_images(self):
        assert _job(JobStatus.PROCESSING).urls == []


class TestGenerationRequest:
    def test_build_prompt_wins_over_params(self):
        request = GenerationRequest.build("m", "fox", {"prompt": "ignored", "steps": 4})
        assert request.input == {"prompt": "fox", "steps": 4}
        assert request.prompt == "fox"

    @pytest.mark.parametrize("prompt", ["", "   "])
    def test_blank_prompt_rejected(self, prompt: str):
        with pytest.raises(ValidationError):
            GenerationRequest.build("m", prompt)

    def test_missing_prompt_rejected(self):
        with pytest.raises(ValidationError):
            GenerationRequest(model="m", input={"steps": 4})

    def test_is_immutable(self):
        request = GenerationRequest.build("m", "fox")
        with pytest.raises(ValidationError):
            request.model = "other"  # type: ignore[misc]

    def test_payload_shape(self):
        assert GenerationRequest.build("m", "fox").to_payload() == {
            "model": "m",
            "input": {"prompt": "fox"},
        }


def test_image_model_defaults_for_sparse_payload():
    model = ImageModel.model_validate({"id": "bare"})
    assert model.provider == ""
    assert model.tags == frozenset()
    assert model.input_schema.type == "object"
