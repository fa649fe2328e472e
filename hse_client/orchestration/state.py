"""
State definition for the inspection pipeline.

The pipeline's progress is one immutable `PipelineState` value. Every change
goes through `PipelineState.transition`, which rejects moves the state
machine does not allow.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, model_validator

from hse_client.errors import InspectionError, InvalidTransition
from hse_client.schemas.models import AcquiredImage, AnalyzeResult


class PipelineStage(str, Enum):
    """Stages of one pipeline run."""
    IDLE = "idle"
    IMAGE_READY = "image_ready"
    UPLOADING = "uploading"
    ANALYZING = "analyzing"
    COMPLETED = "completed"
    FAILED = "failed"


IN_FLIGHT_STAGES: FrozenSet[PipelineStage] = frozenset({
    PipelineStage.UPLOADING,
    PipelineStage.ANALYZING,
})

# IMAGE_READY is reachable from in-flight stages only when a run is cancelled
ALLOWED_TRANSITIONS: Dict[PipelineStage, FrozenSet[PipelineStage]] = {
    PipelineStage.IDLE: frozenset({PipelineStage.IMAGE_READY}),
    PipelineStage.IMAGE_READY: frozenset({
        PipelineStage.IDLE,
        PipelineStage.IMAGE_READY,
        PipelineStage.UPLOADING,
    }),
    PipelineStage.UPLOADING: frozenset({
        PipelineStage.ANALYZING,
        PipelineStage.FAILED,
        PipelineStage.IMAGE_READY,
    }),
    PipelineStage.ANALYZING: frozenset({
        PipelineStage.COMPLETED,
        PipelineStage.FAILED,
        PipelineStage.IMAGE_READY,
    }),
    PipelineStage.COMPLETED: frozenset({
        PipelineStage.IDLE,
        PipelineStage.IMAGE_READY,
        PipelineStage.UPLOADING,
    }),
    PipelineStage.FAILED: frozenset({
        PipelineStage.IDLE,
        PipelineStage.IMAGE_READY,
        PipelineStage.UPLOADING,
    }),
}


def validate_stage_payload(
    stage: PipelineStage,
    image: Optional[AcquiredImage],
    result: Optional[AnalyzeResult],
    error: Optional[InspectionError],
) -> Tuple[bool, Optional[str]]:
    """
    Check that a stage carries exactly the data it needs.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if stage == PipelineStage.IDLE and image is not None:
        return False, "idle state must not hold an image"
    if stage != PipelineStage.IDLE and image is None:
        return False, f"{stage.value} state requires an image"
    if (stage == PipelineStage.COMPLETED) != (result is not None):
        return False, "result is present only in the completed state"
    if (stage == PipelineStage.FAILED) != (error is not None):
        return False, "error is present only in the failed state"
    return True, None


class PipelineState(BaseModel):
    """Snapshot of the pipeline."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    stage: PipelineStage = PipelineStage.IDLE
    image: Optional[AcquiredImage] = None
    remote_url: Optional[str] = None
    result: Optional[AnalyzeResult] = None
    error: Optional[InspectionError] = None
    run_id: Optional[str] = None

    @model_validator(mode="after")
    def check_payload(self):
        is_valid, message = validate_stage_payload(self.stage, self.image, self.result, self.error)
        if not is_valid:
            raise ValueError(message)
        return self

    @property
    def is_busy(self) -> bool:
        return self.stage in IN_FLIGHT_STAGES

    @property
    def has_image(self) -> bool:
        return self.image is not None

    def can_transition_to(self, target: PipelineStage) -> bool:
        return target in ALLOWED_TRANSITIONS[self.stage]

    def transition(self, target: PipelineStage, **changes) -> "PipelineState":
        """
        Build the next state.

        Fields not named in `changes` carry over, except the per-run outputs
        (result, error), which are cleared unless given.

        Raises:
            InvalidTransition: The move is not allowed from the current stage
        """
        if not self.can_transition_to(target):
            raise InvalidTransition(self.stage.value, target.value)

        values = {
            "stage": target,
            "image": self.image,
            "remote_url": self.remote_url,
            "result": None,
            "error": None,
            "run_id": self.run_id,
        }
        values.update(changes)
        return PipelineState(**values)


IDLE_STATE = PipelineState()
