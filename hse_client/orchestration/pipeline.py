"""
Inspection pipeline: acquire -> upload -> analyze, one guarded run at a time.
"""

import asyncio
import time
import uuid
from typing import Callable, List, Optional

from hse_client.acquisition.image_acquisition import ImageAcquisition
from hse_client.clients.analysis import AnalysisClient
from hse_client.clients.auth import AuthHeaderBuilder
from hse_client.clients.upload import UploadClient
from hse_client.errors import AuthRequired, InspectionError, NoImage
from hse_client.history.cache import HistoryCache
from hse_client.orchestration.state import IDLE_STATE, PipelineStage, PipelineState
from hse_client.schemas.models import AcquiredImage
from utils.config import config
from utils.logger import clear_run_id, set_run_id, setup_logger

logger = setup_logger(__name__, level=config.log_level, log_file=config.get_log_file(), component="PIPELINE")

StateListener = Callable[[PipelineState], None]


class InspectionPipeline:
    """
    State machine driving one photo from acquisition to a completed analysis.

    Stages: IDLE -> IMAGE_READY -> UPLOADING -> ANALYZING -> COMPLETED | FAILED.
    At most one run is in flight per instance. Stage failures end the run in
    FAILED carrying the mapped error; the pipeline never retries by itself.
    """

    def __init__(
        self,
        acquisition: ImageAcquisition,
        auth: AuthHeaderBuilder,
        uploader: UploadClient,
        analyzer: AnalysisClient,
        history: Optional[HistoryCache] = None,
    ):
        self.acquisition = acquisition
        self.auth = auth
        self.uploader = uploader
        self.analyzer = analyzer
        self.history = history
        self.logger = logger
        self._state = IDLE_STATE
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> PipelineState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called with every new state.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: PipelineState):
        self._state = state
        self.logger.debug(f"Stage -> {state.stage.value}")
        for listener in list(self._listeners):
            listener(state)

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    async def capture(self) -> Optional[AcquiredImage]:
        """Take a photo; see `_accept_image`."""
        if self._reject_while_busy("capture"):
            return None
        return self._accept_image(await self.acquisition.capture())

    async def pick(self) -> Optional[AcquiredImage]:
        """Pick a photo; see `_accept_image`."""
        if self._reject_while_busy("pick"):
            return None
        return self._accept_image(await self.acquisition.pick())

    def _reject_while_busy(self, action: str) -> bool:
        if self._state.is_busy:
            self.logger.warning(f"Ignoring {action} while {self._state.stage.value}")
            return True
        return False

    def _accept_image(self, image: Optional[AcquiredImage]) -> Optional[AcquiredImage]:
        """Move to IMAGE_READY with a new image; a cancelled acquisition changes nothing."""
        if image is None:
            return None

        # A run may have started while the user was choosing
        if self._state.is_busy:
            self.logger.warning("Discarding image acquired during an in-flight run")
            return None

        self._set_state(self._state.transition(
            PipelineStage.IMAGE_READY,
            image=image,
            remote_url=None,
            run_id=None,
        ))
        self.logger.info(
            f"Image ready: {image.local_uri} ({image.approx_size_bytes} bytes, "
            f"{image.mime_type}, compressed={image.compressed})"
        )
        return image

    def reset(self):
        """Return to IDLE, dropping the image and any result."""
        if self._reject_while_busy("reset"):
            return
        if self._state.stage != PipelineStage.IDLE:
            self._set_state(self._state.transition(
                PipelineStage.IDLE, image=None, remote_url=None, run_id=None
            ))

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def analyze(self) -> Optional[PipelineState]:
        """
        Upload the ready image and submit it for analysis.

        Returns:
            Terminal state of the run, or None if a run was already in flight

        Raises:
            AuthRequired: No active session (state unchanged, no request made)
            NoImage: Nothing acquired (state unchanged, no request made)
        """
        if self._state.is_busy:
            self.logger.warning("Analyze ignored: a run is already in flight")
            return None

        if not self._state.has_image:
            self.logger.warning("Analyze invoked without an image")
            raise NoImage()

        if not self.auth.has_session:
            self.logger.warning("Analyze invoked without a session")
            raise AuthRequired("Please sign in to analyze photos.")

        run_id = str(uuid.uuid4())[:8]
        set_run_id(run_id)
        start_time = time.time()
        self.logger.info(f"Starting run for {self._state.image.local_uri}")

        self._set_state(self._state.transition(
            PipelineStage.UPLOADING, remote_url=None, run_id=run_id
        ))

        try:
            final_state = await self._execute()
        except asyncio.CancelledError:
            # Silent rollback: listeners of an abandoned run see nothing more
            self._state = self._state.transition(PipelineStage.IMAGE_READY, remote_url=None, run_id=None)
            self.logger.info("Run cancelled")
            clear_run_id()
            raise

        self.logger.info(
            f"Run finished in {time.time() - start_time:.2f}s: {final_state.stage.value}"
        )

        if final_state.stage == PipelineStage.COMPLETED and self.history is not None:
            await self.history.refresh()

        clear_run_id()
        return final_state

    async def _execute(self) -> PipelineState:
        image = self._state.image

        try:
            remote_url = await self.uploader.upload(image.data)
        except InspectionError as e:
            return self._fail("Upload", e)
        except Exception as e:
            self.logger.exception("Upload raised an unmapped error")
            return self._fail("Upload", InspectionError(f"Upload failed: {e}"))

        self._set_state(self._state.transition(PipelineStage.ANALYZING, remote_url=remote_url))

        try:
            result = await self.analyzer.submit(remote_url)
        except InspectionError as e:
            return self._fail("Analyze", e)
        except Exception as e:
            self.logger.exception("Analyze raised an unmapped error")
            return self._fail("Analyze", InspectionError(f"Analyze failed: {e}"))

        self._set_state(self._state.transition(PipelineStage.COMPLETED, result=result))
        return self._state

    def _fail(self, stage: str, error: InspectionError) -> PipelineState:
        self.logger.error(f"{stage} failed [{error.code}]: {error.message}")
        self._set_state(self._state.transition(PipelineStage.FAILED, error=error))
        return self._state
