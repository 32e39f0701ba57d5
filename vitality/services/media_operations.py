"""Long-running media synthesis (exercise demonstration videos).

State machine: submitted -> polling -> done | failed.

The manager polls on a fixed, non-zero interval and narrates progress with
milestones whose index strictly increases. A "complete" milestone is always
emitted before the locator is returned. Polling is bounded by a maximum
number of status calls and can be stopped through a CancelToken.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from ..ai import prompts
from ..ai.utils import with_api_key
from ..core.ai_client import AIClient, GenerationError, ai_client
from ..settings import settings

logger = logging.getLogger("vitality.media")


class MediaState(str, Enum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ProgressEvent:
    index: int
    message: str


# (poll count that triggers it, message); None marks milestones tied to submission/resolution.
MILESTONES: list[tuple[Optional[int], str]] = [
    (None, "Initializing Bio-Visual Simulation..."),
    (None, "Accessing Neural Compute Pipeline..."),
    (2, "Synthesizing Movement Dynamics..."),
    (4, "Mapping Muscle Group Activation..."),
    (7, "Refining Biomechanical Precision..."),
    (10, "Rendering Atmospheric Lighting..."),
    (14, "Finalizing Visual Sequence..."),
    (None, "Simulation Complete. Finalizing Stream."),
]
SUBMITTING, SUBMITTED, COMPLETE = 0, 1, len(MILESTONES) - 1

ProgressCallback = Callable[[ProgressEvent], Any]


@dataclass
class MediaOperation:
    subject: str
    state: MediaState = MediaState.SUBMITTED
    job: Any = None  # provider-opaque operation handle
    polls: int = 0
    locator: Optional[str] = None
    error: Optional[str] = None


class MediaOperationFailed(Exception):
    def __init__(self, operation: MediaOperation, reason: str):
        super().__init__(reason)
        self.operation = operation


class CancelToken:
    def __init__(self):
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


class ProgressNarrator:
    """Emits each milestone at most once, in increasing index order."""

    def __init__(self, callback: Optional[ProgressCallback]):
        self._callback = callback
        self.last_index = -1

    def emit(self, index: int) -> None:
        if index <= self.last_index:
            return
        self.last_index = index
        if self._callback is not None:
            self._callback(ProgressEvent(index=index, message=MILESTONES[index][1]))

    def on_poll(self, polls: int) -> None:
        for index, (trigger, _) in enumerate(MILESTONES):
            if trigger is not None and trigger == polls:
                self.emit(index)


def _video_uri(job: Any) -> Optional[str]:
    result = getattr(job, "response", None) or getattr(job, "result", None)
    videos = getattr(result, "generated_videos", None) or []
    if not videos:
        return None
    video = getattr(videos[0], "video", None)
    return getattr(video, "uri", None)


class MediaOperationManager:
    def __init__(
        self,
        client: Optional[AIClient] = None,
        poll_interval: Optional[float] = None,
        max_polls: Optional[int] = None,
    ):
        self.client = client or ai_client
        self.poll_interval = settings.video_poll_interval_sec if poll_interval is None else poll_interval
        self.max_polls = settings.video_max_polls if max_polls is None else max_polls
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be greater than zero")
        if self.max_polls < 1:
            raise ValueError("max_polls must be at least 1")

    def _fail(self, operation: MediaOperation, reason: str) -> MediaOperationFailed:
        operation.state = MediaState.FAILED
        operation.error = reason
        logger.error("Media operation for %r failed after %d poll(s): %s", operation.subject, operation.polls, reason)
        return MediaOperationFailed(operation, reason)

    async def submit(self, subject: str, narrator: Optional[ProgressNarrator] = None) -> MediaOperation:
        narrator = narrator or ProgressNarrator(None)
        operation = MediaOperation(subject=subject)
        narrator.emit(SUBMITTING)
        try:
            operation.job = await self.client.start_video(prompts.exercise_video_prompt(subject))
        except GenerationError as e:
            raise self._fail(operation, str(e)) from e

        narrator.emit(SUBMITTED)
        operation.state = MediaState.POLLING
        logger.info("Submitted video synthesis for %r", subject)
        return operation

    async def _pause(self, cancel: Optional[CancelToken]) -> None:
        if cancel is None:
            await asyncio.sleep(self.poll_interval)
            return
        try:
            await asyncio.wait_for(cancel.wait(), timeout=self.poll_interval)
        except asyncio.TimeoutError:
            pass

    async def wait(
        self,
        operation: MediaOperation,
        narrator: Optional[ProgressNarrator] = None,
        cancel: Optional[CancelToken] = None,
    ) -> str:
        """Poll until the backend resolves the job and return the keyed artifact locator."""
        narrator = narrator or ProgressNarrator(None)

        while not getattr(operation.job, "done", False):
            if operation.polls >= self.max_polls:
                raise self._fail(operation, f"no result after {operation.polls} status calls")
            operation.polls += 1
            narrator.on_poll(operation.polls)

            await self._pause(cancel)
            if cancel is not None and cancel.cancelled:
                raise self._fail(operation, "cancelled by caller")

            try:
                operation.job = await self.client.poll_video(operation.job)
            except GenerationError as e:
                raise self._fail(operation, str(e)) from e

        backend_error = getattr(operation.job, "error", None)
        if backend_error:
            raise self._fail(operation, f"backend reported failure: {backend_error}")

        uri = _video_uri(operation.job)
        if not uri:
            raise self._fail(operation, "completed without a video locator")

        narrator.emit(COMPLETE)
        operation.locator = with_api_key(uri, self.client.api_key)
        operation.state = MediaState.DONE
        return operation.locator

    async def run(
        self,
        subject: str,
        on_progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelToken] = None,
    ) -> str:
        narrator = ProgressNarrator(on_progress)
        operation = await self.submit(subject, narrator)
        return await self.wait(operation, narrator, cancel)
