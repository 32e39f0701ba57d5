import asyncio
import logging
import uuid
from typing import Optional

from pydantic import BaseModel

from .media_operations import MediaOperationFailed, MediaState, ProgressEvent
from .session_content import SessionContent

logger = logging.getLogger("vitality.media")

TERMINAL_STATES = (MediaState.DONE, MediaState.FAILED)


class VideoJob(BaseModel):
    id: str
    subject: str
    state: MediaState = MediaState.SUBMITTED
    progress: list[str] = []
    locator: Optional[str] = None
    error: Optional[str] = None


class VideoJobRegistry:
    """Tracks background video generations so HTTP clients can poll them.

    At most `max_finished` jobs in a terminal state are retained; older
    finished jobs are evicted first. Running jobs are never evicted.
    """

    def __init__(self, content: SessionContent, max_finished: int = 256):
        self.content = content
        self.max_finished = max_finished
        self._jobs: dict[str, VideoJob] = {}
        self._tasks: dict[str, asyncio.Task] = {}

    def get(self, job_id: str) -> Optional[VideoJob]:
        return self._jobs.get(job_id)

    def _evict(self) -> None:
        finished = [job_id for job_id, job in self._jobs.items() if job.state in TERMINAL_STATES]
        for job_id in finished[: max(0, len(finished) - self.max_finished)]:
            del self._jobs[job_id]

    async def start(self, subject: str) -> VideoJob:
        cached = await self.content.videos.get(subject)

        job = VideoJob(id=uuid.uuid4().hex, subject=subject)
        self._jobs[job.id] = job
        if cached:
            job.state = MediaState.DONE
            job.locator = cached
        else:
            task = asyncio.create_task(self._run(job))
            self._tasks[job.id] = task
            task.add_done_callback(lambda _t, job_id=job.id: self._tasks.pop(job_id, None))
        self._evict()
        return job

    async def _run(self, job: VideoJob) -> None:
        def on_progress(event: ProgressEvent) -> None:
            job.progress.append(event.message)
            if job.state == MediaState.SUBMITTED and event.index > 0:
                job.state = MediaState.POLLING

        try:
            job.locator = await self.content.exercise_video(job.subject, on_progress=on_progress)
        except MediaOperationFailed as e:
            job.state = MediaState.FAILED
            job.error = str(e)
            logger.warning("Video job %s for %r failed: %s", job.id, job.subject, e)
            return
        except Exception as e:
            job.state = MediaState.FAILED
            job.error = f"{type(e).__name__}: {e}"
            logger.exception("Video job %s for %r crashed", job.id, job.subject)
            return

        if job.locator:
            job.state = MediaState.DONE
        else:
            job.state = MediaState.FAILED
            job.error = "no video was produced"

    async def wait(self, job_id: str) -> Optional[VideoJob]:
        task = self._tasks.get(job_id)
        if task is not None:
            await asyncio.wait([task])
        return self.get(job_id)
