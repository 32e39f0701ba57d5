from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..deps import get_session_content, get_video_jobs
from ..services.media_operations import MediaState
from ..services.session_content import SessionContent
from ..services.video_jobs import VideoJob, VideoJobRegistry

router = APIRouter(prefix="/media")


class ImageRequest(BaseModel):
    subject: str


class ImageEditRequest(BaseModel):
    subject: str
    instruction: str
    current: Optional[str] = None


class ImageResponse(BaseModel):
    subject: str
    image_url: str
    available: bool


class VideoRequest(BaseModel):
    subject: str


@router.post("/images", response_model=ImageResponse)
async def get_image(payload: ImageRequest, content: SessionContent = Depends(get_session_content)):
    """Cached image for a subject, generated on first request."""
    url = await content.meal_image(payload.subject)
    return ImageResponse(subject=payload.subject, image_url=url, available=bool(url))


@router.post("/images/edit", response_model=ImageResponse)
async def edit_image(payload: ImageEditRequest, content: SessionContent = Depends(get_session_content)):
    if not payload.instruction.strip():
        raise HTTPException(status_code=422, detail="Edit instruction must not be empty")
    url = await content.edit_meal_image(payload.subject, payload.instruction, current=payload.current)
    if not url:
        raise HTTPException(status_code=404, detail=f"No image to edit for '{payload.subject}'")
    return ImageResponse(subject=payload.subject, image_url=url, available=True)


@router.post("/videos", response_model=VideoJob, status_code=202)
async def start_video(payload: VideoRequest, jobs: VideoJobRegistry = Depends(get_video_jobs)):
    return await jobs.start(payload.subject)


@router.get("/videos/{job_id}", response_model=VideoJob)
def get_video(job_id: str, jobs: VideoJobRegistry = Depends(get_video_jobs)):
    job = jobs.get(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Video job not found")
    if job.state == MediaState.FAILED:
        raise HTTPException(status_code=502, detail=job.error or "Video generation failed")
    return job
