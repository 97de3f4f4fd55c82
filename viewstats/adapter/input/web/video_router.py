from fastapi import APIRouter, Depends

from viewstats.adapter.input.web.dependencies import get_video_registry_usecase, to_http_exception
from viewstats.adapter.input.web.request.video_requests import AddVideoRequest, UpdateVideoRequest
from viewstats.application.usecase.video_registry_usecase import VideoRegistryUseCase
from viewstats.domain.errors import VideoNotFoundError, VideoRegistryError

video_router = APIRouter(tags=["videos"])

_ERRORS = (VideoRegistryError, VideoNotFoundError, RuntimeError)


@video_router.get("")
async def list_videos(refresh: bool = False, usecase: VideoRegistryUseCase = Depends(get_video_registry_usecase)):
    try:
        result = usecase.list_videos(force_refresh=refresh)
    except RuntimeError as exc:
        raise to_http_exception(exc)
    return {**result, "total": len(result["videos"])}


@video_router.post("", status_code=201)
async def add_video(request: AddVideoRequest, usecase: VideoRegistryUseCase = Depends(get_video_registry_usecase)):
    """
    Start tracking a video. The start date is today (UTC).
    """
    try:
        video = usecase.add_video(request.id, request.name, description=request.description, color=request.color)
    except _ERRORS as exc:
        raise to_http_exception(exc)
    return {"video": video.to_dict()}


@video_router.patch("/{video_id}")
async def update_video(
    video_id: str,
    request: UpdateVideoRequest,
    usecase: VideoRegistryUseCase = Depends(get_video_registry_usecase),
):
    try:
        before = usecase.get_video(video_id)
        after = usecase.update_video(
            video_id, name=request.name, description=request.description, color=request.color
        )
    except _ERRORS as exc:
        raise to_http_exception(exc)
    return {"before": before.to_dict(), "after": after.to_dict()}


@video_router.delete("/{video_id}")
async def delete_video(video_id: str, usecase: VideoRegistryUseCase = Depends(get_video_registry_usecase)):
    try:
        removed = usecase.delete_video(video_id)
    except _ERRORS as exc:
        raise to_http_exception(exc)
    return {"deleted": removed.to_dict()}
