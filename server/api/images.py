# server/api/images.py

from dataclasses import asdict
from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from api.deps import get_current_user, get_feed_service
from api.schemas import CommentRecord, CommentRequest, FeedResponse, ImageRecord, PaginationInfo
from core.config import MAX_PAGE, MAX_PAGE_SIZE, MAX_UPLOAD_BYTES
from core.errors import ValidationError
from core.feed import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, FeedService
from core.session import TokenIdentity


router = APIRouter(prefix="/images", tags=["images"])


def read_upload(file: UploadFile) -> tuple[bytes, int]:
    """
    Reads an uploaded file without ever holding more than the size limit
    (plus one byte) in memory. Returns the bytes read and the file size.
    """
    if file.size is not None and file.size > MAX_UPLOAD_BYTES:
        raise ValidationError(f"File exceeds the {MAX_UPLOAD_BYTES} byte limit")
    data = file.file.read(MAX_UPLOAD_BYTES + 1)
    return data, max(len(data), file.size or 0)


@router.post("/upload", response_model=ImageRecord)
def upload_image(
    file: UploadFile = File(...),
    description: str | None = Form(None),
    current_user: TokenIdentity = Depends(get_current_user),
    feed: FeedService = Depends(get_feed_service),
):
    data, size = read_upload(file)
    image = feed.upload(
        data=data,
        mime_type=file.content_type,
        size_bytes=size,
        original_name=file.filename,
        description=description,
        uploader_id=current_user.user_id,
    )
    return ImageRecord.model_validate(image)


@router.get("", response_model=FeedResponse)
def list_images(
    search: str | None = None,
    page: int = Query(DEFAULT_PAGE, ge=1, le=MAX_PAGE),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    uploader: int | None = None,
    feed: FeedService = Depends(get_feed_service),
):
    """
    Public feed, newest first. `search` matches descriptions and comment text.
    Pagination counts rows before images with missing files are dropped.
    """
    result = feed.list(search_term=search, page=page, page_size=limit, uploader_id=uploader)
    return FeedResponse(
        data=[ImageRecord.model_validate(image) for image in result.items],
        pagination=PaginationInfo(**asdict(result.pagination)),
    )


@router.post("/{image_id}/like", response_model=ImageRecord)
def like_image(
    image_id: int,
    current_user: TokenIdentity = Depends(get_current_user),
    feed: FeedService = Depends(get_feed_service),
):
    return ImageRecord.model_validate(feed.like(image_id))


@router.delete("/{image_id}/like", response_model=ImageRecord)
def unlike_image(
    image_id: int,
    current_user: TokenIdentity = Depends(get_current_user),
    feed: FeedService = Depends(get_feed_service),
):
    return ImageRecord.model_validate(feed.unlike(image_id))


@router.post("/{image_id}/comment", response_model=CommentRecord)
def comment_image(
    image_id: int,
    body: CommentRequest,
    current_user: TokenIdentity = Depends(get_current_user),
    feed: FeedService = Depends(get_feed_service),
):
    comment = feed.comment(image_id, body.text, current_user.user_id)
    return CommentRecord.model_validate(comment)


@router.delete("/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_image(
    image_id: int,
    current_user: TokenIdentity = Depends(get_current_user),
    feed: FeedService = Depends(get_feed_service),
):
    feed.delete(image_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
