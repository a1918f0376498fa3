from fastapi import APIRouter, Depends, Path
from app.dependencies import (
    MAX_INT64,
    PaginationParams,
    get_error_mapper,
    get_post_repository,
)
from app.errors import ErrorMapper
from app.exceptions import BlogError, InvalidInputError
from app.repositories import PostRepository
from app.schemas import (
    BlogPost,
    CreateCommentRequest,
    CreateCommentResponse,
    CreatePostRequest,
    CreatePostResponse,
    GetAllResponse,
)
from app.services import post_service

router = APIRouter(prefix="/api/posts", tags=["posts"])

@router.get("", response_model=GetAllResponse)
async def list_posts(
    pagination: PaginationParams = Depends(),
    repo: PostRepository = Depends(get_post_repository),
    errors: ErrorMapper = Depends(get_error_mapper),
):
    try:
        posts = await post_service.get_posts(repo, pagination.limit, pagination.offset)
    except BlogError as exc:
        return errors.response("unexpected error getting all blog posts", exc)
    return GetAllResponse(blog_posts=posts, pagination=pagination.to_schema())

@router.get("/{post_id}", response_model=BlogPost)
async def get_post(
    post_id: int = Path(ge=1, le=MAX_INT64),
    repo: PostRepository = Depends(get_post_repository),
    errors: ErrorMapper = Depends(get_error_mapper),
):
    try:
        return await post_service.get_post(repo, post_id)
    except BlogError as exc:
        return errors.response(f"unexpected error getting post with ID ({post_id})", exc)

@router.post("", status_code=201, response_model=CreatePostResponse)
async def create_post(
    data: CreatePostRequest,
    repo: PostRepository = Depends(get_post_repository),
    errors: ErrorMapper = Depends(get_error_mapper),
):
    if not data.title.strip() or not data.content.strip():
        return errors.response("missing title or content", InvalidInputError("bad request"))
    try:
        post_id = await post_service.create_post(repo, data.title, data.content)
    except BlogError as exc:
        return errors.response("unexpected error creating post", exc)
    return CreatePostResponse(blog_post_id=post_id)

@router.post("/{post_id}/comments", status_code=201, response_model=CreateCommentResponse)
async def create_comment(
    data: CreateCommentRequest,
    post_id: int = Path(ge=1, le=MAX_INT64),
    repo: PostRepository = Depends(get_post_repository),
    errors: ErrorMapper = Depends(get_error_mapper),
):
    if not data.text.strip():
        return errors.response("missing comment text", InvalidInputError("bad request"))
    try:
        comment_id = await post_service.create_comment(repo, post_id, data.text)
    except BlogError as exc:
        return errors.response("unexpected error creating comment", exc)
    return CreateCommentResponse(comment_id=comment_id)
