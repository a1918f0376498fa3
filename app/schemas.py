from pydantic import BaseModel, ConfigDict, Field


# --- Comment ---

class BlogPostComment(BaseModel):
    id: int
    comment_text: str
    model_config = ConfigDict(from_attributes=True)


class CreateCommentRequest(BaseModel):
    text: str


class CreateCommentResponse(BaseModel):
    comment_id: int


# --- Post ---

class BlogPost(BaseModel):
    id: int
    title: str
    content: str
    comments: list[BlogPostComment] = []  # ordered by comment id
    model_config = ConfigDict(from_attributes=True)


class CreatePostRequest(BaseModel):
    title: str = Field(max_length=300)
    content: str


class CreatePostResponse(BaseModel):
    blog_post_id: int


# --- Pagination ---

class Pagination(BaseModel):
    limit: int
    offset: int
    page: int


class GetAllResponse(BaseModel):
    blog_posts: list[BlogPost]
    pagination: Pagination


# --- Errors ---

class ErrorResponse(BaseModel):
    message: str
    cause: str
