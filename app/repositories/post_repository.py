"""
Post repository: data access for the BlogPost aggregate.

Design notes
------------
- Reads issue a single statement that outer-joins posts to the link table
  and to comments, then fold the flattened rows back into one ``BlogPost``
  per post id.  A post without comments still produces exactly one row
  (with NULL comment columns), so it surfaces with ``comments == []``.
- LIMIT/OFFSET are applied to a subquery of post ids, never to the joined
  rows.  Paginating the joined rows would cut a post's comment list in
  half and return fewer posts than requested.
- Every operation borrows its own session from the factory and releases it
  before returning.  Writes run inside ``session_factory.begin()``, which
  commits on success and rolls back on any exception, so a comment is never
  left behind without its link row.
- ``SQLAlchemyError`` is wrapped in ``StorageError``; nothing is retried.
"""
import logging

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.exceptions import PostNotFoundError, StorageError
from app.models import Comment, Post, blog_posts_comments
from app.schemas import BlogPost, BlogPostComment

logger = logging.getLogger(__name__)


class PostRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch_posts(
        self,
        post_id: int | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[BlogPost]:
        """
        Return posts with their comments, ordered by post id ascending.

        When *post_id* is given the result holds at most that one post and
        *limit*/*offset* are ignored.  Otherwise *limit* and *offset* count
        distinct posts.
        """
        page_ids = select(Post.id).order_by(Post.id)
        if post_id is not None:
            page_ids = page_ids.where(Post.id == post_id)
        else:
            page_ids = page_ids.limit(limit).offset(offset)
        page_ids = page_ids.subquery("page_ids")

        q = (
            select(
                Post.id.label("post_id"),
                Post.title,
                Post.content,
                Comment.id.label("comment_id"),
                Comment.comment_text,
            )
            .select_from(Post)
            .join(page_ids, page_ids.c.id == Post.id)
            .outerjoin(blog_posts_comments, blog_posts_comments.c.blog_post_id == Post.id)
            .outerjoin(Comment, Comment.id == blog_posts_comments.c.comment_id)
            .order_by(Post.id, Comment.id)
        )

        try:
            async with self._session_factory() as session:
                rows = (await session.execute(q)).all()
        except SQLAlchemyError as exc:
            logger.error("Failed to query blog posts", exc_info=True)
            raise StorageError("failed to query blog posts") from exc

        return _fold_rows(rows)

    async def get_posts(self, limit: int, offset: int) -> list[BlogPost]:
        return await self.fetch_posts(limit=limit, offset=offset)

    async def get_post(self, post_id: int) -> BlogPost:
        """Return the post identified by *post_id* or raise ``PostNotFoundError``."""
        posts = await self.fetch_posts(post_id=post_id)
        if not posts:
            raise PostNotFoundError(post_id)
        return posts[0]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_post(self, title: str, content: str) -> int:
        """Insert a post and return its generated id."""
        try:
            async with self._session_factory.begin() as session:
                post = Post(title=title, content=content)
                session.add(post)
                await session.flush()
                return post.id
        except SQLAlchemyError as exc:
            logger.error("Failed to create blog post", exc_info=True)
            raise StorageError("failed to create blog post") from exc

    async def create_comment(self, post_id: int, text: str) -> int:
        """
        Insert a comment and link it to *post_id* in one transaction.

        The caller is responsible for checking that the post exists.
        Returns the generated comment id.
        """
        try:
            async with self._session_factory.begin() as session:
                comment = Comment(comment_text=text)
                session.add(comment)
                # The link row needs the generated comment id.
                await session.flush()
                await session.execute(
                    insert(blog_posts_comments).values(
                        blog_post_id=post_id, comment_id=comment.id
                    )
                )
                return comment.id
        except SQLAlchemyError as exc:
            logger.error("Failed to create comment for post %s", post_id, exc_info=True)
            raise StorageError("failed to create comment") from exc


def _fold_rows(rows) -> list[BlogPost]:
    """
    Collapse joined (post, comment) rows into one ``BlogPost`` per post id.

    Rows arrive ordered by (post id, comment id); dict insertion order
    carries that ordering through to the result.
    """
    posts: dict[int, BlogPost] = {}
    for row in rows:
        post = posts.get(row.post_id)
        if post is None:
            post = BlogPost(id=row.post_id, title=row.title, content=row.content)
            posts[row.post_id] = post
        if row.comment_id is not None:
            post.comments.append(
                BlogPostComment(id=row.comment_id, comment_text=row.comment_text)
            )
    return list(posts.values())
