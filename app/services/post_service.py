"""
Post service: business rules for blog posts and their comments.

Design notes
------------
- Every function takes the ``PostRepository`` as its first argument so the
  router decides which storage the call runs against (tests pass a
  repository bound to the in-memory database).
- Reads go through the cache-aside layer (Redis, falling back to the
  repository).  An entry that no longer validates as a post is
  treated as a miss.  Only successful reads are cached, so a missing post is
  always reported as ``PostNotFoundError`` straight from the store.
- A comment is only written once its post has been found.  The lookup
  bypasses the cache so a stale entry can never authorise a write.
"""
import logging

from app.cache import cache, detail_key, list_key
from app.config import settings
from app.repositories import PostRepository
from app.schemas import BlogPost

logger = logging.getLogger(__name__)


async def get_posts(repo: PostRepository, limit: int, offset: int) -> list[BlogPost]:
    """Return *limit* posts starting at *offset*, ordered by id."""
    key = list_key(limit, offset)
    cached = await cache.get(key)
    if cached is not None:
        try:
            return [BlogPost.model_validate(item) for item in cached]
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed cache entry %r", key)

    posts = await repo.get_posts(limit, offset)
    await cache.set(key, [p.model_dump() for p in posts], ttl=settings.CACHE_TTL_LIST)
    return posts


async def get_post(repo: PostRepository, post_id: int) -> BlogPost:
    """Return a single post with its comments; raises ``PostNotFoundError``."""
    key = detail_key(post_id)
    cached = await cache.get(key)
    if cached is not None:
        try:
            return BlogPost.model_validate(cached)
        except ValueError:
            logger.warning("Ignoring malformed cache entry %r", key)

    post = await repo.get_post(post_id)
    await cache.set(key, post.model_dump(), ttl=settings.CACHE_TTL_DETAIL)
    return post


async def create_post(repo: PostRepository, title: str, content: str) -> int:
    post_id = await repo.create_post(title, content)
    logger.info("Created blog post %s", post_id)
    await cache.invalidate_posts()
    return post_id


async def create_comment(repo: PostRepository, post_id: int, text: str) -> int:
    """
    Attach a new comment to *post_id* and return the comment id.

    Raises ``PostNotFoundError`` without writing anything when the post
    does not exist.
    """
    await repo.get_post(post_id)

    comment_id = await repo.create_comment(post_id, text)
    logger.info("Created comment %s on blog post %s", comment_id, post_id)
    await cache.invalidate_posts(post_id)
    return comment_id
