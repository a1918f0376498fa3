from app.repositories.post_repository import PostRepository

__all__ = ["PostRepository"]
