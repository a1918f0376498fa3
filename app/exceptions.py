"""
Application exceptions.

Hierarchy::

    BlogError
    ├── NotFoundError
    │   └── PostNotFoundError
    ├── InvalidInputError   caller input violates a precondition
    └── StorageError        the store rejected or could not run a statement

HTTP status codes are not attached here; the router layer resolves them
through the ``ErrorMapper`` table injected at application construction.
"""


class BlogError(Exception):
    """Base class for every error the service layer reports."""


class NotFoundError(BlogError):
    pass


class PostNotFoundError(NotFoundError):
    def __init__(self, post_id: int) -> None:
        super().__init__("blog post not found")
        self.post_id = post_id


class InvalidInputError(BlogError):
    pass


class StorageError(BlogError):
    """Wraps a ``SQLAlchemyError``; the original is chained as ``__cause__``."""
