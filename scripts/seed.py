"""Database seeder: recreates the schema and fills it with posts and comments."""
import asyncio
import argparse
import random
import time

from app.database import engine, async_session, Base, create_schema
from app.repositories import PostRepository

TOPICS = ["python", "fastapi", "postgresql", "redis", "docker", "sqlalchemy",
          "testing", "performance", "asyncio", "pagination"]


async def seed(num_posts: int, max_comments: int) -> None:
    print(f"Seeding: {num_posts} posts, 0-{max_comments} comments each")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await create_schema(engine)

    repo = PostRepository(async_session)
    total_comments = 0
    for i in range(num_posts):
        topic = random.choice(TOPICS)
        post_id = await repo.create_post(
            title=f"Post {i}: notes on {topic}",
            content=f"Everything I learned this week about {topic}.",
        )
        for j in range(random.randint(0, max_comments)):
            await repo.create_comment(post_id, f"Comment {j} on post {i}")
            total_comments += 1

    elapsed = time.perf_counter() - start
    print(f"  Created {num_posts} posts and {total_comments} comments in {elapsed:.2f}s")
    await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the blog database")
    parser.add_argument("--posts", type=int, default=100, help="number of posts")
    parser.add_argument("--max-comments", type=int, default=5,
                        help="upper bound of comments per post")
    args = parser.parse_args()
    asyncio.run(seed(args.posts, args.max_comments))


if __name__ == "__main__":
    main()
