import logging

from sqlalchemy import delete
from sqlalchemy.orm import Session

from gamenews.db.base import SessionLocal, init_db
from gamenews.models.post import Category, Post
from gamenews.services.markdown_converter import convert

logger = logging.getLogger(__name__)

SAMPLE_POSTS = [
    {
        "title": "Elden Ring DLC: Shadow of the Erdtree - Everything We Know",
        "content": (
            "FromSoftware's highly anticipated DLC for **Elden Ring** is set to "
            "bring new areas, bosses, weapons and lore to the Lands Between.\n\n"
            "## What to expect\n\n"
            "- New regions beyond the Erdtree\n"
            "- Challenging new bosses\n"
            "- The mysteries surrounding *Miquella*\n\n"
            "> If FromSoftware's track record is any indication, we're in for something special."
        ),
        "category": Category.NEWS,
        "author": "Gaming Editor",
        "image_url": "https://images.unsplash.com/photo-1542751371-adc38448a05e?w=800&h=400&fit=crop",
        "featured": True,
        "likes": 42,
        "views": 156,
    },
    {
        "title": "The Legend of Zelda: Tears of the Kingdom - A Masterpiece Review",
        "content": (
            "Nintendo has once again delivered an exceptional experience.\n\n"
            "The new **Ultrahand** ability lets players build anything from simple "
            "bridges to complex flying machines.\n\n"
            "---\n\n"
            "A must-play for any fan of open-world games."
        ),
        "category": Category.REVIEWS,
        "author": "Review Team",
        "image_url": "https://images.unsplash.com/photo-1511512578047-dfb367046420?w=800&h=400&fit=crop",
        "semi_featured": True,
        "likes": 38,
        "views": 203,
    },
    {
        "title": "Why Indie Games Are the Future of Gaming",
        "content": (
            "Indie games represent the beating heart of creativity in gaming.\n\n"
            "Games like *Celeste*, *Hollow Knight* and *Hades* have proven that you "
            "don't need a massive budget to create something truly special."
        ),
        "category": Category.OPINION,
        "author": "Industry Analyst",
        "image_url": "https://images.unsplash.com/photo-1556438064-2d7646166914?w=800&h=400&fit=crop",
        "semi_featured": True,
        "likes": 29,
        "views": 187,
    },
    {
        "title": "PlayStation 5 Pro Rumors: What to Expect",
        "content": (
            "Leaked specifications suggest significant performance improvements:\n\n"
            "1. Enhanced CPU with higher clock speeds\n"
            "2. Improved GPU with better ray tracing\n"
            "3. Better cooling for sustained performance\n\n"
            "Sony hasn't officially confirmed a `Pro` model."
        ),
        "category": Category.NEWS,
        "author": "Tech Reporter",
        "image_url": "https://images.unsplash.com/photo-1606144042614-b2417e99c4e3?w=800&h=400&fit=crop",
        "likes": 35,
        "views": 142,
    },
]


def seed(db: Session) -> int:
    db.execute(delete(Post))
    for sample in SAMPLE_POSTS:
        post = Post(
            title=sample["title"],
            content=sample["content"],
            content_html=convert(sample["content"]),
            category=sample["category"].value,
            author=sample["author"],
            likes=sample.get("likes", 0),
            views=sample.get("views", 0),
            featured=sample.get("featured", False),
            semi_featured=sample.get("semi_featured", False),
        )
        post.set_image_url(sample["image_url"])
        db.add(post)
    db.commit()
    return len(SAMPLE_POSTS)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    session = SessionLocal()
    try:
        count = seed(session)
        logger.info(f"Inserted {count} sample posts.")
    except Exception as e:
        session.rollback()
        logger.error(f"Seeding failed: {e}", exc_info=True)
    finally:
        session.close()
