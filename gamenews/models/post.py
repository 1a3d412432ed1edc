import datetime
import enum
import uuid

from sqlalchemy import (
    UUID,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    LargeBinary,
    String,
    Text,
)

from gamenews.db.base import Base


class Category(str, enum.Enum):
    NEWS = "News"
    OPINION = "Opinion"
    REVIEWS = "Reviews"


CATEGORY_VALUES = tuple(c.value for c in Category)


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint(
            "category IN ({})".format(", ".join(f"'{c}'" for c in CATEGORY_VALUES)),
            name="ck_posts_category",
        ),
        CheckConstraint("likes >= 0", name="ck_posts_likes_non_negative"),
        CheckConstraint("views >= 0", name="ck_posts_views_non_negative"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    content_html = Column(Text, nullable=False, default="", server_default="")
    category = Column(String(20), nullable=False, index=True)
    author = Column(String(200), nullable=False)

    # An image is either owned (bytes on the row) or referenced (a URL), never both
    image_data = Column(LargeBinary, nullable=True)
    image_content_type = Column(String(100), nullable=True)
    image_url = Column(Text, nullable=False, default="", server_default="")

    likes = Column(Integer, nullable=False, default=0, server_default="0")
    views = Column(Integer, nullable=False, default=0, server_default="0")
    featured = Column(Boolean, nullable=False, default=False, server_default="0", index=True)
    semi_featured = Column(
        Boolean, nullable=False, default=False, server_default="0", index=True
    )

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    @property
    def has_inline_image(self) -> bool:
        return bool(self.image_data)

    def set_inline_image(self, data: bytes, content_type: str) -> None:
        self.image_data = data
        self.image_content_type = content_type
        self.image_url = ""

    def set_image_url(self, url: str) -> None:
        self.image_url = url
        self.image_data = None
        self.image_content_type = None

    def clear_image(self) -> None:
        self.image_url = ""
        self.image_data = None
        self.image_content_type = None
