import datetime
import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from gamenews.models.post import Category
from gamenews.settings import settings


class PostInput(BaseModel):
    """Every editable field of a post; edits resupply all of them."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=settings.MAX_CONTENT_CHARS)
    category: Category
    author: Optional[str] = None
    imageUrl: str = ""
    imageData: Optional[str] = Field(
        default=None, description="Base64 encoded image bytes stored on the post."
    )
    imageContentType: Optional[str] = None
    imageFilename: Optional[str] = None
    removeImage: bool = False

    @field_validator("title", "content", mode="before")
    @classmethod
    def _strip_required(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("author", "imageUrl", mode="before")
    @classmethod
    def _strip_optional(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class PostSummary(BaseModel):
    id: uuid.UUID
    title: str
    category: Category
    author: str
    image: Optional[str] = None
    excerpt: str
    readingTime: str
    likes: int = 0
    views: int = 0
    featured: bool = False
    semiFeatured: bool = False
    createdAt: datetime.datetime
    updatedAt: Optional[datetime.datetime] = None


class PostDetail(PostSummary):
    content: str
    contentHtml: str


class HomePage(BaseModel):
    featuredCarousel: List[PostSummary] = Field(default_factory=list)
    featuredGrid: List[PostSummary] = Field(default_factory=list)
    recentPosts: List[PostSummary] = Field(default_factory=list)


class CategoryPage(BaseModel):
    category: Category
    featuredArticle: Optional[PostSummary] = None
    recentArticles: List[PostSummary] = Field(default_factory=list)


class LikesResponse(BaseModel):
    likes: int


class DashboardEntry(BaseModel):
    id: uuid.UUID
    title: str
    category: Category
    author: str
    createdAt: datetime.datetime
    featured: bool
    semiFeatured: bool


class FeaturedRosterRequest(BaseModel):
    featured: List[uuid.UUID] = Field(default_factory=list)
    semiFeatured: List[uuid.UUID] = Field(default_factory=list)


class FeaturedRosterResponse(BaseModel):
    featured: int
    semiFeatured: int


class PreviewRequest(BaseModel):
    markdown: str = Field(default="", max_length=settings.MAX_CONTENT_CHARS)


class PreviewResponse(BaseModel):
    html: str
