import logging
import uuid
from typing import List, Optional, Tuple

from gamenews.exceptions import PostNotFoundError
from gamenews.models.post import Category, Post
from gamenews.repos.posts_repo import PostSort
from gamenews.schemas.post import (
    CategoryPage,
    DashboardEntry,
    HomePage,
    PostDetail,
    PostInput,
    PostSummary,
)
from gamenews.services.image_service import decode_image_payload, image_src
from gamenews.services.markdown_converter import convert
from gamenews.settings import Settings, settings
from gamenews.utils import calculate_reading_time, make_excerpt

logger = logging.getLogger(__name__)


class PostsService:
    def __init__(self, repo, counter_service, current_settings: Settings = settings):
        self.repo = repo
        self.counter_service = counter_service
        self.settings = current_settings

    # --- Reads ---

    def get_post(self, post_id: uuid.UUID, count_view: bool = True) -> PostDetail:
        """Load a post for display. Reading it for display counts as a view."""
        if count_view:
            self.counter_service.increment_views(post_id)
        post = self._require(post_id)
        return PostDetail(**build_post_data(post, self._base_url, include_content=True))

    def list_posts(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        sort: PostSort = PostSort.NEWEST,
        limit: Optional[int] = None,
        search_body: bool = False,
    ) -> List[PostSummary]:
        posts = self.repo.list_posts(
            search=search,
            category=category,
            sort=sort,
            limit=limit,
            search_body=search_body,
        )
        return self._summaries(posts)

    def list_featured(self, limit: Optional[int] = None) -> List[PostSummary]:
        return self._summaries(self.repo.list_featured(limit))

    def list_semi_featured(self, limit: Optional[int] = None) -> List[PostSummary]:
        return self._summaries(self.repo.list_semi_featured(limit))

    def list_by_category(
        self, category: Category, limit: Optional[int] = None
    ) -> List[PostSummary]:
        return self._summaries(self.repo.list_by_category(category.value, limit))

    def get_home(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        sort: PostSort = PostSort.NEWEST,
    ) -> HomePage:
        return HomePage(
            featuredCarousel=self.list_featured(self.settings.FEATURED_LIMIT),
            featuredGrid=self.list_semi_featured(self.settings.SEMI_FEATURED_LIMIT),
            recentPosts=self.list_posts(
                search=search,
                category=category,
                sort=sort,
                limit=self.settings.RECENT_LIMIT,
            ),
        )

    def get_category_page(self, slug: str) -> Optional[CategoryPage]:
        category = category_from_slug(slug)
        if category is None:
            return None
        posts = self.list_by_category(category, self.settings.CATEGORY_LIMIT)
        return CategoryPage(
            category=category,
            featuredArticle=posts[0] if posts else None,
            recentArticles=posts[1:],
        )

    def list_dashboard(self) -> List[DashboardEntry]:
        return [
            DashboardEntry(
                id=post.id,
                title=post.title,
                category=post.category,
                author=post.author,
                createdAt=post.created_at,
                featured=post.featured,
                semiFeatured=post.semi_featured,
            )
            for post in self.repo.list_for_dashboard()
        ]

    def get_image(self, post_id: uuid.UUID) -> Optional[Tuple[bytes, str]]:
        post = self.repo.get(post_id)
        if not post or not post.has_inline_image:
            return None
        return post.image_data, post.image_content_type

    # --- Mutations ---

    def create_post(self, data: PostInput) -> PostDetail:
        image = self._decode_image(data)

        post = Post(
            title=data.title,
            content=data.content,
            content_html=convert(data.content),
            category=data.category.value,
            author=data.author or self.settings.DEFAULT_AUTHOR,
        )
        _apply_image(post, data, image)

        post = self.repo.add(post)
        logger.info(f"Created post {post.id} ({post.category}): {post.title}")
        return PostDetail(**build_post_data(post, self._base_url, include_content=True))

    def update_post(self, post_id: uuid.UUID, data: PostInput) -> PostDetail:
        post = self._require(post_id)
        image = self._decode_image(data)

        post.title = data.title
        post.content = data.content
        post.content_html = convert(data.content)
        post.category = data.category.value
        post.author = data.author or self.settings.DEFAULT_AUTHOR
        _apply_image(post, data, image)

        post = self.repo.save(post)
        logger.info(f"Updated post {post.id}")
        return PostDetail(**build_post_data(post, self._base_url, include_content=True))

    def delete_post(self, post_id: uuid.UUID) -> None:
        post = self._require(post_id)
        self.repo.delete(post)
        logger.info(f"Deleted post {post_id}")

    def like_post(self, post_id: uuid.UUID) -> int:
        return self.counter_service.increment_likes(post_id)

    def rebuild_content_html(self) -> int:
        """Re-render the HTML cache of every post; returns how many changed."""
        changed = 0
        for post in self.repo.all_posts():
            html = convert(post.content or "")
            if html != post.content_html:
                post.content_html = html
                self.repo.save(post)
                changed += 1
        logger.info(f"Re-rendered content for {changed} posts")
        return changed

    # --- Helpers ---

    @property
    def _base_url(self) -> str:
        return self.settings.API_BASE_URL.rstrip("/")

    def _require(self, post_id: uuid.UUID) -> Post:
        post = self.repo.get(post_id)
        if not post:
            logger.warning(f"Post not found: {post_id}")
            raise PostNotFoundError(post_id)
        return post

    def _decode_image(self, data: PostInput) -> Optional[Tuple[bytes, str]]:
        if not data.imageData:
            return None
        return decode_image_payload(
            data.imageData,
            data.imageContentType,
            data.imageFilename,
            self.settings.MAX_IMAGE_BYTES,
        )

    def _summaries(self, posts: List[Post]) -> List[PostSummary]:
        return [PostSummary(**build_post_data(post, self._base_url)) for post in posts]


def _apply_image(post: Post, data: PostInput, image: Optional[Tuple[bytes, str]]) -> None:
    # Uploaded bytes are not resupplied by edit forms, the URL field is
    if image:
        post.set_inline_image(*image)
    elif data.imageUrl:
        post.set_image_url(data.imageUrl)
    elif data.removeImage or not post.has_inline_image:
        post.clear_image()


def render_content_html(post: Post) -> str:
    """Cached HTML for a post, re-rendered from the markdown when the cache is empty."""
    if post.content_html and post.content_html.strip():
        return post.content_html
    logger.debug(f"Rendering missing HTML cache for post {post.id}")
    return convert(post.content or "")


def build_post_data(post: Post, base_url: str, include_content: bool = False) -> dict:
    """Standardized post fields shared by the summary and detail views."""
    content = post.content or ""
    post_data = {
        "id": post.id,
        "title": post.title,
        "category": post.category,
        "author": post.author,
        "image": image_src(post, base_url),
        "excerpt": make_excerpt(content),
        "readingTime": calculate_reading_time(content),
        "likes": post.likes or 0,
        "views": post.views or 0,
        "featured": bool(post.featured),
        "semiFeatured": bool(post.semi_featured),
        "createdAt": post.created_at,
        "updatedAt": post.updated_at,
    }

    if include_content:
        post_data["content"] = content
        post_data["contentHtml"] = render_content_html(post)

    return post_data


def category_from_slug(slug: str) -> Optional[Category]:
    for category in Category:
        if category.value.lower() == (slug or "").strip().lower():
            return category
    return None
