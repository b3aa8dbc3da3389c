"""Page paths, CMS clients and publishing."""

from generative_pages.publishing.cms import (
    AEMAdminClient,
    CMSPublisher,
    DAClient,
    PersistedBlock,
    PublishResult,
    PublishUrls,
    build_cms_page_html,
)
from generative_pages.publishing.paths import (
    build_categorized_path,
    classify_category,
    generate_semantic_slug,
    generate_slug,
)

__all__ = [
    "AEMAdminClient",
    "CMSPublisher",
    "DAClient",
    "PersistedBlock",
    "PublishResult",
    "PublishUrls",
    "build_categorized_path",
    "build_cms_page_html",
    "classify_category",
    "generate_semantic_slug",
    "generate_slug",
]
