"""One-time migration of the legacy posts/pages settings shape.

Older settings exports described two hard-wired categories (posts and
pages) with flat fields such as ``postsFolder`` and ``pagesCreationMode``
plus an optional list of custom types. :func:`migrate_legacy` turns such a
document into an explicit list of :class:`ContentTypeConfig` records and
the matching ``[site]`` overrides. The engine never branches on the legacy
shape itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field

from sitectl.domain.types import DEFAULT_TEMPLATE, ContentTypeConfig, CreationMode

DEFAULT_PAGE_TEMPLATE = '---\ntitle: "{{title}}"\ndescription: ""\n---\n'

POSTS_NAME = "Posts"
PAGES_NAME = "Pages"


class LegacySettings(BaseModel):
    """The subset of a legacy settings export that carries meaning."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    automate_post_creation: bool = Field(default=False, alias="automatePostCreation")
    posts_folder: str = Field(default="", alias="postsFolder")
    posts_link_base_path: str = Field(default="", alias="postsLinkBasePath")
    creation_mode: CreationMode = Field(default=CreationMode.FILE, alias="creationMode")
    index_file_name: str = Field(default="", alias="indexFileName")
    only_automate_in_posts_folder: bool = Field(default=False, alias="onlyAutomateInPostsFolder")
    enable_underscore_prefix: bool = Field(default=False, alias="enableUnderscorePrefix")
    default_template: str = Field(default="", alias="defaultTemplate")

    enable_pages: bool = Field(default=False, alias="enablePages")
    pages_folder: str = Field(default="", alias="pagesFolder")
    pages_link_base_path: str = Field(default="", alias="pagesLinkBasePath")
    pages_creation_mode: CreationMode = Field(default=CreationMode.FILE, alias="pagesCreationMode")
    pages_index_file_name: str = Field(default="", alias="pagesIndexFileName")
    page_template: str = Field(default="", alias="pageTemplate")
    only_automate_in_pages_folder: bool = Field(default=False, alias="onlyAutomateInPagesFolder")

    date_format: str | None = Field(default=None, alias="dateFormat")
    add_trailing_slash_to_links: bool | None = Field(default=None, alias="addTrailingSlashToLinks")
    copy_heading_link_format: Literal["obsidian", "astro"] | None = Field(
        default=None, alias="copyHeadingLinkFormat"
    )

    content_types: list[dict[str, Any]] = Field(
        default_factory=list,
        validation_alias=AliasChoices("contentTypes", "customContentTypes", "content_types"),
    )


@dataclass
class MigrationOutcome:
    """Result of a legacy migration.

    Attributes:
        content_types: Existing types followed by the migrated ones.
        migrated: Ids of the types created from legacy fields.
        blocked: Legacy categories skipped because a type of that name exists.
        site: ``[site]`` overrides recovered from the legacy document.
    """

    content_types: list[ContentTypeConfig] = field(default_factory=list)
    migrated: list[str] = field(default_factory=list)
    blocked: list[str] = field(default_factory=list)
    site: dict[str, Any] = field(default_factory=dict)


def _unique_id(base: str, taken: set[str]) -> str:
    candidate = base
    counter = 2
    while candidate in taken:
        candidate = f"{base}-{counter}"
        counter += 1
    taken.add(candidate)
    return candidate


def _site_overrides(legacy: LegacySettings) -> dict[str, Any]:
    site: dict[str, Any] = {}
    if legacy.date_format:
        site["date_format"] = legacy.date_format
    if legacy.add_trailing_slash_to_links is not None:
        site["trailing_slash"] = legacy.add_trailing_slash_to_links
    if legacy.copy_heading_link_format is not None:
        site["heading_link_format"] = (
            "site" if legacy.copy_heading_link_format == "astro" else "wiki"
        )
    return site


def migrate_legacy(data: dict[str, Any]) -> MigrationOutcome:
    """Convert a legacy settings document into content types.

    Raises:
        pydantic.ValidationError: The document or one of its content
            types does not validate.
    """
    legacy = LegacySettings.model_validate(data)
    existing = [ContentTypeConfig.model_validate(raw) for raw in legacy.content_types]
    names = {ct.name for ct in existing}
    taken = {ct.id for ct in existing}

    outcome = MigrationOutcome(content_types=list(existing), site=_site_overrides(legacy))

    if legacy.automate_post_creation:
        if POSTS_NAME in names:
            outcome.blocked.append(POSTS_NAME)
        else:
            posts = ContentTypeConfig(
                id=_unique_id("posts", taken),
                name=POSTS_NAME,
                folder_pattern=legacy.posts_folder,
                link_base_path=legacy.posts_link_base_path,
                template=legacy.default_template or DEFAULT_TEMPLATE,
                creation_mode=legacy.creation_mode,
                index_file_name=legacy.index_file_name,
                ignore_subfolders=legacy.only_automate_in_posts_folder,
                underscore_prefix=legacy.enable_underscore_prefix,
            )
            outcome.content_types.append(posts)
            outcome.migrated.append(posts.id)

    if legacy.enable_pages:
        if PAGES_NAME in names:
            outcome.blocked.append(PAGES_NAME)
        else:
            pages = ContentTypeConfig(
                id=_unique_id("pages", taken),
                name=PAGES_NAME,
                folder_pattern=legacy.pages_folder,
                link_base_path=legacy.pages_link_base_path,
                template=legacy.page_template or DEFAULT_PAGE_TEMPLATE,
                creation_mode=legacy.pages_creation_mode,
                index_file_name=legacy.pages_index_file_name,
                ignore_subfolders=legacy.only_automate_in_pages_folder,
            )
            outcome.content_types.append(pages)
            outcome.migrated.append(pages.id)

    return outcome
