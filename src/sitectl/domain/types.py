"""Content-type configuration records and classification enums.

A :class:`ContentTypeConfig` identifies one authoring category (posts,
pages, docs, ...). The engine treats a list of them as read-only input
per call; the records themselves are built by the config layer.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

DEFAULT_TEMPLATE = '---\ntitle: "{{title}}"\ndate: {{date}}\ntags: []\n---\n'

DEFAULT_INDEX_NAME = "index"


class CreationMode(StrEnum):
    """How a new entry of a content type is laid out on disk."""

    FILE = "file"
    FOLDER = "folder"


class HeadingLinkFormat(StrEnum):
    """Output styles for heading links."""

    WIKI = "wiki"
    MARKDOWN = "markdown"
    SITE = "site"


class ContentTypeConfig(BaseModel):
    """One configured content type.

    Field names are snake_case; camelCase spellings and the legacy plugin
    spellings (``folder``, ``enableUnderscorePrefix``, ``useMdxExtension``)
    are accepted on input so exported plugin settings load unchanged.
    """

    model_config = {"frozen": True}

    id: str
    name: str = ""
    folder_pattern: str = Field(
        default="",
        validation_alias=AliasChoices("folder_pattern", "folderPattern", "folder"),
    )
    enabled: bool = True
    creation_mode: CreationMode = Field(
        default=CreationMode.FILE,
        validation_alias=AliasChoices("creation_mode", "creationMode"),
    )
    index_file_name: str = Field(
        default="",
        validation_alias=AliasChoices("index_file_name", "indexFileName"),
    )
    ignore_subfolders: bool = Field(
        default=False,
        validation_alias=AliasChoices("ignore_subfolders", "ignoreSubfolders"),
    )
    template: str = DEFAULT_TEMPLATE
    link_base_path: str = Field(
        default="",
        validation_alias=AliasChoices("link_base_path", "linkBasePath"),
    )
    use_alt_extension: bool = Field(
        default=False,
        validation_alias=AliasChoices("use_alt_extension", "useAltExtension", "useMdxExtension"),
    )
    underscore_prefix: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "underscore_prefix", "underscorePrefix", "enableUnderscorePrefix"
        ),
    )

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            msg = "content type id must not be empty"
            raise ValueError(msg)
        return value

    @field_validator("folder_pattern")
    @classmethod
    def _normalize_pattern(cls, value: str) -> str:
        return value.strip().strip("/")

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not str(data.get("name") or "").strip():
            return {**data, "name": data.get("id", "")}
        return data

    @property
    def effective_index_name(self) -> str:
        """Index file stem, falling back to ``index`` when left blank."""
        return self.index_file_name.strip() or DEFAULT_INDEX_NAME

    @property
    def display_name(self) -> str:
        return self.name or self.id
