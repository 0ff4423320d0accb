"""Pydantic models describing the mailqueries configuration document."""
from __future__ import annotations

import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.definitions import QueryDefinition


class ValidationError(ValueError):
    """Raised when configuration data does not satisfy the schema."""


class BookmarkConfig(BaseModel):
    """A saved search."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: Optional[str] = None
    query: str
    key: Optional[str] = None
    favorite: bool = False
    hide: bool = False
    hide_unread: bool = False

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("bookmark query must not be empty")
        return value

    def to_definition(self) -> QueryDefinition:
        return QueryDefinition.bookmark(
            self.query,
            name=self.name,
            key=self.key,
            favorite=self.favorite,
            hide=self.hide,
            hide_unread=self.hide_unread,
        )


class MaildirConfig(BaseModel):
    """A maildir shortcut; its query is derived from ``maildir``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    maildir: str = Field(min_length=1)
    name: Optional[str] = None
    key: Optional[str] = None
    favorite: bool = False
    hide: bool = False
    hide_unread: bool = False

    def to_definition(self) -> QueryDefinition:
        return QueryDefinition.shortcut(
            self.maildir,
            name=self.name,
            key=self.key,
            favorite=self.favorite,
            hide=self.hide,
            hide_unread=self.hide_unread,
        )


class ImapSettings(BaseModel):
    """IMAP account used to evaluate the queries."""

    model_config = ConfigDict(extra="forbid")

    host: str
    username: str
    password: Optional[str] = None
    password_env: Optional[str] = None
    port: int = Field(default=993, gt=0)
    ssl: bool = True
    default_mailbox: str = "INBOX"

    @model_validator(mode="after")
    def _password_source(self) -> "ImapSettings":
        if self.password is None and self.password_env is None:
            raise ValueError("imap requires either password or password_env")
        return self

    def resolve_password(self) -> str:
        if self.password is not None:
            return self.password
        value = os.environ.get(self.password_env or "")
        if value is None:
            raise ValidationError(f"environment variable {self.password_env} is not set")
        return value


class RefreshSettings(BaseModel):
    """Timing of the ``watch`` loop."""

    model_config = ConfigDict(extra="forbid")

    interval_s: int = Field(default=300, gt=0)
    backoff_base_s: int = Field(default=5, gt=0)
    backoff_cap_s: int = Field(default=300, gt=0)

    @model_validator(mode="after")
    def _validate_backoff(self) -> "RefreshSettings":
        if self.backoff_cap_s < self.backoff_base_s:
            raise ValueError("backoff_cap_s must be greater than or equal to backoff_base_s")
        return self


class RuntimeConfig(BaseModel):
    """Root configuration loaded from ``config.yaml``."""

    model_config = ConfigDict(extra="forbid")

    version: int = 1
    bookmarks: List[BookmarkConfig] = Field(default_factory=list)
    maildirs: List[MaildirConfig] = Field(default_factory=list)
    imap: Optional[ImapSettings] = None
    refresh: RefreshSettings = Field(default_factory=RefreshSettings)

    @field_validator("version")
    @classmethod
    def _supported_version(cls, value: int) -> int:
        if value != 1:
            raise ValueError("config.yaml version must be 1")
        return value
