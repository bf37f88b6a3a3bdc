"""Refs-changed event data models."""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class HookEventType(str, Enum):
    """Bitbucket Server webhook event keys (X-Event-Key header)."""

    SERVER_REFS_CHANGED = "repo:refs_changed"
    SERVER_MIRROR_REPO_SYNCHRONIZED = "mirror:repo_synchronized"
    SERVER_PING = "diagnostics:ping"

    @classmethod
    def from_key(cls, key: Optional[str]) -> Optional["HookEventType"]:
        for member in cls:
            if member.value == key:
                return member
        return None


class BitbucketType(str, Enum):
    """Kind of Bitbucket instance that delivered a hook."""

    SERVER = "server"
    CLOUD = "cloud"


class RepositoryType(str, Enum):
    """Repository SCM types known to Bitbucket."""

    GIT = "git"
    MERCURIAL = "hg"

    @classmethod
    def from_scm(cls, scm: Optional[str]) -> Optional["RepositoryType"]:
        """Resolve a raw scmId string, returning None when unrecognized."""
        if scm is None:
            return None
        for member in cls:
            if member.value == scm.lower():
                return member
        return None


class ChangeKind(str, Enum):
    """Classification of a ref mutation."""

    CREATED = "created"
    UPDATED = "updated"
    REMOVED = "removed"
    UNKNOWN = "unknown"

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> "ChangeKind":
        # Exact match only, "update" is not UPDATE
        return _RAW_CHANGE_KINDS.get(raw, cls.UNKNOWN)


_RAW_CHANGE_KINDS = {
    "ADD": ChangeKind.CREATED,
    "UPDATE": ChangeKind.UPDATED,
    "DELETE": ChangeKind.REMOVED,
}


class RefType(str, Enum):
    """Type of ref touched by a change."""

    BRANCH = "BRANCH"
    OTHER = "OTHER"

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> "RefType":
        return cls.BRANCH if raw == "BRANCH" else cls.OTHER


class RefChange(BaseModel):
    """A single ref mutation carried by a refs-changed event."""

    model_config = ConfigDict(frozen=True)

    ref_id: str
    ref_display_id: str
    ref_type: RefType
    raw_ref_type: Optional[str] = None
    from_hash: str
    to_hash: str
    raw_change_type: Optional[str] = None
    change_kind: ChangeKind

    @property
    def is_branch(self) -> bool:
        return self.ref_type is RefType.BRANCH


class RepositoryIdentity(BaseModel):
    """Repository as identified by Bitbucket Server (project key + slug)."""

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    owner_name: str
    repository_name: str
    scm_type: Optional[str] = None

    def matches(self, owner_name: str, repository_name: str, repository_id: Optional[int] = None) -> bool:
        """
        Check whether this repository is the given one.

        When both sides carry an id, id equality decides on its own.
        Otherwise owner and repository names are compared case-insensitively.
        """
        if self.id is not None and repository_id is not None:
            return self.id == repository_id
        return (
            self.owner_name.casefold() == owner_name.casefold()
            and self.repository_name.casefold() == repository_name.casefold()
        )

    def matches_repository(self, other: "RepositoryIdentity") -> bool:
        return self.matches(other.owner_name, other.repository_name, other.id)


class RefsChangedEvent(BaseModel):
    """Structured form of one refs-changed webhook delivery."""

    model_config = ConfigDict(frozen=True)

    repository: RepositoryIdentity
    changes: Tuple[RefChange, ...] = ()
    event_key: Optional[str] = None
    actor: Optional[str] = None
