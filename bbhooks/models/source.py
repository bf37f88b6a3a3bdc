"""Registered sources and navigators that hook events are matched against."""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from bbhooks.models.scm import CheckoutStrategy


class CandidateKind(str, Enum):
    """Discriminates the candidates a head event may be offered to."""

    BITBUCKET_SERVER_SOURCE = "bitbucket_server_source"
    BITBUCKET_SERVER_NAVIGATOR = "bitbucket_server_navigator"
    OTHER = "other"


class SourceTraits(BaseModel):
    """Pull request discovery behaviour configured on a source."""

    model_config = ConfigDict(frozen=True)

    # An empty list means pull requests from that direction are not discovered
    origin_pr_strategies: Tuple[CheckoutStrategy, ...] = ()
    fork_pr_strategies: Tuple[CheckoutStrategy, ...] = ()


class BitbucketServerSource(BaseModel):
    """A single repository registered for indexing."""

    model_config = ConfigDict(frozen=True)

    kind: CandidateKind = CandidateKind.BITBUCKET_SERVER_SOURCE
    name: Optional[str] = None
    server_url: Optional[str] = None
    repo_owner: str
    repository: str
    repository_id: Optional[int] = None
    traits: SourceTraits = SourceTraits()


class BitbucketServerNavigator(BaseModel):
    """An organization folder scanning every repository of one owner."""

    model_config = ConfigDict(frozen=True)

    kind: CandidateKind = CandidateKind.BITBUCKET_SERVER_NAVIGATOR
    name: Optional[str] = None
    server_url: Optional[str] = None
    repo_owner: str


class OtherCandidate(BaseModel):
    """Any source or navigator this service does not know how to match."""

    model_config = ConfigDict(frozen=True)

    kind: CandidateKind = CandidateKind.OTHER
    name: Optional[str] = None
