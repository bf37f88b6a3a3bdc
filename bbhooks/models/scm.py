"""Head and revision models handed to the indexing side."""

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class CheckoutStrategy(str, Enum):
    """How a pull request is materialized for a build."""

    MERGE = "MERGE"
    HEAD = "HEAD"

    @classmethod
    def ordered(cls, strategies) -> list["CheckoutStrategy"]:
        """Strategies in declaration order, duplicates removed."""
        wanted = set(strategies)
        return [member for member in cls if member in wanted]


class HeadOrigin(str, Enum):
    """Whether a pull request comes from the source repository or a fork."""

    DEFAULT = "default"
    FORK = "fork"


class BranchHead(BaseModel):
    """A plain branch."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["branch"] = "branch"
    name: str


class PullRequestHead(BaseModel):
    """A synthetic head for one pull request and checkout strategy."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pull_request"] = "pull_request"
    name: str
    owner_name: str
    repo_name: str
    target_branch_name: str
    checkout_strategy: CheckoutStrategy
    pull_request_id: str
    origin: HeadOrigin = HeadOrigin.DEFAULT
    target: BranchHead


Head = Union[BranchHead, PullRequestHead]


class GitRevision(BaseModel):
    """A commit on a head."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["git"] = "git"
    head: Head = Field(discriminator="kind")
    commit_hash: str


class PullRequestRevision(BaseModel):
    """Paired target and source commits of a pull request head."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pull_request"] = "pull_request"
    head: PullRequestHead
    target_revision: GitRevision
    source_revision: GitRevision


Revision = Union[GitRevision, PullRequestRevision]
