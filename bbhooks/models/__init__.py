"""Data models for the Bitbucket Server hook service."""

from .api_response import WebhookResponse
from .pull_request import PullRequest, PullRequestEndpoint
from .refs import (
    BitbucketType,
    ChangeKind,
    HookEventType,
    RefChange,
    RefsChangedEvent,
    RefType,
    RepositoryIdentity,
    RepositoryType,
)
from .scm import (
    BranchHead,
    CheckoutStrategy,
    GitRevision,
    Head,
    HeadOrigin,
    PullRequestHead,
    PullRequestRevision,
    Revision,
)
from .source import (
    BitbucketServerNavigator,
    BitbucketServerSource,
    CandidateKind,
    OtherCandidate,
    SourceTraits,
)

__all__ = [
    # Event models
    "HookEventType",
    "BitbucketType",
    "RepositoryType",
    "ChangeKind",
    "RefType",
    "RefChange",
    "RepositoryIdentity",
    "RefsChangedEvent",
    # Pull request models
    "PullRequest",
    "PullRequestEndpoint",
    # Head and revision models
    "CheckoutStrategy",
    "HeadOrigin",
    "BranchHead",
    "PullRequestHead",
    "Head",
    "GitRevision",
    "PullRequestRevision",
    "Revision",
    # Candidate models
    "CandidateKind",
    "SourceTraits",
    "BitbucketServerSource",
    "BitbucketServerNavigator",
    "OtherCandidate",
    # API response models
    "WebhookResponse",
]
