"""
Pull request head resolution for branch updates.

A push to a branch moves the source side of every open pull request
originating from it. For each such pull request targeting the source, one
head is synthesized per checkout strategy the source wants for pull requests
of that origin (same repository or fork).
"""

from typing import Dict, List, Optional, Sequence

from bbhooks.models.pull_request import PullRequest
from bbhooks.models.refs import ChangeKind, RefChange, RefsChangedEvent
from bbhooks.models.scm import (
    BranchHead,
    CheckoutStrategy,
    GitRevision,
    Head,
    HeadOrigin,
    PullRequestHead,
    PullRequestRevision,
    Revision,
)
from bbhooks.models.source import BitbucketServerSource
from bbhooks.services.branch_resolver import log_unknown_ref_type
from bbhooks.services.pr_cache import OutgoingPullRequestCache
from bbhooks.services.source_context import SourceContext


def pull_request_head_name(pull_request_id: str, strategy: CheckoutStrategy, strategy_count: int) -> str:
    """PR-<id>, suffixed with the lowercased strategy when several are wanted."""
    if strategy_count > 1:
        return f"PR-{pull_request_id}-{strategy.name.lower()}"
    return f"PR-{pull_request_id}"


def targets_source(pull_request: PullRequest, source: BitbucketServerSource) -> bool:
    target = pull_request.destination.repository
    return (
        target.owner_name.casefold() == source.repo_owner.casefold()
        and target.repository_name.casefold() == source.repository.casefold()
    )


def build_pull_request_heads(
    pull_request: PullRequest,
    source: BitbucketServerSource,
    strategies: List[CheckoutStrategy],
    origin: HeadOrigin,
) -> Dict[PullRequestHead, PullRequestRevision]:
    """Build the head/revision pair of each strategy for one pull request."""
    heads: Dict[PullRequestHead, PullRequestRevision] = {}
    target = BranchHead(name=pull_request.destination.branch_name)

    for strategy in strategies:
        name = pull_request_head_name(pull_request.id, strategy, len(strategies))
        head = PullRequestHead(
            name=name,
            owner_name=source.repo_owner,
            repo_name=source.repository,
            target_branch_name=name,
            checkout_strategy=strategy,
            pull_request_id=pull_request.id,
            origin=origin,
            target=target,
        )
        heads[head] = PullRequestRevision(
            head=head,
            target_revision=GitRevision(head=target, commit_hash=pull_request.destination.commit_hash),
            source_revision=GitRevision(head=head, commit_hash=pull_request.source.commit_hash),
        )

    return heads


def resolve_pull_requests(
    kind: ChangeKind,
    changes: Sequence[RefChange],
    event: RefsChangedEvent,
    source: BitbucketServerSource,
    cache: OutgoingPullRequestCache,
    result: Dict[Head, Optional[Revision]],
) -> None:
    """
    Add pull request heads affected by updated branches to ``result``.

    Created and removed refs never produce pull request heads. Sources that
    do not discover pull requests get nothing from here.
    """
    if kind is not ChangeKind.UPDATED:
        return

    context = SourceContext(source)
    if not context.wants_pull_requests():
        return

    repository = event.repository
    origin = context.classify_origin(repository.owner_name, repository.repository_name)
    strategies = context.strategies_for(origin)
    if not strategies:
        return

    for change in changes:
        if not change.is_branch:
            log_unknown_ref_type(change)

    for pull_request in cache.get(source.server_url):
        if not targets_source(pull_request, source):
            continue
        result.update(build_pull_request_heads(pull_request, source, strategies, origin))
