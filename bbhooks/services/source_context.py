"""Pull request discovery policy of a registered source."""

from typing import List

from bbhooks.models.scm import CheckoutStrategy, HeadOrigin
from bbhooks.models.source import BitbucketServerSource


class SourceContext:
    """Answers which pull request heads a source wants, based on its traits."""

    def __init__(self, source: BitbucketServerSource):
        self.source = source
        self._origin = CheckoutStrategy.ordered(source.traits.origin_pr_strategies)
        self._fork = CheckoutStrategy.ordered(source.traits.fork_pr_strategies)

    def wants_pull_requests(self) -> bool:
        return bool(self._origin or self._fork)

    def origin_strategies(self) -> List[CheckoutStrategy]:
        return list(self._origin)

    def fork_strategies(self) -> List[CheckoutStrategy]:
        return list(self._fork)

    def classify_origin(self, owner_name: str, repo_name: str) -> HeadOrigin:
        """DEFAULT when the repository is the source's own, FORK otherwise."""
        if (
            self.source.repo_owner.casefold() == owner_name.casefold()
            and self.source.repository.casefold() == repo_name.casefold()
        ):
            return HeadOrigin.DEFAULT
        return HeadOrigin.FORK

    def strategies_for(self, origin: HeadOrigin) -> List[CheckoutStrategy]:
        if origin is HeadOrigin.DEFAULT:
            return self.origin_strategies()
        return self.fork_strategies()
