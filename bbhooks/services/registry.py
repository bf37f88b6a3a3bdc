"""
Registry of configured sources and navigators.

The registry is loaded once at startup from a YAML file such as:

    navigators:
      - server_url: https://bitbucket.example.com
        repo_owner: PROJ
    sources:
      - name: proj-app
        server_url: https://bitbucket.example.com
        repo_owner: PROJ
        repository: app
        repository_id: 42
        traits:
          origin_pr_strategies: [MERGE]
          fork_pr_strategies: [MERGE, HEAD]
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from bbhooks.models.source import (
    BitbucketServerNavigator,
    BitbucketServerSource,
    CandidateKind,
    OtherCandidate,
)
from bbhooks.utils.logging import get_logger

logger = get_logger(__name__)

Candidate = Union[BitbucketServerSource, BitbucketServerNavigator, OtherCandidate]


class RegistryError(Exception):
    """Raised when the sources file cannot be loaded."""
    pass


class SourceRegistry:
    """In-memory list of the navigators and sources hook events are offered to."""

    def __init__(
        self,
        navigators: Optional[List[Candidate]] = None,
        sources: Optional[List[Candidate]] = None,
    ):
        self.navigators: List[Candidate] = list(navigators or [])
        self.sources: List[Candidate] = list(sources or [])

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SourceRegistry":
        """
        Load a registry from a YAML file.

        Raises:
            RegistryError: If the file is missing, unreadable or malformed
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise RegistryError(f"Can not read sources file {path}: {e}") from e

        registry = cls.from_dict(data)
        logger.info(
            f"Loaded {len(registry.sources)} sources and {len(registry.navigators)} navigators from {path}"
        )
        return registry

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SourceRegistry":
        if not isinstance(data, dict):
            raise RegistryError("Sources file must contain a mapping")
        try:
            navigators = [
                cls._candidate(entry, BitbucketServerNavigator) for entry in data.get("navigators") or []
            ]
            sources = [cls._candidate(entry, BitbucketServerSource) for entry in data.get("sources") or []]
        except (ValidationError, TypeError, AttributeError) as e:
            raise RegistryError(f"Invalid sources file entry: {e}") from e
        return cls(navigators, sources)

    @staticmethod
    def _candidate(entry: Dict[str, Any], model) -> Candidate:
        if entry.get("kind") == CandidateKind.OTHER.value:
            return OtherCandidate.model_validate(entry)
        return model.model_validate(entry)

    def sources_for(self, owner: str, repository: str) -> List[BitbucketServerSource]:
        """Bitbucket Server sources registered for a repository (case-insensitive)."""
        return [
            source
            for source in self.sources
            if source.kind is CandidateKind.BITBUCKET_SERVER_SOURCE
            and source.repo_owner.casefold() == owner.casefold()
            and source.repository.casefold() == repository.casefold()
        ]


def load_registry(path: Optional[str]) -> SourceRegistry:
    """Load the registry from ``path``, or return an empty one when unset."""
    if not path:
        logger.warning("No sources file configured, hook events will match nothing")
        return SourceRegistry()
    return SourceRegistry.from_file(path)
