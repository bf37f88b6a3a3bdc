"""Pull request data models returned by the Bitbucket Server API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from bbhooks.models.refs import RepositoryIdentity


class PullRequestEndpoint(BaseModel):
    """One side (fromRef / toRef) of a pull request."""

    model_config = ConfigDict(frozen=True)

    repository: RepositoryIdentity
    ref_id: Optional[str] = None
    branch_name: str
    commit_hash: str


class PullRequest(BaseModel):
    """Open pull request as listed by the outgoing pull requests endpoint."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: Optional[str] = None
    source: PullRequestEndpoint
    destination: PullRequestEndpoint
