"""
Unit tests for source and navigator matching.
"""

import logging

import pytest

from bbhooks.models import BitbucketServerNavigator, OtherCandidate
from bbhooks.services.matcher import (
    CLOUD_SERVER_URL,
    event_matches_source_repository,
    is_server_url_match,
    match_source,
    matches_navigator,
)

from conftest import SERVER_URL, make_change, make_event, make_repository, make_source


class TestServerUrlMatch:
    """Test the server URL predicate."""

    def test_exact_match(self):
        assert is_server_url_match(SERVER_URL, SERVER_URL)

    def test_case_sensitive(self):
        assert not is_server_url_match(SERVER_URL.upper(), SERVER_URL)

    def test_none_never_matches(self):
        assert not is_server_url_match(None, None)
        assert not is_server_url_match(None, SERVER_URL)

    def test_cloud_never_matches(self):
        assert not is_server_url_match(CLOUD_SERVER_URL, CLOUD_SERVER_URL)


class TestNavigatorMatch:
    """Test navigator matching."""

    def test_matches_owner_case_insensitively(self, navigator):
        event = make_event(make_change(), repository=make_repository(owner="PROJ"))

        assert matches_navigator(navigator, event, SERVER_URL)

    def test_other_owner(self, navigator):
        event = make_event(make_change(), repository=make_repository(owner="OTHER"))

        assert not matches_navigator(navigator, event, SERVER_URL)

    def test_other_server(self, navigator):
        event = make_event(make_change())

        assert not matches_navigator(navigator, event, "https://elsewhere.example.com")

    def test_cloud_navigator_never_matches(self):
        cloud = BitbucketServerNavigator(server_url=CLOUD_SERVER_URL, repo_owner="PROJ")
        event = make_event(make_change())

        assert not matches_navigator(cloud, event, CLOUD_SERVER_URL)

    def test_unrecognized_candidate(self):
        assert not matches_navigator(OtherCandidate(name="github"), make_event(make_change()), SERVER_URL)

    def test_source_is_not_a_navigator(self):
        assert not matches_navigator(make_source(), make_event(make_change()), SERVER_URL)


class TestSourceMatch:
    """Test source matching."""

    def test_git_source_on_same_server(self):
        source = make_source()

        assert match_source(source, make_event(make_change()), SERVER_URL) is source

    def test_other_server(self):
        source = make_source(server_url="https://elsewhere.example.com")

        assert match_source(source, make_event(make_change()), SERVER_URL) is None

    def test_source_without_server_url(self):
        assert match_source(make_source(server_url=None), make_event(make_change()), SERVER_URL) is None

    @pytest.mark.parametrize("scm", ["hg", "svn", ""])
    def test_non_git_repository(self, scm, caplog):
        event = make_event(make_change(), repository=make_repository(scm=scm))

        with caplog.at_level(logging.INFO, logger="bbhooks.services.matcher"):
            assert match_source(make_source(), event, SERVER_URL) is None

        assert "unknown repository type" in caplog.text

    def test_navigator_is_not_a_source(self, navigator):
        assert match_source(navigator, make_event(make_change()), SERVER_URL) is None

    def test_unrecognized_candidate(self):
        assert match_source(OtherCandidate(), make_event(make_change()), SERVER_URL) is None

    def test_repository_names_are_not_checked(self):
        # Fork pushes must still reach the upstream source
        event = make_event(make_change(), repository=make_repository(owner="~ALICE", name="fork"))

        assert match_source(make_source(), event, SERVER_URL) is not None


class TestRepositoryMatch:
    """Test event repository to source repository matching."""

    def test_names_case_insensitive(self):
        event = make_event(make_change(), repository=make_repository(owner="proj", name="REPO"))

        assert event_matches_source_repository(event, make_source(owner="PROJ", repository="repo"))

    def test_different_name(self):
        event = make_event(make_change(), repository=make_repository(name="other"))

        assert not event_matches_source_repository(event, make_source())

    def test_id_is_authoritative(self):
        event = make_event(make_change(), repository=make_repository(name="renamed", repo_id=5))

        assert event_matches_source_repository(event, make_source(repository_id=5))
        assert not event_matches_source_repository(event, make_source(repository="renamed", repository_id=6))

    def test_falls_back_to_names_without_event_id(self):
        event = make_event(make_change(), repository=make_repository(repo_id=None))

        assert event_matches_source_repository(event, make_source(repository_id=5))
