"""PR source backed by the GitHub REST/GraphQL API through PyGithub.

Useful where the gh binary is not installed (containers, CI runners) but a
token is available. The open-PR listing goes through the search API; the
review decision only exists in GraphQL, so it is queried there.
"""

from __future__ import annotations

import logging

import requests
from github import Auth, Github, GithubException

from prnotify_core.errors import FetchFailure
from prnotify_core.models import PullRequest
from prnotify_core.sources.base import BasePRSource

logger = logging.getLogger(__name__)

_REVIEW_DECISION_QUERY = """
query($owner: String!, $name: String!, $number: Int!) {
  repository(owner: $owner, name: $name) {
    pullRequest(number: $number) {
      reviewDecision
    }
  }
}
"""


class GitHubApiSource(BasePRSource):
    def __init__(self, token: str, author: str | None = None, client: Github | None = None):
        self._gh = client if client is not None else Github(auth=Auth.Token(token))
        self._author = author

    def _login(self) -> str:
        if self._author is None:
            self._author = self._gh.get_user().login
        return self._author

    def list_open_prs(self) -> list[PullRequest]:
        try:
            query = f"is:pr is:open author:{self._login()}"
            return [
                PullRequest(
                    repo=issue.repository.full_name,
                    number=issue.number,
                    title=issue.title or "",
                    url=issue.html_url or "",
                )
                for issue in self._gh.search_issues(query)
            ]
        except (GithubException, requests.RequestException) as e:
            raise FetchFailure(f"searching open PRs: {e}") from e

    def fetch_review_decision(self, repo: str, number: int) -> str:
        owner, _, name = repo.partition("/")
        try:
            _, data = self._gh.requester.graphql_query(
                _REVIEW_DECISION_QUERY,
                {"owner": owner, "name": name, "number": number},
            )
        except (GithubException, requests.RequestException) as e:
            raise FetchFailure(f"review decision for {repo}#{number}: {e}") from e

        pull = ((data.get("data") or {}).get("repository") or {}).get("pullRequest")
        if pull is None:
            raise FetchFailure(f"{repo}#{number} not found")
        return pull.get("reviewDecision") or ""
