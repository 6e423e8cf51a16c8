"""Linear GraphQL API provider."""

import httpx

from linearflow.models import TrackerIssue
from linearflow.providers.base import TrackerProvider
from linearflow.settings import LinearFlowSettings

ENDPOINT = "https://api.linear.app/graphql"

MEDIUM_PRIORITY = 3

_GET_ISSUE = """
query GetIssue($id: String!) {
  issue(id: $id) {
    id
    identifier
    title
    url
  }
}
"""

_CREATE_ISSUE = """
mutation CreateIssue($title: String!, $description: String, $teamId: String!, $priority: Int) {
  issueCreate(input: {
    title: $title
    description: $description
    teamId: $teamId
    priority: $priority
  }) {
    success
    issue {
      id
      identifier
      title
      url
    }
  }
}
"""

_CREATE_ATTACHMENT = """
mutation CreateAttachment($issueId: String!, $title: String!, $url: String!, $subtitle: String) {
  attachmentCreate(input: {
    issueId: $issueId
    title: $title
    url: $url
    subtitle: $subtitle
  }) {
    success
    attachment {
      id
    }
  }
}
"""


class LinearProvider(TrackerProvider):
    def __init__(self, settings: LinearFlowSettings) -> None:
        if not settings.linear_api_key:
            raise RuntimeError("LINEAR_API_KEY is required")
        self._api_key = settings.linear_api_key.get_secret_value()

    def _gql(self, query: str, variables: dict | None = None) -> dict:
        response = httpx.post(
            ENDPOINT,
            json={"query": query, "variables": variables or {}},
            headers={
                "Authorization": self._api_key,
                "Content-Type": "application/json",
            },
            timeout=30,
        )
        response.raise_for_status()
        data = response.json()
        if "errors" in data:
            raise RuntimeError(f"Linear API error: {data['errors']}")
        return data["data"]

    def _issue_from_node(self, node: dict) -> TrackerIssue:
        return TrackerIssue(
            id=node["id"],
            identifier=node.get("identifier"),
            title=node["title"],
            url=node["url"],
        )

    def create_issue(
        self,
        title: str,
        description: str,
        team_id: str,
        priority: int | None = MEDIUM_PRIORITY,
    ) -> TrackerIssue | None:
        data = self._gql(
            _CREATE_ISSUE,
            {
                "title": title,
                "description": description,
                "teamId": team_id,
                "priority": priority,
            },
        )
        result = data["issueCreate"]
        if not result["success"]:
            raise RuntimeError("Linear issueCreate returned success=false")
        # issue can be null even when success is true
        node = result.get("issue")
        return self._issue_from_node(node) if node else None

    def get_issue(self, issue_id: str) -> TrackerIssue:
        data = self._gql(_GET_ISSUE, {"id": issue_id})
        node = data["issue"]
        if not node:
            raise RuntimeError(f"Issue '{issue_id}' not found in Linear")
        return self._issue_from_node(node)

    def create_attachment(
        self,
        issue_id: str,
        title: str,
        url: str,
        subtitle: str | None = None,
    ) -> None:
        data = self._gql(
            _CREATE_ATTACHMENT,
            {
                "issueId": issue_id,
                "title": title,
                "url": url,
                "subtitle": subtitle,
            },
        )
        if not data["attachmentCreate"]["success"]:
            raise RuntimeError("Linear attachmentCreate returned success=false")
