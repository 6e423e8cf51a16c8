"""Abstract base class for issue tracker providers."""

from abc import ABC, abstractmethod

from linearflow.models import TrackerIssue


class TrackerProvider(ABC):
    @abstractmethod
    def create_issue(
        self,
        title: str,
        description: str,
        team_id: str,
        priority: int | None,
    ) -> TrackerIssue | None: ...

    @abstractmethod
    def get_issue(self, issue_id: str) -> TrackerIssue: ...

    @abstractmethod
    def create_attachment(
        self,
        issue_id: str,
        title: str,
        url: str,
        subtitle: str | None = None,
    ) -> None: ...
