"""Abstract base class for the hosting service the run talks to."""

from abc import ABC, abstractmethod

from prtag.models import PullRequest, ReleaseRequest, Tag


class ReleaseProvider(ABC):
    @abstractmethod
    def get_pull_request(self, number: int) -> PullRequest: ...

    @abstractmethod
    def list_tags(self, per_page: int = 100) -> list[Tag]: ...

    @abstractmethod
    def create_release(self, request: ReleaseRequest) -> int:
        """Create tag and release in one call, returning the HTTP status."""

    @abstractmethod
    def add_labels(self, number: int, labels: list[str]) -> None: ...

    @abstractmethod
    def create_comment(self, number: int, body: str) -> None: ...
