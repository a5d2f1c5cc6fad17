"""GitHub REST API v3 provider."""

import httpx

from prtag.errors import ConfigError, ProviderError
from prtag.events import pull_request_from_node
from prtag.models import PullRequest, ReleaseRequest, Tag
from prtag.providers.base import ReleaseProvider
from prtag.settings import PrtagSettings

BASE_URL = "https://api.github.com"

_UNAUTHORIZED = "GitHub API returned 401. Check that GITHUB_TOKEN is passed to the workflow step."


class GitHubProvider(ReleaseProvider):
    def __init__(self, settings: PrtagSettings) -> None:
        if not settings.github_token:
            raise ConfigError("No GitHub credentials. Set GITHUB_TOKEN.")
        self._token = settings.github_token.get_secret_value()
        self._owner, self._repo = settings.owner_repo
        self._base_url = settings.github_api_url.rstrip("/") or BASE_URL
        self._headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self._owner}/{self._repo}"

    def _check(self, response: httpx.Response) -> None:
        if response.status_code == 401:
            raise ProviderError(_UNAUTHORIZED)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                f"GitHub API {response.request.method} {response.request.url.path} "
                f"failed with {response.status_code}"
            ) from exc

    def _get(self, path: str, params: dict | None = None) -> dict | list:
        try:
            response = httpx.get(
                f"{self._base_url}{path}",
                headers=self._headers,
                params=params or {},
                timeout=30,
            )
        except httpx.RequestError as exc:
            raise ProviderError(f"GitHub API GET {path} failed: {exc}") from exc
        self._check(response)
        return response.json()

    def _post(self, path: str, body: dict) -> httpx.Response:
        try:
            return httpx.post(
                f"{self._base_url}{path}",
                headers=self._headers,
                json=body,
                timeout=30,
            )
        except httpx.RequestError as exc:
            raise ProviderError(f"GitHub API POST {path} failed: {exc}") from exc

    def get_pull_request(self, number: int) -> PullRequest:
        node = self._get(f"{self._repo_path}/pulls/{number}")
        return pull_request_from_node(node)  # type: ignore[arg-type]

    def list_tags(self, per_page: int = 100) -> list[Tag]:
        # NOTE: fetches page 1 only. The newest tags come first, which the baseline scan relies on.
        nodes = self._get(f"{self._repo_path}/tags", params={"per_page": str(per_page)})
        return [Tag(name=node["name"]) for node in nodes]  # type: ignore[union-attr]

    def create_release(self, request: ReleaseRequest) -> int:
        response = self._post(f"{self._repo_path}/releases", request.model_dump())
        if response.status_code == 401:
            raise ProviderError(_UNAUTHORIZED)
        return response.status_code

    def add_labels(self, number: int, labels: list[str]) -> None:
        self._check(self._post(f"{self._repo_path}/issues/{number}/labels", {"labels": labels}))

    def create_comment(self, number: int, body: str) -> None:
        self._check(self._post(f"{self._repo_path}/issues/{number}/comments", {"body": body}))
