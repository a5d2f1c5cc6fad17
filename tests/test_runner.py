"""Tests for prtag.runner: gating, label glue and release creation."""

from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest
from pytest_httpx import HTTPXMock

from prtag.errors import ProviderError, ReleaseCreationError, VersionResolutionError
from prtag.models import CommentEvent, PullRequest, PullRequestEvent, ReleaseRequest, Tag
from prtag.providers.github import BASE_URL, GitHubProvider
from prtag.runner import run, write_outputs
from prtag.settings import PrtagSettings


def _mock_provider(pr: PullRequest | None = None, tags: list[str] | None = None, status: int = 201) -> MagicMock:
    provider = MagicMock()
    provider.get_pull_request.return_value = pr
    provider.list_tags.return_value = [Tag(name=n) for n in (tags or [])]
    provider.create_release.return_value = status
    return provider


def _comment(body: str = "#tag please", action: str = "created") -> CommentEvent:
    return CommentEvent(action=action, issue_number=7, comment_body=body)


def _pr_event(pr: PullRequest, action: str) -> PullRequestEvent:
    return PullRequestEvent(action=action, number=pr.number, pull_request=pr)


class TestOpened:
    def test_labels_and_hints(self, open_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider()
        outcome = run(_pr_event(open_pr, "opened"), provider, settings)
        assert outcome.status == "labeled"
        provider.add_labels.assert_called_once_with(7, ["feature"])
        provider.create_comment.assert_called_once_with(
            7, "Add a comment including `#tag` to create a release candidate tag."
        )
        provider.create_release.assert_not_called()

    def test_chore_branch_still_labeled(self, open_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider()
        pr = open_pr.model_copy(update={"head_ref": "chore/deps"})
        run(_pr_event(pr, "opened"), provider, settings)
        provider.add_labels.assert_called_once_with(7, ["chore"])

    def test_unknown_branch_not_labeled(
        self, open_pr: PullRequest, settings: PrtagSettings, capsys: pytest.CaptureFixture
    ) -> None:
        provider = _mock_provider()
        pr = open_pr.model_copy(update={"head_ref": "wip"})
        outcome = run(_pr_event(pr, "opened"), provider, settings)
        assert outcome.reason is None
        provider.add_labels.assert_not_called()
        provider.create_comment.assert_called_once()
        assert "branch pattern not expected" in capsys.readouterr().out


class TestGating:
    def test_non_merge_pr_events_ignored(self, open_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider()
        for action in ("synchronize", "closed", "edited"):
            outcome = run(_pr_event(open_pr, action), provider, settings)
            assert outcome.status == "skipped"
        provider.list_tags.assert_not_called()

    def test_comment_without_trigger(self, open_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider(open_pr)
        outcome = run(_comment("looks good"), provider, settings)
        assert outcome.status == "skipped"
        assert outcome.reason == "PR not found"
        provider.get_pull_request.assert_not_called()

    def test_edited_comment_ignored(self, open_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider(open_pr)
        assert run(_comment(action="edited"), provider, settings).status == "skipped"

    def test_no_event(self, settings: PrtagSettings) -> None:
        assert run(None, _mock_provider(), settings).status == "skipped"

    def test_other_base_branch(self, open_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider(open_pr.model_copy(update={"base_ref": "develop"}))
        outcome = run(_comment(), provider, settings)
        assert outcome.status == "skipped"
        assert outcome.reason == "PR not to master or main"
        provider.list_tags.assert_not_called()

    def test_configured_base_branch(self, open_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider(open_pr.model_copy(update={"base_ref": "develop"}))
        configured = settings.model_copy(update={"base_branches": ["develop"]})
        assert run(_comment(), provider, configured).status == "released"

    def test_draft(self, open_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider(open_pr.model_copy(update={"draft": True}))
        assert run(_comment(), provider, settings).reason == "PR is a draft"

    def test_unclassifiable_branch(self, open_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider(open_pr.model_copy(update={"head_ref": "experiment"}))
        outcome = run(_comment(), provider, settings)
        assert outcome.reason == "branch pattern not expected"
        provider.create_release.assert_not_called()

    def test_chore_never_resolves(self, merged_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider(tags=["1.0.0"])
        pr = merged_pr.model_copy(update={"head_ref": "chore/cleanup"})
        outcome = run(_pr_event(pr, "closed"), provider, settings)
        assert outcome.status == "skipped"
        assert outcome.reason == "chore branch"
        provider.list_tags.assert_not_called()
        provider.create_release.assert_not_called()


class TestRelease:
    def test_comment_creates_release_candidate(self, open_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider(open_pr, tags=["1.2.3"])
        outcome = run(_comment(), provider, settings)

        assert outcome.status == "released"
        assert outcome.resolved is not None
        assert outcome.resolved.tag_name == "1.3.0-rc-feature-login.0"
        provider.get_pull_request.assert_called_once_with(7)
        provider.list_tags.assert_called_once_with(100)
        provider.create_release.assert_called_once_with(
            ReleaseRequest(
                tag_name="1.3.0-rc-feature-login.0",
                name="Add login page",
                body="Implements the login form.",
                draft=False,
                prerelease=True,
                target_commitish="feature/login",
            )
        )
        provider.create_comment.assert_called_once_with(7, ":label: Pre-release `1.3.0-rc-feature-login.0` created.")

    def test_repeat_comment_bumps_rc(self, open_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider(open_pr, tags=["1.3.0-rc-feature-login.0", "1.2.3"])
        outcome = run(_comment(), provider, settings)
        assert outcome.resolved is not None
        assert outcome.resolved.tag_name == "1.3.0-rc-feature-login.1"

    def test_merge_creates_release(self, merged_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider(tags=["1.3.0-rc-feature-login.1", "1.2.3"])
        outcome = run(_pr_event(merged_pr, "closed"), provider, settings)

        assert outcome.resolved is not None
        assert outcome.resolved.tag_name == "1.3.0"
        request = provider.create_release.call_args.args[0]
        assert request.prerelease is False
        assert request.target_commitish == "main"
        provider.create_comment.assert_called_once_with(7, ":label: Release `1.3.0` created.")

    def test_first_release(self, merged_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider(tags=[])
        pr = merged_pr.model_copy(update={"head_ref": "release/v1"})
        outcome = run(_pr_event(pr, "closed"), provider, settings)
        assert outcome.resolved is not None
        assert outcome.resolved.tag_name == "1.0.0"

    def test_release_failure_raises(self, merged_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider(tags=["1.2.3"], status=422)
        with pytest.raises(ReleaseCreationError, match="HTTP 422") as exc_info:
            run(_pr_event(merged_pr, "closed"), provider, settings)
        assert exc_info.value.tag_name == "1.3.0"
        provider.create_comment.assert_not_called()

    def test_release_failure_without_pr_number_tolerated(
        self, merged_pr: PullRequest, settings: PrtagSettings
    ) -> None:
        provider = _mock_provider(tags=["1.2.3"], status=500)
        pr = merged_pr.model_copy(update={"number": 0})
        assert run(_pr_event(pr, "closed"), provider, settings).status == "released"

    def test_resolution_error_propagates(self, merged_pr: PullRequest, settings: PrtagSettings) -> None:
        pr = merged_pr.model_copy(update={"head_ref": "fix/snake_case", "merged": False})
        provider = _mock_provider(pr, tags=["1.2.3"])
        with pytest.raises(VersionResolutionError):
            run(_comment(), provider, settings)
        provider.create_release.assert_not_called()

    def test_comment_failure_is_warning(
        self, merged_pr: PullRequest, settings: PrtagSettings, capsys: pytest.CaptureFixture
    ) -> None:
        provider = _mock_provider(tags=["1.2.3"])
        provider.create_comment.side_effect = ProviderError("boom")
        outcome = run(_pr_event(merged_pr, "closed"), provider, settings)
        assert outcome.status == "released"
        assert "comment failed" in capsys.readouterr().out

    def test_comment_connection_error_is_warning(
        self, merged_pr: PullRequest, settings: PrtagSettings, httpx_mock: HTTPXMock, capsys: pytest.CaptureFixture
    ) -> None:
        repo_url = f"{BASE_URL}/repos/acme/widgets"
        httpx_mock.add_response(url=f"{repo_url}/tags?per_page=100", json=[{"name": "1.2.3"}])
        httpx_mock.add_response(url=f"{repo_url}/releases", method="POST", status_code=201, json={"id": 1})
        httpx_mock.add_exception(httpx.ConnectError("connection reset"), url=f"{repo_url}/issues/7/comments")
        outcome = run(_pr_event(merged_pr, "closed"), GitHubProvider(settings), settings)
        assert outcome.status == "released"
        assert outcome.resolved is not None
        assert outcome.resolved.tag_name == "1.3.0"
        assert "comment failed" in capsys.readouterr().out

    def test_dry_run_creates_nothing(self, open_pr: PullRequest, settings: PrtagSettings) -> None:
        provider = _mock_provider(open_pr, tags=["1.2.3"])
        outcome = run(_comment(), provider, settings, dry_run=True)
        assert outcome.status == "dry-run"
        assert outcome.resolved is not None
        assert outcome.resolved.tag_name == "1.3.0-rc-feature-login.0"
        provider.create_release.assert_not_called()
        provider.create_comment.assert_not_called()

    def test_writes_step_outputs(self, merged_pr: PullRequest, settings: PrtagSettings, tmp_path: Path) -> None:
        output = tmp_path / "github_output"
        output.write_text("existing=1\n")
        provider = _mock_provider(tags=["1.2.3"])
        run(_pr_event(merged_pr, "closed"), provider, settings.model_copy(update={"output_path": output}))
        assert output.read_text() == "existing=1\nnew_tag=1.3.0\npre_release=false\n"


def test_write_outputs_creates_file(tmp_path: Path) -> None:
    path = tmp_path / "out"
    write_outputs(path, {"new_tag": "1.0.0"})
    assert path.read_text() == "new_tag=1.0.0\n"
