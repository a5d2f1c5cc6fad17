"""Normalize GitHub webhook payloads into CommentEvent / PullRequestEvent."""

import json
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from prtag.errors import EventError
from prtag.models import CommentEvent, Event, PullRequest, PullRequestEvent

_EVENT_ADAPTER: TypeAdapter[CommentEvent | PullRequestEvent] = TypeAdapter(Event)


def pull_request_from_node(node: dict) -> PullRequest:
    """Build a PullRequest from a REST API or webhook pull_request object."""
    return PullRequest(
        number=node["number"],
        title=node.get("title") or "",
        body=node.get("body"),
        draft=bool(node.get("draft", False)),
        merged=bool(node.get("merged", False)),
        head_ref=node["head"]["ref"],
        base_ref=node["base"]["ref"],
    )


def parse_event(event_name: str, payload: dict[str, Any]) -> CommentEvent | PullRequestEvent | None:
    """Return the event for issue_comment / pull_request payloads, None for any other event.

    Raises EventError when a supported event's payload is missing required fields.
    """
    try:
        match event_name:
            case "issue_comment":
                raw: dict[str, Any] = {
                    "kind": "comment",
                    "action": payload["action"],
                    "issue_number": payload["issue"]["number"],
                    "comment_body": payload["comment"].get("body") or "",
                }
            case "pull_request":
                node = payload["pull_request"]
                number = payload.get("number") or node["number"]
                raw = {
                    "kind": "pull_request",
                    "action": payload["action"],
                    "number": number,
                    "pull_request": pull_request_from_node({"number": number, **node}),
                }
            case _:
                return None
        return _EVENT_ADAPTER.validate_python(raw)
    except (KeyError, TypeError, AttributeError, ValidationError) as exc:
        raise EventError(f"Malformed {event_name} payload: {exc}") from exc


def load_event(event_name: str, path: Path) -> CommentEvent | PullRequestEvent | None:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise EventError(f"Cannot read event payload {path}: {exc}") from exc
    return parse_event(event_name, payload)
