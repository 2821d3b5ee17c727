"""GitHub issues webhook models for the Slack bridge.

This module defines the data models that flow through the webhook handler:
the transport-neutral inbound request, the leniently parsed issues payload,
the extracted notice with defaults applied, and the outbound Slack message.

GitHub Webhook Payload Structure (issues event, fields used here):
{
  "action": "opened",
  "issue": {
    "html_url": "https://github.com/owner/repo/issues/1",
    "title": "Issue title",
    "number": 1
  },
  "repository": {"full_name": "owner/repo"},
  "sender": {"login": "username"}
}

Every field is optional. Nested accessors yield None instead of raising when
an intermediate object is missing, has the wrong JSON type, or a leaf value
cannot be coerced. Defaults are substituted afterwards by
IssuePayload.to_notice().
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

DEFAULT_ACTION = "unknown"
DEFAULT_TITLE = "(no title)"
DEFAULT_NUMBER = 0
DEFAULT_REPOSITORY = "(unknown repo)"
DEFAULT_SENDER = "(unknown sender)"


@dataclass(frozen=True)
class InboundEvent:
    """A single inbound HTTP request, independent of the hosting runtime.

    Attributes:
        method: HTTP method as received (any case).
        headers: Request headers. Lookups through header() ignore case.
        body: Raw request body. Lambda supplies text, the HTTP server bytes.
        body_undecodable: The transport flagged the body as encoded but it
            could not be decoded; body then holds the raw text.
    """

    method: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[Union[str, bytes]] = None
    body_undecodable: bool = False

    def header(self, name: str) -> Optional[str]:
        """Return the value of a header, matching the name case-insensitively."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    @property
    def is_get(self) -> bool:
        return (self.method or "").upper() == "GET"

    @property
    def has_body(self) -> bool:
        return self.body is not None and bool(self.body.strip())


class _LenientModel(BaseModel):
    """Base model whose fields fall back to None when malformed."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("*", mode="wrap")
    @classmethod
    def _absent_when_malformed(cls, value: Any, handler: Any) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None


class IssueFields(_LenientModel):
    html_url: Optional[str] = None
    title: Optional[str] = None
    # Lax coercion: "7" and true are accepted as 7 and 1
    number: Optional[int] = None


class RepositoryFields(_LenientModel):
    full_name: Optional[str] = None


class SenderFields(_LenientModel):
    login: Optional[str] = None


class IssueNotice(BaseModel):
    """Issue event fields after default substitution.

    Attributes:
        action: The issue action (opened, closed, edited, ...).
        issue_url: Browser URL of the issue. May be empty.
        title: The issue title.
        number: The issue number within the repository.
        repository: Repository full name in "owner/repo" form.
        sender: Login of the user that triggered the event.
    """

    model_config = ConfigDict(frozen=True)

    action: str = DEFAULT_ACTION
    issue_url: str = ""
    title: str = DEFAULT_TITLE
    number: int = DEFAULT_NUMBER
    repository: str = DEFAULT_REPOSITORY
    sender: str = DEFAULT_SENDER

    @property
    def has_issue_url(self) -> bool:
        return bool(self.issue_url.strip())

    def render_text(self) -> str:
        """Render the Slack mrkdwn summary for this issue event.

        Returns:
            str: "*[repo]* Issue *#N* action by `sender`" followed by the
            bold title and the issue URL on separate lines.
        """
        return (
            f"*[{self.repository}]* Issue *#{self.number}* {self.action} "
            f"by `{self.sender}`\n*{self.title}*\n{self.issue_url}"
        )


class IssuePayload(_LenientModel):
    """The subset of a GitHub issues event payload used by the bridge."""

    action: Optional[str] = None
    issue: Optional[IssueFields] = None
    repository: Optional[RepositoryFields] = None
    sender: Optional[SenderFields] = None

    @classmethod
    def from_json_value(cls, data: Any) -> "IssuePayload":
        """Build a payload from any decoded JSON value.

        Anything other than a JSON object (array, scalar, null) is treated
        as a payload with every field absent.
        """
        if not isinstance(data, dict):
            return cls()
        return cls.model_validate(data)

    def to_notice(self) -> IssueNotice:
        issue = self.issue or IssueFields()
        repository = self.repository or RepositoryFields()
        sender = self.sender or SenderFields()

        return IssueNotice(
            action=_or_default(self.action, DEFAULT_ACTION),
            issue_url=_or_default(issue.html_url, ""),
            title=_or_default(issue.title, DEFAULT_TITLE),
            number=_or_default(issue.number, DEFAULT_NUMBER),
            repository=_or_default(repository.full_name, DEFAULT_REPOSITORY),
            sender=_or_default(sender.login, DEFAULT_SENDER),
        )


def _or_default(value: Optional[Any], default: Any) -> Any:
    return default if value is None else value


def headers_from_mapping(headers: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Copy a header mapping, dropping null values and stringifying the rest."""
    if not headers:
        return {}
    return {str(k): str(v) for k, v in headers.items() if v is not None}
