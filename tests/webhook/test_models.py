"""Unit tests for issues payload extraction and notice rendering."""

import pytest

from esep_webhook.webhook import InboundEvent, IssueNotice, IssuePayload


class TestIssuePayloadExtraction:
    """Field extraction with default substitution."""

    def test_extracts_all_fields(self, issue_payload):
        notice = IssuePayload.from_json_value(issue_payload).to_notice()

        assert notice == IssueNotice(
            action="opened",
            issue_url="https://x/1",
            title="Bug",
            number=1,
            repository="o/r",
            sender="alice",
        )

    def test_empty_object_uses_defaults(self):
        notice = IssuePayload.from_json_value({}).to_notice()

        assert notice.action == "unknown"
        assert notice.issue_url == ""
        assert notice.title == "(no title)"
        assert notice.number == 0
        assert notice.repository == "(unknown repo)"
        assert notice.sender == "(unknown sender)"

    @pytest.mark.parametrize("value", [None, [], [1, 2], "text", 42, 1.5, True])
    def test_non_object_payload_uses_defaults(self, value):
        notice = IssuePayload.from_json_value(value).to_notice()

        assert notice == IssueNotice()

    def test_null_leaves_use_defaults(self):
        payload = {
            "action": None,
            "issue": {"html_url": None, "title": None, "number": None},
            "repository": {"full_name": None},
            "sender": {"login": None},
        }

        assert IssuePayload.from_json_value(payload).to_notice() == IssueNotice()

    def test_missing_intermediate_objects(self):
        payload = {"action": "closed", "issue": {"html_url": "https://x/9"}}

        notice = IssuePayload.from_json_value(payload).to_notice()

        assert notice.action == "closed"
        assert notice.issue_url == "https://x/9"
        assert notice.repository == "(unknown repo)"
        assert notice.sender == "(unknown sender)"

    def test_intermediate_objects_of_wrong_type(self):
        payload = {
            "action": "edited",
            "issue": "not-an-object",
            "repository": ["o/r"],
            "sender": 7,
        }

        notice = IssuePayload.from_json_value(payload).to_notice()

        assert notice.action == "edited"
        assert notice.issue_url == ""
        assert notice.repository == "(unknown repo)"
        assert notice.sender == "(unknown sender)"

    def test_malformed_leaf_values_use_defaults(self):
        payload = {
            "action": {"nested": True},
            "issue": {
                "html_url": "https://x/3",
                "title": ["Bug"],
                "number": "three",
            },
            "sender": {"login": 123},
        }

        notice = IssuePayload.from_json_value(payload).to_notice()

        assert notice.action == "unknown"
        assert notice.issue_url == "https://x/3"
        assert notice.title == "(no title)"
        assert notice.number == 0
        assert notice.sender == "(unknown sender)"

    @pytest.mark.parametrize("number, expected", [(True, 1), ("7", 7), (7.0, 7)])
    def test_number_uses_lax_coercion(self, number, expected):
        payload = {"issue": {"html_url": "https://x/1", "number": number}}

        notice = IssuePayload.from_json_value(payload).to_notice()

        assert notice.number == expected

    def test_fractional_number_uses_default(self):
        payload = {"issue": {"html_url": "https://x/1", "number": 1.5}}

        notice = IssuePayload.from_json_value(payload).to_notice()

        assert notice.number == 0

    def test_empty_strings_are_kept(self):
        payload = {"action": "", "issue": {"html_url": "https://x/4", "title": ""}}

        notice = IssuePayload.from_json_value(payload).to_notice()

        assert notice.action == ""
        assert notice.title == ""

    def test_whitespace_url_is_not_a_url(self):
        payload = {"issue": {"html_url": "   "}}

        notice = IssuePayload.from_json_value(payload).to_notice()

        assert not notice.has_issue_url


class TestIssueNoticeRendering:
    """Slack mrkdwn message text."""

    def test_render_text(self):
        notice = IssueNotice(
            action="opened",
            issue_url="https://x/1",
            title="Bug",
            number=1,
            repository="o/r",
            sender="alice",
        )

        assert notice.render_text() == (
            "*[o/r]* Issue *#1* opened by `alice`\n*Bug*\nhttps://x/1"
        )

    def test_render_text_with_defaults(self):
        notice = IssueNotice(issue_url="https://x/2")

        assert notice.render_text() == (
            "*[(unknown repo)]* Issue *#0* unknown by `(unknown sender)`\n"
            "*(no title)*\nhttps://x/2"
        )


class TestInboundEvent:
    """Case-insensitive header access and body checks."""

    @pytest.mark.parametrize(
        "name", ["X-GitHub-Event", "x-github-event", "X-GITHUB-EVENT"]
    )
    def test_header_lookup_ignores_case(self, name):
        event = InboundEvent(method="POST", headers={name: "issues"})

        assert event.header("X-GitHub-Event") == "issues"

    def test_missing_header(self):
        assert InboundEvent(method="POST").header("X-GitHub-Event") is None

    @pytest.mark.parametrize("method", ["GET", "get", "Get"])
    def test_get_ignores_case(self, method):
        assert InboundEvent(method=method).is_get

    @pytest.mark.parametrize("body", [None, "", "   ", "\n\t", b"", b"  "])
    def test_blank_bodies(self, body):
        assert not InboundEvent(method="POST", body=body).has_body

    @pytest.mark.parametrize("body", ["{}", b"{}", " x "])
    def test_present_bodies(self, body):
        assert InboundEvent(method="POST", body=body).has_body
