"""Tests for the Graph data types — parsing and query encoding."""

from conftest import graph_message

from outlook_mcp.graph.types import EmailDetail, EmailSummary, ListQuery


# ── ListQuery.to_params ────────────────────────────────────────────────────────


class TestListQueryParams:
    def test_defaults(self) -> None:
        assert ListQuery().to_params() == {
            "$top": "10",
            "$orderby": "receivedDateTime DESC",
        }

    def test_search_is_double_quoted(self) -> None:
        params = ListQuery(search="budget review").to_params()
        assert params["$search"] == '"budget review"'

    def test_filter_passes_through_verbatim(self) -> None:
        params = ListQuery(filter="isRead eq false").to_params()
        assert params["$filter"] == "isRead eq false"

    def test_falsy_skip_is_omitted(self) -> None:
        assert "$skip" not in ListQuery(skip=0).to_params()

    def test_skip_and_select(self) -> None:
        params = ListQuery(skip=20, select="id,subject").to_params()
        assert params["$skip"] == "20"
        assert params["$select"] == "id,subject"

    def test_parameter_order(self) -> None:
        params = ListQuery(
            skip=5, filter="f", search="s", select="id", order_by="subject"
        ).to_params()
        assert list(params) == ["$top", "$skip", "$filter", "$orderby", "$select", "$search"]


# ── EmailSummary ───────────────────────────────────────────────────────────────


class TestEmailSummary:
    def test_from_graph(self) -> None:
        email = EmailSummary.from_graph(graph_message())
        assert email.id == "M1"
        assert email.sender_name == "Alice"
        assert email.sender_address == "a@x.com"
        assert email.is_read is False
        assert email.has_attachments is True
        assert email.importance == "high"

    def test_payload_renders_sender(self) -> None:
        payload = EmailSummary.from_graph(graph_message()).to_payload()
        assert payload["from"] == "Alice <a@x.com>"
        assert set(payload) == {
            "id", "subject", "from", "received", "preview",
            "isRead", "hasAttachments", "importance",
        }

    def test_missing_sender_does_not_raise(self) -> None:
        data = graph_message()
        del data["from"]
        assert EmailSummary.from_graph(data).sender == " <>"


# ── EmailDetail ────────────────────────────────────────────────────────────────


class TestEmailDetail:
    def test_body_from_graph(self) -> None:
        data = graph_message(body={"contentType": "html", "content": "<p>Hi</p>"})
        payload = EmailDetail.from_graph(data).to_payload()
        assert payload["body"] == "<p>Hi</p>"
        assert payload["bodyType"] == "html"

    def test_absent_body_falls_back_to_preview(self) -> None:
        payload = EmailDetail.from_graph(graph_message()).to_payload()
        assert payload["body"] == "Please review the attached budget..."
        assert payload["bodyType"] == "preview"

    def test_empty_body_content_falls_back_to_preview(self) -> None:
        data = graph_message(body={"contentType": "text", "content": ""})
        detail = EmailDetail.from_graph(data)
        assert detail.body == detail.preview
        assert detail.body_type == "text"
