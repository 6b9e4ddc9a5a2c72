"""Data types shared across the Graph client and the tool layer."""

from dataclasses import dataclass
from typing import Any

DEFAULT_TOP = 10
DEFAULT_ORDER_BY = "receivedDateTime DESC"


@dataclass(frozen=True)
class ListQuery:
    """Paging, filtering and ordering for ``GET /me/messages``.

    ``filter`` and ``search`` are forwarded verbatim; their grammar is the
    remote API's business. ``select`` is only used internally.
    """

    top: int = DEFAULT_TOP
    skip: int | None = None
    filter: str | None = None
    order_by: str = DEFAULT_ORDER_BY
    search: str | None = None
    select: str | None = None

    def to_params(self) -> dict[str, str]:
        """Encode into Graph's ``$``-prefixed OData query parameters.

        Falsy values are left out. The search term is wrapped in double
        quotes as Graph's ``$search`` expects.
        """
        params: dict[str, str] = {}
        if self.top:
            params["$top"] = str(self.top)
        if self.skip:
            params["$skip"] = str(self.skip)
        if self.filter:
            params["$filter"] = self.filter
        if self.order_by:
            params["$orderby"] = self.order_by
        if self.select:
            params["$select"] = self.select
        if self.search:
            params["$search"] = f'"{self.search}"'
        return params


@dataclass(frozen=True)
class EmailSummary:
    """A message as listed by Graph — no body, just the preview."""

    id: str
    subject: str
    sender_name: str
    sender_address: str
    received: str
    preview: str
    is_read: bool
    has_attachments: bool
    importance: str

    @property
    def sender(self) -> str:
        """Sender rendered as ``Name <address>``."""
        return f"{self.sender_name} <{self.sender_address}>"

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "subject": self.subject,
            "from": self.sender,
            "received": self.received,
            "preview": self.preview,
            "isRead": self.is_read,
            "hasAttachments": self.has_attachments,
            "importance": self.importance,
        }

    @classmethod
    def from_graph(cls, data: dict[str, Any]) -> "EmailSummary":
        """Map a Graph ``message`` resource to an EmailSummary."""
        return cls(**_summary_fields(data))


@dataclass(frozen=True)
class EmailDetail(EmailSummary):
    """A single message with its body.

    When Graph leaves ``body`` out, the preview stands in and the content
    type is reported as ``"preview"``.
    """

    body: str = ""
    body_type: str = "preview"

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["body"] = self.body
        payload["bodyType"] = self.body_type
        return payload

    @classmethod
    def from_graph(cls, data: dict[str, Any]) -> "EmailDetail":
        fields = _summary_fields(data)
        body = data.get("body") or {}
        return cls(
            **fields,
            body=body.get("content") or fields["preview"],
            body_type=body.get("contentType") or "preview",
        )


def _summary_fields(data: dict[str, Any]) -> dict[str, Any]:
    # Drafts can come back without a sender
    address = (data.get("from") or {}).get("emailAddress") or {}
    return {
        "id": str(data.get("id", "")),
        "subject": str(data.get("subject") or ""),
        "sender_name": str(address.get("name") or ""),
        "sender_address": str(address.get("address") or ""),
        "received": str(data.get("receivedDateTime") or ""),
        "preview": str(data.get("bodyPreview") or ""),
        "is_read": bool(data.get("isRead", False)),
        "has_attachments": bool(data.get("hasAttachments", False)),
        "importance": str(data.get("importance") or ""),
    }
