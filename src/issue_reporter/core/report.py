"""
Data model for diagnostic reports and the tickets created from them.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..config.format_functions import is_valid_image_reference


@dataclass
class DiagnosticReport:
    """One inbound bug report. Payload and response are arbitrary JSON objects."""
    url: str
    payload: Dict[str, Any] = field(default_factory=dict)
    response: Dict[str, Any] = field(default_factory=dict)
    request_headers: Dict[str, str] = field(default_factory=dict)
    image_reference: Optional[str] = None

    @property
    def has_image(self) -> bool:
        return is_valid_image_reference(self.image_reference)


@dataclass
class NetworkCall:
    """A failed network request captured by the reporting client."""
    method: str = ""
    url: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    response_status: int = 0
    response_headers: str = ""
    response_body: str = ""
    page_url: str = ""
    timestamp: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NetworkCall":
        """
        Build a network call from its JSON object form.

        Raises:
            ValueError: if the object does not have the network call shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"network call must be an object, got {type(data).__name__}")

        request_data = data.get('requestData') or {}
        if not isinstance(request_data, dict):
            raise ValueError("requestData must be an object")

        headers = request_data.get('headers') or {}
        if not isinstance(headers, dict):
            raise ValueError("requestData.headers must be an object")

        status = data.get('responseStatus', 0)
        if isinstance(status, bool) or not isinstance(status, (int, float)):
            raise ValueError("responseStatus must be a number")

        return cls(
            method=_as_str(request_data.get('method')),
            url=_as_str(request_data.get('url')),
            headers={str(k): _as_str(v) for k, v in headers.items()},
            body=request_data.get('body'),
            response_status=int(status),
            response_headers=_as_str(data.get('responseHeaders')),
            response_body=_as_str(data.get('responseBody')),
            page_url=_as_str(data.get('pageUrl')),
            timestamp=_as_str(data.get('timestamp')),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire form, matching what the reporting client sends."""
        return {
            'requestData': {
                'method': self.method,
                'url': self.url,
                'headers': dict(self.headers),
                'body': self.body,
            },
            'responseStatus': self.response_status,
            'responseHeaders': self.response_headers,
            'responseBody': self.response_body,
            'pageUrl': self.page_url,
            'timestamp': self.timestamp,
        }


@dataclass(frozen=True)
class TicketRecord:
    ticket_id: str
    status: str
    assigned_to: str
    link: str

    def to_dict(self) -> Dict[str, str]:
        return {
            'ticketId': self.ticket_id,
            'status': self.status,
            'assignedTo': self.assigned_to,
            'jiraLink': self.link,
        }


@dataclass
class FlattenedProjection:
    """Denormalized record of a created ticket, written to the ticket store."""
    ticket_id: str
    status: str
    assigned_to: str
    link: str
    created_at: datetime
    issue: str = ""
    description: str = ""
    user_email: str = ""
    lead_id: str = ""
    product: str = ""
    page_url: str = ""
    image_url: str = ""
    failed_network_calls_json: str = ""
    payload_json: str = ""
    response_json: str = ""
    request_headers_json: str = ""

    def to_row(self) -> Dict[str, str]:
        row = asdict(self)
        row['created_at'] = self.created_at.isoformat()
        return row

    @classmethod
    def from_row(cls, row: Dict[str, str]) -> "FlattenedProjection":
        """
        Rebuild a projection from a store row.

        Raises:
            ValueError: if the row has no valid created_at timestamp
        """
        values = {name: row.get(name) or "" for name in PROJECTION_FIELDS}
        if not values['created_at']:
            raise ValueError(f"row for ticket '{values['ticket_id']}' has no created_at timestamp")
        values['created_at'] = datetime.fromisoformat(values['created_at'])
        return cls(**values)


PROJECTION_FIELDS: List[str] = [
    'ticket_id', 'status', 'assigned_to', 'link', 'created_at',
    'issue', 'description', 'user_email', 'lead_id', 'product', 'page_url', 'image_url',
    'failed_network_calls_json', 'payload_json', 'response_json', 'request_headers_json',
]


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)
