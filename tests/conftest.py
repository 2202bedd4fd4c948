import json

import pytest

from issue_reporter.core.exceptions import TicketSubmissionError
from issue_reporter.core.report import DiagnosticReport


class FakeTicketClient:
    """Records calls instead of talking to Jira."""

    def __init__(self, fail_create=False, fail_comment=False, fail_lookup=False, issue_type_id="10004"):
        self.fail_create = fail_create
        self.fail_comment = fail_comment
        self.fail_lookup = fail_lookup
        self.issue_type_id = issue_type_id
        self.created = []
        self.comments = []
        self.counter = 0

    def lookup_issue_type_id(self, project_key, issue_type_name):
        if self.fail_lookup:
            raise ConnectionError("createmeta unavailable")
        return self.issue_type_id

    def create_issue(self, project_key, issue_type_id, summary, description, assignee=""):
        if self.fail_create:
            raise TicketSubmissionError("failed to create Jira ticket: status=400", status_code=400)
        self.counter += 1
        key = f"{project_key}-{self.counter}"
        self.created.append({
            'project_key': project_key,
            'issue_type_id': issue_type_id,
            'summary': summary,
            'description': description,
            'assignee': assignee,
        })
        return key, f"https://example.atlassian.net/browse/{key}"

    def add_comment(self, issue_key, body):
        if self.fail_comment:
            raise ConnectionError("comment rejected")
        self.comments.append((issue_key, body))


class FakeStore:
    def __init__(self, fail=False):
        self.fail = fail
        self.saved = []

    def save(self, projection):
        if self.fail:
            raise OSError("disk full")
        self.saved.append(projection)
        return projection.ticket_id


class FakeUploader:
    def __init__(self, url="https://bucket.s3.amazonaws.com/screenshots/a.png?sig=1", error=None):
        self.url = url
        self.error = error
        self.uploads = []

    def upload(self, data, content_type, filename=None):
        self.uploads.append((data, content_type, filename))
        if self.error:
            raise self.error
        return self.url


def network_call(index=0, body_size=10):
    return {
        'requestData': {
            'method': 'POST',
            'url': f'https://api.example.com/v1/items/{index}',
            'headers': {'Content-Type': 'application/json'},
            'body': {'value': 'x' * body_size},
        },
        'responseStatus': 500,
        'responseHeaders': 'content-type: application/json',
        'responseBody': '{"error":"internal"}',
        'pageUrl': 'https://app.example.com/items',
        'timestamp': '2024-05-01T10:00:00Z',
    }


@pytest.fixture
def fake_client():
    return FakeTicketClient()


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def network_calls_json():
    return json.dumps([network_call(0), network_call(1)])


@pytest.fixture
def basic_report():
    return DiagnosticReport(
        url="https://app.example.com/checkout",
        payload={
            'issue': 'Checkout button does nothing',
            'description': 'Clicking pay shows a spinner forever',
            'userEmail': 'user@example.com',
            'leadId': 'L-42',
            'product': 'payments',
        },
        response={'status': 'reported'},
        request_headers={'Content-Type': 'application/json'},
    )
