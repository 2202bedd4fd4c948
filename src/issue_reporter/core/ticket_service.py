"""
Ticket creation: the sequence from a diagnostic report to a Jira ticket.

Validate -> build description (normalize, budget, sections, final guard)
-> select assignee -> submit -> overflow comment -> persist.

Only submission can fail the request. Everything after it is best-effort
and never invalidates the ticket that was already created.
"""

import threading
from datetime import datetime, timezone
from typing import Optional

from .assignee import AssigneeSelector
from .budget import MAX_DESCRIPTION_LENGTH
from .description_builder import BuiltDescription, DescriptionBuilder
from .exceptions import ReportCancelledError, ReportValidationError, TicketSubmissionError
from .report import DiagnosticReport, FlattenedProjection, TicketRecord
from ..config.format_functions import to_compact_json, truncate_text, preview
from ..utils.logger import get_logger

# Jira summary field limit
MAX_SUMMARY_LENGTH = 255
TICKET_STATUS_CREATED = "created"


class TicketService:
    """
    Creates Jira tickets from diagnostic reports.
    """

    def __init__(self, ticket_client, project_key: str, issue_type: str = "Bug",
                 fallback_issue_type_id: str = "10001",
                 selector: Optional[AssigneeSelector] = None,
                 store=None,
                 builder: Optional[DescriptionBuilder] = None,
                 ceiling: int = MAX_DESCRIPTION_LENGTH):
        """
        Initialize the ticket service.

        Args:
            ticket_client: Ticket system client (create_issue, add_comment, lookup_issue_type_id)
            project_key: Jira project key
            issue_type: Issue type name to look up
            fallback_issue_type_id: Issue type id used when lookup fails
            selector: Assignee selector (defaults to an empty roster)
            store: Ticket store with save(projection) (optional)
            builder: Description builder
            ceiling: Maximum description and comment length
        """
        self.ticket_client = ticket_client
        self.project_key = project_key
        self.issue_type = issue_type
        self.fallback_issue_type_id = fallback_issue_type_id
        self.selector = selector or AssigneeSelector([])
        self.store = store
        self.ceiling = ceiling
        self.builder = builder or DescriptionBuilder(ceiling)
        self.logger = get_logger()

    def create_ticket(self, report: DiagnosticReport,
                      cancel_event: Optional[threading.Event] = None) -> TicketRecord:
        """
        Create a ticket for a report.

        Args:
            report: Diagnostic report
            cancel_event: Set by the caller to abandon the request

        Returns:
            TicketRecord

        Raises:
            ReportValidationError: if the report is malformed
            ReportCancelledError: if cancelled before submission
            TicketSubmissionError: if the ticket system did not create the issue
        """
        self._validate(report)
        self._check_cancelled(cancel_event, "build description")

        created_at = datetime.now(timezone.utc)
        built = self.builder.build(report, now=created_at)
        self.logger.ticket_start(preview(built.fields.issue))
        self._check_cancelled(cancel_event, "select assignee")

        assignee = self.selector.select()
        issue_type_id = self.resolve_issue_type_id()
        self._check_cancelled(cancel_event, "submit ticket")

        summary = truncate_text(f"Issue Report: {built.fields.issue}", MAX_SUMMARY_LENGTH)
        self.logger.debug(
            f"Submitting ticket: project={self.project_key} issue_type={issue_type_id} "
            f"assignee={assignee or 'unassigned'} description_length={len(built.description)}"
        )
        try:
            ticket_id, link = self.ticket_client.create_issue(
                self.project_key, issue_type_id, summary, built.description, assignee
            )
        except TicketSubmissionError as e:
            self.logger.ticket_failed(str(e))
            raise
        except Exception as e:
            self.logger.ticket_failed(str(e))
            raise TicketSubmissionError(f"failed to create Jira ticket: {e}") from e

        record = TicketRecord(ticket_id=ticket_id, status=TICKET_STATUS_CREATED, assigned_to=assignee, link=link)
        self.logger.ticket_created(ticket_id, assignee)

        if cancel_event is not None and cancel_event.is_set():
            self.logger.warning(f"Request cancelled after creating {ticket_id}; skipping comment and persistence")
            return record

        if built.was_truncated:
            self.attach_overflow(ticket_id, built)

        if self.store is not None:
            self.persist(record, report, built, created_at)
        else:
            self.logger.debug("Ticket store not configured, skipping persistence")

        return record

    def resolve_issue_type_id(self) -> str:
        """Look up the issue type id, falling back to the configured default."""
        try:
            issue_type_id = self.ticket_client.lookup_issue_type_id(self.project_key, self.issue_type)
        except Exception as e:
            self.logger.warning(f"Issue type lookup failed, using default id {self.fallback_issue_type_id}: {e}")
            return self.fallback_issue_type_id

        if not issue_type_id:
            self.logger.warning(
                f"Issue type '{self.issue_type}' not found in {self.project_key}, "
                f"using default id {self.fallback_issue_type_id}"
            )
            return self.fallback_issue_type_id
        return issue_type_id

    def attach_overflow(self, ticket_id: str, built: BuiltDescription) -> bool:
        """
        Post the overflow document as a comment.

        Returns:
            True if the comment was added
        """
        body = built.overflow.compose(self.ceiling)
        try:
            self.ticket_client.add_comment(ticket_id, body)
        except Exception as e:
            # Ticket stands; overflow content is lost from Jira
            self.logger.overflow_comment(ticket_id, len(body), False, str(e))
            return False

        self.logger.overflow_comment(ticket_id, len(body), True)
        return True

    def persist(self, record: TicketRecord, report: DiagnosticReport,
                built: BuiltDescription, created_at: datetime) -> Optional[str]:
        """Save the flattened projection; failures are logged only."""
        projection = build_projection(record, report, built, created_at)
        try:
            record_id = self.store.save(projection)
        except Exception as e:
            self.logger.error(f"Failed to save ticket {record.ticket_id} to store: {e}")
            return None

        self.logger.persisted(record.ticket_id, record_id)
        return record_id

    @staticmethod
    def _validate(report: DiagnosticReport):
        if not isinstance(report, DiagnosticReport):
            raise ReportValidationError(f"Expected a DiagnosticReport, got {type(report).__name__}")
        if not isinstance(report.payload, dict):
            raise ReportValidationError("Report payload must be an object")
        if not isinstance(report.response, dict):
            raise ReportValidationError("Report response must be an object")
        if not isinstance(report.request_headers, dict):
            raise ReportValidationError("Report request headers must be an object")

    def _check_cancelled(self, cancel_event: Optional[threading.Event], next_step: str):
        if cancel_event is not None and cancel_event.is_set():
            self.logger.warning(f"Request cancelled before step: {next_step}")
            raise ReportCancelledError(f"cancelled before {next_step}")


def build_projection(record: TicketRecord, report: DiagnosticReport,
                     built: BuiltDescription, created_at: datetime) -> FlattenedProjection:
    """Flatten a created ticket and its report for the ticket store."""
    fields = built.fields

    network_calls_json = ""
    if 'failedNetworkCalls' in report.payload:
        network_calls = report.payload['failedNetworkCalls']
        if isinstance(network_calls, str):
            network_calls_json = network_calls
        else:
            network_calls_json = to_compact_json(network_calls)

    return FlattenedProjection(
        ticket_id=record.ticket_id,
        status=record.status,
        assigned_to=record.assigned_to,
        link=record.link,
        created_at=created_at,
        issue=fields.issue,
        description=fields.description,
        user_email=fields.user_email,
        lead_id=fields.lead_id,
        product=fields.product,
        page_url=fields.page_url,
        image_url=fields.image_reference,
        failed_network_calls_json=network_calls_json,
        payload_json=to_compact_json(report.payload),
        response_json=to_compact_json(report.response),
        request_headers_json=to_compact_json(report.request_headers),
    )
