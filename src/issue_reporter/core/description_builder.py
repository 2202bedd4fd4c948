"""
Assembly of the Jira ticket description from a diagnostic report.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import List, Optional

from .budget import Budget, allocate_budget, MAX_DESCRIPTION_LENGTH, NETWORK_CALLS, HEADERS, RESPONSE, PAYLOAD
from .field_normalizer import FieldNormalizer, NormalizedFields
from .overflow import OverflowDocument, apply_final_guard
from .report import DiagnosticReport
from .sections import RenderedSection, render_section
from ..utils.logger import get_logger

TECHNICAL_DETAILS_HEADING = "h3. Technical Details\n\n"
SCREENSHOT_NOTE_PANEL = (
    "{panel:title=Note|borderStyle=dashed|borderColor=#ccc|titleBGColor=#f0f0f0|bgColor=#fafafa}\n"
    "This screenshot URL will expire in 7 days.\n{panel}\n\n"
)


@dataclass
class BuiltDescription:
    description: str
    overflow: OverflowDocument
    budget: Budget
    fields: NormalizedFields
    sections: List[RenderedSection] = field(default_factory=list)
    guard_fired: bool = False

    @property
    def was_truncated(self) -> bool:
        return not self.overflow.is_empty

    def section(self, name: str) -> Optional[RenderedSection]:
        for section in self.sections:
            if section.name == name:
                return section
        return None


def format_timestamp(now: datetime) -> str:
    """RFC 1123 timestamp line."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return f"Ticket created on: {format_datetime(now.astimezone(timezone.utc), usegmt=True)}\n"


class DescriptionBuilder:
    """
    Builds size-bounded ticket descriptions.

    Summary, description, user information, screenshot, the technical
    details heading and the timestamp are essential and never cut. The
    four variable sections share what is left of the ceiling.
    """

    def __init__(self, ceiling: int = MAX_DESCRIPTION_LENGTH, normalizer: Optional[FieldNormalizer] = None):
        self.ceiling = ceiling
        self.normalizer = normalizer or FieldNormalizer()
        self.logger = get_logger()

    def build(self, report: DiagnosticReport, now: Optional[datetime] = None) -> BuiltDescription:
        """
        Build the description and its overflow document.

        Args:
            report: Diagnostic report
            now: Creation time (defaults to the current UTC time)

        Returns:
            BuiltDescription
        """
        fields = self.normalizer.normalize(report.payload, report.url, report.image_reference)
        overflow = OverflowDocument()

        head = (
            self._summary_block(fields)
            + self._description_block(fields)
            + self._metadata_block(fields)
            + self._screenshot_block(fields)
        )
        timestamp = format_timestamp(now or datetime.now(timezone.utc))

        essential_length = len(head) + len(TECHNICAL_DETAILS_HEADING) + len(timestamp)
        budget = allocate_budget(essential_length, self.ceiling)

        payload = report.payload if isinstance(report.payload, dict) else {}
        sections = [
            render_section(NETWORK_CALLS, payload.get('failedNetworkCalls'), budget.network_calls, overflow),
            render_section(HEADERS, report.request_headers, budget.headers, overflow),
            render_section(RESPONSE, report.response, budget.response, overflow),
            render_section(PAYLOAD, report.payload, budget.payload, overflow),
        ]
        for section in sections:
            if section.truncated:
                self.logger.section_truncated(section.title, len(section.full_content), budget.allocation(section.name))

        description = (
            head
            + sections[0].text
            + TECHNICAL_DETAILS_HEADING
            + "".join(section.text for section in sections[1:])
            + timestamp
        )

        description, guard_fired = apply_final_guard(description, overflow, self.ceiling)
        if guard_fired:
            self.logger.warning(f"Description still over {self.ceiling} chars after section budgeting; hard-truncated")

        return BuiltDescription(
            description=description,
            overflow=overflow,
            budget=budget,
            fields=fields,
            sections=sections,
            guard_fired=guard_fired,
        )

    @staticmethod
    def _summary_block(fields: NormalizedFields) -> str:
        return f"h2. Issue Summary\n{fields.issue}\n\n"

    @staticmethod
    def _description_block(fields: NormalizedFields) -> str:
        if not fields.description:
            return ""
        return f"h3. Description\n{fields.description}\n\n"

    @staticmethod
    def _metadata_block(fields: NormalizedFields) -> str:
        lines = []
        if fields.user_email:
            lines.append(f"* *User Email:* {fields.user_email}\n")
        if fields.lead_id:
            lines.append(f"* *Lead ID:* {fields.lead_id}\n")
        if fields.product:
            lines.append(f"* *Product:* {fields.product}\n")
        if fields.page_url:
            lines.append(f"* *Page URL:* {fields.page_url}\n")

        if not lines:
            return ""
        return "h3. User Information\n" + "".join(lines) + "\n\n"

    @staticmethod
    def _screenshot_block(fields: NormalizedFields) -> str:
        if not fields.image_reference:
            return ""
        if fields.image_reference.startswith("http"):
            return f"h3. Screenshot\n!{fields.image_reference}|width=800!\n\n" + SCREENSHOT_NOTE_PANEL
        return f"h3. Screenshot\n{fields.image_reference}\n\n"
