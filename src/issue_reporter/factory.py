"""
Wiring of configuration into a ready-to-use ticket service.
"""

from dataclasses import dataclass
from typing import Optional

from .clients.jira_client import JiraTicketClient
from .clients.s3_uploader import S3Uploader
from .config.reporter_config import ReporterConfig
from .core.assignee import AssigneeSelector
from .core.report_intake import ReportIntake
from .core.ticket_service import TicketService
from .utils.logger import get_logger
from .utils.ticket_store import TicketStore


@dataclass
class Reporter:
    service: TicketService
    intake: ReportIntake
    store: Optional[TicketStore]


def build_store(config: ReporterConfig) -> Optional[TicketStore]:
    """Open the ticket store, or None if it is disabled or unusable."""
    logger = get_logger()
    if not config.ticket_store_file:
        logger.warning("TICKET_STORE_FILE not set, tickets will not be persisted")
        return None
    try:
        return TicketStore(config.ticket_store_file)
    except OSError as e:
        logger.warning(f"Ticket store unavailable at {config.ticket_store_file}: {e}")
        return None


def build_reporter(config: Optional[ReporterConfig] = None) -> Reporter:
    """
    Build the ticket service and its collaborators from configuration.

    Args:
        config: Configuration (loaded from the environment if omitted)

    Returns:
        Reporter

    Raises:
        ValueError: if required configuration is missing
    """
    config = config or ReporterConfig()
    config.validate()
    logger = get_logger(config.log_file, config.log_level)

    uploader = None
    if config.s3_enabled:
        uploader = S3Uploader.from_config(config)
    else:
        logger.warning("S3 not configured, screenshots will be dropped")

    store = build_store(config)
    service = TicketService(
        JiraTicketClient(config),
        project_key=config.project_key,
        issue_type=config.issue_type,
        fallback_issue_type_id=config.fallback_issue_type_id,
        selector=AssigneeSelector(config.support_team),
        store=store,
    )
    return Reporter(service=service, intake=ReportIntake(uploader=uploader), store=store)
