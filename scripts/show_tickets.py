#!/usr/bin/env python3
"""
Inspect tickets saved in the ticket store.
"""

import argparse
import json
import sys

from issue_reporter.config.reporter_config import ReporterConfig
from issue_reporter.core.exceptions import TicketNotFoundError
from issue_reporter.factory import build_store
from issue_reporter.utils.logger import get_logger


def main():
    parser = argparse.ArgumentParser(description="Show tickets saved in the ticket store")
    parser.add_argument("ticket_id", nargs="?", help="Ticket id to show (all tickets if omitted)")
    args = parser.parse_args()

    config = ReporterConfig()
    logger = get_logger(config.log_file, config.log_level)

    store = build_store(config)
    if store is None:
        logger.error("Ticket store not available: TICKET_STORE_FILE is not set")
        return 1

    if args.ticket_id:
        try:
            projection = store.find_by_ticket_id(args.ticket_id)
        except TicketNotFoundError:
            logger.error(f"Ticket with ID {args.ticket_id} not found")
            return 1
        print(json.dumps(projection.to_row(), indent=2))
        return 0

    tickets = store.find_all()
    for projection in tickets:
        print(f"{projection.ticket_id}\t{projection.created_at.isoformat()}\t"
              f"{projection.assigned_to or '-'}\t{projection.issue}")
    logger.info(f"{len(tickets)} ticket(s) in store")
    return 0


if __name__ == "__main__":
    sys.exit(main())
