#!/usr/bin/env python3
"""
Create a Jira ticket from a diagnostic report.

Reads either a JSON ticket request (url, payload, response, requestHeaders)
or, with --form, the issue form fields as a JSON object.
"""

import argparse
import json
import mimetypes
import sys
from pathlib import Path

from issue_reporter.config.reporter_config import ReporterConfig
from issue_reporter.core.description_builder import DescriptionBuilder
from issue_reporter.core.exceptions import TicketSubmissionError
from issue_reporter.core.report_intake import ReportIntake, Screenshot, report_from_request
from issue_reporter.factory import build_reporter
from issue_reporter.utils.logger import get_logger


def load_screenshot(path: str) -> Screenshot:
    file_path = Path(path)
    content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    return Screenshot(data=file_path.read_bytes(), content_type=content_type, filename=file_path.name)


def main():
    parser = argparse.ArgumentParser(description="Create a Jira ticket from a diagnostic report")
    parser.add_argument("report_file", help="Path to the report JSON file")
    parser.add_argument("--form", action="store_true", help="Report file holds issue form fields")
    parser.add_argument("--screenshot", help="Screenshot to upload (form reports only)")
    parser.add_argument("--dry-run", action="store_true",
                        help="Print the description and overflow comment without creating a ticket")
    parser.add_argument("--log-file", help="Path to log file")
    args = parser.parse_args()

    config = ReporterConfig()
    logger = get_logger(args.log_file or config.log_file, config.log_level)

    with open(args.report_file, 'r', encoding='utf-8') as f:
        data = json.load(f)

    screenshot = load_screenshot(args.screenshot) if args.screenshot else None

    try:
        if args.dry_run:
            report = ReportIntake().from_issue_form(data) if args.form else report_from_request(data)
            built = DescriptionBuilder().build(report)
            print(built.description)
            print(f"\n=== DESCRIPTION: {len(built.description)} chars, "
                  f"{len(built.overflow)} overflow block(s) ===\n")
            if not built.overflow.is_empty:
                print(built.overflow.compose())
            return 0

        reporter = build_reporter(config)
        if args.form:
            report = reporter.intake.from_issue_form(data, screenshot)
        else:
            report = report_from_request(data)
        record = reporter.service.create_ticket(report)
    except ValueError as e:
        logger.error(f"Invalid report: {e}")
        return 2
    except TicketSubmissionError as e:
        logger.error(f"Failed to create ticket: {e}")
        return 1

    print(json.dumps(record.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
