"""
CSV-backed store for flattened ticket records.
"""

import csv
import threading
from pathlib import Path
from typing import List, Optional

from ..core.exceptions import TicketNotFoundError
from ..core.report import FlattenedProjection, PROJECTION_FIELDS
from .logger import get_logger

# Payload snapshots easily exceed the default 128 KiB field limit
csv.field_size_limit(2**31 - 1)


class TicketStore:
    """
    Persists created tickets to a CSV file, one row per ticket id.
    """

    def __init__(self, store_file: str = "tracker/tickets.csv"):
        """
        Initialize the ticket store.

        Args:
            store_file: Path to the CSV store file
        """
        self.store_file = Path(store_file)
        self.store_file.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self.logger = get_logger()
        self._initialize_store()

    def _initialize_store(self):
        """Create the CSV file with headers if it doesn't exist."""
        with self._lock:
            if not self.store_file.exists():
                with open(self.store_file, 'w', newline='', encoding='utf-8') as f:
                    writer = csv.writer(f)
                    writer.writerow(PROJECTION_FIELDS)

    def _read_rows(self) -> List[dict]:
        try:
            with open(self.store_file, 'r', newline='', encoding='utf-8') as f:
                return list(csv.DictReader(f))
        except FileNotFoundError:
            return []

    def save(self, projection: FlattenedProjection) -> str:
        """
        Save a projection, replacing any earlier row for the same ticket.

        Args:
            projection: Flattened ticket record

        Returns:
            Record id (the ticket id)
        """
        row = projection.to_row()
        with self._lock:
            rows = self._read_rows()
            replaced = False
            for i, existing in enumerate(rows):
                if existing.get('ticket_id') == projection.ticket_id:
                    rows[i] = row
                    replaced = True
                    break

            if replaced:
                with open(self.store_file, 'w', newline='', encoding='utf-8') as f:
                    writer = csv.DictWriter(f, fieldnames=PROJECTION_FIELDS)
                    writer.writeheader()
                    writer.writerows(rows)
            else:
                with open(self.store_file, 'a', newline='', encoding='utf-8') as f:
                    writer = csv.DictWriter(f, fieldnames=PROJECTION_FIELDS)
                    writer.writerow(row)

        return projection.ticket_id

    def _to_projection(self, row: dict) -> Optional[FlattenedProjection]:
        try:
            return FlattenedProjection.from_row(row)
        except ValueError as e:
            self.logger.warning(f"Skipping damaged row in {self.store_file}: {e}")
            return None

    def find_by_ticket_id(self, ticket_id: str) -> FlattenedProjection:
        """
        Get the stored record for a ticket.

        Raises:
            TicketNotFoundError: if no readable record exists
        """
        with self._lock:
            rows = self._read_rows()
        for row in rows:
            if row.get('ticket_id') == ticket_id:
                projection = self._to_projection(row)
                if projection is not None:
                    return projection
        raise TicketNotFoundError(f"ticket {ticket_id} not found")

    def find_all(self) -> List[FlattenedProjection]:
        """All readable records; damaged rows are skipped with a warning."""
        with self._lock:
            rows = self._read_rows()
        projections = [self._to_projection(row) for row in rows]
        return [projection for projection in projections if projection is not None]
