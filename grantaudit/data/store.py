"""In-memory grant record store."""

import csv
import json
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .models import Grant
from .sample import sample_grants


# Export/CSV header -> record key
CSV_COLUMNS = {
    "ID": "id",
    "Ministry": "ministry",
    "Program": "program",
    "Recipient": "recipient",
    "Fiscal Year": "fiscalYear",
    "Amount": "amount",
    "Flagged": "flagged",
    "Flag Reason": "flagReason",
}


def read_records(path: Path) -> list[dict]:
    """
    Read raw grant records from a JSON or CSV file.

    JSON may be a list of records or an object with a "grants" list.
    CSV uses the export header (ID,Ministry,Program,...).
    """
    path = Path(path)

    if path.suffix.lower() == ".csv":
        with open(path, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            return [
                {CSV_COLUMNS.get(k.strip(), k.strip()): v for k, v in row.items() if k}
                for row in reader
            ]

    with open(path, encoding="utf-8-sig") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("grants", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of grant records")
    return data


def parse_records(records: Iterable[dict]) -> tuple[list[Grant], int]:
    """
    Convert raw records to Grants, skipping invalid rows.

    Returns:
        (grants, number of rows skipped)
    """
    grants = []
    skipped = 0
    for raw in records:
        try:
            grants.append(Grant.from_dict(raw))
        except (ValueError, TypeError, AttributeError):
            skipped += 1
    return grants, skipped


class GrantStore:
    """
    The loaded grant records plus the review tracker that owns their flags.

    Records are read-only; flag state lives in `tracker` and is projected
    onto every record this store hands out.
    """

    def __init__(self, grants: Iterable[Grant] = (), tracker=None):
        from grantaudit.review import ReviewTracker

        self.tracker = tracker if tracker is not None else ReviewTracker()
        self._grants: dict[str, Grant] = {}
        for grant in grants:
            self._grants[grant.id] = grant
        self.tracker.seed_grant_flags(self._grants.values())

    @classmethod
    def from_sample(cls) -> "GrantStore":
        """Store holding the bundled sample grants."""
        return cls(sample_grants())

    @classmethod
    def from_file(cls, path: Path) -> "GrantStore":
        """Load a store from a JSON or CSV dataset."""
        grants, skipped = parse_records(read_records(path))
        if skipped:
            print(f"  Warning: skipped {skipped} invalid grant record(s) in {path}")
        return cls(grants)

    def __len__(self) -> int:
        return len(self._grants)

    def __iter__(self) -> Iterator[Grant]:
        return iter(self.all())

    def all(self) -> list[Grant]:
        """All grants, in load order, with current flag state."""
        return self.tracker.project_all(self._grants.values())

    def get(self, grant_id: str) -> Optional[Grant]:
        grant = self._grants.get(grant_id)
        return self.tracker.project(grant) if grant else None

    def flagged(self) -> list[Grant]:
        """Grants currently flagged for review."""
        return [g for g in self.all() if g.flagged]

    def toggle_grant_flag(self, grant_id: str, flagged: bool, reason: Optional[str] = None) -> Grant:
        """
        Flag or unflag a grant.

        Returns the grant with its new flag state.
        """
        if grant_id not in self._grants:
            raise ValueError(f"Grant {grant_id} not found")

        self.tracker.toggle_grant_flag(grant_id, flagged, reason)
        return self.get(grant_id)
