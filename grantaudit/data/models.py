"""Record types for Grant Audit."""

import math
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional

from grantaudit.normalization import normalize_name

ALL_MINISTRIES = "ALL MINISTRIES"

OTHER_MINISTRIES = "Other Ministries"

# Neutral gray for the consolidated 'Other' bucket
OTHER_COLOR = "#6B7280"


class ReviewItemType(PyEnum):
    """Kind of entity on the review list."""
    PROGRAM = "program"
    RECIPIENT = "recipient"


@dataclass(frozen=True)
class Grant:
    """One grant disbursement."""
    id: str
    ministry: str
    program: str
    recipient: str
    fiscal_year: str
    amount: float
    flagged: bool = False
    flag_reason: Optional[str] = None

    def __post_init__(self):
        if not math.isfinite(self.amount) or self.amount < 0:
            raise ValueError(f"Grant {self.id}: amount must be a finite non-negative number, got {self.amount}")
        if not self.flagged and self.flag_reason is not None:
            raise ValueError(f"Grant {self.id}: flag_reason set on an unflagged grant")

    @classmethod
    def from_dict(cls, raw: dict) -> "Grant":
        """
        Build a Grant from an API/JSON record.

        Accepts both camelCase keys (fiscalYear, flagReason) and snake_case.
        Whitespace in ministry, program and recipient names is collapsed.
        A flag reason on an unflagged record is dropped.
        """
        if raw.get("id") in (None, ""):
            raise ValueError(f"Grant record has no id: {raw!r}")

        flagged = raw.get("flagged", False)
        if isinstance(flagged, str):
            flagged = flagged.strip().lower() == "true"
        flagged = bool(flagged)

        reason = raw.get("flagReason", raw.get("flag_reason")) or None

        try:
            amount = float(raw["amount"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Grant {raw.get('id')!r}: invalid amount {raw.get('amount')!r}") from e

        return cls(
            id=str(raw["id"]),
            ministry=normalize_name(raw.get("ministry")) or "",
            program=normalize_name(raw.get("program")) or "",
            recipient=normalize_name(raw.get("recipient")) or "",
            fiscal_year=str(raw.get("fiscalYear", raw.get("fiscal_year")) or ""),
            amount=amount,
            flagged=flagged,
            flag_reason=reason if flagged else None,
        )

    def to_dict(self) -> dict:
        """Serialize with the API's camelCase keys."""
        data = {
            "id": self.id,
            "ministry": self.ministry,
            "program": self.program,
            "recipient": self.recipient,
            "fiscalYear": self.fiscal_year,
            "amount": self.amount,
            "flagged": self.flagged,
        }
        if self.flag_reason is not None:
            data["flagReason"] = self.flag_reason
        return data


@dataclass
class MinistryTotal:
    """Summed funding for one ministry."""
    ministry: str
    total: float
    color: str
    # True when the total was scaled from aggregates rather than summed from grants
    estimated: bool = False


@dataclass
class YearlyTotal:
    """Summed funding for one fiscal year."""
    year: str
    total: float


@dataclass
class KeyMetric:
    """A headline figure for the dashboard."""
    title: str
    value: str | int | float
    description: Optional[str] = None


@dataclass
class FlaggingCriterion:
    """A named, independently toggleable risk heuristic."""
    id: str
    name: str
    description: str
    enabled: bool = True


@dataclass
class ReviewItem:
    """A program or recipient put on the review list."""
    id: str
    name: str
    type: ReviewItemType
    total_amount: float = 0.0
    flag_reason: list[str] = field(default_factory=list)
    ministry: Optional[str] = None
    program_count: Optional[int] = None
    date_added: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["type"] = self.type.value
        data["date_added"] = self.date_added.isoformat() if self.date_added else None
        return data
