"""
Recipient Concentration Detection.

Flags grants to a recipient whose combined funding within a program exceeds
the configured share (default 30%) of everything that program disbursed.
"""

from collections import defaultdict

from grantaudit.data import Grant

RECIPIENT_CONCENTRATION = "Recipient Concentration"


def recipient_shares(grants: list[Grant]) -> dict[tuple[str, str, str], float]:
    """Each recipient's share of its (ministry, program) funding."""
    program_totals = defaultdict(float)
    recipient_totals = defaultdict(float)

    for g in grants:
        program_totals[(g.ministry, g.program)] += g.amount
        recipient_totals[(g.ministry, g.program, g.recipient)] += g.amount

    shares = {}
    for (ministry, program, recipient), total in recipient_totals.items():
        program_total = program_totals[(ministry, program)]
        if program_total > 0:
            shares[(ministry, program, recipient)] = total / program_total
    return shares


def detect_concentration(grants: list[Grant], thresholds: dict) -> dict[str, str]:
    ratio = float(thresholds.get("concentration_ratio", 0.30))
    shares = recipient_shares(grants)
    return {
        g.id: RECIPIENT_CONCENTRATION
        for g in grants
        if shares.get((g.ministry, g.program, g.recipient), 0.0) > ratio
    }
