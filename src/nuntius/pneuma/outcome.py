"""
Outcome Classifier - Map a receipt and transaction record to a status.

Pure functions over already-fetched node data. The caller decides which
lookups to make (see ``TransactionService.get_status``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .models import Receipt, TransactionRecord


class Outcome(str, Enum):
    NOT_REACHED = "NOT_REACHED"
    PENDING = "PENDING"
    REVERTED = "REVERTED"
    OUT_OF_GAS = "OUT_OF_GAS"
    SUCCESS = "SUCCESS"

    @property
    def is_terminal(self) -> bool:
        return self in (Outcome.REVERTED, Outcome.OUT_OF_GAS, Outcome.SUCCESS)


@dataclass(frozen=True)
class StatusReport:
    outcome: Outcome
    status: str
    message: str
    possible_reason: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"status": self.status, "message": self.message}
        if self.possible_reason is not None:
            result["possibleReason"] = self.possible_reason
        return result


_REPORTS = {
    Outcome.NOT_REACHED: StatusReport(
        Outcome.NOT_REACHED, "NOT_REACHED", "Transaction has not reached the blockchain nodes"
    ),
    Outcome.PENDING: StatusReport(Outcome.PENDING, "PENDING", "Transaction is pending"),
    Outcome.REVERTED: StatusReport(
        Outcome.REVERTED, "FAILED", "Transaction failed", possible_reason="REVERTED"
    ),
    Outcome.OUT_OF_GAS: StatusReport(
        Outcome.OUT_OF_GAS, "FAILED", "Transaction failed", possible_reason="Out of Gas"
    ),
    Outcome.SUCCESS: StatusReport(
        Outcome.SUCCESS, "SUCCESS", "Transaction completed successfully"
    ),
}


def classify(receipt: Optional[Receipt], record: Optional[TransactionRecord]) -> Outcome:
    """
    Classify a transaction from its receipt and record.

    A receipt without a status field is treated as absent. A failed
    receipt that used exactly its gas limit ran out of gas; any other
    failure (including one with no record to compare against) reverted.
    """
    if receipt is None or not receipt.is_resolved:
        return Outcome.NOT_REACHED if record is None else Outcome.PENDING
    if receipt.succeeded:
        return Outcome.SUCCESS
    if record is not None and receipt.gas_used == record.gas:
        return Outcome.OUT_OF_GAS
    return Outcome.REVERTED


def report_for(outcome: Outcome) -> StatusReport:
    return _REPORTS[outcome]
