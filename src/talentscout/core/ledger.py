"""Balance mutations. Every change to the balance goes through ``record``."""

from __future__ import annotations

import logging

from talentscout.models.finance import Finances, Transaction
from talentscout.models.state import GameState

logger = logging.getLogger(__name__)


def record(state: GameState, amount: int, category: str, description: str = "") -> None:
    """Apply ``amount`` to the balance and append it to the ledger."""
    fin = state.finances
    fin.balance += amount
    fin.ledger.append(
        Transaction(
            absolute_week=state.absolute_week,
            amount=amount,
            category=category,
            description=description,
        )
    )
    logger.debug("ledger amount=%d category=%s balance=%d", amount, category, fin.balance)


def adjust_credit(fin: Finances, delta: int) -> int:
    """Move the credit score, clamped to 0..100. Returns the new score."""
    fin.credit_score = max(0, min(100, fin.credit_score + delta))
    return fin.credit_score
