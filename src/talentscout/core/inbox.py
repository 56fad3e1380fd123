"""Inbox and toast queues consumed by the presentation layer."""

from __future__ import annotations

import logging

from talentscout.models.state import GameState, InboxMessage, Toast, ToastLevel

logger = logging.getLogger(__name__)


def post_message(state: GameState, category: str, title: str, body: str = "") -> InboxMessage:
    """Append an inbox message for the current week."""
    message = InboxMessage(
        id=state.next_id("msg"),
        season=state.season,
        week=state.week,
        category=category,
        title=title,
        body=body,
    )
    state.inbox.append(message)
    logger.debug("inbox_message category=%s title=%s", category, title)
    return message


def push_toast(
    state: GameState, message: str, level: ToastLevel = "info", toast_id: str | None = None
) -> Toast:
    toast = Toast(id=toast_id or state.next_id("toast"), level=level, message=message)
    state.pending_toasts.append(toast)
    return toast
