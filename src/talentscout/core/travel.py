"""International travel bookings.

A booking departs the week after it is made and lasts one to three weeks
depending on how far the destination is. Each week abroad builds country
familiarity.
"""

from __future__ import annotations

import logging

from talentscout.core.inbox import post_message
from talentscout.core.ledger import record
from talentscout.models.commands import CommandResult
from talentscout.models.scout import TravelBooking
from talentscout.models.state import GameState

logger = logging.getLogger(__name__)

COUNTRY_CONTINENT: dict[str, str] = {
    "england": "europe",
    "spain": "europe",
    "france": "europe",
    "germany": "europe",
    "italy": "europe",
    "portugal": "europe",
    "netherlands": "europe",
    "brazil": "south_america",
    "argentina": "south_america",
    "uruguay": "south_america",
    "usa": "north_america",
    "mexico": "north_america",
    "nigeria": "africa",
    "ghana": "africa",
    "senegal": "africa",
    "japan": "asia",
    "south_korea": "asia",
    "australia": "oceania",
}

SAME_CONTINENT_COST = 450
DEFAULT_LONG_HAUL_COST = 2500

PAIR_COSTS: dict[frozenset[str], int] = {
    frozenset({"europe", "africa"}): 1500,
    frozenset({"europe", "south_america"}): 2000,
    frozenset({"europe", "north_america"}): 2000,
    frozenset({"europe", "asia"}): 2500,
    frozenset({"europe", "oceania"}): 3000,
    frozenset({"north_america", "south_america"}): 1200,
    frozenset({"asia", "oceania"}): 1500,
}

ADJACENT: set[frozenset[str]] = {
    frozenset({"europe", "africa"}),
    frozenset({"north_america", "south_america"}),
    frozenset({"asia", "oceania"}),
}

FAMILIARITY_PER_WEEK = 10


def travel_cost(origin: str, destination: str) -> int:
    if origin == destination:
        return SAME_CONTINENT_COST
    return PAIR_COSTS.get(frozenset({origin, destination}), DEFAULT_LONG_HAUL_COST)


def travel_weeks(origin: str, destination: str) -> int:
    if origin == destination:
        return 1
    if frozenset({origin, destination}) in ADJACENT:
        return 2
    return 3


def book_international_travel(state: GameState, country_key: str) -> CommandResult:
    scout = state.scout
    destination = COUNTRY_CONTINENT.get(country_key)
    if destination is None:
        return CommandResult.rejected("not_found", f"unknown country {country_key}")
    if scout.travel_booking is not None:
        return CommandResult.rejected(
            "already_booked", f"already booked to {scout.travel_booking.country}"
        )
    if country_key == scout.home_country:
        return CommandResult.rejected("not_eligible", "that is your home country")

    origin = COUNTRY_CONTINENT.get(scout.home_country, "europe")
    cost = travel_cost(origin, destination)
    if state.finances.balance < cost:
        return CommandResult.rejected(
            "insufficient_funds", f"the trip costs {cost}, balance is {state.finances.balance}"
        )

    depart = state.absolute_week + 1
    booking = TravelBooking(
        country=country_key,
        continent=destination,
        cost=cost,
        depart_week=depart,
        return_week=depart + travel_weeks(origin, destination),
    )
    record(state, -cost, "international_travel", country_key)
    scout.travel_booking = booking
    logger.info("travel_booked country=%s cost=%d depart=%d", country_key, cost, depart)
    return CommandResult.success(
        country=country_key, cost=cost, depart_week=booking.depart_week
    )


def update_travel(state: GameState) -> None:
    """Move an active booking forward as the week closes."""
    scout = state.scout
    booking = scout.travel_booking
    if booking is None:
        return
    next_week = state.absolute_week + 1
    if booking.departed:
        familiarity = scout.country_familiarity.get(booking.country, 0)
        scout.country_familiarity[booking.country] = min(100, familiarity + FAMILIARITY_PER_WEEK)
    elif booking.depart_week <= next_week:
        booking.departed = True
        post_message(state, "travel", f"Departing for {booking.country}", "Bon voyage.")
    if booking.departed and booking.return_week <= next_week:
        scout.travel_booking = None
        post_message(state, "travel", f"Back from {booking.country}", "You are home again.")
        logger.info("travel_returned country=%s", booking.country)
