"""Career seeding — generate a fresh, reproducible career from a seed.

The same seed and tuning always produce the same scout, players, rivals,
and ids.
"""

from __future__ import annotations

import random
import uuid

from talentscout.core.rivals import PERSONALITY_AGGRESSION
from talentscout.core.travel import COUNTRY_CONTINENT
from talentscout.models.constants import ATTRIBUTE_ORDER, POSITIONS
from talentscout.models.finance import Finances
from talentscout.models.player import Player
from talentscout.models.rivals import RivalScout
from talentscout.models.schedule import WeekSimulation
from talentscout.models.scout import Scout
from talentscout.models.state import GameState
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

FIRST_NAMES = [
    "Luca", "Mateo", "Kwame", "Jonas", "Rafael", "Yuki", "Idris", "Theo",
    "Emeka", "Diego", "Finn", "Hugo", "Tiago", "Omar", "Ruben", "Kenji",
]  # fmt: skip
LAST_NAMES = [
    "Silva", "Okafor", "Moreau", "Becker", "Rossi", "Tanaka", "Mensah", "Novak",
    "Costa", "Jansen", "Diallo", "Herrera", "Kim", "Walsh", "Ferreira", "Sato",
]  # fmt: skip

RIVAL_DATA = [
    ("Victor Crane", "Northgate Athletic"),
    ("Mara Lindqvist", "Riverside Rovers"),
    ("Dev Patel", "Harbour City"),
    ("Jules Ferrand", "Eastmoor United"),
    ("Bram Hollis", "Kingsbridge Albion"),
]

RIVAL_QUALITY_WEIGHTS = [2, 3, 3, 4, 4, 5]
PERSONALITIES = ["aggressive", "methodical", "connected", "lucky"]


def _scaled(value: int, tuning: Tuning) -> int:
    """Map a value on the 0-20 reference scale onto the configured scale."""
    span = tuning.attribute_max - tuning.attribute_min
    scaled = tuning.attribute_min + round(value * span / 20)
    return max(tuning.attribute_min, min(tuning.attribute_max, scaled))


def generate_players(count: int, seed: int, tuning: Tuning = DEFAULT_TUNING) -> dict[str, Player]:
    rng = random.Random(f"{seed}-players")
    countries = sorted(COUNTRY_CONTINENT)
    players: dict[str, Player] = {}
    for idx in range(count):
        age = rng.randint(16, 30)
        base = rng.randint(6, 15)
        attrs = {
            a: _scaled(max(0, min(20, base + rng.randint(-3, 3))), tuning) for a in ATTRIBUTE_ORDER
        }
        youth = max(0, 23 - age)
        potential = _scaled(min(20, base + rng.randint(0, youth // 2 + 1)), tuning)
        buzz = max(0, min(100, base * 4 + youth * 5 + rng.randint(-10, 10)))
        market_value = round(base**2 * 20_000 * (1 + youth * 0.1), -4)
        player_id = str(uuid.uuid5(uuid.NAMESPACE_DNS, f"player-{seed}-{idx}"))
        players[player_id] = Player(
            id=player_id,
            name=f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
            age=age,
            position=rng.choice(POSITIONS),
            country=rng.choice(countries),
            true_attributes=attrs,
            potential=potential,
            buzz=buzz,
            market_value=int(market_value),
        )
    return players


def generate_rivals(seed: int) -> list[RivalScout]:
    rng = random.Random(f"{seed}-rivals")
    count = rng.randint(3, 5)
    rivals: list[RivalScout] = []
    for idx in range(count):
        name, club = RIVAL_DATA[idx]
        quality = rng.choice(RIVAL_QUALITY_WEIGHTS)
        personality = rng.choice(PERSONALITIES)
        rivals.append(
            RivalScout(
                id=str(uuid.uuid5(uuid.NAMESPACE_DNS, f"rival-{seed}-{idx}")),
                name=name,
                club_name=club,
                quality=quality,
                personality=personality,
                aggression=PERSONALITY_AGGRESSION[personality],
                budget_tier=rng.randint(1, 4),
                reputation=10 + quality * 8,
            )
        )
    return rivals


def generate_career(
    seed: int = 42,
    tuning: Tuning = DEFAULT_TUNING,
    scout_name: str = "Alex Morgan",
    starting_balance: int = 2000,
    player_count: int = 30,
) -> GameState:
    """Build a new career at season 1, week 1."""
    return GameState(
        seed=seed,
        scout=Scout(name=scout_name),
        players=generate_players(player_count, seed, tuning),
        rivals=generate_rivals(seed),
        finances=Finances(balance=starting_balance, credit_score=tuning.credit_default),
        week_simulation=WeekSimulation(season=1, week=1),
    )
