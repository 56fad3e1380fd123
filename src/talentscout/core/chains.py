"""Event chain templates.

A chain is a fixed sequence of steps. Each step becomes a ChainStepEvent when
it falls due; later steps may branch on the choice made at an earlier step.
Choice effects scale with the step's escalation level.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from talentscout.models.narrative import ChoiceEffects, EventChain, EventChoice


@dataclass(frozen=True)
class ChainStep:
    """One step of a chain template.

    Attributes:
        title: Headline; ``{player}`` and ``{rival}`` are filled from chain context.
        description: Body text, same placeholders.
        escalation_level: Fixed severity of the step.
        choice_labels: Player-facing options; empty means acknowledge-only.
        week_delay: Weeks after the previous step resolves before this one fires.
        branch_on: Index into choice_history whose value selects a branch.
        branches: Prior choice -> (title, description) overrides.
    """

    title: str
    description: str
    escalation_level: int
    choice_labels: tuple[str, ...] = ()
    week_delay: int = 1
    branch_on: int | None = None
    branches: dict[int, tuple[str, str]] = field(default_factory=dict)


@dataclass(frozen=True)
class ChainTemplate:
    key: str
    steps: tuple[ChainStep, ...]

    @property
    def max_steps(self) -> int:
        return len(self.steps)


CHAIN_TEMPLATES: dict[str, ChainTemplate] = {
    t.key: t
    for t in [
        ChainTemplate(
            key="rival_poaching",
            steps=(
                ChainStep(
                    title="{rival} is circling {player}",
                    description="Word is that {rival} has been at every {player} game.",
                    escalation_level=0,
                ),
                ChainStep(
                    title="{rival} is closing in on {player}",
                    description="Their club is preparing a move. How do you respond?",
                    escalation_level=1,
                    choice_labels=(
                        "Rush a report",
                        "Do thorough due diligence",
                        "Pivot to another target",
                    ),
                ),
                ChainStep(
                    title="The race for {player}",
                    description="The chase for {player} is over.",
                    escalation_level=2,
                    week_delay=2,
                    branch_on=1,
                    branches={
                        0: (
                            "You beat {rival} to {player}",
                            "Your rushed report landed first. Not pretty, but it counted.",
                        ),
                        1: (
                            "Thoroughness paid off",
                            "Your detailed dossier on {player} impressed the board.",
                        ),
                        2: (
                            "You let {player} go",
                            "{rival} gets their man. You have moved on.",
                        ),
                    },
                ),
            ),
        ),
        ChainTemplate(
            key="wonderkid_pressure",
            steps=(
                ChainStep(
                    title="Whispers about {player}",
                    description="Everyone is suddenly talking about {player}.",
                    escalation_level=0,
                    choice_labels=("Fly out to watch", "Wait for more footage"),
                ),
                ChainStep(
                    title="{player}'s price is rising",
                    description="Clubs are asking what you make of {player}.",
                    escalation_level=1,
                    week_delay=2,
                    choice_labels=("Back your judgment publicly", "Stay quiet"),
                ),
                ChainStep(
                    title="Decision time on {player}",
                    description="The market has made up its mind about {player}.",
                    escalation_level=2,
                    branch_on=1,
                    branches={
                        0: (
                            "Your name is tied to {player}",
                            "You went on record. Your reputation now rides on {player}.",
                        ),
                        1: (
                            "{player} moves on quietly",
                            "You kept your counsel and your options open.",
                        ),
                    },
                ),
            ),
        ),
        ChainTemplate(
            key="media_scrutiny",
            steps=(
                ChainStep(
                    title="A journalist is asking about your record",
                    description="A feature on scouting is in the works and your name came up.",
                    escalation_level=0,
                    choice_labels=("Give an interview", "Decline to comment"),
                ),
                ChainStep(
                    title="The article is out",
                    description="The piece has been published.",
                    escalation_level=1,
                    week_delay=2,
                    branch_on=0,
                    branches={
                        0: ("You come across well", "The interview paints you as a sharp eye."),
                        1: ("You are a footnote", "The article barely mentions you."),
                    },
                ),
            ),
        ),
    ]
}


def choice_effects(escalation_level: int, index: int) -> ChoiceEffects:
    """Effects of picking option ``index`` on a chain step.

    The first option is bold (full reputation, extra fatigue), the second is
    measured (half reputation), and anything else plays it safe.
    """
    base = (escalation_level + 1) * 2
    if index == 0:
        return ChoiceEffects(reputation=base, fatigue=3)
    if index == 1:
        return ChoiceEffects(reputation=base / 2)
    return ChoiceEffects(fatigue=-2)


def render_step(template: ChainTemplate, chain: EventChain) -> tuple[str, str, list[EventChoice]]:
    """Title, description, and choices for the chain's next step."""
    step = template.steps[chain.current_step]
    title, description = step.title, step.description
    if step.branch_on is not None and step.branch_on < len(chain.choice_history):
        prior = chain.choice_history[step.branch_on]
        if prior is not None and prior in step.branches:
            title, description = step.branches[prior]
    names = {
        "player": chain.context.get("player_name", "the player"),
        "rival": chain.context.get("rival_name", "a rival"),
    }
    choices = [
        EventChoice(label=label, effects=choice_effects(step.escalation_level, i))
        for i, label in enumerate(step.choice_labels)
    ]
    return title.format(**names), description.format(**names), choices
