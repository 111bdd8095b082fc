from __future__ import annotations

from dataclasses import dataclass

from wcs.career.entities import RelationshipEntry, clamp_int
from wcs.contracts import RandomSource, RelationshipKind
from wcs.core import stable_id

PARENT_NAMES = ["Mom", "Dad", "Mike", "Sarah", "James", "Lisa", "David", "Jennifer"]
SIBLING_NAMES = ["Alex", "Jordan", "Sam", "Taylor", "Morgan", "Casey", "Riley", "Quinn"]
COACH_NAMES = ["Coach Williams", "Coach Martinez", "Coach Brown", "Coach Davis"]
FRIEND_NAMES = ["Jake", "Kyle", "Marcus", "Devin", "Chris", "Nick", "Tyler", "Cole"]
PARTNER_NAMES = ["Jordan", "Sam", "Alex", "Morgan", "Riley"]

ROMANTIC_WEEKLY_DECAY = 2
DISSOLVE_BELOW = 20
DISSOLVE_CHANCE = 0.15
START_DATING_MIN_AGE = 15
START_DATING_MIN_SOCIAL = 50
START_DATING_CHANCE = 0.12
ROMANTIC_START_LEVEL = 30
ROMANTIC_WEEKLY_TIME = 4
LEVEL_GAIN_PER_HOUR_ABOVE = 0.5
LEVEL_LOSS_PER_HOUR_BELOW = 1.5
CONFLICT_CHANCE = 0.2
CONFLICT_LEVEL_CEILING = 40


@dataclass(frozen=True, slots=True)
class RelationshipAction:
    key: str
    label: str
    hours: int
    money: int = 0


@dataclass(slots=True)
class ActionEffect:
    level_delta: int = 0
    stress: int = 0
    confidence: int = 0
    social: int = 0
    mat_iq: int = 0
    performance: float = 0.0
    text: str = ""


ACTIONS_BY_KIND: dict[RelationshipKind, list[RelationshipAction]] = {
    RelationshipKind.PARENT: [
        RelationshipAction("spend_time", "Spend time", 4),
        RelationshipAction("ask_advice", "Ask for advice", 2),
    ],
    RelationshipKind.SIBLING: [
        RelationshipAction("spend_time", "Spend time", 4),
        RelationshipAction("hang_out", "Hang out", 3),
    ],
    RelationshipKind.COACH: [
        RelationshipAction("spend_time", "Spend time", 6),
        RelationshipAction("get_advice", "Get coaching advice", 4),
    ],
    RelationshipKind.FRIEND: [
        RelationshipAction("spend_time", "Spend time", 4),
        RelationshipAction("hang_out", "Hang out", 3),
    ],
    RelationshipKind.ROMANTIC: [
        RelationshipAction("spend_time", "Spend time together", 6),
        RelationshipAction("date", "Date night", 6, money=30),
        RelationshipAction("argument", "Argument", 2),
    ],
}


def generate_initial_relationships(rand: RandomSource) -> list[RelationshipEntry]:
    entries: list[RelationshipEntry] = []
    parent_one = rand.choice(PARENT_NAMES)
    parent_two = rand.choice([n for n in PARENT_NAMES if n != parent_one])
    entries.append(RelationshipEntry(stable_id("rel", "parent", 1), RelationshipKind.PARENT, parent_one, 70 + rand.randint(0, 25), "Parent"))
    entries.append(RelationshipEntry(stable_id("rel", "parent", 2), RelationshipKind.PARENT, parent_two, 65 + rand.randint(0, 30), "Parent"))
    for i in range(rand.randint(0, 2)):
        entries.append(
            RelationshipEntry(stable_id("rel", "sibling", i + 1), RelationshipKind.SIBLING, rand.choice(SIBLING_NAMES), 40 + rand.randint(0, 40), "Sibling")
        )
    entries.append(RelationshipEntry(stable_id("rel", "coach", 1), RelationshipKind.COACH, rand.choice(COACH_NAMES), 50 + rand.randint(0, 30), "Coach"))
    for i in range(2 + rand.randint(0, 1)):
        entries.append(
            RelationshipEntry(stable_id("rel", "friend", i + 1), RelationshipKind.FRIEND, rand.choice(FRIEND_NAMES), 35 + rand.randint(0, 45), "Friend")
        )
    return entries


def romantic_partner(entries: list[RelationshipEntry]) -> RelationshipEntry | None:
    return next((e for e in entries if e.kind == RelationshipKind.ROMANTIC), None)


def available_actions(entry: RelationshipEntry, hours_left: int, money: int) -> list[RelationshipAction]:
    return [a for a in ACTIONS_BY_KIND[entry.kind] if a.hours <= hours_left and a.money <= money]


def resolve_action(entry: RelationshipEntry, action_key: str, rand: RandomSource) -> ActionEffect:
    if action_key == "spend_time":
        effect = ActionEffect(level_delta=rand.randint(2, 5), text=f"You spent time with {entry.name}. Relationship stronger.")
        if entry.kind == RelationshipKind.ROMANTIC:
            effect.performance = 0.05
        return effect
    if action_key == "ask_advice":
        return ActionEffect(level_delta=1, stress=-rand.randint(1, 3), text=f"You asked {entry.name} for advice. Felt supported.")
    if action_key == "hang_out":
        return ActionEffect(
            level_delta=rand.randint(2, 5),
            social=rand.randint(1, 3),
            confidence=rand.randint(1, 4),
            text=f"You hung out with {entry.name}.",
        )
    if action_key == "get_advice":
        mat_iq = rand.randint(0, 1)
        suffix = " Mat IQ up." if mat_iq else ""
        return ActionEffect(level_delta=2, mat_iq=mat_iq, text=f"{entry.name} gave you some pointers.{suffix}")
    if action_key == "date":
        return ActionEffect(
            level_delta=rand.randint(3, 6),
            confidence=rand.randint(5, 12),
            performance=0.08,
            text=f"Date night with {entry.name}. Great for performance.",
        )
    if action_key == "argument":
        return ActionEffect(
            level_delta=-rand.randint(2, 4),
            stress=rand.randint(4, 8),
            confidence=-rand.randint(3, 7),
            performance=-0.1,
            text=f"Argument with {entry.name}. Performance may suffer.",
        )
    raise ValueError(f"unknown relationship action '{action_key}'")


def update_level(entry: RelationshipEntry, allocated_hours: int) -> int:
    diff = allocated_hours - entry.weekly_time_required
    if diff >= 0:
        return clamp_int(0, 100, entry.level + diff * LEVEL_GAIN_PER_HOUR_ABOVE)
    return clamp_int(0, 100, entry.level + diff * LEVEL_LOSS_PER_HOUR_BELOW)


def apply_weekly_time(entry: RelationshipEntry, allocated_hours: int, rand: RandomSource) -> bool:
    """Settle a week of partner time; returns whether a conflict broke out."""
    neglected = allocated_hours < entry.weekly_time_required and entry.level < CONFLICT_LEVEL_CEILING
    conflict = neglected and rand.chance(CONFLICT_CHANCE)
    entry.level = update_level(entry, allocated_hours)
    return conflict


def age_romance(entries: list[RelationshipEntry], age: int, social: int, rand: RandomSource) -> tuple[list[RelationshipEntry], str | None]:
    partner = romantic_partner(entries)
    if partner is not None:
        partner.level = max(0, partner.level - ROMANTIC_WEEKLY_DECAY)
        if partner.level < DISSOLVE_BELOW and rand.chance(DISSOLVE_CHANCE):
            remaining = [e for e in entries if e.kind != RelationshipKind.ROMANTIC]
            return remaining, f"You and {partner.name} grew apart. Single again."
        return entries, None
    if age >= START_DATING_MIN_AGE and social >= START_DATING_MIN_SOCIAL and rand.chance(START_DATING_CHANCE):
        name = rand.choice(PARTNER_NAMES)
        partner = RelationshipEntry(
            rel_id=stable_id("rel", "romantic", name.lower()),
            kind=RelationshipKind.ROMANTIC,
            name=name,
            level=ROMANTIC_START_LEVEL,
            label="Partner",
            weekly_time_required=ROMANTIC_WEEKLY_TIME,
        )
        return [*entries, partner], f"You started dating {name}!"
    return entries, None
