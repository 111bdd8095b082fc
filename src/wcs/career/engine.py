from __future__ import annotations

import copy
from dataclasses import asdict
from typing import Any, Mapping

from wcs.career.bootstrap import StartOptions, create_game_state
from wcs.career.budget import BudgetContext, available_hours, total_allocated, validate_allocation
from wcs.career.calendar import (
    HS_REGULAR_SEASON,
    HS_WRAP_WEEK,
    WEEKS_PER_YEAR,
    generate_hs_schedule,
    is_tournament_week,
    meet_for_week,
    phase_label,
)
from wcs.career.choices import CHOICES, ChoiceDefinition, available_choices, is_unlocked, preview
from wcs.career.economy import part_time_pay, settle_week
from wcs.career.entities import (
    Injury,
    MatchLine,
    Opponent,
    RelationshipEntry,
    SeasonProgress,
    WeekActivity,
    WeekModifiers,
    WeekSummary,
    clamp_int,
)
from wcs.career.opponents import generate_pools, generate_ranking_ledgers
from wcs.career.progression import (
    allocation_to_gains,
    energy_factor,
    injury_risk_from_allocation,
    injury_risk_from_hours,
    is_rest_heavy,
    recovery_effects,
    stress_factor,
    training_gain,
)
from wcs.career.rankings import entry_rating, find_entry, player_rank_in_list, update_after_match, upsert_player
from wcs.career.recruiting import compute_score, generate_offers, resolve_counter
from wcs.career.reference import (
    COLLEGE_BRACKETS,
    COLLEGE_ENTRY_CAPS,
    DEFAULT_JUCO_SCHOOL_ID,
    HS_BRACKETS,
    INJURY_KINDS,
    LEAGUES,
    OFFSEASON_EVENTS,
    PROMOTIONS,
    WEIGHT_CLASSES_COLLEGE,
    BracketDef,
    nearest_weight_class,
    school_by_id,
    weight_classes_for,
)
from wcs.career.relationships import (
    ACTIONS_BY_KIND,
    age_romance,
    apply_weekly_time,
    available_actions,
    resolve_action,
    romantic_partner,
)
from wcs.career.state import COLLEGE_LAST_GRADE, HS_LAST_GRADE, GameState
from wcs.career.tournaments import (
    bracket_opponents,
    in_season_opponents,
    offseason_opponents,
    ordinal,
    place_from_losses,
    place_from_wins,
)
from wcs.contracts import (
    Attribute,
    BudgetMode,
    LeagueTier,
    LifeStage,
    Outcome,
    OutcomeCode,
    RelationshipKind,
    TimeAllocation,
)
from wcs.core import DeterministicRandomSource, stable_id
from wcs.match import MatchContext, MatchResolver, MatchResult

PLAYER_ENTRY_ID = "player"
MATCH_ENERGY_COST = 4
WIN_CONFIDENCE = 2
LOSS_CONFIDENCE = -3
CHOICE_GAIN_SCALE = 0.35
FRESHMAN_WEEKS = 8
FRESHMAN_PENALTY_PER_WEEK = 1.5
JOB_HOURLY_PAY = 12
COLLEGE_COMPETE_MATCHES = (2, 5)
BOARD_ROWS = 10

TRAINING_LINES: dict[Attribute, str] = {
    Attribute.TECHNIQUE: "You drilled hard.",
    Attribute.CONDITIONING: "You pushed your cardio.",
    Attribute.STRENGTH: "You hit the weight room.",
    Attribute.MAT_IQ: "Film study paid off.",
}


class CareerStateMachine:
    """Owns one GameState and applies every weekly transition to it.

    Public operations validate before touching state and return an Outcome
    instead of raising; the random stream position is written back into the
    state after each mutation.
    """

    def __init__(self, state: GameState) -> None:
        state.validate()
        self.state = state
        self._rand = DeterministicRandomSource.restore(state.seed, state.rng_state)
        self._resolver = MatchResolver(state.settings.logistic_slope)

    @classmethod
    def create(cls, seed: str | int, options: StartOptions | None = None) -> CareerStateMachine:
        return cls(create_game_state(seed, options))

    @property
    def rng_state(self) -> str:
        return self._rand.serialize()

    def snapshot(self) -> GameState:
        return copy.deepcopy(self.state)

    # ------------------------------------------------------------------ queries

    def get_choices(self) -> list[dict[str, Any]]:
        s = self.state
        if s.career_complete or s.activity.committed:
            return []
        return [
            {"key": c.key, "label": c.label, "tab": c.tab, "hours": c.hours, "money": c.money}
            for c in available_choices(
                s.life_stage,
                self._partner() is not None,
                s.competitor.has_injury,
                s.hours_left_this_week,
                s.finances.money,
            )
        ]

    def preview_choice(self, key: str) -> Outcome:
        choice = CHOICES.get(key)
        if choice is None:
            return Outcome.reject(OutcomeCode.INVALID_CHOICE, f"Unknown choice '{key}'.")
        available = any(c["key"] == key for c in self.get_choices())
        return Outcome.success(f"Preview of {choice.label}.", available=available, **preview(choice))

    def get_offseason_events(self) -> list[dict[str, Any]]:
        s = self.state
        if s.life_stage != LifeStage.HIGH_SCHOOL or s.career_complete:
            return []
        events: list[dict[str, Any]] = []
        for key, event in OFFSEASON_EVENTS.items():
            if key in s.season.offseason_events_used or s.week not in event.weeks:
                continue
            if event.invite_only and s.reputation.recruiting_score < event.min_recruiting:
                continue
            events.append(
                {
                    "key": key,
                    "name": event.name,
                    "cost": event.cost,
                    "prestige": event.prestige,
                    "matches": event.matches,
                    "invite_only": event.invite_only,
                    "can_afford": s.finances.money >= event.cost,
                }
            )
        return events

    def get_relationships(self) -> list[dict[str, Any]]:
        return [
            {
                "rel_id": r.rel_id,
                "kind": r.kind.value,
                "name": r.name,
                "level": r.level,
                "label": r.label,
                "weekly_time_required": r.weekly_time_required,
            }
            for r in self.state.relationships
        ]

    def get_relationship_actions(self, rel_id: str) -> list[dict[str, Any]]:
        s = self.state
        entry = self._relationship(rel_id)
        if entry is None or s.career_complete or s.activity.committed:
            return []
        return [
            {"key": a.key, "label": a.label, "hours": a.hours, "money": a.money}
            for a in available_actions(entry, s.hours_left_this_week, s.finances.money)
        ]

    def get_rankings_board(self) -> list[dict[str, Any]]:
        s = self.state
        board: list[dict[str, Any]] = []
        for wc in sorted(s.rankings):
            rows = [
                {
                    "rank": idx + 1,
                    "entry_id": e.entry_id,
                    "name": e.name,
                    "rating": e.rating,
                    "true_skill": e.true_skill,
                    "wins": e.wins,
                    "losses": e.losses,
                    "is_player": e.entry_id == PLAYER_ENTRY_ID,
                }
                for idx, e in enumerate(s.rankings[wc][:BOARD_ROWS])
            ]
            player_rank = self._player_rank(wc) if wc == s.competitor.weight_class else None
            board.append({"weight_class": wc, "entries": rows, "player_rank": player_rank})
        return board

    # ---------------------------------------------------------------- mutations

    def apply_choice(self, key: str) -> Outcome:
        blocked = self._week_closed()
        if blocked is not None:
            return blocked
        s = self.state
        choice = CHOICES.get(key)
        if choice is None:
            return Outcome.reject(OutcomeCode.INVALID_CHOICE, f"Unknown choice '{key}'.")
        if not is_unlocked(choice, s.life_stage, self._partner() is not None, s.competitor.has_injury):
            return Outcome.reject(OutcomeCode.INVALID_CHOICE, f"{choice.label} is not available right now.")
        if choice.hours > s.hours_left_this_week:
            return Outcome.reject(
                OutcomeCode.INVALID_CHOICE,
                f"Not enough hours: {choice.label} needs {choice.hours}h, {s.hours_left_this_week}h left.",
            )
        if choice.money > s.finances.money:
            return Outcome.reject(OutcomeCode.INVALID_CHOICE, f"Not enough money: {choice.label} costs ${choice.money}.")

        c = s.competitor
        s.hours_left_this_week -= choice.hours
        s.finances.money -= choice.money
        if choice.modifier is not None:
            mod = choice.modifier
            s.modifiers.stack(mod.training, mod.performance, mod.injury_risk, mod.weight_cut, mod.reason)
        e_factor = energy_factor(c.meters.energy)
        s_factor = stress_factor(c.meters.stress)
        c.meters.adjust(**choice.meters)
        if choice.intense:
            s.activity.intense_hours += choice.hours

        summary = None
        if choice.key == "compete":
            summary = WeekSummary(week=s.week, year=s.year, phase=phase_label(s.week, s.life_stage), event_type="compete")
        message = self._resolve_choice(choice, e_factor, s_factor, summary)
        s.log(message)
        self._refresh_derived()
        self._save_rng()
        return Outcome.success(
            message,
            key=key,
            hours_left=s.hours_left_this_week,
            money=s.finances.money,
            summary=asdict(summary) if summary else None,
        )

    def apply_allocation(self, allocation: TimeAllocation | Mapping[str, Any]) -> Outcome:
        if not isinstance(allocation, TimeAllocation):
            try:
                allocation = TimeAllocation.from_mapping(allocation)
            except (TypeError, ValueError) as exc:
                return Outcome.reject(OutcomeCode.VALIDATION_FAILURE, str(exc))
        s = self.state
        if s.career_complete:
            return Outcome.reject(OutcomeCode.ILLEGAL_STATE, "Career complete.")
        if s.activity.committed or s.hours_left_this_week < self._action_budget():
            return Outcome.reject(OutcomeCode.ILLEGAL_STATE, "This week already has activity; plan the next one.")

        available = available_hours(self._budget_context(BudgetMode.FULL_WEEK))
        verdict = validate_allocation(allocation, available, s.life_stage)
        if not verdict.ok:
            issue = verdict.issues[0]
            return Outcome.reject(
                OutcomeCode.VALIDATION_FAILURE,
                issue.message,
                issue_code=issue.code,
                issues=[asdict(i) for i in verdict.issues],
            )

        c = s.competitor
        gains = allocation_to_gains(allocation, c.meters.energy, c.meters.stress)
        mult = s.modifiers.training_mult
        applied = {
            attr.value: c.apply_training_gain(attr, raw * mult)
            for attr, raw in (
                (Attribute.TECHNIQUE, gains.technique),
                (Attribute.CONDITIONING, gains.conditioning),
                (Attribute.STRENGTH, gains.strength),
                (Attribute.MAT_IQ, gains.mat_iq),
                (Attribute.MENTAL, gains.mental),
            )
        }
        heavy = is_rest_heavy(allocation)
        recovery = recovery_effects(allocation.recovery, heavy)
        c.apply_rest(recovery.energy, recovery.health, recovery.stress_reduction, heavy)
        intensity = allocation.technique + allocation.conditioning + allocation.strength
        c.meters.adjust(energy=-(intensity + allocation.extra_practice_blocks * 2))
        s.life.adjust(grades=min(5, allocation.study // 3), social=min(5, allocation.social // 2))
        s.finances.money += allocation.job * JOB_HOURLY_PAY
        if c.weight is not None and allocation.weight_cut > 0:
            c.weight.current_weight = max(c.weight.target_class, c.weight.current_weight - allocation.weight_cut)
        s.activity.relationship_hours += allocation.relationship_time
        s.activity.training_sessions = sum(1 for h in (allocation.technique, allocation.conditioning, allocation.strength) if h > 0)

        risk = injury_risk_from_allocation(allocation) * s.modifiers.injury_risk_mult * s.settings.injury_rate_multiplier
        injury = self._roll_injury(risk)

        s.activity.committed = True
        s.hours_left_this_week = 0
        s.log(f"Week planned: {total_allocated(allocation, s.life_stage)}h of {available}h. Energy {c.meters.energy}.")
        self._refresh_derived()
        self._save_rng()
        return Outcome.success(
            "Week planned. Training and recovery applied.",
            available=available,
            allocated=total_allocated(allocation, s.life_stage),
            gains=applied,
            injured=injury is not None,
        )

    def advance_week(self) -> bool:
        s = self.state
        if s.career_complete:
            return False
        c = s.competitor
        recruiting_before = s.reputation.recruiting_score
        energy_before = c.meters.energy
        stress_before = c.meters.stress

        if not s.activity.committed:
            risk = injury_risk_from_hours(s.activity.intense_hours) * s.modifiers.injury_risk_mult
            self._roll_injury(risk * s.settings.injury_rate_multiplier)
            rest_heavy = s.activity.rest_sessions > 0 and s.activity.intense_hours == 0 and s.activity.training_sessions == 0
            c.consecutive_rest_weeks = c.consecutive_rest_weeks + 1 if rest_heavy else 0
        rusted = c.apply_rest_decay()
        if rusted:
            s.log("Ring rust: " + ", ".join(a.value.replace("_", " ") for a in rusted) + " slipped.")

        played_with = s.modifiers
        relationship_hours = s.activity.relationship_hours
        s.last_week_summary = None
        s.modifiers = WeekModifiers()
        s.activity = WeekActivity()

        s.week += 1
        rolled = s.week > WEEKS_PER_YEAR
        if rolled:
            s.week = 1
            s.year += 1

        c.meters.adjust(energy=s.settings.passive_energy_recovery)
        if s.life_stage == LifeStage.COLLEGE:
            s.weeks_in_college += 1
        if c.weight is not None and c.weight.current_weight < c.weight.natural_weight:
            c.weight.current_weight += 1

        self._settle_relationships(relationship_hours)
        self._heal_injuries()
        ledger = settle_week(s.life_stage, s.finances, self._rand)
        s.did_part_time_this_week = False
        if s.finances.broke:
            c.meters.adjust(stress=3)
            s.log(f"You couldn't cover ${ledger.expenses} in expenses this week.")

        summary = WeekSummary(week=s.week, year=s.year, phase=phase_label(s.week, s.life_stage))
        if rolled:
            self._rollover(summary)
        else:
            self._run_competition(summary, played_with)

        s.hours_left_this_week = self._action_budget()
        self._refresh_derived()
        self._expire_offers()
        summary.phase = phase_label(s.week, s.life_stage)
        summary.energy_change = c.meters.energy - energy_before
        summary.stress_change = c.meters.stress - stress_before
        summary.recruiting_change = s.reputation.recruiting_score - recruiting_before
        s.last_week_summary = summary
        self._save_rng()
        return rolled

    def run_offseason_event(self, key: str) -> Outcome:
        s = self.state
        event = OFFSEASON_EVENTS.get(key)
        if event is None:
            return Outcome.reject(OutcomeCode.INVALID_CHOICE, f"Unknown event '{key}'.")
        if s.career_complete or s.life_stage != LifeStage.HIGH_SCHOOL:
            return Outcome.reject(OutcomeCode.ILLEGAL_STATE, f"{event.name} is only open to high school wrestlers.")
        if s.week not in event.weeks:
            weeks = ", ".join(str(w) for w in event.weeks)
            return Outcome.reject(OutcomeCode.ILLEGAL_STATE, f"{event.name} runs in week {weeks}, not week {s.week}.")
        if key in s.season.offseason_events_used:
            return Outcome.reject(OutcomeCode.ILLEGAL_STATE, "Already competed here this year.")
        if event.invite_only and s.reputation.recruiting_score < event.min_recruiting:
            return Outcome.reject(
                OutcomeCode.INVALID_CHOICE,
                f"{event.name} is invite-only (recruiting {event.min_recruiting}+ required).",
            )
        if s.finances.money < event.cost:
            return Outcome.reject(OutcomeCode.INVALID_CHOICE, "You can't afford it.")

        c = s.competitor
        s.finances.money -= event.cost
        s.season.offseason_events_used.append(key)
        summary = WeekSummary(week=s.week, year=s.year, phase=phase_label(s.week, s.life_stage), event_type=key)
        wins = 0
        for opponent in offseason_opponents(event, c.weight_class, s.year, self._rand):
            if self._play_match(opponent, summary, s.modifiers, high_stakes=True).won:
                wins += 1
        place = place_from_wins(wins, event.matches, self._rand)
        summary.placement = place

        if key == "fargo":
            s.reputation.fargo_placements.append(place)
        elif key == "super32":
            s.reputation.super32_placements.append(place)
        if event.accolade_top and place <= event.accolade_top:
            title = "Champ" if place == 1 else "Runner-up"
            s.reputation.accolades.append(f"{event.name} {title} (Year {s.year})")
        if event.win_rating_bonus and place == 1:
            s.reputation.wno_wins += 1
            c.rating_bonus += event.win_rating_bonus
            s.reputation.accolades.append(f"{event.name} Champion (Year {s.year})")

        results = ", ".join(f"{'W' if m.won else 'L'} ({m.method})" for m in summary.matches)
        message = f"{event.name}: You went {wins}-{event.matches - wins}. {results}. Placed {ordinal(place)}."
        s.log(message)
        self._refresh_derived()
        self._save_rng()
        return Outcome.success(
            message,
            place=place,
            event_name=event.name,
            matches=[asdict(m) for m in summary.matches],
            summary=asdict(summary),
        )

    def apply_relationship_action(self, rel_id: str, action_key: str) -> Outcome:
        blocked = self._week_closed()
        if blocked is not None:
            return blocked
        s = self.state
        entry = self._relationship(rel_id)
        if entry is None:
            return Outcome.reject(OutcomeCode.INVALID_CHOICE, f"Unknown relationship '{rel_id}'.")
        action = next((a for a in ACTIONS_BY_KIND[entry.kind] if a.key == action_key), None)
        if action is None:
            return Outcome.reject(OutcomeCode.INVALID_CHOICE, f"'{action_key}' is not an option with {entry.name}.")
        if action.hours > s.hours_left_this_week:
            return Outcome.reject(
                OutcomeCode.INVALID_CHOICE,
                f"Not enough hours: {action.label} needs {action.hours}h, {s.hours_left_this_week}h left.",
            )
        if action.money > s.finances.money:
            return Outcome.reject(OutcomeCode.INVALID_CHOICE, f"Not enough money: {action.label} costs ${action.money}.")

        c = s.competitor
        s.hours_left_this_week -= action.hours
        s.finances.money -= action.money
        effect = resolve_action(entry, action.key, self._rand)
        entry.level = clamp_int(0, 100, entry.level + effect.level_delta)
        c.meters.adjust(stress=effect.stress, confidence=effect.confidence)
        s.life.adjust(social=effect.social)
        if effect.mat_iq:
            c.apply_training_gain(Attribute.MAT_IQ, effect.mat_iq)
        if effect.performance:
            s.modifiers.stack(performance=effect.performance, reason=f"{action.label} ({entry.name})")
        if entry.kind == RelationshipKind.ROMANTIC:
            s.activity.relationship_hours += action.hours

        s.log(effect.text)
        self._refresh_derived()
        self._save_rng()
        return Outcome.success(effect.text, rel_id=rel_id, level=entry.level, hours_left=s.hours_left_this_week)

    def counter_offer(self, offer_id: str) -> Outcome:
        s = self.state
        if s.life_stage != LifeStage.HIGH_SCHOOL:
            return Outcome.reject(OutcomeCode.ILLEGAL_STATE, "Offers can only be negotiated in high school.")
        offer = next((o for o in s.offers if o.offer_id == offer_id), None)
        if offer is None:
            return Outcome.reject(OutcomeCode.INVALID_CHOICE, f"No open offer '{offer_id}'.")
        if offer_id in s.negotiated_offer_ids:
            return Outcome.reject(OutcomeCode.INVALID_CHOICE, f"You already countered {offer.school_name}.")

        school = school_by_id(offer.school_id)
        result = resolve_counter(offer, school, s.reputation.recruiting_score, self._rand, s.competitor.weight_class)
        s.negotiated_offer_ids.append(offer_id)
        s.offers = [result.offer if o.offer_id == offer_id else o for o in s.offers]
        if result.success:
            message = f"{school.name} raised their offer to {result.offer.tuition_covered_pct}% tuition."
        else:
            message = f"{school.name} held firm at {offer.tuition_covered_pct}%."
        s.log(message)
        self._save_rng()
        return Outcome.success(message, countered=result.success, chance=result.chance, offer=asdict(result.offer))

    def accept_offer(self, offer_id: str) -> Outcome:
        s = self.state
        if s.life_stage != LifeStage.HIGH_SCHOOL:
            return Outcome.reject(OutcomeCode.ILLEGAL_STATE, "Offers can only be accepted in high school.")
        if s.committed_offer is not None:
            return Outcome.reject(OutcomeCode.ILLEGAL_STATE, f"Already committed to {s.committed_offer.school_name}.")
        offer = next((o for o in s.offers if o.offer_id == offer_id), None)
        if offer is None:
            return Outcome.reject(OutcomeCode.INVALID_CHOICE, f"No open offer '{offer_id}'.")
        s.committed_offer = offer
        message = f"You committed to {offer.school_name} ({offer.division}, {offer.tuition_covered_pct}% tuition)."
        s.log(message)
        return Outcome.success(message, offer=asdict(offer))

    # ----------------------------------------------------------------- internals

    def _resolve_choice(
        self, choice: ChoiceDefinition, e_factor: float, s_factor: float, summary: WeekSummary | None
    ) -> str:
        s = self.state
        c = s.competitor
        rand = self._rand
        partner = self._partner()

        if choice.trains is not None:
            s.activity.training_sessions += 1
            raw = training_gain(choice.hours) * choice.gain_scale * CHOICE_GAIN_SCALE * s.modifiers.training_mult
            gained = c.apply_training_gain(choice.trains, raw, e_factor, s_factor)
            label = choice.trains.value.replace("_", " ").title()
            line = TRAINING_LINES[choice.trains]
            return f"{line} {label} +{gained}." if gained else f"{line} No measurable gain this time."
        if summary is not None:
            pool = [*s.pools.unranked, *s.pools.state_ranked]
            for _ in range(rand.randint(*COLLEGE_COMPETE_MATCHES)):
                self._play_match(rand.choice(pool), summary, s.modifiers)
            return f"You competed. Went {summary.wins}-{summary.losses} this week."
        if choice.key == "rest":
            s.activity.rest_sessions += 1
            return "You rested. Body and mind feel better."
        if choice.key == "study":
            s.life.adjust(grades=rand.randint(1, 4))
            return "You hit the books. Grades improved."
        if choice.key == "hang_out":
            s.life.adjust(social=rand.randint(2, 5))
            return "You hung out. Social and mood improved."
        if choice.key == "party":
            s.life.adjust(social=rand.randint(3, 6))
            return "You went to a party. Social up but training takes a hit this week."
        if choice.key == "interview":
            return "Media interview went well. Slight confidence boost."
        if choice.key == "rehab":
            injury = c.injuries[0]
            injury.weeks_out -= 1
            if injury.weeks_out <= 0:
                c.injuries.pop(0)
                return f"Rehab session. Your {injury.kind} is healed."
            return "Rehab session. Injury risk down, body recovering."
        if choice.key == "part_time_job":
            pay = part_time_pay(rand)
            s.finances.money += pay
            s.did_part_time_this_week = True
            c.meters.adjust(health=-rand.randint(0, 2))
            return f"You worked a shift. Earned ${pay}."
        if partner is not None and choice.key == "relationship_time":
            partner.level = clamp_int(0, 100, partner.level + rand.randint(2, 5))
            s.activity.relationship_hours += choice.hours
            return f"You spent time with {partner.name}. Relationship stronger."
        if partner is not None and choice.key == "date":
            partner.level = clamp_int(0, 100, partner.level + rand.randint(3, 6))
            s.activity.relationship_hours += choice.hours
            return f"Date night with {partner.name}. Great week for performance."
        if partner is not None and choice.key == "argument":
            partner.level = clamp_int(0, 100, partner.level - rand.randint(2, 4))
            return f"Argument with {partner.name}. Performance may suffer."
        raise ValueError(f"choice '{choice.key}' has no resolution")

    def _play_match(
        self,
        opponent: Opponent,
        summary: WeekSummary,
        modifiers: WeekModifiers,
        high_stakes: bool = False,
    ) -> MatchResult:
        s = self.state
        c = s.competitor
        result = self._resolver.run(c, opponent, self._rand, self._match_context(modifiers, high_stakes))
        s.record.add_match_result(result.won, result.method)
        c.meters.adjust(
            energy=-MATCH_ENERGY_COST,
            confidence=WIN_CONFIDENCE if result.won else LOSS_CONFIDENCE,
        )
        self._update_ledger(opponent, result.won)
        summary.matches.append(
            MatchLine(
                opponent_name=opponent.name,
                opponent_rating=opponent.overall_rating,
                won=result.won,
                method=result.method.value,
                score=result.score_line,
                state_rank=opponent.state_rank,
                national_rank=opponent.national_rank,
            )
        )
        if result.won:
            summary.wins += 1
        else:
            summary.losses += 1
        return result

    def _match_context(self, modifiers: WeekModifiers, high_stakes: bool = False) -> MatchContext:
        s = self.state
        c = s.competitor
        freshman = 0.0
        if s.life_stage == LifeStage.COLLEGE and s.weeks_in_college < FRESHMAN_WEEKS:
            freshman = max(0, FRESHMAN_WEEKS - s.weeks_in_college) * FRESHMAN_PENALTY_PER_WEEK
        return MatchContext(
            injury_penalty=c.injury_penalty(),
            weight_cut_penalty=c.weight_cut_penalty(modifiers.weight_cut_severity_mult),
            freshman_penalty=freshman,
            performance_mult=modifiers.performance_mult,
            high_stakes=high_stakes,
        )

    def _update_ledger(self, opponent: Opponent, won: bool) -> None:
        s = self.state
        c = s.competitor
        ledger = s.rankings.get(c.weight_class)
        if ledger is None:
            return
        opp_rating = entry_rating(ledger, opponent.opponent_id)
        if opp_rating is None:
            return
        if find_entry(ledger, PLAYER_ENTRY_ID) is None:
            ledger = upsert_player(ledger, PLAYER_ENTRY_ID, c.name, c.overall_rating, c.weight_class, c.true_skill)
        mine = entry_rating(ledger, PLAYER_ENTRY_ID) or c.overall_rating
        if won:
            ledger = update_after_match(ledger, PLAYER_ENTRY_ID, opponent.opponent_id, mine + 1, opp_rating - 1)
        else:
            ledger = update_after_match(ledger, opponent.opponent_id, PLAYER_ENTRY_ID, opp_rating + 1, mine - 1)
        s.rankings[c.weight_class] = upsert_player(
            ledger, PLAYER_ENTRY_ID, c.name, c.overall_rating, c.weight_class, c.true_skill
        )

    def _run_competition(self, summary: WeekSummary, played_with: WeekModifiers) -> None:
        s = self.state
        week = s.week
        if s.life_stage == LifeStage.HIGH_SCHOOL:
            first, last = HS_REGULAR_SEASON
            if first <= week <= last:
                self._run_scheduled_meet(summary, played_with)
            elif week in HS_BRACKETS:
                self._run_bracket(HS_BRACKETS[week], summary, played_with)
            elif week == HS_WRAP_WEEK:
                self._season_wrap(summary)
        elif week in COLLEGE_BRACKETS:
            self._run_bracket(COLLEGE_BRACKETS[week], summary, played_with)

    def _run_scheduled_meet(self, summary: WeekSummary, played_with: WeekModifiers) -> None:
        s = self.state
        meet = meet_for_week(s.schedule, s.week)
        if meet is None or meet.completed:
            return
        meet.completed = True
        if meet.kind == "tournament":
            summary.event_type = "tournament"
            for opponent in in_season_opponents(s.pools, self._rand):
                self._play_match(opponent, summary, played_with)
            summary.placement = place_from_losses(summary.losses)
            self._note(summary, f"Tournament: {summary.wins}-{summary.losses}, placed {ordinal(summary.placement)}.")
            return

        summary.event_type = meet.kind
        if meet.practice_only:
            self._note(summary, "JV week: practice only (no varsity match).")
            return
        opponent = s.pools.find(meet.opponent_id) if meet.opponent_id else None
        if opponent is None:
            opponent = self._rand.choice(s.pools.unranked)
        result = self._play_match(opponent, summary, played_with)
        tags = ""
        if opponent.state_rank:
            tags += f" #{opponent.state_rank} state"
        if opponent.national_rank:
            tags += f" #{opponent.national_rank} national"
        outcome = "W" if result.won else "L"
        self._note(
            summary,
            f"{outcome} vs {opponent.name} ({opponent.overall_rating}){tags}, {result.method.value} {result.score_line}.",
        )

    def _run_bracket(self, bracket: BracketDef, summary: WeekSummary, played_with: WeekModifiers) -> None:
        s = self.state
        if bracket.key == "district" and s.league == LeagueTier.HS_JV:
            self._note(summary, "JV doesn't compete at districts. Focus on next year.")
            return
        if bracket.key == "state" and not s.season.state_qualified:
            return
        if bracket.key == "ncaa" and not s.season.ncaa_qualified:
            return

        summary.event_type = bracket.key
        for opponent in bracket_opponents(bracket, s.pools, self._rand):
            self._play_match(opponent, summary, played_with, high_stakes=True)
        place = place_from_wins(summary.wins, bracket.rounds, self._rand)
        summary.placement = place
        year = s.year

        if bracket.key == "district":
            s.season.district_place = place
            s.season.state_qualified = place <= bracket.qualify_top
            verdict = "qualified for state!" if s.season.state_qualified else f"Top {bracket.qualify_top} qualify. Season over."
            self._note(summary, f"Districts: You placed {ordinal(place)}. {verdict}")
        elif bracket.key == "state":
            s.season.state_place = place
            s.reputation.state_placements.append(place)
            if place == 1:
                s.reputation.accolades.append(f"State Champion (Year {year})")
                self._note(summary, "STATE TOURNAMENT: You won the state title!")
            else:
                self._note(summary, f"State tournament: You placed {ordinal(place)}.")
        elif bracket.key == "conference":
            s.season.conference_place = place
            s.season.ncaa_qualified = place <= bracket.qualify_top
            verdict = "qualified for NCAAs!" if s.season.ncaa_qualified else f"Top {bracket.qualify_top} advance."
            self._note(summary, f"Conference: You placed {ordinal(place)}. {verdict}")
        elif bracket.key == "ncaa":
            s.season.ncaa_place = place
            s.reputation.ncaa_placements.append(place)
            if place == 1:
                s.reputation.accolades.append(f"NCAA Champion (Year {year})")
                self._note(summary, "NCAA CHAMPIONSHIPS: You won the national title!")
            else:
                s.reputation.accolades.append(f"All-American (Year {year})")
                self._note(summary, f"NCAA Championships: You placed {ordinal(place)}. All-American!")

    def _season_wrap(self, summary: WeekSummary) -> None:
        s = self.state
        summary.event_type = "wrap"
        season = s.record.season
        self._refresh_derived()
        self._note(summary, f"Season complete. Record: {season.wins}-{season.losses}. Recruiting: {s.reputation.recruiting_score}.")
        if s.grade < 11 or s.committed_offer is not None:
            return
        new_offers = generate_offers(
            s.reputation.recruiting_score, s.life.gpa, s.week_index, s.year, s.offers, self._rand
        )
        s.offers.extend(new_offers)
        for offer in new_offers:
            self._note(summary, f"Offer: {offer.school_name} ({offer.division}) at {offer.tuition_covered_pct}% tuition.")

    def _rollover(self, summary: WeekSummary) -> None:
        s = self.state
        c = s.competitor
        summary.event_type = "rollover"
        s.age += 1
        s.grade += 1
        s.record.reset_season()
        c.potential.reset_year()
        c.consecutive_rest_weeks = 0
        s.season = SeasonProgress()

        if s.life_stage == LifeStage.HIGH_SCHOOL:
            if s.grade > HS_LAST_GRADE:
                self._graduate(summary)
            else:
                self._promote(summary)
        elif s.grade > COLLEGE_LAST_GRADE:
            s.career_complete = True
            self._note(summary, "Your college career is complete.")
        self._regenerate_season()

    def _promote(self, summary: WeekSummary) -> None:
        s = self.state
        rule = PROMOTIONS.get(s.league)
        if rule is None:
            self._note(summary, f"Year {s.year} begins.")
            return
        next_tier, min_age, min_rating = rule
        if s.age >= min_age or s.competitor.overall_rating >= min_rating:
            s.league = next_tier
            self._note(summary, f"Promoted to {LEAGUES[next_tier].label}. Tougher competition.")
        else:
            self._note(summary, f"Year {s.year} begins. Still at {LEAGUES[s.league].label}.")

    def _graduate(self, summary: WeekSummary) -> None:
        s = self.state
        c = s.competitor
        offer = s.committed_offer
        school = school_by_id(offer.school_id if offer else DEFAULT_JUCO_SCHOOL_ID)
        s.league = school.division
        s.school_id = school.school_id
        s.finances.annual_tuition = school.tuition
        s.finances.scholarship_pct = offer.tuition_covered_pct if offer else 0
        s.finances.city_cost_index = school.city_cost_index
        s.weeks_in_college = 0
        s.offers = []
        s.negotiated_offer_ids = []
        wc = nearest_weight_class(c.weight_class, WEIGHT_CLASSES_COLLEGE)
        c.weight_class = wc
        if c.weight is not None:
            c.weight.target_class = wc
        c.apply_entry_cap(COLLEGE_ENTRY_CAPS[school.division])
        self._note(summary, f"You graduated and joined {school.name} ({LEAGUES[school.division].label}) at {wc}.")

    def _regenerate_season(self) -> None:
        s = self.state
        c = s.competitor
        mean = LEAGUES[s.league].mean_true_skill
        s.pools = generate_pools(c.weight_class, mean, self._rand, s.year)
        s.rankings = generate_ranking_ledgers(weight_classes_for(s.league), c.weight_class, mean, s.pools, self._rand, s.year)
        if s.life_stage == LifeStage.HIGH_SCHOOL:
            s.schedule = generate_hs_schedule(
                s.pools,
                self._rand,
                s.reputation.recruiting_score,
                has_fargo_history=bool(s.reputation.fargo_placements),
                jv=s.league == LeagueTier.HS_JV,
            )
        else:
            s.schedule = []

    def _settle_relationships(self, relationship_hours: int) -> None:
        s = self.state
        partner = self._partner()
        if partner is not None and apply_weekly_time(partner, relationship_hours, self._rand):
            s.competitor.meters.adjust(stress=5)
            s.modifiers.stack(performance=-0.05, reason="Relationship conflict")
            s.log(f"{partner.name} is upset about the lack of time together.")
        s.relationships, note = age_romance(s.relationships, s.age, s.life.social, self._rand)
        if note:
            s.log(note)

    def _heal_injuries(self) -> None:
        s = self.state
        remaining: list[Injury] = []
        for injury in s.competitor.injuries:
            injury.weeks_out -= 1
            if injury.weeks_out > 0:
                remaining.append(injury)
            else:
                s.log(f"Recovered from {injury.kind}.")
        s.competitor.injuries = remaining

    def _roll_injury(self, risk: float) -> Injury | None:
        if risk <= 0 or not self._rand.chance(risk):
            return None
        s = self.state
        injury = Injury(
            injury_id=stable_id("inj", s.week_index, len(s.competitor.injuries) + 1),
            kind=self._rand.choice(INJURY_KINDS),
            severity=self._rand.randint(1, 4),
            weeks_out=self._rand.randint(1, 4),
        )
        s.competitor.injuries.append(injury)
        s.log(f"Injury: {injury.kind}, out {injury.weeks_out} week(s).")
        return injury

    def _expire_offers(self) -> None:
        s = self.state
        expired = [o for o in s.offers if o.deadline_week_index < s.week_index]
        if not expired:
            return
        s.offers = [o for o in s.offers if o.deadline_week_index >= s.week_index]
        for offer in expired:
            s.log(f"Offer from {offer.school_name} expired.")

    def _refresh_derived(self) -> None:
        s = self.state
        c = s.competitor
        rating = c.overall_rating
        s.reputation.state_rank = self._player_rank(c.weight_class)
        national = s.pools.national_ranked
        national_rank = 1 + sum(1 for o in national if o.overall_rating > rating)
        s.reputation.national_rank = national_rank if national and national_rank <= len(national) else None
        s.reputation.recruiting_score = compute_score(c, s.reputation, s.life, s.record.career)

    def _player_rank(self, weight_class: int) -> int | None:
        field = [e for e in self.state.rankings.get(weight_class, []) if e.entry_id != PLAYER_ENTRY_ID]
        if not field:
            return None
        rank = player_rank_in_list(self.state.competitor.overall_rating, field)
        return rank if rank <= len(field) else None

    def _budget_context(self, mode: BudgetMode) -> BudgetContext:
        s = self.state
        c = s.competitor
        return BudgetContext(
            life_stage=s.life_stage,
            mode=mode,
            is_tournament_week=is_tournament_week(s.week, s.life_stage),
            injury_weeks_out=[i.weeks_out for i in c.injuries],
            over_weight_class=c.weight is not None and c.weight.pounds_over > 0,
            action_hours=s.settings.weekly_action_hours,
        )

    def _action_budget(self) -> int:
        return available_hours(self._budget_context(BudgetMode.ACTION_HOURS))

    def _week_closed(self) -> Outcome | None:
        s = self.state
        if s.career_complete:
            return Outcome.reject(OutcomeCode.INVALID_CHOICE, "Career complete.")
        if s.activity.committed:
            return Outcome.reject(OutcomeCode.INVALID_CHOICE, "This week is already committed to a full-week plan.")
        return None

    def _partner(self) -> RelationshipEntry | None:
        return romantic_partner(self.state.relationships)

    def _relationship(self, rel_id: str) -> RelationshipEntry | None:
        return next((r for r in self.state.relationships if r.rel_id == rel_id), None)

    def _note(self, summary: WeekSummary, text: str) -> None:
        summary.messages.append(text)
        self.state.log(text)

    def _save_rng(self) -> None:
        self.state.rng_state = self._rand.serialize()
