from __future__ import annotations

from dataclasses import dataclass, fields

from wcs.contracts import ValidationError, ValidationIssue


@dataclass(slots=True)
class EngineSettings:
    name: str = "standard"
    weekly_action_hours: int = 40
    logistic_slope: float = 8.0
    passive_energy_recovery: int = 6
    yearly_growth_cap: int = 14
    starting_money: int = 500
    injury_rate_multiplier: float = 1.0

    def validate(self) -> None:
        issues: list[ValidationIssue] = []
        if not 8 <= self.weekly_action_hours <= 168:
            issues.append(_issue("weekly_action_hours", "must be within [8, 168]"))
        if self.logistic_slope <= 0:
            issues.append(_issue("logistic_slope", "must be positive"))
        if not 0 <= self.passive_energy_recovery <= 25:
            issues.append(_issue("passive_energy_recovery", "must be within [0, 25]"))
        if not 1 <= self.yearly_growth_cap <= 60:
            issues.append(_issue("yearly_growth_cap", "must be within [1, 60]"))
        if self.starting_money < 0:
            issues.append(_issue("starting_money", "must be non-negative"))
        if not 0.0 <= self.injury_rate_multiplier <= 3.0:
            issues.append(_issue("injury_rate_multiplier", "must be within [0, 3]"))
        if issues:
            raise ValidationError(issues)


def _issue(field_name: str, message: str) -> ValidationIssue:
    return ValidationIssue(
        code="INVALID_ENGINE_SETTING",
        severity="blocking",
        field_path=f"settings.{field_name}",
        entity_id=field_name,
        message=message,
    )


def default_engine_settings() -> dict[str, EngineSettings]:
    return {
        "standard": EngineSettings(),
        "hardcore": EngineSettings(
            name="hardcore",
            weekly_action_hours=36,
            logistic_slope=7.0,
            passive_energy_recovery=4,
            yearly_growth_cap=10,
            starting_money=250,
            injury_rate_multiplier=1.3,
        ),
    }


def validate_settings_config(config: dict[str, object]) -> EngineSettings:
    known = {f.name for f in fields(EngineSettings)}
    unknown = sorted(set(config) - known)
    if unknown:
        raise ValueError(f"unknown engine settings: {unknown}")
    preset = str(config.get("name", "standard"))
    base = default_engine_settings().get(preset)
    if base is None:
        raise ValueError(f"unknown settings preset '{preset}'")
    merged = {f.name: getattr(base, f.name) for f in fields(EngineSettings)}
    merged.update(config)
    settings = EngineSettings(**merged)
    settings.validate()
    return settings
