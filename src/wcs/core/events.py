from __future__ import annotations

from collections import defaultdict
from typing import Callable, DefaultDict

from wcs.contracts import NarrativeEvent
from wcs.core.ids import make_id, now_utc

NarrativeHandler = Callable[[NarrativeEvent], None]


class EventBus:
    def __init__(self) -> None:
        self._narrative_handlers: list[tuple[str | None, NarrativeHandler]] = []
        self._counter: DefaultDict[str, int] = defaultdict(int)

    def subscribe_narrative(self, handler: NarrativeHandler, scope: str | None = None) -> None:
        self._narrative_handlers.append((scope, handler))

    def publish_narrative(self, event: NarrativeEvent) -> None:
        self._counter[event.scope] += 1
        for scope, handler in self._narrative_handlers:
            if scope is None or scope == event.scope:
                handler(event)

    def emitted_count(self, scope: str | None = None) -> int:
        if scope is None:
            return sum(self._counter.values())
        return self._counter[scope]


def career_event(event_type: str, claim: str, week_index: int, severity: str = "normal") -> NarrativeEvent:
    return NarrativeEvent(
        event_id=make_id("ne"),
        time=now_utc(),
        scope="career",
        event_type=event_type,
        actors=["player"],
        claims=[claim],
        evidence_handles=[f"week_index:{week_index}"],
        severity=severity,
        confidentiality_tier="public",
    )
