"""Countdown clocks, one per team.

The clock is driven from outside: whoever owns the real timer (the UI) reports elapsed
seconds through `tick`. That keeps the engine deterministic and free of threads.
"""

from dataclasses import dataclass

from src.core.shared_types import Team


@dataclass(frozen=True)
class ClockSnapshot:
    our_remaining: float
    opponent_remaining: float


class ChessClock:
    """Two independent countdowns. A side whose time reaches zero has its flag fallen."""

    __slots__ = ("_initial_seconds", "_remaining", "_expired")

    def __init__(self, initial_seconds: float) -> None:
        self._initial_seconds = initial_seconds
        self._remaining: dict[Team, float] = {}
        self._expired: set[Team] = set()
        self.reset()

    def reset(self) -> None:
        self._remaining = {team: float(self._initial_seconds) for team in Team}
        self._expired = set()

    def remaining(self, team: Team) -> float:
        return self._remaining[team]

    def is_flag_fallen(self, team: Team) -> bool:
        return team in self._expired

    def tick(self, team: Team, seconds: float = 1.0) -> bool:
        """Consume time from `team`'s clock. Returns True only the first time that clock runs out."""
        if seconds <= 0:
            raise ValueError(f"seconds must be positive, got {seconds}")
        if team in self._expired:
            return False
        self._remaining[team] = max(0.0, self._remaining[team] - seconds)
        if self._remaining[team] <= 0.0:
            self._expired.add(team)
            return True
        return False

    def snapshot(self) -> ClockSnapshot:
        return ClockSnapshot(
            our_remaining=self._remaining[Team.OUR],
            opponent_remaining=self._remaining[Team.OPPONENT],
        )
