from typing import Protocol


class CheckSchedule(Protocol):
    def due(self) -> bool: ...


class IterationCheckSchedule:
    """Counts listener iterations and signals a status check every ``every`` of them.

    The counter resets as soon as a check comes due, whatever the check
    later reports. Bursty input shortens the wall-clock interval between
    checks because iterations then complete faster.
    """

    def __init__(self, every: int = 100) -> None:
        if every < 1:
            raise ValueError(f"every must be positive, got {every}")
        self._every = every
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    def due(self) -> bool:
        self._count += 1
        if self._count >= self._every:
            self._count = 0
            return True
        return False
