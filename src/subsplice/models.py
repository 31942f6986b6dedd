from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Candidate:
    """A generated hostname plus where it came from."""
    hostname: str
    domain: str
    word: str
    position: int


@dataclass(frozen=True)
class ProbeOutcome:
    candidate: Candidate
    alive: bool = False
    resolved: bool = False
    scheme: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def hostname(self):
        return self.candidate.hostname

    @property
    def url(self):
        if not self.scheme:
            return None
        return f"{self.scheme}://{self.candidate.hostname}/"


@dataclass(frozen=True)
class RunStats:
    total: int
    completed: int
    resolved: int
    alive: int
    elapsed: float
