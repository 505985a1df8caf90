"""Persistence result value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PersistenceResult:
    """Outcome of a successful persist call: where the file landed and its size."""

    path: str
    size: int
    filename: str
    identifier: str

    def __str__(self) -> str:
        return self.path
