"""Tracking of BEEFY voting rounds and their completion."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Sequence
from dataclasses import dataclass, field
from typing import Optional

log = logging.getLogger(__name__)

Vote = tuple[bytes, bytes]
Round = tuple[Hashable, int]


def threshold(authorities: int) -> int:
    """Return the number of votes needed to conclude a round.

    Tolerates up to a third (rounded down) of ``authorities - 1`` faulty voters.
    """
    faulty = max(authorities - 1, 0) // 3
    return authorities - faulty


@dataclass(frozen=True)
class ValidatorSet:
    """An ordered list of validator public keys with the id of the set."""

    validators: Sequence[bytes] = field(default_factory=tuple)
    id: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "validators", tuple(bytes(v) for v in self.validators))


class Rounds:
    """Collects votes per round for one validator set."""

    def __init__(self, validator_set: Optional[ValidatorSet] = None) -> None:
        self._validator_set = ValidatorSet() if validator_set is None else validator_set
        self._rounds: dict[Round, list[Vote]] = {}

    @property
    def validator_set_id(self) -> int:
        """Id of the validator set the rounds belong to."""
        return self._validator_set.id

    @property
    def validators(self) -> list[bytes]:
        """Public keys of the validators, in set order."""
        return list(self._validator_set.validators)

    def add_vote(self, round: Round, vote: Vote) -> bool:
        """Record ``vote`` for ``round``; return False if it was already recorded."""
        votes = self._rounds.setdefault(round, [])
        if vote in votes:
            return False
        votes.append(vote)
        return True

    def is_done(self, round: Round) -> bool:
        """Return True once ``round`` has gathered enough votes."""
        votes = self._rounds.get(round)
        needed = threshold(len(self._validator_set.validators))
        done = votes is not None and len(votes) >= needed
        log.debug("Round #%s done: %s", round[1], done)
        return done

    def drop(self, round: Round) -> Optional[list[Optional[bytes]]]:
        """Forget ``round`` and return one signature slot per validator.

        Slots of validators that did not vote are None. Returns None if the
        round is unknown.
        """
        log.debug("About to drop round #%s", round[1])
        votes = self._rounds.pop(round, None)
        if votes is None:
            return None
        return [
            next((sig for public, sig in votes if public == authority), None)
            for authority in self._validator_set.validators
        ]