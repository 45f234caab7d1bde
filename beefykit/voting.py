"""Vote target selection and aggregation of votes into signed commitments."""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Optional

from beefykit.gossip import GossipValidator
from beefykit.notification import SignedCommitmentSender
from beefykit.rounds import Round, Rounds, Vote

log = logging.getLogger(__name__)

_U32_MAX = (1 << 32) - 1


def _next_power_of_two(value: int) -> int:
    return 1 if value <= 1 else 1 << (value - 1).bit_length()


def vote_target(best_grandpa: int, best_beefy: int, min_delta: int) -> int:
    """Return the next block number to vote on."""
    diff = min(max(best_grandpa - best_beefy, 0), _U32_MAX)
    step = max(min_delta, _next_power_of_two(diff))
    target = best_beefy + step
    log.debug(
        "vote target - diff: %s, next_power_of_two: %s, target block: #%s",
        diff,
        _next_power_of_two(diff),
        target,
    )
    return target


def should_vote_on(
    number: int, best_grandpa: int, best_beefy: Optional[int], min_delta: int
) -> bool:
    """Return True if block ``number`` is the one to vote on now."""
    if best_beefy is None:
        log.debug("Missing best BEEFY block - won't vote for: %s", number)
        return False
    return number == vote_target(best_grandpa, best_beefy, min_delta)


@dataclass(frozen=True)
class SignedCommitment:
    """A concluded round: the commitment and one signature slot per validator."""

    payload: Hashable
    block_number: int
    validator_set_id: int
    signatures: list[Optional[bytes]]


class VoteAggregator:
    """Collects votes and emits a signed commitment when a round concludes."""

    def __init__(
        self,
        rounds: Optional[Rounds] = None,
        gossip_validator: Optional[GossipValidator] = None,
        sender: Optional[SignedCommitmentSender] = None,
        on_justification: Optional[Callable[[int, SignedCommitment], None]] = None,
    ) -> None:
        self.rounds = Rounds() if rounds is None else rounds
        self.gossip_validator = GossipValidator() if gossip_validator is None else gossip_validator
        self.sender = sender
        self.on_justification = on_justification
        self.best_beefy_block: Optional[int] = None
        self.last_signed_id = 0

    def handle_vote(self, round: Round, vote: Vote) -> Optional[SignedCommitment]:
        """Record ``vote``; return the signed commitment if it concluded the round."""
        self.gossip_validator.note_round(round[1])

        if not (self.rounds.add_vote(round, vote) and self.rounds.is_done(round)):
            return None
        signatures = self.rounds.drop(round)
        if signatures is None:
            return None

        self.last_signed_id = self.rounds.validator_set_id
        signed = SignedCommitment(
            payload=round[0],
            block_number=round[1],
            validator_set_id=self.last_signed_id,
            signatures=signatures,
        )
        log.info("Round #%s concluded, committed: %s.", round[1], signed)

        if self.on_justification is not None:
            try:
                self.on_justification(round[1], signed)
            except Exception:  # a round may conclude more than once
                log.debug("Failed to append justification: %s", signed)

        if self.sender is not None:
            self.sender.notify(signed)
        self.best_beefy_block = round[1]
        return signed