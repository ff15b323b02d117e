from __future__ import annotations

from typing import Optional, Sequence

from pickem.schemas import Contest, Participant, PickStatus, RankedParticipant


def pick_status(contest: Contest, pick: Optional[str]) -> PickStatus:
    winner = contest.winner
    if not pick:
        return "not_picked"
    if winner is None:
        return "pending"
    return "correct" if pick == winner else "incorrect"


def compute_standings(
    participants: Sequence[Participant],
    contests: Sequence[Contest],
) -> list[RankedParticipant]:
    """Tally each participant's picks and rank them.

    Ordered by correct (desc) then incorrect (asc); remaining ties keep the
    input order. The tiebreaker value is carried through untouched.
    """
    tallies: list[dict] = []
    for participant in participants:
        counts = {"correct": 0, "incorrect": 0, "pending": 0}
        for contest in contests:
            status = pick_status(contest, participant.picks.get(contest.id))
            if status != "not_picked":
                counts[status] += 1
        tallies.append(
            {
                "id": participant.id,
                "display_name": participant.display_name,
                "picks": dict(participant.picks),
                "tiebreaker": participant.tiebreaker,
                "total": sum(counts.values()),
                **counts,
            }
        )

    tallies.sort(key=lambda row: (-row["correct"], row["incorrect"]))
    return [RankedParticipant(rank=index, **row) for index, row in enumerate(tallies, start=1)]
