from __future__ import annotations

import unittest

from pickem.schemas import Contest, Final, InProgress, Participant
from pickem.standings import compute_standings, pick_status


def _final(contest_id: int, away: str, home: str, winner: str) -> Contest:
    return Contest(
        id=contest_id,
        away_name=away,
        home_name=home,
        day="Sunday",
        kickoff="1:00pm",
        result=Final(away_score=0, home_score=0, winner=winner),
    )


class StandingsTests(unittest.TestCase):
    def test_correct_player_ranks_first(self) -> None:
        contests = [_final(1, "Chicago", "Denver", "Denver")]
        participants = [
            Participant(id=1, display_name="A", picks={1: "Denver"}),
            Participant(id=2, display_name="B", picks={1: "Chicago"}),
        ]

        table = compute_standings(participants, contests)

        self.assertEqual([1, 2], [row.id for row in table])
        self.assertEqual((1, 0), (table[0].correct, table[0].incorrect))
        self.assertEqual((0, 1), (table[1].correct, table[1].incorrect))
        self.assertEqual([1, 2], [row.rank for row in table])

    def test_pending_and_unpicked_contests(self) -> None:
        contests = [
            _final(1, "Jets", "Bills", "Bills"),
            Contest(id=2, away_name="Bears", home_name="Lions", day="Monday", kickoff="8:15pm"),
            Contest(
                id=3,
                away_name="Rams",
                home_name="Jaguars",
                day="Sunday",
                kickoff="9:30am",
                result=InProgress(away_score=7, home_score=0, leader="Rams"),
            ),
            _final(4, "Saints", "Bears", "Saints"),
        ]
        participant = Participant(id=1, display_name="A", picks={1: "Bills", 2: "Lions", 3: "Rams"})

        row = compute_standings([participant], contests)[0]

        self.assertEqual((1, 0, 2, 3), (row.correct, row.incorrect, row.pending, row.total))

    def test_ties_broken_by_incorrect_then_input_order(self) -> None:
        contests = [
            _final(1, "Jets", "Bills", "Bills"),
            _final(2, "Bears", "Lions", "Lions"),
            Contest(id=3, away_name="Rams", home_name="Jaguars", day="Sunday", kickoff="9:30am"),
        ]
        participants = [
            Participant(id=1, display_name="two wrong", picks={1: "Jets", 2: "Bears"}),
            Participant(id=2, display_name="one right pending", picks={1: "Bills", 3: "Rams"}, tiebreaker=40),
            Participant(id=3, display_name="one right one wrong", picks={1: "Bills", 2: "Bears"}),
            Participant(id=4, display_name="one right", picks={2: "Lions"}, tiebreaker=10),
            Participant(id=5, display_name="nothing", picks={}),
        ]

        table = compute_standings(participants, contests)

        self.assertEqual([2, 4, 3, 5, 1], [row.id for row in table])
        self.assertEqual(40, table[0].tiebreaker)

    def test_repeated_calls_are_identical(self) -> None:
        contests = [_final(1, "Jets", "Bills", "Bills"), _final(2, "Bears", "Lions", "Bears")]
        participants = [
            Participant(id=i, display_name=f"P{i}", picks={1: "Bills" if i % 2 else "Jets", 2: "Bears"})
            for i in range(1, 7)
        ]

        first = [row.model_dump_json() for row in compute_standings(participants, contests)]
        second = [row.model_dump_json() for row in compute_standings(participants, contests)]

        self.assertEqual(first, second)

    def test_picks_for_unknown_contests_are_ignored(self) -> None:
        participant = Participant(id=1, display_name="A", picks={99: "Bills"})

        row = compute_standings([participant], [_final(1, "Jets", "Bills", "Bills")])[0]

        self.assertEqual(0, row.total)


class PickStatusTests(unittest.TestCase):
    def test_statuses(self) -> None:
        final = _final(1, "Jets", "Bills", "Bills")
        open_contest = Contest(id=2, away_name="Bears", home_name="Lions", day="Monday", kickoff="8:15pm")

        self.assertEqual("correct", pick_status(final, "Bills"))
        self.assertEqual("incorrect", pick_status(final, "Jets"))
        self.assertEqual("not_picked", pick_status(final, None))
        self.assertEqual("pending", pick_status(open_contest, "Lions"))
        self.assertEqual("not_picked", pick_status(open_contest, ""))


if __name__ == "__main__":
    unittest.main()
