from __future__ import annotations

import asyncio
import unittest
from dataclasses import replace

from pickem.errors import (
    FeedFetchError,
    InvalidPickError,
    NoScheduleError,
    PickLockedError,
    RefreshInProgressError,
    ScheduleFormatError,
    UnknownContestError,
    UnknownParticipantError,
)
from pickem.schemas import Final, Unresolved
from pickem.settings import load_settings
from pickem.state import AppState, ScoreRefresher, initial_state
from pickem.teams import DEFAULT_NFL_ALIASES, NameResolver

SHEET = "WEEK 7\nSunday\nJets at Bills 1:00pm\nMonday\nBears at Lions 8:15pm\n"

SCOREBOARD = {
    "events": [
        {
            "id": "1",
            "competitions": [
                {
                    "status": {"type": {"name": "STATUS_FINAL"}},
                    "competitors": [
                        {"homeAway": "home", "team": {"displayName": "Buffalo Bills"}, "score": "17"},
                        {"homeAway": "away", "team": {"displayName": "New York Jets"}, "score": "10"},
                    ],
                }
            ],
        }
    ]
}


class AppStateTests(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = replace(load_settings(), default_week=3, season=2025)
        self.state = initial_state(self.settings).load_schedule(SHEET)

    def test_load_schedule_sets_week_and_contests(self) -> None:
        self.assertEqual(7, self.state.week_number)
        self.assertEqual(["Jets", "Bears"], [c.away_name for c in self.state.contests])

    def test_load_schedule_keeps_prior_week_when_absent(self) -> None:
        state = initial_state(self.settings).load_schedule("Jets at Bills 1:00pm")

        self.assertEqual(3, state.week_number)

    def test_load_schedule_format_error_leaves_state_unchanged(self) -> None:
        with self.assertRaises(ScheduleFormatError):
            self.state.load_schedule("nothing useful here")

        self.assertEqual(2, len(self.state.contests))

    def test_participants_and_picks(self) -> None:
        state, first = self.state.add_participant()
        state, second = state.add_participant("  Dana ")
        state = state.set_pick(first.id, 1, "Bills").set_pick(second.id, 1, "Jets")
        state = state.set_pick(first.id, 1, "Jets")
        state = state.rename_participant(first.id, "Alex").set_tiebreaker(first.id, 41)

        self.assertEqual("Player 1", first.display_name)
        self.assertEqual("Dana", second.display_name)
        self.assertEqual({1: "Jets"}, state.participant(1).picks)
        self.assertEqual(("Alex", 41), (state.participant(1).display_name, state.participant(1).tiebreaker))
        self.assertEqual([], self.state.participants)

    def test_set_pick_rejects_team_not_in_contest(self) -> None:
        state, participant = self.state.add_participant()

        with self.assertRaises(InvalidPickError):
            state.set_pick(participant.id, 1, "Lions")
        with self.assertRaises(UnknownContestError):
            state.set_pick(participant.id, 99, "Bills")
        with self.assertRaises(UnknownParticipantError):
            state.set_pick(42, 1, "Bills")

    def test_pick_on_final_contest_is_locked(self) -> None:
        state, participant = self.state.add_participant()
        state = state.set_pick(participant.id, 1, "Jets").set_contest_winner(1, "Bills")

        with self.assertRaises(PickLockedError):
            state.set_pick(participant.id, 1, "Bills")

        self.assertEqual({1: "Jets"}, state.participant(participant.id).picks)
        row = state.standings()[0]
        self.assertEqual((0, 1), (row.correct, row.incorrect))
        # Undecided contests still accept picks.
        state = state.set_pick(participant.id, 2, "Lions")
        self.assertEqual("Lions", state.participant(participant.id).picks[2])

    def test_pick_unlocks_when_manual_result_is_cleared(self) -> None:
        state, participant = self.state.add_participant()
        state = state.set_contest_winner(1, "Bills").set_contest_winner(1, None)

        state = state.set_pick(participant.id, 1, "Bills")

        self.assertEqual({1: "Bills"}, state.participant(participant.id).picks)

    def test_new_schedule_clears_picks_and_tiebreakers(self) -> None:
        state, participant = self.state.add_participant("Dana")
        state = state.set_pick(participant.id, 1, "Jets").set_tiebreaker(participant.id, 44)

        state = state.load_schedule("WEEK 8\nSteelers at Bengals 1:00pm\n")
        state = state.set_contest_winner(1, "Bengals")

        kept = state.participant(participant.id)
        self.assertEqual(("Dana", {}, 0), (kept.display_name, kept.picks, kept.tiebreaker))
        row = state.standings()[0]
        self.assertEqual((0, 0, 0, 0), (row.correct, row.incorrect, row.pending, row.total))

    def test_manual_winner_override_and_clear(self) -> None:
        state = self.state.set_contest_winner(2, "Lions")
        self.assertEqual(Final(away_score=0, home_score=0, winner="Lions"), state.contest(2).result)

        state = state.set_contest_winner(2, None)
        self.assertEqual(Unresolved(), state.contest(2).result)

        with self.assertRaises(InvalidPickError):
            state.set_contest_winner(2, "Bills")

    def test_standings_from_state(self) -> None:
        state, participant = self.state.add_participant()
        state = state.set_pick(participant.id, 1, "Bills").set_contest_winner(1, "Bills")

        row = state.standings()[0]

        self.assertEqual((1, 0, 0), (row.correct, row.incorrect, row.pending))

    def test_contests_by_day(self) -> None:
        grouped = self.state.contests_by_day()

        self.assertEqual(["Sunday", "Monday"], list(grouped))
        self.assertEqual([2], [c.id for c in grouped["Monday"]])

    def test_document_round_trip(self) -> None:
        state, participant = self.state.add_participant("Dana")
        state = state.set_pick(participant.id, 2, "Lions")

        restored = AppState.from_document(state.to_document())

        self.assertEqual(state, restored)


class ScoreRefresherTests(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = load_settings()
        self.resolver = NameResolver(DEFAULT_NFL_ALIASES)
        self.state = initial_state(self.settings).load_schedule(SHEET)

    def test_refresh_reconciles_fetched_scoreboard(self) -> None:
        calls = []

        def fetch(week, settings):
            calls.append(week)
            return SCOREBOARD

        refresher = ScoreRefresher(self.resolver, self.settings, fetch=fetch)

        state = asyncio.run(refresher.refresh(self.state))

        self.assertEqual([7], calls)
        self.assertEqual(Final(away_score=10, home_score=17, winner="Bills"), state.contest(1).result)
        self.assertIsInstance(state.contest(2).result, Unresolved)
        self.assertIsNotNone(state.last_score_update)
        self.assertFalse(refresher.in_flight)

    def test_refresh_requires_schedule(self) -> None:
        refresher = ScoreRefresher(self.resolver, self.settings, fetch=lambda week, settings: SCOREBOARD)

        with self.assertRaises(NoScheduleError):
            asyncio.run(refresher.refresh(initial_state(self.settings)))

    def test_fetch_failure_clears_in_flight_flag(self) -> None:
        def fetch(week, settings):
            raise FeedFetchError("down")

        refresher = ScoreRefresher(self.resolver, self.settings, fetch=fetch)

        with self.assertRaises(FeedFetchError):
            asyncio.run(refresher.refresh(self.state))
        self.assertFalse(refresher.in_flight)

    def test_second_refresh_while_in_flight_is_rejected(self) -> None:
        async def scenario():
            started = asyncio.Event()
            loop = asyncio.get_running_loop()
            release = asyncio.Event()

            def fetch(week, settings):
                loop.call_soon_threadsafe(started.set)
                asyncio.run_coroutine_threadsafe(release.wait(), loop).result()
                return SCOREBOARD

            refresher = ScoreRefresher(self.resolver, self.settings, fetch=fetch)
            first = asyncio.create_task(refresher.refresh(self.state))
            await started.wait()
            self.assertTrue(refresher.in_flight)
            with self.assertRaises(RefreshInProgressError):
                await refresher.refresh(self.state)
            release.set()
            return await first

        state = asyncio.run(scenario())

        self.assertEqual("Bills", state.contest(1).winner)


if __name__ == "__main__":
    unittest.main()
