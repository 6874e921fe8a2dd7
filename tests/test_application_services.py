import random
import unittest

from application.reels import ReelGenerator
from application.services import GameSession, SessionState
from domain.models import Player, SpinRecord
from domain.repositories import PlayerRepository, SpinHistoryRepository
from domain.results import StoreResult


class InMemoryPlayerRepository(PlayerRepository):
    def __init__(self):
        self.players = {}
        self.next_id = 1
        self.fail_set_balance = False

    def ensure_schema(self):
        return StoreResult.ok()

    def find_player(self, name: str, age: int, card: str):
        for player in sorted(self.players.values(), key=lambda p: p.id):
            if (player.name, player.age, player.card) == (name, age, card):
                return StoreResult.ok(player.id)
        return StoreResult.ok(None)

    def create_player(self, name: str, age: int, card: str):
        player = Player(id=self.next_id, name=name, age=age, card=card, balance=0.0)
        self.players[player.id] = player
        self.next_id += 1
        return StoreResult.ok(player.id)

    def get_player(self, player_id: int):
        return StoreResult.ok(self.players.get(player_id))

    def set_balance(self, player_id: int, amount: float):
        if self.fail_set_balance:
            return StoreResult.fail("Error updating balance: disk I/O error")
        if player_id in self.players:
            self.players[player_id].balance = amount
        return StoreResult.ok()


class InMemorySpinHistoryRepository(SpinHistoryRepository):
    def __init__(self):
        self.records = []
        self.fail_append = False

    def ensure_schema(self):
        return StoreResult.ok()

    def append_spin_record(self, record: SpinRecord):
        if self.fail_append:
            return StoreResult.fail("Error saving spin history: database is locked")
        self.records.append(record)
        return StoreResult.ok(len(self.records))

    def get_spin_history(self, player_id: int):
        return StoreResult.ok([r for r in self.records if r.player_id == player_id])


class BrokenSchemaRepository(InMemoryPlayerRepository):
    def ensure_schema(self):
        return StoreResult.fail("Error creating players table: readonly database")


class GameSessionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.player_repo = InMemoryPlayerRepository()
        self.history_repo = InMemorySpinHistoryRepository()
        self.session = self._new_session()

    def _new_session(self, **kwargs) -> GameSession:
        return GameSession(
            self.player_repo,
            self.history_repo,
            reels=ReelGenerator(rng=random.Random(7)),
            **kwargs,
        )

    def test_identify_creates_new_player(self):
        result = self.session.identify("Alice", 30, "1111")
        self.assertTrue(result.success)
        self.assertTrue(result.created)
        self.assertEqual(result.player_id, 1)
        self.assertEqual(len(self.player_repo.players), 1)
        self.assertEqual(self.session.state, SessionState.FUND)

    def test_identify_known_player_reuses_id(self):
        first = self.session.identify("Alice", 30, "1111")

        second = self._new_session().identify("Alice", 30, "1111")
        self.assertTrue(second.success)
        self.assertFalse(second.created)
        self.assertEqual(second.player_id, first.player_id)
        self.assertEqual(len(self.player_repo.players), 1)

    def test_identity_triple_must_match_exactly(self):
        alice = self.session.identify("Alice", 30, "1111")
        other = self._new_session().identify("Alice", 31, "1111")
        self.assertTrue(other.created)
        self.assertNotEqual(alice.player_id, other.player_id)

    def test_fund_resets_balance_to_starting_value(self):
        self.session.identify("Alice", 30, "1111")
        result = self.session.fund()
        self.assertTrue(result.success)
        self.assertEqual(self.session.balance, 100.0)
        self.assertEqual(self.player_repo.players[1].balance, 100.0)

    def test_spin_before_fund_is_rejected(self):
        self.session.identify("Alice", 30, "1111")
        result = self.session.spin(10)
        self.assertFalse(result.success)
        self.assertEqual(self.history_repo.records, [])

    def test_fund_before_identify_is_rejected(self):
        result = self.session.fund()
        self.assertFalse(result.success)
        self.assertEqual(self.session.state, SessionState.IDENTIFY)

    def test_spin_deducts_bet_and_records_history(self):
        self.session.identify("Alice", 30, "1111")
        self.session.fund()

        result = self.session.spin(10)
        self.assertTrue(result.success)
        self.assertEqual(result.winnings, 0.0)
        self.assertEqual(result.balance, 90.0)
        self.assertEqual(len(result.grid), 3)
        self.assertTrue(all(len(row) == 3 for row in result.grid))
        self.assertEqual(self.player_repo.players[1].balance, 90.0)
        self.assertEqual(
            self.history_repo.records,
            [SpinRecord(player_id=1, bet=10, winnings=0.0, balance=90.0)],
        )

    def test_balance_after_many_spins(self):
        self.session.identify("Alice", 30, "1111")
        self.session.fund()

        bets = [5, 12.5, 0, -3, 40]
        for bet in bets:
            result = self.session.spin(bet)
            self.assertTrue(result.success)

        self.assertAlmostEqual(self.session.balance, 100.0 - sum(bets))
        self.assertEqual(len(self.history_repo.records), len(bets))
        self.assertEqual([r.bet for r in self.history_repo.records], bets)

    def test_balance_may_go_negative(self):
        self.session.identify("Alice", 30, "1111")
        self.session.fund()
        result = self.session.spin(250)
        self.assertTrue(result.success)
        self.assertEqual(result.balance, -150.0)

    def test_relogin_resets_leftover_balance(self):
        self.session.identify("Alice", 30, "1111")
        self.session.fund()
        self.session.spin(10)
        self.assertEqual(self.player_repo.players[1].balance, 90.0)

        again = self._new_session()
        again.identify("Alice", 30, "1111")
        again.fund()
        self.assertEqual(again.balance, 100.0)
        self.assertEqual(self.player_repo.players[1].balance, 100.0)

    def test_store_failures_are_reported_but_spin_continues(self):
        self.session.identify("Alice", 30, "1111")
        self.session.fund()
        self.player_repo.fail_set_balance = True
        self.history_repo.fail_append = True

        with self.assertLogs("application.services", level="WARNING") as logs:
            result = self.session.spin(10)
        self.assertTrue(result.success)
        self.assertEqual(result.balance, 90.0)
        self.assertEqual(len(result.store_errors), 2)
        self.assertIn("Error saving spin history", logs.output[-1])

    def test_store_failure_aborts_spin_when_requested(self):
        session = self._new_session(abort_on_store_error=True)
        session.identify("Alice", 30, "1111")
        session.fund()
        self.history_repo.fail_append = True

        result = session.spin(10)
        self.assertFalse(result.success)
        self.assertIn("Error saving spin history", result.error_message)

    def test_bootstrap_reports_schema_failure(self):
        session = GameSession(BrokenSchemaRepository(), self.history_repo)
        with self.assertLogs("application.services", level="WARNING"):
            result = session.bootstrap()
        self.assertFalse(result.success)
        self.assertEqual(len(result.store_errors), 1)

    def test_quit_is_terminal(self):
        self.session.identify("Alice", 30, "1111")
        self.session.fund()
        self.session.quit()
        self.assertEqual(self.session.state, SessionState.QUIT)
        self.assertFalse(self.session.spin(1).success)


if __name__ == "__main__":
    unittest.main()
