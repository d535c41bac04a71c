"""
Testes da busca por prioridade
"""

import unittest

from cutstock.models import CuttingPattern
from cutstock.search import PrioritySearchSolver, SearchConfig


def pattern(stock, lengths, counts, used, waste):
    return CuttingPattern(stock_length=stock, lengths=lengths, counts=counts, used=used, waste=waste)


class TestPrioritySearchSolver(unittest.TestCase):

    def setUp(self):
        self.solver = PrioritySearchSolver()
        self.full_bar = pattern(6100, (1000.0,), (6,), 6000.0, 0.0)

    def test_exact_solution(self):
        state = self.solver.solve([self.full_bar], [12], SearchConfig(max_states=1000))
        self.assertIsNotNone(state)
        self.assertEqual(state.produced, (12,))
        self.assertEqual(state.bars, 2)
        self.assertEqual(state.picks, (0, 0))

    def test_prefers_single_bar(self):
        lengths = (918.0, 687.0)
        patterns = [
            pattern(3500, lengths, (2, 2), 3210.0, 190.0),
            pattern(6100, lengths, (4, 3), 5733.0, 267.0),
            pattern(3500, lengths, (1, 3), 2979.0, 421.0),
            pattern(3500, lengths, (3, 0), 2754.0, 646.0),
        ]
        state = self.solver.solve(patterns, [4, 3], SearchConfig(max_states=1000))
        self.assertEqual(state.produced, (4, 3))
        self.assertEqual(state.bars, 1)
        self.assertEqual(state.picks, (1,))

    def test_unreachable_demand_returns_none(self):
        self.assertIsNone(self.solver.solve([self.full_bar], [7], SearchConfig(max_states=1000)))

    def test_overproduction_tolerance(self):
        state = self.solver.solve(
            [self.full_bar], [7], SearchConfig(max_states=1000, overproduction_tolerance=5)
        )
        self.assertEqual(state.produced, (12,))

    def test_state_limit(self):
        self.assertIsNone(self.solver.solve([self.full_bar], [12], SearchConfig(max_states=1)))

    def test_stop_reason(self):
        self.solver.solve([self.full_bar], [12], SearchConfig(max_states=1000))
        self.assertEqual(self.solver.stop_reason, "goal")
        self.solver.solve([self.full_bar], [7], SearchConfig(max_states=1000))
        self.assertEqual(self.solver.stop_reason, "exhausted")
        self.solver.solve([self.full_bar], [12], SearchConfig(max_states=1))
        self.assertEqual(self.solver.stop_reason, "states")

    def test_successor_budget_bounds_large_pattern_sets(self):
        # cada estado expande 2000 padrões
        patterns = [pattern(6100, (1000.0,), (1,), 1000.0, 5100.0 + i) for i in range(2000)]
        config = SearchConfig(max_states=10000, max_successors=5000)

        self.assertIsNone(self.solver.solve(patterns, [50], config))
        self.assertEqual(self.solver.stop_reason, "successors")

    def test_time_limit(self):
        state = self.solver.solve([self.full_bar], [12], SearchConfig(max_states=1000, time_limit=0))
        self.assertIsNone(state)
        self.assertEqual(self.solver.stop_reason, "time")

    def test_no_patterns(self):
        self.assertIsNone(self.solver.solve([], [1], SearchConfig()))

    def test_deterministic(self):
        lengths = (918.0, 687.0)
        patterns = [
            pattern(6100, lengths, (5, 2), 5964.0, 36.0),
            pattern(6100, lengths, (2, 6), 5958.0, 42.0),
            pattern(3500, lengths, (2, 2), 3210.0, 190.0),
            pattern(6100, lengths, (4, 3), 5733.0, 267.0),
        ]
        first = self.solver.solve(patterns, [12, 12], SearchConfig(max_states=5000))
        second = self.solver.solve(patterns, [12, 12], SearchConfig(max_states=5000))
        self.assertEqual(first, second)


if __name__ == '__main__':
    unittest.main()
