"""
Testes da análise de problema
"""

import unittest

from cutstock.analyzer import ProblemAnalyzer
from cutstock.models import OptimizationItem


def distinct_items(count, quantity=1):
    return [OptimizationItem(length=100 + i * 10, quantity=quantity) for i in range(count)]


class TestProblemAnalyzer(unittest.TestCase):

    def setUp(self):
        self.analyzer = ProblemAnalyzer()

    def test_small_problem_uses_pattern_search(self):
        items = [OptimizationItem(length=918, quantity=4), OptimizationItem(length=687, quantity=3)]
        analysis = self.analyzer.analyze(items)
        self.assertEqual(analysis.unique_lengths, 2)
        self.assertEqual(analysis.total_demand, 7)
        self.assertEqual(analysis.max_quantity, 4)
        self.assertAlmostEqual(analysis.avg_quantity_per_length, 3.5)
        self.assertEqual(analysis.estimated_pattern_count, 4)
        self.assertEqual(analysis.pattern_complexity, 28)
        self.assertEqual(analysis.complexity, "low")
        self.assertTrue(analysis.use_pattern_search)
        self.assertIsNone(analysis.pattern_limit)

    def test_medium_problem_by_length_count(self):
        analysis = self.analyzer.analyze(distinct_items(12))
        self.assertEqual(analysis.complexity, "medium")
        self.assertEqual(analysis.pattern_limit, 50000)

    def test_medium_problem_by_demand(self):
        analysis = self.analyzer.analyze(distinct_items(5, quantity=120))
        self.assertEqual(analysis.total_demand, 600)
        self.assertEqual(analysis.complexity, "medium")

    def test_high_problem(self):
        analysis = self.analyzer.analyze(distinct_items(5, quantity=300))
        self.assertEqual(analysis.complexity, "high")
        self.assertEqual(analysis.pattern_limit, 30000)
        self.assertTrue(analysis.use_pattern_search)

    def test_extreme_by_demand(self):
        analysis = self.analyzer.analyze(distinct_items(5, quantity=500))
        self.assertEqual(analysis.complexity, "extreme")
        self.assertFalse(analysis.use_pattern_search)

    def test_extreme_by_pattern_complexity(self):
        items = distinct_items(17)
        analysis = self.analyzer.analyze(items)
        self.assertGreater(analysis.pattern_complexity, 1_000_000)
        self.assertEqual(analysis.complexity, "extreme")
        self.assertFalse(self.analyzer.should_use_pattern_search(items))
        self.assertIsNone(self.analyzer.recommended_pattern_limit(items))

    def test_extreme_by_length_count(self):
        analysis = self.analyzer.analyze(distinct_items(25))
        self.assertEqual(analysis.complexity, "extreme")

    def test_lengths_are_merged(self):
        items = [OptimizationItem(length=500, quantity=2), OptimizationItem(length=500, quantity=3)]
        analysis = self.analyzer.analyze(items)
        self.assertEqual(analysis.unique_lengths, 1)
        self.assertEqual(analysis.max_quantity, 5)
        self.assertEqual(analysis.to_dict()["total_demand"], 5)


if __name__ == '__main__':
    unittest.main()
