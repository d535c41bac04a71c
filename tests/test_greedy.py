"""
Testes do fallback guloso
"""

import unittest
from collections import Counter

from cutstock.bars import BarBuilder, DemandQueue
from cutstock.config import SolverSettings
from cutstock.context import OptimizationContext
from cutstock.exceptions import CutOverflowError
from cutstock.greedy import (
    BestFitFinder, FutureOpportunityCalculator, ItemPlacer,
    StockSelectionStrategy, WasteMinimizer
)
from cutstock.models import EnhancedConstraints, OptimizationItem


NO_KERF = EnhancedConstraints(kerf_width=0, start_safety=50, end_safety=50)


class TestBarBuilder(unittest.TestCase):

    def test_segment_positions_with_kerf(self):
        constraints = EnhancedConstraints(kerf_width=3.5, start_safety=2, end_safety=2)
        bar = BarBuilder("cut-0", 0, 6100, constraints)
        first = bar.add(1000, "OS-1", "KASA")
        second = bar.add(1000, "OS-1", "KASA")

        self.assertEqual(first.position, 2)
        self.assertEqual(first.end_position, 1002)
        self.assertEqual(second.position, 1005.5)
        self.assertEqual(second.end_position - second.position, 1000)
        self.assertEqual(bar.kerf_loss, 3.5)

        cut = bar.to_cut()
        self.assertEqual(cut.segment_count, 2)
        self.assertEqual(cut.used_length, 2003.5)
        self.assertAlmostEqual(cut.used_length + cut.remaining_length + cut.safety_margin, 6100, delta=1e-9)
        self.assertEqual(cut.profile_type, "KASA")
        self.assertFalse(cut.finalized)

    def test_overflow_raises(self):
        constraints = EnhancedConstraints(kerf_width=0, start_safety=0, end_safety=0)
        bar = BarBuilder("cut-0", 0, 1000, constraints)
        bar.add(600)
        self.assertFalse(bar.fits(500))
        with self.assertLogs("cutstock.bars", level="ERROR"):
            with self.assertRaises(CutOverflowError):
                bar.add(500)

    def test_demand_queue_follows_input_order(self):
        queue = DemandQueue([
            OptimizationItem(length=500, quantity=1, work_order_id="OS-1", profile_type="A"),
            OptimizationItem(length=500, quantity=1, work_order_id="OS-2", profile_type="B"),
        ])
        self.assertEqual(queue.take(500), ("OS-1", "A"))
        self.assertEqual(queue.take(500), ("OS-2", "B"))
        self.assertEqual(queue.take(500), ("", "standard"))


class TestHeuristics(unittest.TestCase):

    def setUp(self):
        self.settings = SolverSettings()

    def test_fragment_penalty(self):
        minimizer = WasteMinimizer(self.settings)
        self.assertAlmostEqual(minimizer.adjusted_waste(50, 75), 50 / 0.95)
        self.assertEqual(minimizer.adjusted_waste(0, 75), 0)
        self.assertEqual(minimizer.adjusted_waste(100, 75), 100)

    def test_future_opportunity(self):
        calculator = FutureOpportunityCalculator(self.settings)
        self.assertEqual(calculator.score(500, [], 0), 1.0)
        self.assertAlmostEqual(calculator.score(500, [600, 400, 300, 100], 0), 2 / 3)
        self.assertEqual(calculator.score(400, [400], 3.5), 0.0)

    def test_stock_selection_prefers_less_total_waste(self):
        context = OptimizationContext(
            [OptimizationItem(length=918, quantity=6)], stock_lengths=[3500, 6100], constraints=NO_KERF
        )
        self.assertEqual(StockSelectionStrategy().select(918, 6, context), 6100)

    def test_stock_selection_prefers_shorter_stock(self):
        context = OptimizationContext(
            [OptimizationItem(length=1000, quantity=3)], stock_lengths=[3500, 6100], constraints=NO_KERF
        )
        self.assertEqual(StockSelectionStrategy().select(1000, 3, context), 3500)

    def test_best_fit_picks_tightest_bar(self):
        context = OptimizationContext([OptimizationItem(length=900, quantity=1)], constraints=NO_KERF)
        loose = BarBuilder("cut-0", 0, 6100, NO_KERF)
        loose.add(4000)
        tight = BarBuilder("cut-1", 1, 6100, NO_KERF)
        tight.add(5000)
        full = BarBuilder("cut-2", 2, 6100, NO_KERF)
        full.add(5500)

        finder = BestFitFinder(self.settings)
        self.assertIs(finder.find([loose, tight, full], 900, [], context), tight)
        self.assertIsNone(finder.find([full], 900, [], context))


class TestItemPlacer(unittest.TestCase):

    def test_places_every_unit(self):
        items = [
            OptimizationItem(length=1000, quantity=7, work_order_id="OS-1"),
            OptimizationItem(length=450, quantity=5, work_order_id="OS-2"),
        ]
        context = OptimizationContext(items, stock_lengths=[6100], constraints=NO_KERF)
        cuts = ItemPlacer().place_all(items, context)

        produced = Counter(s.length for cut in cuts for s in cut.segments)
        self.assertEqual(produced, Counter({1000.0: 7, 450.0: 5}))
        self.assertEqual([cut.id for cut in cuts], [f"cut-{i}" for i in range(len(cuts))])
        for cut in cuts:
            self.assertGreaterEqual(cut.remaining_length, 0)
            self.assertLessEqual(cut.used_length, NO_KERF.usable_length(cut.stock_length))
            self.assertEqual(cut.segment_count, len(cut.segments))

    def test_fills_bars_in_order(self):
        items = [OptimizationItem(length=1000, quantity=12)]
        context = OptimizationContext(items, stock_lengths=[6100], constraints=NO_KERF)
        cuts = ItemPlacer().place_all(items, context)
        self.assertEqual(len(cuts), 2)
        self.assertEqual([cut.segment_count for cut in cuts], [6, 6])


if __name__ == '__main__':
    unittest.main()
