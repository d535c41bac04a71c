"""
Testes de validação e finalização do plano
"""

import unittest

from cutstock.bars import BarBuilder
from cutstock.context import OptimizationContext
from cutstock.exceptions import (
    AccountingViolationError, DemandMismatchError, DemandShortageError,
    PlanInvariantError, SegmentCountMismatchError
)
from cutstock.models import (
    Cut, CuttingSegment, EnhancedConstraints, ItemGroup, OptimizationItem,
    SolutionPath, WasteCategory
)
from cutstock.validation import DemandValidator, PlanValidator


CONSTRAINTS = EnhancedConstraints(kerf_width=3.5, start_safety=2, end_safety=2, min_scrap_length=75)


def build_cut(index, lengths, stock=6100):
    bar = BarBuilder(f"cut-{index}", index, stock, CONSTRAINTS)
    for length in lengths:
        bar.add(length, "OS-1", "KASA")
    return bar.to_cut()


class TestDemandValidator(unittest.TestCase):

    def setUp(self):
        self.validator = DemandValidator()
        self.groups = [ItemGroup(1000.0, 2), ItemGroup(500.0, 1)]

    def test_exact(self):
        report = self.validator.validate([build_cut(0, [1000, 1000, 500])], self.groups)
        self.assertTrue(report.is_valid)
        self.assertEqual(report.errors, [])
        self.assertEqual(report.warnings, [])

    def test_shortage(self):
        report = self.validator.validate([build_cut(0, [1000, 500])], self.groups, tolerance=2)
        self.assertFalse(report.is_valid)
        self.assertEqual(len(report.errors), 1)
        self.assertIn("1000mm", report.errors[0])

    def test_overage_within_tolerance_is_warning(self):
        report = self.validator.validate([build_cut(0, [1000, 1000, 1000, 500])], self.groups, tolerance=2)
        self.assertTrue(report.is_valid)
        self.assertEqual(len(report.warnings), 1)

    def test_overage_beyond_tolerance_is_error(self):
        report = self.validator.validate([build_cut(0, [1000, 1000, 1000, 500])], self.groups, tolerance=0)
        self.assertFalse(report.is_valid)

    def test_undemanded_length_is_error(self):
        report = self.validator.validate([build_cut(0, [1000, 1000, 500, 300])], self.groups, tolerance=2)
        self.assertFalse(report.is_valid)


class TestPlanValidator(unittest.TestCase):

    def setUp(self):
        self.validator = PlanValidator()
        self.groups = [ItemGroup(1000.0, 2)]
        self.context = OptimizationContext(
            [OptimizationItem(length=1000, quantity=2)], stock_lengths=[6100], constraints=CONSTRAINTS
        )

    def test_validate_demand_shortage(self):
        with self.assertRaises(DemandShortageError) as ctx:
            self.validator.validate_demand([build_cut(0, [1000])], self.groups, SolutionPath.GREEDY)
        self.assertEqual(len(ctx.exception.errors), 1)

    def test_validate_demand_tolerance_per_path(self):
        cuts = [build_cut(0, [1000, 1000, 1000])]
        report = self.validator.validate_demand(cuts, self.groups, SolutionPath.GREEDY)
        self.assertTrue(report.is_valid)
        self.assertEqual(len(report.warnings), 1)

        with self.assertRaises(DemandMismatchError):
            self.validator.validate_demand(cuts, self.groups, SolutionPath.PATTERN_SEARCH)

    def test_finalize(self):
        cut = self.validator.finalize([build_cut(0, [1000, 1000])], self.context)[0]
        self.assertTrue(cut.finalized)
        self.assertEqual(cut.used_length, 2007.5)
        self.assertEqual(cut.remaining_length, 4092.5)
        self.assertEqual(cut.safety_margin, 0.0)
        self.assertEqual(cut.waste_category, WasteCategory.EXCESSIVE)
        self.assertTrue(cut.is_reclaimable)
        self.assertEqual(cut.plan_label, "2×1000mm")
        self.assertEqual(cut.profile_type, "KASA")
        self.assertAlmostEqual(cut.used_length + cut.remaining_length, cut.stock_length, delta=0.01)

        again = self.validator.finalize([cut], self.context)[0]
        self.assertEqual(again, cut)

    def test_finalize_accounting_violation(self):
        broken = Cut(id="cut-0", stock_index=0, stock_length=6100, used_length=6200,
                     remaining_length=0, safety_margin=0)
        with self.assertRaises(AccountingViolationError):
            self.validator.finalize([broken], self.context)

    def test_finalize_rejects_open_cut_that_does_not_add_up(self):
        broken = Cut(id="cut-0", stock_index=0, stock_length=6100, used_length=1000,
                     remaining_length=10, safety_margin=4)
        with self.assertRaises(AccountingViolationError):
            self.validator.finalize([broken], self.context)

    def test_bar_past_stock_length_raises(self):
        bar = BarBuilder("cut-0", 0, 6100, CONSTRAINTS)
        bar.add(1000, "OS-1", "KASA")
        bar.used = 6200
        with self.assertRaises(AccountingViolationError):
            bar.to_cut()

    def test_finalize_segment_count_mismatch(self):
        broken = Cut(id="cut-0", stock_index=0, stock_length=6100, segment_count=2,
                     used_length=0, remaining_length=6096, safety_margin=4)
        with self.assertRaises(SegmentCountMismatchError):
            self.validator.finalize([broken], self.context)

    def test_global_invariants(self):
        cuts = self.validator.finalize([build_cut(0, [1000]), build_cut(1, [1000])], self.context)
        self.validator.validate_global_invariants(cuts, self.context)

        duplicated = [cuts[0], cuts[0]]
        with self.assertRaises(PlanInvariantError):
            self.validator.validate_global_invariants(duplicated, self.context)

    def test_global_invariants_segment_bounds(self):
        segment = CuttingSegment(id="s0", sequence_number=0, length=1000, position=0, end_position=1000)
        cut = Cut(id="cut-0", stock_index=0, stock_length=6100, segments=[segment], segment_count=1,
                  used_length=1004, remaining_length=5096, finalized=True)
        with self.assertRaises(PlanInvariantError):
            self.validator.validate_global_invariants([cut], self.context)


if __name__ == '__main__':
    unittest.main()
