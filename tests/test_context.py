"""
Testes do contexto de otimização
"""

import unittest

from cutstock.context import OptimizationContext
from cutstock.exceptions import InvalidInputError
from cutstock.models import (
    EnhancedConstraints, ObjectiveType, OptimizationItem, OptimizationObjective
)


class TestOptimizationContext(unittest.TestCase):

    def setUp(self):
        self.items = [
            OptimizationItem(length=918, quantity=4, work_order_id="OS-1"),
            OptimizationItem(length=687, quantity=3, work_order_id="OS-2"),
            OptimizationItem(length=918, quantity=2, work_order_id="OS-3"),
        ]

    def test_default_stock_length(self):
        context = OptimizationContext(self.items)
        self.assertEqual(context.stock_lengths, (6100.0,))
        self.assertEqual(context.primary_stock_length, 6100.0)

    def test_stock_lengths_are_deduplicated_and_sorted(self):
        context = OptimizationContext(self.items, stock_lengths=[6500, 6100, 6500, 7300])
        self.assertEqual(context.stock_lengths, (6100.0, 6500.0, 7300.0))
        self.assertEqual(context.primary_stock_length, 7300.0)

    def test_accessors(self):
        context = OptimizationContext(self.items, request_id="req-1")
        self.assertEqual(context.request_id, "req-1")
        self.assertEqual(context.total_item_count, 9)
        self.assertTrue(context.has_objective(ObjectiveType.MINIMIZE_WASTE))
        self.assertFalse(context.has_objective(ObjectiveType.MINIMIZE_COST))
        self.assertEqual(context.usable_length(6100), 6096.0)
        self.assertIsInstance(context.items, tuple)
        self.assertGreater(context.start_time, 0)

    def test_item_groups_merge_lengths(self):
        groups = OptimizationContext(self.items).item_groups()
        self.assertEqual([(g.length, g.quantity) for g in groups], [(918.0, 6), (687.0, 3)])

    def test_item_at_usable_length_accepted(self):
        # 1000 - 0.1 - 0.2 arredonda para 999.6999999999999
        constraints = EnhancedConstraints(start_safety=0.1, end_safety=0.2)
        context = OptimizationContext(
            [OptimizationItem(length=999.7, quantity=2)], stock_lengths=[1000], constraints=constraints
        )
        self.assertEqual(context.total_item_count, 2)

    def test_empty_items_rejected(self):
        with self.assertRaises(InvalidInputError):
            OptimizationContext([])

    def test_invalid_item_rejected_by_model(self):
        with self.assertRaises(ValueError):
            OptimizationItem(length=0, quantity=1)
        with self.assertRaises(ValueError):
            OptimizationItem(length=100, quantity=0)

    def test_empty_objectives_rejected(self):
        with self.assertRaises(InvalidInputError):
            OptimizationContext(self.items, objectives=[])

    def test_objective_weights_must_sum_to_one(self):
        objectives = [
            OptimizationObjective(type=ObjectiveType.MINIMIZE_WASTE, weight=0.5),
            OptimizationObjective(type=ObjectiveType.MINIMIZE_COST, weight=0.4),
        ]
        with self.assertRaises(InvalidInputError):
            OptimizationContext(self.items, objectives=objectives)

        objectives.append(OptimizationObjective(type=ObjectiveType.MINIMIZE_TIME, weight=0.1))
        context = OptimizationContext(self.items, objectives=objectives)
        self.assertTrue(context.has_objective(ObjectiveType.MINIMIZE_TIME))

    def test_oversize_item_rejected(self):
        items = [OptimizationItem(length=7000, quantity=1, work_order_id="OS-9")]
        with self.assertRaises(InvalidInputError) as ctx:
            OptimizationContext(items, stock_lengths=[6100])
        self.assertIn("7000", str(ctx.exception))
        self.assertIsInstance(ctx.exception, ValueError)

    def test_item_must_fit_usable_length(self):
        constraints = EnhancedConstraints(kerf_width=0, start_safety=50, end_safety=50)
        items = [OptimizationItem(length=6050, quantity=1)]
        with self.assertRaises(InvalidInputError):
            OptimizationContext(items, stock_lengths=[6100], constraints=constraints)

    def test_stock_consumed_by_safety_margins_dropped(self):
        constraints = EnhancedConstraints(kerf_width=0, start_safety=50, end_safety=50)
        with self.assertLogs("cutstock.context", level="WARNING"):
            context = OptimizationContext(
                [OptimizationItem(length=500, quantity=1)],
                stock_lengths=[80, 6100],
                constraints=constraints,
            )
        self.assertEqual(context.stock_lengths, (6100.0,))

    def test_no_usable_stock_rejected(self):
        constraints = EnhancedConstraints(kerf_width=0, start_safety=50, end_safety=50)
        with self.assertRaises(InvalidInputError):
            OptimizationContext(
                [OptimizationItem(length=10, quantity=1)],
                stock_lengths=[80, 100],
                constraints=constraints,
            )


if __name__ == '__main__':
    unittest.main()
