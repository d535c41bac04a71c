"""
CutStock - Otimizador de cortes lineares (cutting stock 1D)
"""

__version__ = "1.0.0"
__author__ = "CutStock Team"

from .context import OptimizationContext
from .core import CuttingOptimizer
from .exceptions import CutStockError, InvalidInputError, PlanInvariantError
from .models import (
    AdvancedOptimizationResult, CostModel, Cut, CuttingSegment, EnhancedConstraints,
    ObjectiveType, OptimizationItem, OptimizationObjective, PerformanceSettings
)

__all__ = [
    "CuttingOptimizer",
    "OptimizationContext",
    "OptimizationItem",
    "EnhancedConstraints",
    "OptimizationObjective",
    "ObjectiveType",
    "PerformanceSettings",
    "CostModel",
    "Cut",
    "CuttingSegment",
    "AdvancedOptimizationResult",
    "CutStockError",
    "InvalidInputError",
    "PlanInvariantError",
]
