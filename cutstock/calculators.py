"""
Calculadoras puras: barras, desperdício, custo e métricas
"""

import math
from typing import List, Sequence, Tuple

import numpy as np

from .config import LENGTH_EPSILON, WASTE_CATEGORY_LIMITS, SolverSettings
from .models import (
    CostBreakdown, CostModel, Cut, EnhancedConstraints, PerformanceMetrics,
    SolutionPath, WasteCategory, WasteDistribution, WasteStatistics
)

_CATEGORY_ORDER = (
    WasteCategory.MINIMAL,
    WasteCategory.SMALL,
    WasteCategory.MEDIUM,
    WasteCategory.LARGE,
    WasteCategory.EXCESSIVE,
)


class StockCalculator:
    """Cálculos de ocupação de uma barra"""

    @staticmethod
    def max_pieces_per_bar(item_length: float, stock_length: float, constraints: EnhancedConstraints) -> int:
        """
        Máximo de peças de um comprimento que cabem em uma barra

        Args:
            item_length: Comprimento da peça (mm)
            stock_length: Comprimento da barra (mm)
            constraints: Restrições de corte

        Returns:
            Número de peças (>= 0)
        """
        usable = constraints.usable_length(stock_length)
        kerf = constraints.kerf_width
        return max(0, math.floor((usable + kerf + LENGTH_EPSILON) / (item_length + kerf)))

    @staticmethod
    def kerf_needed(segment_count: int, kerf_width: float) -> float:
        """Kerf consumido antes da próxima peça"""
        if kerf_width <= 0:
            return 0.0
        return kerf_width if segment_count > 0 else 0.0

    @staticmethod
    def pieces_length(piece_total: float, piece_count: int, kerf_width: float) -> float:
        """Comprimento ocupado por peças e kerfs entre elas (sem margens)"""
        if piece_count <= 0:
            return 0.0
        return piece_total + kerf_width * (piece_count - 1)

    @staticmethod
    def efficiency(total_stock_length: float, total_waste: float) -> float:
        if total_stock_length <= 0:
            return 0.0
        return (total_stock_length - total_waste) / total_stock_length * 100

    @staticmethod
    def accounting_holds(used_length: float, remaining_length: float, stock_length: float,
                         tolerance: float) -> bool:
        return abs(used_length + remaining_length - stock_length) < tolerance


class WasteAnalyzer:
    """Classificação e estatísticas de sobras"""

    @staticmethod
    def categorize(remaining_length: float) -> WasteCategory:
        index = int(np.digitize(remaining_length, WASTE_CATEGORY_LIMITS))
        return _CATEGORY_ORDER[index]

    @staticmethod
    def is_reclaimable(remaining_length: float, min_scrap_length: float) -> bool:
        return remaining_length >= min_scrap_length

    @staticmethod
    def distribution(cuts: Sequence[Cut]) -> WasteDistribution:
        """Histograma das categorias de sobra dos cortes finalizados"""
        counts = {category: 0 for category in _CATEGORY_ORDER}
        for cut in cuts:
            counts[cut.waste_category] += 1
        return WasteDistribution(
            minimal=counts[WasteCategory.MINIMAL],
            small=counts[WasteCategory.SMALL],
            medium=counts[WasteCategory.MEDIUM],
            large=counts[WasteCategory.LARGE],
            excessive=counts[WasteCategory.EXCESSIVE],
            reclaimable=sum(1 for cut in cuts if cut.is_reclaimable),
            total_pieces=len(cuts),
        )

    @staticmethod
    def statistics(cuts: Sequence[Cut]) -> WasteStatistics:
        if not cuts:
            return WasteStatistics()

        remaining = np.array([cut.remaining_length for cut in cuts], dtype=float)
        total_stock = float(np.sum([cut.stock_length for cut in cuts]))
        total_waste = float(remaining.sum())

        return WasteStatistics(
            total_waste=total_waste,
            average_waste=float(remaining.mean()),
            min_waste=float(remaining.min()),
            max_waste=float(remaining.max()),
            std_waste=float(remaining.std()),
            waste_percentage=WasteAnalyzer.waste_percentage(total_waste, total_stock),
            reclaimable_percentage=WasteAnalyzer.reclaimable_percentage(cuts),
            excessive_cut_indices=WasteAnalyzer.excessive_cut_indices(cuts),
        )

    @staticmethod
    def waste_percentage(total_waste: float, total_stock_length: float) -> float:
        if total_stock_length <= 0:
            return 0.0
        return total_waste / total_stock_length * 100

    @staticmethod
    def reclaimable_percentage(cuts: Sequence[Cut]) -> float:
        """Percentual de barras cuja sobra é reaproveitável"""
        if not cuts:
            return 0.0
        return sum(1 for cut in cuts if cut.is_reclaimable) / len(cuts) * 100

    @staticmethod
    def excessive_cut_indices(cuts: Sequence[Cut]) -> List[int]:
        return [cut.stock_index for cut in cuts if cut.waste_category == WasteCategory.EXCESSIVE]

    @staticmethod
    def efficiency_category(efficiency: float) -> str:
        if efficiency >= 95:
            return "excellent"
        if efficiency >= 90:
            return "good"
        if efficiency >= 70:
            return "average"
        return "poor"


class CostCalculator:
    """Composição de custos de um plano"""

    @staticmethod
    def timing(cuts: Sequence[Cut], settings: SolverSettings) -> Tuple[float, float, float]:
        """
        Tempos estimados em minutos

        Returns:
            (preparação, corte, total)
        """
        setup_time = len(cuts) * settings.setup_time_per_bar
        cutting_time = sum(cut.segment_count for cut in cuts) * settings.cutting_time_per_segment
        return setup_time, cutting_time, setup_time + cutting_time

    @staticmethod
    def breakdown(cuts: Sequence[Cut], cost_model: CostModel, constraints: EnhancedConstraints,
                  total_time: float) -> CostBreakdown:
        total_segments = sum(cut.segment_count for cut in cuts)
        total_used = sum(cut.used_length for cut in cuts)
        total_waste = sum(cut.remaining_length for cut in cuts)

        material_cost = total_used * cost_model.material_cost
        cutting_cost = total_segments * cost_model.cutting_cost
        setup_cost = len(cuts) * cost_model.setup_cost
        waste_cost = total_waste * cost_model.waste_cost
        time_cost = total_time * cost_model.time_cost
        energy_cost = len(cuts) * constraints.energy_per_stock * cost_model.energy_cost

        return CostBreakdown(
            material_cost=material_cost,
            cutting_cost=cutting_cost,
            setup_cost=setup_cost,
            waste_cost=waste_cost,
            time_cost=time_cost,
            energy_cost=energy_cost,
            total_cost=material_cost + cutting_cost + setup_cost + waste_cost + time_cost + energy_cost,
        )

    @staticmethod
    def cost_per_meter(total_cost: float, total_length: float) -> float:
        if total_length <= 0:
            return 0.0
        return total_cost / (total_length / 1000)


class MetricsCalculator:
    """Pontuações e métricas de desempenho"""

    _COMPLEXITY = {
        SolutionPath.GREEDY: "O(n²)",
        SolutionPath.PATTERN_SEARCH: "O(2^n)",
    }
    _SCALABILITY = {
        SolutionPath.GREEDY: 8,
        SolutionPath.PATTERN_SEARCH: 7,
    }

    @staticmethod
    def confidence(efficiency: float, total_waste: float, total_cost: float) -> float:
        """
        Confiança do plano (0-100)

        Fatores: eficiência (peso 0.4), desperdício (0.3) e custo (0.3).
        """
        confidence = 100.0
        confidence *= 0.4 * max(0.0, efficiency / 100) + 0.6
        confidence *= 0.3 * max(0.0, 1 - total_waste / 10000) + 0.7
        confidence *= 0.3 * max(0.0, 1 - total_cost / 10000) + 0.7
        return float(max(0, min(100, round(confidence))))

    @staticmethod
    def quality_score(efficiency: float, total_waste: float) -> float:
        return max(0.0, min(100.0, efficiency - total_waste / 100))

    @staticmethod
    def optimization_score(efficiency: float, waste_percentage: float, quality_score: float) -> float:
        waste_score = max(0.0, 100 - waste_percentage)
        return float(round(efficiency * 0.5 + waste_score * 0.3 + quality_score * 0.2))

    @staticmethod
    def cutting_complexity(total_segments: int, stock_count: int) -> float:
        if stock_count == 0:
            return 0.0
        return min(100.0, total_segments / stock_count * 10)

    @staticmethod
    def memory_estimate(item_count: int) -> float:
        """Estimativa de memória (MB)"""
        return float(round(item_count * 0.1 * min(10, item_count / 100)))

    @classmethod
    def performance_metrics(cls, path: SolutionPath, item_count: int) -> PerformanceMetrics:
        return PerformanceMetrics(
            algorithm_complexity=cls._COMPLEXITY[path],
            convergence_rate=0.95,
            memory_usage=cls.memory_estimate(item_count),
            cpu_usage=0.0,
            scalability=cls._SCALABILITY[path],
        )
