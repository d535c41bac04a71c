"""
Fallback guloso (best-fit decrescente)
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .bars import BarBuilder
from .calculators import StockCalculator
from .config import SolverSettings
from .context import OptimizationContext, group_items
from .models import Cut, OptimizationItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockOption:
    stock_length: float
    bars: int
    total_waste: float
    waste_percentage: float


class StockSelectionStrategy:
    """Escolhe o comprimento de estoque ao abrir uma nova barra"""

    WASTE_TIE = 100.0
    PERCENTAGE_TIE = 0.5

    def select(self, length: float, remaining_quantity: int, context: OptimizationContext) -> float:
        constraints = context.constraints
        best: Optional[StockOption] = None

        for stock in context.stock_lengths:
            capacity = StockCalculator.max_pieces_per_bar(length, stock, constraints)
            if capacity <= 0:
                continue
            quantity = max(1, remaining_quantity)
            bars = math.ceil(quantity / capacity)
            per_bar = min(capacity, quantity)
            used_per_bar = (constraints.safety_margin
                            + StockCalculator.pieces_length(per_bar * length, per_bar, constraints.kerf_width))
            waste_per_bar = stock - used_per_bar
            option = StockOption(
                stock_length=stock,
                bars=bars,
                total_waste=bars * waste_per_bar,
                waste_percentage=waste_per_bar / stock * 100,
            )
            if best is None or self._better(option, best):
                best = option

        if best is None:
            return context.primary_stock_length
        return best.stock_length

    def _better(self, a: StockOption, b: StockOption) -> bool:
        if abs(a.total_waste - b.total_waste) > self.WASTE_TIE:
            return a.total_waste < b.total_waste
        if a.bars != b.bars:
            return a.bars < b.bars
        if abs(a.waste_percentage - b.waste_percentage) > self.PERCENTAGE_TIE:
            return a.waste_percentage < b.waste_percentage
        return a.stock_length < b.stock_length


class WasteMinimizer:
    """Penaliza sobras pequenas demais para reaproveitar"""

    def __init__(self, settings: SolverSettings):
        self.penalty_factor = settings.fragment_penalty_factor

    def adjusted_waste(self, waste: float, min_scrap_length: float) -> float:
        if 0 < waste < min_scrap_length:
            return waste / self.penalty_factor
        return waste


class FutureOpportunityCalculator:
    def __init__(self, settings: SolverSettings):
        self.depth = settings.look_ahead_depth

    def score(self, space: float, upcoming: Sequence[float], kerf_width: float) -> float:
        """Fração das próximas peças que ainda caberiam no espaço"""
        window = list(upcoming)[:self.depth]
        if not window:
            return 1.0
        return sum(1 for length in window if length + kerf_width <= space) / len(window)


class BestFitFinder:
    """Procura a barra aberta que deixa a menor sobra após a colocação"""

    WASTE_TIE = 1.0
    ADJUSTED_TIE = 0.01

    def __init__(self, settings: SolverSettings):
        self.minimizer = WasteMinimizer(settings)
        self.future = FutureOpportunityCalculator(settings)

    def find(self, bars: Sequence[BarBuilder], length: float, upcoming: Sequence[float],
             context: OptimizationContext) -> Optional[BarBuilder]:
        constraints = context.constraints
        best = None
        best_key = None

        for bar in bars:
            if not bar.fits(length):
                continue
            waste = bar.space_after(length)
            key = (
                waste,
                self.minimizer.adjusted_waste(waste, constraints.min_scrap_length),
                bar.stock_length,
                self.future.score(waste, upcoming, constraints.kerf_width),
            )
            if best is None or self._better(key, best_key):
                best, best_key = bar, key

        return best

    def _better(self, a, b) -> bool:
        waste_a, adjusted_a, stock_a, future_a = a
        waste_b, adjusted_b, stock_b, future_b = b
        if abs(waste_a - waste_b) >= self.WASTE_TIE:
            return waste_a < waste_b
        if abs(adjusted_a - adjusted_b) >= self.ADJUSTED_TIE:
            return adjusted_a < adjusted_b
        if stock_a != stock_b:
            return stock_a < stock_b
        return future_a > future_b


class ItemPlacer:
    """Coloca cada unidade demandada, da maior para a menor"""

    def __init__(self, settings: Optional[SolverSettings] = None):
        self.settings = settings or SolverSettings()
        self.finder = BestFitFinder(self.settings)
        self.selector = StockSelectionStrategy()

    def place_all(self, items: Sequence[OptimizationItem], context: OptimizationContext) -> List[Cut]:
        ordered = sorted(items, key=lambda item: -item.length)
        lengths = [group.length for group in group_items(items)]
        remaining: Dict[float, int] = {}
        for item in items:
            remaining[item.length] = remaining.get(item.length, 0) + item.quantity

        bars: List[BarBuilder] = []
        for item in ordered:
            upcoming = lengths[lengths.index(item.length) + 1:]
            for _ in range(item.quantity):
                bar = self.finder.find(bars, item.length, upcoming, context)
                if bar is None:
                    stock = self.selector.select(item.length, remaining[item.length], context)
                    index = len(bars)
                    bar = BarBuilder(f"cut-{index}", index, stock, context.constraints)
                    bars.append(bar)
                    logger.debug(f"Nova barra {bar.cut_id} de {stock}mm para peça de {item.length}mm")

                bar.add(item.length, item.work_order_id, item.profile_type)
                remaining[item.length] -= 1

        logger.info(f"Guloso: {context.total_item_count} peças em {len(bars)} barras")
        return [bar.to_cut() for bar in bars]
