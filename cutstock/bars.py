"""
Montagem de barras em aberto e fila de origem das peças
"""

import logging
from collections import deque
from typing import Dict, Iterable, List, Tuple

from .calculators import StockCalculator
from .config import LENGTH_EPSILON
from .exceptions import AccountingViolationError, CutOverflowError
from .models import Cut, CuttingSegment, EnhancedConstraints, OptimizationItem

logger = logging.getLogger(__name__)


class BarBuilder:
    """
    Barra em montagem

    `used` não inclui as margens de segurança; elas são somadas apenas na
    finalização do plano.
    """

    def __init__(self, cut_id: str, stock_index: int, stock_length: float, constraints: EnhancedConstraints):
        self.cut_id = cut_id
        self.stock_index = stock_index
        self.stock_length = stock_length
        self.constraints = constraints
        self.usable = constraints.usable_length(stock_length)
        self.segments: List[CuttingSegment] = []
        self.used = 0.0
        self.kerf_loss = 0.0

    @property
    def next_kerf(self) -> float:
        return StockCalculator.kerf_needed(len(self.segments), self.constraints.kerf_width)

    def space_after(self, length: float) -> float:
        """Espaço útil que sobraria após colocar a peça"""
        return self.usable - (self.used + self.next_kerf + length)

    def fits(self, length: float) -> bool:
        return self.space_after(length) >= -LENGTH_EPSILON

    def add(self, length: float, work_order_id: str = "", profile_type: str = "standard") -> CuttingSegment:
        kerf = self.next_kerf
        if self.used + kerf + length > self.usable + LENGTH_EPSILON:
            logger.error(
                f"Estouro na barra {self.cut_id}: peça {length}mm, usado {self.used}mm, útil {self.usable}mm"
            )
            raise CutOverflowError(self.cut_id, length, self.used + kerf, self.usable)

        position = self.constraints.start_safety + self.used + kerf
        segment = CuttingSegment(
            id=f"{self.cut_id}-seg-{len(self.segments)}",
            sequence_number=len(self.segments),
            length=length,
            position=position,
            end_position=position + length,
            work_order_id=work_order_id,
            profile_type=profile_type,
        )
        self.segments.append(segment)
        self.used += kerf + length
        self.kerf_loss += kerf
        return segment

    def to_cut(self) -> Cut:
        safety = self.constraints.safety_margin
        remaining = self.stock_length - self.used - safety
        if remaining < -LENGTH_EPSILON:
            logger.error(f"Barra {self.cut_id} excede o estoque: usado {self.used}mm + margens {safety}mm")
            raise AccountingViolationError(
                self.cut_id, self.used + safety, remaining, self.stock_length, LENGTH_EPSILON
            )

        return Cut(
            id=self.cut_id,
            stock_index=self.stock_index,
            stock_length=self.stock_length,
            segments=list(self.segments),
            segment_count=len(self.segments),
            used_length=self.used,
            remaining_length=max(0.0, remaining),
            kerf_loss=self.kerf_loss,
            safety_margin=safety,
            profile_type=self.segments[0].profile_type if self.segments else "standard",
        )


class DemandQueue:
    """Origem (ordem de serviço, perfil) de cada unidade demandada, por comprimento"""

    def __init__(self, items: Iterable[OptimizationItem]):
        self._queues: Dict[float, deque] = {}
        for item in items:
            queue = self._queues.setdefault(item.length, deque())
            for _ in range(item.quantity):
                queue.append((item.work_order_id, item.profile_type))

    def take(self, length: float) -> Tuple[str, str]:
        queue = self._queues.get(length)
        if not queue:
            return "", "standard"
        return queue.popleft()
