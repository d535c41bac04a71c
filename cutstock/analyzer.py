"""
Análise do tamanho do problema e escolha do caminho de solução
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .config import MAX_PATTERN_COMPLEXITY, PROBLEM_SIZE_TABLE
from .models import OptimizationItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProblemAnalysis:
    unique_lengths: int
    total_demand: int
    avg_quantity_per_length: float
    max_quantity: int
    pattern_complexity: int
    estimated_pattern_count: int
    complexity: str
    use_pattern_search: bool
    pattern_limit: Optional[int]

    def to_dict(self):
        return {
            "unique_lengths": self.unique_lengths,
            "total_demand": self.total_demand,
            "avg_quantity_per_length": self.avg_quantity_per_length,
            "max_quantity": self.max_quantity,
            "pattern_complexity": self.pattern_complexity,
            "estimated_pattern_count": self.estimated_pattern_count,
            "complexity": self.complexity,
            "use_pattern_search": self.use_pattern_search,
            "pattern_limit": self.pattern_limit,
        }


class ProblemAnalyzer:
    """
    Classifica o problema e recomenda o caminho de solução

    Problemas pequenos seguem para a busca por padrões (com limite de padrões
    para os médios e grandes); os extremos vão direto para o guloso.
    """

    def analyze(self, items: Iterable[OptimizationItem]) -> ProblemAnalysis:
        quantities = {}
        for item in items:
            quantities[item.length] = quantities.get(item.length, 0) + item.quantity

        unique_lengths = len(quantities)
        total_demand = sum(quantities.values())
        max_quantity = max(quantities.values()) if quantities else 0
        avg_quantity = total_demand / unique_lengths if unique_lengths else 0.0
        estimated_patterns = 2 ** unique_lengths
        pattern_complexity = estimated_patterns * total_demand

        complexity, use_pattern_search, pattern_limit = "extreme", False, None
        if pattern_complexity <= MAX_PATTERN_COMPLEXITY:
            for max_lengths, max_demand, level, limit in PROBLEM_SIZE_TABLE:
                if unique_lengths <= max_lengths and total_demand <= max_demand:
                    complexity, use_pattern_search, pattern_limit = level, True, limit
                    break

        analysis = ProblemAnalysis(
            unique_lengths=unique_lengths,
            total_demand=total_demand,
            avg_quantity_per_length=avg_quantity,
            max_quantity=max_quantity,
            pattern_complexity=pattern_complexity,
            estimated_pattern_count=estimated_patterns,
            complexity=complexity,
            use_pattern_search=use_pattern_search,
            pattern_limit=pattern_limit,
        )
        logger.info(
            f"Análise do problema: {unique_lengths} comprimentos, demanda {total_demand}, "
            f"complexidade {complexity} -> {'busca por padrões' if use_pattern_search else 'guloso'}"
        )
        return analysis

    def should_use_pattern_search(self, items: Iterable[OptimizationItem]) -> bool:
        return self.analyze(items).use_pattern_search

    def recommended_pattern_limit(self, items: Iterable[OptimizationItem]) -> Optional[int]:
        return self.analyze(items).pattern_limit
