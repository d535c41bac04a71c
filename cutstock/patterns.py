"""
Geração de padrões de corte por enumeração limitada
"""

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence

from .calculators import StockCalculator
from .config import LENGTH_EPSILON, SolverSettings
from .exceptions import NoPatternsFoundError
from .models import CuttingPattern, CuttingSegment, EnhancedConstraints, ItemGroup

logger = logging.getLogger(__name__)


def format_length(length: float) -> str:
    return f"{length:g}"


class PatternGenerator:
    """
    Enumera os padrões de corte viáveis para cada comprimento de estoque

    Cada padrão é um vetor de contagens alinhado à tabela de comprimentos dos
    grupos (ordem decrescente). A enumeração usa uma pilha explícita; cada
    ramo carrega sua própria tupla de contagens.
    """

    def __init__(self, settings: Optional[SolverSettings] = None):
        self.settings = settings or SolverSettings()

    def generate(
        self,
        groups: Sequence[ItemGroup],
        stock_lengths: Iterable[float],
        constraints: EnhancedConstraints,
        max_patterns: Optional[int] = None,
    ) -> List[CuttingPattern]:
        """
        Gera, filtra e ordena os padrões de corte

        Args:
            groups: Demanda agrupada por comprimento
            stock_lengths: Comprimentos de estoque disponíveis
            constraints: Restrições de corte
            max_patterns: Teto de padrões retornados (None = sem teto)

        Returns:
            Padrões ordenados por (sobra, estoque, contagens)

        Raises:
            NoPatternsFoundError: nenhum estoque admite padrão algum
        """
        lengths = tuple(group.length for group in groups)
        demands = tuple(group.quantity for group in groups)
        stocks = sorted(set(stock_lengths), reverse=True)

        efficient: List[CuttingPattern] = []
        maximal: List[CuttingPattern] = []
        for stock in stocks:
            usable = constraints.usable_length(stock)
            if usable <= 0:
                logger.warning(f"Estoque de {stock}mm ignorado: comprimento útil {usable}mm")
                continue

            for pattern in self._enumerate(stock, usable, lengths, demands, constraints.kerf_width):
                maximal.append(pattern)
                if pattern.used / usable >= self.settings.min_pattern_utilization:
                    efficient.append(pattern)

        if not maximal:
            raise NoPatternsFoundError(stocks, lengths)

        patterns = efficient
        if not patterns:
            logger.warning(
                f"Nenhum padrão atinge {self.settings.min_pattern_utilization:.0%} de utilização; "
                f"mantendo os {len(maximal)} padrões sem filtro"
            )
            patterns = maximal

        patterns.sort(key=lambda p: (p.waste, p.stock_length, p.counts))
        if max_patterns is not None and len(patterns) > max_patterns:
            logger.info(f"Padrões truncados de {len(patterns)} para {max_patterns}")
            patterns = patterns[:max_patterns]

        logger.info(f"{len(patterns)} padrões gerados para {len(stocks)} comprimentos de estoque")
        return patterns

    def _enumerate(self, stock: float, usable: float, lengths, demands, kerf: float):
        """
        Percorre todos os vetores de contagem viáveis e devolve os não dominados

        Um padrão P é dominado quando outro padrão Q tem, para todo comprimento,
        contagem >= à de P e sobra estritamente menor. Como a viabilidade é
        monotônica, isso equivale a existir um comprimento que ainda cabe em P
        sem ultrapassar a demanda; basta testar esse acréscimo na folha.
        """
        n = len(lengths)
        budget = self.settings.max_pattern_nodes
        visited = 0
        found = []

        # (índice do comprimento, contagens, soma das peças, número de peças)
        stack = [(0, (), 0.0, 0)]
        while stack:
            index, counts, piece_total, piece_count = stack.pop()
            visited += 1
            if visited > budget:
                logger.warning(
                    f"Enumeração de padrões para {stock}mm interrompida após {budget} nós"
                )
                break

            used = StockCalculator.pieces_length(piece_total, piece_count, kerf)

            if index == n:
                if piece_count == 0:
                    continue
                if self._can_extend(counts, used, usable, lengths, demands, kerf):
                    continue
                found.append(CuttingPattern(
                    stock_length=stock,
                    lengths=lengths,
                    counts=counts,
                    used=used,
                    waste=usable - used,
                ))
                continue

            length = lengths[index]
            capacity = usable - used + (kerf if piece_count == 0 else 0.0)
            bound = min(demands[index], math.floor((capacity + LENGTH_EPSILON) / (length + kerf)))
            for count in range(max(0, bound) + 1):
                stack.append((
                    index + 1,
                    counts + (count,),
                    piece_total + count * length,
                    piece_count + count,
                ))

        return found

    @staticmethod
    def _can_extend(counts, used, usable, lengths, demands, kerf) -> bool:
        for i, count in enumerate(counts):
            if count < demands[i] and used + lengths[i] + kerf <= usable + LENGTH_EPSILON:
                return True
        return False

    @staticmethod
    def plan_label(pattern: Dict[float, int]) -> str:
        """Rótulo legível, ex.: '2×918mm + 1×687mm'"""
        parts = [
            f"{pattern[length]}×{format_length(length)}mm"
            for length in sorted(pattern, reverse=True)
            if pattern[length] > 0
        ]
        return " + ".join(parts)

    @staticmethod
    def cutting_plan(segments: Iterable[CuttingSegment]) -> List[Dict]:
        """Agrega segmentos por comprimento (ordem decrescente)"""
        plan: Dict[float, Dict] = {}
        for segment in segments:
            entry = plan.get(segment.length)
            if entry is None:
                plan[segment.length] = {"length": segment.length, "count": 1, "profile": segment.profile_type}
            else:
                entry["count"] += 1
        return [plan[length] for length in sorted(plan, reverse=True)]
