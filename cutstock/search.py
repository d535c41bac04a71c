"""
Busca best-first sobre combinações de padrões
"""

import heapq
import itertools
import logging
import math
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .models import CuttingPattern

logger = logging.getLogger(__name__)

# Sucessores gerados entre consultas ao relógio
CLOCK_CHECK_INTERVAL = 1024


@dataclass(frozen=True)
class SearchConfig:
    max_states: int = 10000
    overproduction_tolerance: int = 0
    waste_normalization: float = 10.0
    max_successors: Optional[int] = None
    time_limit: Optional[float] = None


@dataclass(frozen=True)
class SearchState:
    """Peças produzidas, barras usadas, sobra acumulada e padrões escolhidos"""
    produced: Tuple[int, ...]
    bars: int
    waste: float
    picks: Tuple[int, ...]


class PrioritySearchSolver:
    """
    Procura a combinação de padrões que atende a demanda com menos barras

    Estados são vetores de produção alinhados à tabela de comprimentos dos
    padrões. Empates na fila são resolvidos pela ordem de inserção.

    Três orçamentos encerram a busca sem solução: estados retirados da fila,
    sucessores gerados e tempo. O motivo da última parada fica em `stop_reason`
    ("goal", "exhausted", "states", "successors" ou "time").
    """

    def __init__(self):
        self.stop_reason: Optional[str] = None

    def solve(self, patterns: Sequence[CuttingPattern], demand: Sequence[int],
              config: SearchConfig) -> Optional[SearchState]:
        """
        Executa a busca

        Args:
            patterns: Padrões candidatos (mesma tabela de comprimentos)
            demand: Quantidade exigida por comprimento
            config: Limites e tolerância

        Returns:
            Estado-objetivo ou None se a fila esvaziar ou algum orçamento for atingido
        """
        self.stop_reason = "exhausted"
        if not patterns:
            return None

        required = tuple(demand)
        limits = tuple(q + config.overproduction_tolerance for q in required)
        lengths = patterns[0].lengths
        best_density = max(
            sum(l * c for l, c in zip(lengths, p.counts)) for p in patterns
        )
        if best_density <= 0:
            return None

        deadline = time.time() + config.time_limit if config.time_limit is not None else None
        counter = itertools.count()
        start = SearchState(produced=(0,) * len(required), bars=0, waste=0.0, picks=())
        best_seen: Dict[Tuple[int, ...], Tuple[int, float]] = {start.produced: (0, 0.0)}
        open_set: List = [(self._priority(start, required, lengths, best_density, config), next(counter), start)]

        pops = 0
        generated = 0
        while open_set:
            if pops >= config.max_states:
                return self._stop("states", pops, generated, patterns)
            if deadline is not None and time.time() >= deadline:
                return self._stop("time", pops, generated, patterns)

            _, _, state = heapq.heappop(open_set)
            pops += 1

            if best_seen.get(state.produced, (state.bars, state.waste)) < (state.bars, state.waste):
                continue

            if all(r <= p <= lim for r, p, lim in zip(required, state.produced, limits)):
                self.stop_reason = "goal"
                logger.info(
                    f"Busca concluída: {state.bars} barras, sobra {state.waste:.1f}mm, "
                    f"{pops} estados, {generated} sucessores"
                )
                return state

            for index, pattern in enumerate(patterns):
                generated += 1
                if config.max_successors is not None and generated > config.max_successors:
                    return self._stop("successors", pops, generated, patterns)
                if deadline is not None and generated % CLOCK_CHECK_INTERVAL == 0 and time.time() >= deadline:
                    return self._stop("time", pops, generated, patterns)

                produced = tuple(p + c for p, c in zip(state.produced, pattern.counts))
                if any(p > lim for p, lim in zip(produced, limits)):
                    continue

                successor = SearchState(
                    produced=produced,
                    bars=state.bars + 1,
                    waste=state.waste + pattern.waste,
                    picks=state.picks + (index,),
                )
                key = (successor.bars, successor.waste)
                seen = best_seen.get(produced)
                if seen is not None and seen <= key:
                    continue
                best_seen[produced] = key
                priority = self._priority(successor, required, lengths, best_density, config)
                heapq.heappush(open_set, (priority, next(counter), successor))

        return self._stop("exhausted", pops, generated, patterns)

    def _stop(self, reason: str, pops: int, generated: int, patterns: Sequence[CuttingPattern]) -> None:
        self.stop_reason = reason
        logger.info(
            f"Busca sem solução ({reason}) após {pops} estados e {generated} sucessores "
            f"({len(patterns)} padrões)"
        )
        return None

    @staticmethod
    def _priority(state: SearchState, required, lengths, best_density: float, config: SearchConfig) -> float:
        shortage = 0
        remaining = 0.0
        for r, p, length in zip(required, state.produced, lengths):
            if p < r:
                shortage += r - p
                remaining += (r - p) * length
        return (
            shortage * 1000
            + state.waste / config.waste_normalization * 1000
            + state.bars
            + math.ceil(remaining / best_density)
        )
