"""
Otimizador por padrões: geração de padrões + busca por prioridade
"""

import logging
from typing import Callable, List, Optional, Sequence

from .bars import BarBuilder, DemandQueue
from .context import OptimizationContext, group_items
from .exceptions import NoPatternsFoundError, PlanInvariantError, SearchExhaustedError
from .models import Cut, CuttingPattern, OptimizationItem
from .outcome import Fatal, Ok, Outcome, Retryable
from .patterns import PatternGenerator
from .search import PrioritySearchSolver, SearchConfig, SearchState
from .validation import DemandValidator

logger = logging.getLogger(__name__)


class PatternSearchOptimizer:
    """Busca um plano que atende a demanda exatamente"""

    def __init__(self, settings=None, generator: Optional[PatternGenerator] = None,
                 solver: Optional[PrioritySearchSolver] = None):
        self.generator = generator or PatternGenerator(settings)
        self.settings = self.generator.settings
        self.solver = solver or PrioritySearchSolver()
        self.fallback_reason: Optional[str] = None

    def solve(self, items: Sequence[OptimizationItem], context: OptimizationContext,
              pattern_limit: Optional[int] = None) -> Outcome:
        """
        Tenta resolver pelo caminho de padrões

        Returns:
            Ok(cuts), Retryable(motivo) ou Fatal(erro)
        """
        groups = group_items(items)
        if context.performance.max_patterns is not None:
            pattern_limit = context.performance.max_patterns

        try:
            patterns = self.generator.generate(groups, context.stock_lengths, context.constraints, pattern_limit)
        except NoPatternsFoundError as e:
            logger.warning(f"Geração de padrões falhou: {e}")
            return Retryable(reason=e.message, code=e.code)

        max_states = self.settings.adaptive_state_limit(len(patterns), context.performance.max_search_states)
        tolerance = self.settings.overproduction.pattern_search
        config = SearchConfig(
            max_states=max_states,
            overproduction_tolerance=tolerance,
            waste_normalization=self.settings.waste_normalization,
            max_successors=self.settings.max_search_successors,
            time_limit=min(self.settings.max_search_seconds, context.performance.max_execution_time),
        )
        state = self.solver.solve(patterns, [group.quantity for group in groups], config)
        if state is None:
            reason = getattr(self.solver, "stop_reason", None) or "exhausted"
            error = SearchExhaustedError(max_states, len(patterns), reason)
            return Retryable(reason=error.message, code=error.code)

        try:
            cuts = self.to_cuts(state, patterns, items, context)
        except PlanInvariantError as e:
            return Fatal(error=e)

        report = DemandValidator().validate(cuts, groups, tolerance)
        if not report.is_valid:
            return Retryable(
                reason="Plano convertido não atende a demanda: " + "; ".join(report.errors),
                code="DEMAND_MISMATCH",
            )
        return Ok(cuts=cuts)

    def optimize(self, items: Sequence[OptimizationItem], context: OptimizationContext,
                 pattern_limit: Optional[int], fallback: Callable[[], List[Cut]]) -> List[Cut]:
        """Resolve pelo caminho de padrões; recorre a `fallback` em falhas recuperáveis"""
        outcome = self.solve(items, context, pattern_limit)

        if isinstance(outcome, Ok):
            return outcome.cuts
        if isinstance(outcome, Retryable):
            logger.warning(f"Busca por padrões sem solução ({outcome.code}): {outcome.reason}. Usando guloso")
            self.fallback_reason = outcome.reason
            return fallback()
        if isinstance(outcome, Fatal):
            logger.error(f"Invariante violada na busca por padrões: {outcome.error}")
            raise outcome.error
        raise TypeError(f"Resultado desconhecido: {outcome!r}")

    @staticmethod
    def to_cuts(state: SearchState, patterns: Sequence[CuttingPattern],
                items: Sequence[OptimizationItem], context: OptimizationContext) -> List[Cut]:
        """Converte os padrões escolhidos em barras com segmentos posicionados"""
        queue = DemandQueue(items)
        cuts = []
        for index, pick in enumerate(sorted(state.picks)):
            pattern = patterns[pick]
            bar = BarBuilder(f"cut-{index}", index, pattern.stock_length, context.constraints)
            for length, count in zip(pattern.lengths, pattern.counts):
                for _ in range(count):
                    work_order_id, profile_type = queue.take(length)
                    bar.add(length, work_order_id, profile_type)
            cuts.append(bar.to_cut())
        return cuts
