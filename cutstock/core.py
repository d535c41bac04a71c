"""
Núcleo do sistema CutStock: ponto de entrada da otimização
"""

import logging
import time
from typing import Iterable, List, Optional

from .analyzer import ProblemAnalyzer
from .config import SolverSettings
from .context import OptimizationContext
from .greedy import ItemPlacer
from .models import (
    AdvancedOptimizationResult, CostModel, Cut, EnhancedConstraints,
    OptimizationItem, OptimizationObjective, PerformanceSettings, SolutionPath
)
from .pattern_search import PatternSearchOptimizer
from .validation import PlanValidator

logger = logging.getLogger(__name__)


class CuttingOptimizer:
    """
    Sistema principal de otimização de cortes 1D

    Fluxo: análise do problema -> busca por padrões (com fallback guloso) ou
    guloso direto -> validação da demanda -> finalização -> resultado.
    """

    def __init__(self, settings: Optional[SolverSettings] = None):
        """
        Inicializa o otimizador

        Args:
            settings: Parâmetros do otimizador (padrão: SolverSettings())
        """
        self.settings = settings or SolverSettings()
        self.analyzer = ProblemAnalyzer()

    def optimize(self, context: OptimizationContext) -> AdvancedOptimizationResult:
        """
        Otimiza o plano de corte de um contexto

        Args:
            context: Contexto validado da chamada

        Returns:
            Resultado completo da otimização

        Raises:
            DemandShortageError, DemandMismatchError: plano não atende a demanda
            PlanInvariantError: invariante do plano violada
        """
        start_time = time.time()
        settings = context.settings
        logger.info(
            f"Otimização {context.request_id}: {context.total_item_count} peças, "
            f"estoques {list(context.stock_lengths)}"
        )

        analysis = self.analyzer.analyze(context.items)
        placer = ItemPlacer(settings)
        path = SolutionPath.GREEDY
        fallback_reason = None

        if analysis.use_pattern_search:
            path = SolutionPath.PATTERN_SEARCH
            optimizer = PatternSearchOptimizer(settings)

            def fallback() -> List[Cut]:
                nonlocal path
                path = SolutionPath.GREEDY
                return placer.place_all(context.items, context)

            cuts = optimizer.optimize(context.items, context, analysis.pattern_limit, fallback)
            fallback_reason = optimizer.fallback_reason
        else:
            fallback_reason = f"Problema de complexidade {analysis.complexity}"
            cuts = placer.place_all(context.items, context)

        validator = PlanValidator(settings)
        report = validator.validate_demand(cuts, context.item_groups(), path)
        cuts = validator.finalize(cuts, context)
        validator.validate_global_invariants(cuts, context)

        execution_time = (time.time() - start_time) * 1000
        result = validator.build_result(
            cuts,
            context,
            path,
            report,
            execution_time_ms=execution_time,
            metadata={
                "request_id": context.request_id,
                "stock_lengths": list(context.stock_lengths),
                "problem_analysis": analysis.to_dict(),
                "fallback_reason": fallback_reason,
            },
        )
        logger.info(
            f"Otimização {context.request_id} concluída via {path.value}: {result.stock_count} barras, "
            f"eficiência {result.efficiency:.2f}%, sobra {result.total_waste:.1f}mm"
        )
        return result

    def optimize_items(
        self,
        items: Iterable[OptimizationItem],
        stock_lengths: Optional[Iterable[float]] = None,
        constraints: Optional[EnhancedConstraints] = None,
        objectives: Optional[Iterable[OptimizationObjective]] = None,
        cost_model: Optional[CostModel] = None,
        performance: Optional[PerformanceSettings] = None,
    ) -> AdvancedOptimizationResult:
        """Atalho: monta o contexto (objetivo padrão: minimizar desperdício) e otimiza"""
        context = OptimizationContext(
            items,
            stock_lengths=stock_lengths,
            constraints=constraints,
            objectives=objectives,
            performance=performance,
            cost_model=cost_model,
            settings=self.settings,
        )
        return self.optimize(context)
