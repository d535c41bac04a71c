"""
Validação de demanda, finalização das barras e montagem do resultado
"""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

from .calculators import CostCalculator, MetricsCalculator, StockCalculator, WasteAnalyzer
from .config import LENGTH_EPSILON, SolverSettings
from .exceptions import (
    AccountingViolationError, DemandMismatchError, DemandShortageError,
    PlanInvariantError, SegmentCountMismatchError
)
from .models import (
    AdvancedOptimizationResult, Cut, ItemGroup, PatternUsage, SolutionPath,
    StockSummary, ValidationReport, WorkOrderBreakdown
)
from .patterns import PatternGenerator, format_length

logger = logging.getLogger(__name__)

POSITION_TOLERANCE = 1e-6


def produced_counts(cuts: Sequence[Cut]) -> Counter:
    return Counter(segment.length for cut in cuts for segment in cut.segments)


class DemandValidator:
    """Compara as peças produzidas com a demanda"""

    def validate(self, cuts: Sequence[Cut], groups: Sequence[ItemGroup], tolerance: int = 0) -> ValidationReport:
        produced = produced_counts(cuts)
        errors, warnings = [], []

        for group in groups:
            count = produced.get(group.length, 0)
            label = format_length(group.length)
            if count < group.quantity:
                errors.append(f"{label}mm: faltam {group.quantity - count} de {group.quantity} peças")
            elif count > group.quantity + tolerance:
                errors.append(
                    f"{label}mm: {count - group.quantity} peças a mais (tolerância {tolerance})"
                )
            elif count > group.quantity:
                warnings.append(f"{label}mm: {count - group.quantity} peças a mais")

        demanded = {group.length for group in groups}
        for length in sorted(set(produced) - demanded):
            errors.append(f"{format_length(length)}mm: {produced[length]} peças não demandadas")

        return ValidationReport(is_valid=not errors, errors=errors, warnings=warnings)

    @staticmethod
    def shortages(cuts: Sequence[Cut], groups: Sequence[ItemGroup]) -> List[str]:
        produced = produced_counts(cuts)
        return [
            f"{format_length(group.length)}mm: faltam {group.quantity - produced.get(group.length, 0)} peças"
            for group in groups
            if produced.get(group.length, 0) < group.quantity
        ]


class PlanValidator:
    """Finalização e verificação das invariantes do plano"""

    def __init__(self, settings: Optional[SolverSettings] = None):
        self.settings = settings or SolverSettings()
        self.demand_validator = DemandValidator()

    def validate_demand(self, cuts: Sequence[Cut], groups: Sequence[ItemGroup],
                        path: SolutionPath) -> ValidationReport:
        """
        Valida a demanda com a tolerância do caminho

        Raises:
            DemandShortageError: peças faltando
            DemandMismatchError: excesso além da tolerância
        """
        tolerance = self.settings.overproduction.for_path(path.value)
        report = self.demand_validator.validate(cuts, groups, tolerance)

        shortages = self.demand_validator.shortages(cuts, groups)
        if shortages:
            logger.error(f"Plano com falta de peças: {shortages}")
            raise DemandShortageError(shortages)
        if not report.is_valid:
            logger.error(f"Plano diverge da demanda: {report.errors}")
            raise DemandMismatchError(report.errors)
        for warning in report.warnings:
            logger.warning(f"Excesso de produção tolerado: {warning}")
        return report

    def finalize(self, cuts: Sequence[Cut], context) -> List[Cut]:
        """Soma as margens ao comprimento usado e preenche os campos derivados"""
        constraints = context.constraints
        finalized = []

        for cut in cuts:
            if cut.finalized:
                finalized.append(cut)
                continue

            used = cut.used_length + cut.safety_margin
            if not StockCalculator.accounting_holds(used, cut.remaining_length, cut.stock_length, LENGTH_EPSILON):
                logger.error(
                    f"Contabilidade inválida na barra {cut.id}: usado {cut.used_length}mm + "
                    f"restante {cut.remaining_length}mm + margens {cut.safety_margin}mm ≠ {cut.stock_length}mm"
                )
                raise AccountingViolationError(cut.id, used, cut.remaining_length, cut.stock_length, LENGTH_EPSILON)

            # a verificação acima limita o resíduo negativo a LENGTH_EPSILON
            remaining = max(0.0, cut.stock_length - used)
            if cut.segment_count != len(cut.segments):
                logger.error(f"Contagem de segmentos inválida na barra {cut.id}")
                raise SegmentCountMismatchError(cut.id, cut.segment_count, len(cut.segments))

            pattern = {entry["length"]: entry["count"] for entry in PatternGenerator.cutting_plan(cut.segments)}
            finalized.append(cut.model_copy(update={
                "used_length": used,
                "remaining_length": remaining,
                "safety_margin": 0.0,
                "waste_category": WasteAnalyzer.categorize(remaining),
                "is_reclaimable": WasteAnalyzer.is_reclaimable(remaining, constraints.min_scrap_length),
                "plan_label": PatternGenerator.plan_label(pattern),
                "profile_type": self._profile_type(cut),
                "finalized": True,
            }))

        return finalized

    @staticmethod
    def _profile_type(cut: Cut) -> str:
        if cut.segments and cut.segments[0].profile_type:
            return cut.segments[0].profile_type
        return cut.profile_type or "Unknown"

    def validate_global_invariants(self, cuts: Sequence[Cut], context) -> None:
        """Verifica contabilidade, contagens e posições de todas as barras finalizadas"""
        constraints = context.constraints
        tolerance = self.settings.accounting_tolerance
        seen_ids = set()

        for cut in cuts:
            if cut.id in seen_ids:
                raise PlanInvariantError(f"Identificador de barra duplicado: {cut.id}", code="DUPLICATE_CUT_ID")
            seen_ids.add(cut.id)

            if cut.remaining_length < 0:
                raise PlanInvariantError(f"Barra {cut.id} com sobra negativa", code="NEGATIVE_REMAINING")
            if not StockCalculator.accounting_holds(cut.used_length, cut.remaining_length,
                                                    cut.stock_length, tolerance):
                raise AccountingViolationError(cut.id, cut.used_length, cut.remaining_length,
                                               cut.stock_length, tolerance)
            if cut.segment_count != len(cut.segments):
                raise SegmentCountMismatchError(cut.id, cut.segment_count, len(cut.segments))

            limit = cut.stock_length - constraints.end_safety + POSITION_TOLERANCE
            for segment in cut.segments:
                if abs(segment.end_position - segment.position - segment.length) > POSITION_TOLERANCE:
                    raise PlanInvariantError(
                        f"Segmento {segment.id} com posição inconsistente", code="SEGMENT_POSITION"
                    )
                if segment.position < constraints.start_safety - POSITION_TOLERANCE or segment.end_position > limit:
                    raise PlanInvariantError(
                        f"Segmento {segment.id} fora da área útil da barra {cut.id}", code="SEGMENT_BOUNDS"
                    )

    def build_result(
        self,
        cuts: Sequence[Cut],
        context,
        path: SolutionPath,
        report: ValidationReport,
        execution_time_ms: float = 0.0,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AdvancedOptimizationResult:
        """Monta o resultado completo a partir das barras finalizadas"""
        cuts = list(cuts)
        constraints = context.constraints

        total_stock = sum(cut.stock_length for cut in cuts)
        total_used = sum(cut.used_length for cut in cuts)
        total_waste = sum(cut.remaining_length for cut in cuts)
        total_segments = sum(cut.segment_count for cut in cuts)
        efficiency = max(0.0, min(100.0, StockCalculator.efficiency(total_stock, total_waste)))

        setup_time, cutting_time, total_time = CostCalculator.timing(cuts, self.settings)
        costs = CostCalculator.breakdown(cuts, context.cost_model, constraints, total_time)

        statistics = WasteAnalyzer.statistics(cuts)
        quality = MetricsCalculator.quality_score(efficiency, total_waste)

        if statistics.waste_percentage > constraints.max_waste_percentage:
            warning = (
                f"Desperdício de {statistics.waste_percentage:.2f}% acima do máximo aceitável "
                f"({constraints.max_waste_percentage:g}%)"
            )
            logger.warning(warning)
            report = report.model_copy(update={"warnings": report.warnings + [warning]})

        return AdvancedOptimizationResult(
            algorithm=path,
            cuts=cuts,
            efficiency=efficiency,
            total_waste=total_waste,
            total_cost=costs.total_cost,
            cost_breakdown=costs,
            stock_count=len(cuts),
            total_length=total_stock,
            total_segments=total_segments,
            average_cuts_per_stock=total_segments / len(cuts) if cuts else 0.0,
            setup_time=setup_time,
            cutting_time=cutting_time,
            total_time=total_time,
            cost_per_meter=CostCalculator.cost_per_meter(costs.total_cost, total_used),
            waste_percentage=statistics.waste_percentage,
            reclaimable_waste_percentage=statistics.reclaimable_percentage,
            waste_distribution=WasteAnalyzer.distribution(cuts),
            waste_statistics=statistics,
            stock_summary=self.stock_summary(cuts),
            work_orders=self.work_order_breakdown(cuts),
            quality_score=quality,
            optimization_score=MetricsCalculator.optimization_score(
                efficiency, statistics.waste_percentage, quality
            ),
            confidence=MetricsCalculator.confidence(efficiency, total_waste, costs.total_cost),
            efficiency_category=WasteAnalyzer.efficiency_category(efficiency),
            cutting_complexity=MetricsCalculator.cutting_complexity(total_segments, len(cuts)),
            total_kerf_loss=sum(cut.kerf_loss for cut in cuts),
            total_safety_reserve=len(cuts) * constraints.safety_margin,
            performance_metrics=MetricsCalculator.performance_metrics(path, context.total_item_count),
            validation=report,
            execution_time_ms=execution_time_ms,
            metadata=metadata or {},
        )

    @staticmethod
    def stock_summary(cuts: Sequence[Cut]) -> List[StockSummary]:
        summary = []
        for stock in sorted({cut.stock_length for cut in cuts}):
            group = [cut for cut in cuts if cut.stock_length == stock]
            labels = Counter(cut.plan_label or f"{cut.segment_count} segmentos" for cut in group)
            total_waste = sum(cut.remaining_length for cut in group)
            total_used = sum(cut.used_length for cut in group)
            summary.append(StockSummary(
                stock_length=stock,
                cut_count=len(group),
                patterns=[
                    PatternUsage(pattern=label, count=count)
                    for label, count in sorted(labels.items(), key=lambda kv: (-kv[1], kv[0]))
                ],
                avg_waste=total_waste / len(group),
                total_waste=total_waste,
                efficiency=total_used / (stock * len(group)) * 100,
            ))
        return summary

    @staticmethod
    def work_order_breakdown(cuts: Sequence[Cut]) -> List[WorkOrderBreakdown]:
        counts = Counter(segment.work_order_id for cut in cuts for segment in cut.segments)
        return [WorkOrderBreakdown(work_order_id=wo, piece_count=counts[wo]) for wo in sorted(counts)]
