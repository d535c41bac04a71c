"""
Contexto imutável de uma chamada de otimização
"""

import logging
import time
import uuid
from typing import Dict, Iterable, List, Optional, Tuple

from .config import LENGTH_EPSILON, SolverSettings
from .exceptions import InvalidInputError
from .models import (
    CostModel, EnhancedConstraints, ItemGroup, ObjectiveType,
    OptimizationItem, OptimizationObjective, PerformanceSettings
)

logger = logging.getLogger(__name__)

WEIGHT_TOLERANCE = 1e-6


class OptimizationContext:
    """
    Agrupa itens, estoques, restrições, objetivos e custos de uma chamada

    A validação acontece no construtor; um contexto construído é sempre
    consistente e não expõe mutadores.
    """

    def __init__(
        self,
        items: Iterable[OptimizationItem],
        stock_lengths: Optional[Iterable[float]] = None,
        constraints: Optional[EnhancedConstraints] = None,
        objectives: Optional[Iterable[OptimizationObjective]] = None,
        performance: Optional[PerformanceSettings] = None,
        cost_model: Optional[CostModel] = None,
        request_id: Optional[str] = None,
        settings: Optional[SolverSettings] = None,
    ):
        self._settings = settings or SolverSettings()
        self._items: Tuple[OptimizationItem, ...] = tuple(items)
        self._constraints = constraints or EnhancedConstraints()
        self._objectives: Tuple[OptimizationObjective, ...] = tuple(
            objectives if objectives is not None
            else [OptimizationObjective(type=ObjectiveType.MINIMIZE_WASTE, weight=1.0)]
        )
        self._performance = performance or PerformanceSettings()
        self._cost_model = cost_model or CostModel()
        self._request_id = request_id or f"opt-{uuid.uuid4().hex[:12]}"
        self._start_time = time.time()

        self._validate_items()
        self._validate_objectives()
        self._stock_lengths = self._prepare_stock_lengths(stock_lengths)
        self._validate_item_fit()

    # ------------------------------------------------------------------
    # Validação
    # ------------------------------------------------------------------

    def _validate_items(self) -> None:
        if not self._items:
            raise InvalidInputError("Lista de itens vazia")

        for index, item in enumerate(self._items):
            if item.length <= 0:
                raise InvalidInputError(
                    f"Item {index} com comprimento inválido: {item.length}",
                    details={"index": index, "length": item.length},
                )
            if item.quantity < 1:
                raise InvalidInputError(
                    f"Item {index} com quantidade inválida: {item.quantity}",
                    details={"index": index, "quantity": item.quantity},
                )

    def _validate_objectives(self) -> None:
        if not self._objectives:
            raise InvalidInputError("Pelo menos um objetivo deve ser informado")

        total_weight = sum(objective.weight for objective in self._objectives)
        if abs(total_weight - 1.0) > WEIGHT_TOLERANCE:
            raise InvalidInputError(
                f"Os pesos dos objetivos devem somar 1 (soma atual: {total_weight})",
                details={"total_weight": total_weight},
            )

    def _prepare_stock_lengths(self, stock_lengths: Optional[Iterable[float]]) -> Tuple[float, ...]:
        candidates = sorted(set(float(s) for s in stock_lengths)) if stock_lengths else []
        if not candidates:
            candidates = [self._settings.default_stock_length]

        valid = []
        for stock in candidates:
            if self._constraints.usable_length(stock) <= 0:
                logger.warning(
                    f"Estoque de {stock}mm descartado: margens de segurança "
                    f"({self._constraints.safety_margin}mm) consomem todo o comprimento"
                )
                continue
            valid.append(stock)

        if not valid:
            raise InvalidInputError(
                "Nenhum comprimento de estoque utilizável após descontar as margens de segurança",
                details={"stock_lengths": candidates, "safety_margin": self._constraints.safety_margin},
            )
        return tuple(valid)

    def _validate_item_fit(self) -> None:
        max_usable = max(self.usable_length(stock) for stock in self._stock_lengths)
        for item in self._items:
            if item.length > max_usable + LENGTH_EPSILON:
                raise InvalidInputError(
                    f"Peça de {item.length}mm (ordem '{item.work_order_id}', perfil '{item.profile_type}') "
                    f"excede o maior comprimento útil disponível ({max_usable}mm)",
                    details={"length": item.length, "max_usable": max_usable,
                             "work_order_id": item.work_order_id},
                )

    # ------------------------------------------------------------------
    # Acesso somente leitura
    # ------------------------------------------------------------------

    @property
    def items(self) -> Tuple[OptimizationItem, ...]:
        return self._items

    @property
    def stock_lengths(self) -> Tuple[float, ...]:
        return self._stock_lengths

    @property
    def constraints(self) -> EnhancedConstraints:
        return self._constraints

    @property
    def objectives(self) -> Tuple[OptimizationObjective, ...]:
        return self._objectives

    @property
    def performance(self) -> PerformanceSettings:
        return self._performance

    @property
    def cost_model(self) -> CostModel:
        return self._cost_model

    @property
    def settings(self) -> SolverSettings:
        return self._settings

    @property
    def request_id(self) -> str:
        return self._request_id

    @property
    def start_time(self) -> float:
        return self._start_time

    @property
    def primary_stock_length(self) -> float:
        """Maior comprimento de estoque disponível"""
        return self._stock_lengths[-1]

    @property
    def total_item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    def has_objective(self, objective_type: ObjectiveType) -> bool:
        return any(objective.type == objective_type for objective in self._objectives)

    def usable_length(self, stock_length: float) -> float:
        return self._constraints.usable_length(stock_length)

    def item_groups(self) -> List[ItemGroup]:
        """Itens agrupados por comprimento, do maior para o menor"""
        return group_items(self._items)


def group_items(items: Iterable[OptimizationItem]) -> List[ItemGroup]:
    """Agrupa a demanda por comprimento (ordem decrescente de comprimento)"""
    totals: Dict[float, int] = {}
    for item in items:
        totals[item.length] = totals.get(item.length, 0) + item.quantity
    return [ItemGroup(length=length, quantity=totals[length]) for length in sorted(totals, reverse=True)]
