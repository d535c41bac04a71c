"""
Modelos de dados para o sistema CutStock
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WasteCategory(str, Enum):
    """Categorias de sobra por barra"""
    MINIMAL = "minimal"       # < 50mm
    SMALL = "small"           # 50-100mm
    MEDIUM = "medium"         # 100-200mm
    LARGE = "large"           # 200-500mm
    EXCESSIVE = "excessive"   # >= 500mm


class ObjectiveType(str, Enum):
    """Objetivos de otimização suportados"""
    MINIMIZE_WASTE = "minimize-waste"
    MINIMIZE_COST = "minimize-cost"
    MINIMIZE_TIME = "minimize-time"
    MAXIMIZE_EFFICIENCY = "maximize-efficiency"


class ObjectivePriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SolutionPath(str, Enum):
    """Caminho que produziu o plano"""
    PATTERN_SEARCH = "pattern-search"
    GREEDY = "greedy"


# ============================================================
# Entrada
# ============================================================

class OptimizationItem(BaseModel):
    """Unidade de demanda: uma peça (comprimento x quantidade) de uma ordem de serviço"""
    model_config = ConfigDict(frozen=True)

    profile_type: str = Field("standard", description="Tipo de perfil")
    length: float = Field(..., gt=0, description="Comprimento da peça (mm)")
    quantity: int = Field(..., ge=1, description="Quantidade necessária")
    work_order_id: str = Field("", description="Ordem de serviço de origem")
    color: Optional[str] = Field(None, description="Cor do perfil")
    size: Optional[str] = Field(None, description="Tamanho/medida comercial")

    @property
    def total_length(self) -> float:
        """Comprimento total necessário"""
        return self.length * self.quantity


class EnhancedConstraints(BaseModel):
    """Restrições físicas de corte"""
    model_config = ConfigDict(frozen=True)

    kerf_width: float = Field(3.5, ge=0, description="Espessura da lâmina (mm)")
    start_safety: float = Field(2.0, ge=0, description="Margem de segurança inicial (mm)")
    end_safety: float = Field(2.0, ge=0, description="Margem de segurança final (mm)")
    min_scrap_length: float = Field(75.0, ge=0, description="Menor sobra reaproveitável (mm)")
    energy_per_stock: float = Field(0.5, ge=0, description="Energia por barra (kWh)")
    max_waste_percentage: float = Field(10.0, ge=0, le=100, description="Desperdício máximo aceitável (%)")

    @property
    def safety_margin(self) -> float:
        return self.start_safety + self.end_safety

    def usable_length(self, stock_length: float) -> float:
        """Comprimento útil da barra descontadas as margens"""
        return stock_length - self.start_safety - self.end_safety


class OptimizationObjective(BaseModel):
    """Objetivo ponderado"""
    model_config = ConfigDict(frozen=True)

    type: ObjectiveType = Field(..., description="Tipo de objetivo")
    weight: float = Field(..., ge=0, le=1, description="Peso do objetivo")
    priority: ObjectivePriority = Field(ObjectivePriority.MEDIUM, description="Prioridade")


class PerformanceSettings(BaseModel):
    """Orçamento de desempenho de uma chamada"""
    model_config = ConfigDict(frozen=True)

    max_execution_time: float = Field(30.0, gt=0, description="Tempo máximo da busca por padrões (s)")
    max_search_states: int = Field(10000, ge=1, le=10000, description="Teto de estados da busca")
    max_patterns: Optional[int] = Field(None, ge=1, description="Teto de padrões (sobrepõe o analisador)")


class CostModel(BaseModel):
    """Custos unitários"""
    model_config = ConfigDict(frozen=True)

    material_cost: float = Field(0.1, ge=0, description="Custo do material por mm")
    cutting_cost: float = Field(0.05, ge=0, description="Custo por segmento cortado")
    setup_cost: float = Field(10.0, ge=0, description="Custo de preparação por barra")
    waste_cost: float = Field(0.02, ge=0, description="Custo da sobra por mm")
    time_cost: float = Field(0.5, ge=0, description="Custo por minuto de máquina")
    energy_cost: float = Field(0.15, ge=0, description="Custo por kWh")


# ============================================================
# Estruturas de trabalho (padrões)
# ============================================================

@dataclass(frozen=True)
class ItemGroup:
    """Peças agrupadas por comprimento"""
    length: float
    quantity: int


@dataclass(frozen=True)
class CuttingPattern:
    """
    Padrão de corte: contagem de peças por comprimento em uma barra

    `counts[i]` refere-se a `lengths[i]`; a tabela de comprimentos é compartilhada
    por todos os padrões de uma mesma geração.
    """
    stock_length: float
    lengths: Tuple[float, ...]
    counts: Tuple[int, ...]
    used: float
    waste: float

    @property
    def pattern(self) -> Dict[float, int]:
        """Mapa comprimento -> quantidade (somente comprimentos presentes)"""
        return {length: count for length, count in zip(self.lengths, self.counts) if count > 0}

    @property
    def piece_count(self) -> int:
        return sum(self.counts)


# ============================================================
# Plano de corte
# ============================================================

class CuttingSegment(BaseModel):
    """Uma peça posicionada na barra"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Identificador do segmento")
    sequence_number: int = Field(..., ge=0, description="Ordem na barra")
    length: float = Field(..., gt=0, description="Comprimento da peça")
    position: float = Field(..., ge=0, description="Posição inicial (mm)")
    end_position: float = Field(..., description="Posição final (mm)")
    work_order_id: str = Field("", description="Ordem de serviço")
    profile_type: str = Field("standard", description="Tipo de perfil")


class Cut(BaseModel):
    """Plano de uma barra física"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Identificador da barra no plano")
    stock_index: int = Field(..., ge=0, description="Índice da barra")
    stock_length: float = Field(..., gt=0, description="Comprimento do estoque (mm)")
    segments: List[CuttingSegment] = Field(default_factory=list, description="Peças posicionadas")
    segment_count: int = Field(0, ge=0, description="Número de segmentos")
    used_length: float = Field(0.0, ge=0, description="Comprimento utilizado (mm)")
    remaining_length: float = Field(0.0, ge=0, description="Sobra (mm)")
    kerf_loss: float = Field(0.0, ge=0, description="Perda de lâmina (mm)")
    safety_margin: float = Field(0.0, ge=0, description="Margens ainda não somadas ao usado (mm)")
    waste_category: WasteCategory = Field(WasteCategory.MINIMAL, description="Categoria da sobra")
    is_reclaimable: bool = Field(False, description="Se a sobra é reaproveitável")
    plan_label: str = Field("", description="Rótulo legível do plano")
    profile_type: str = Field("standard", description="Tipo de perfil da barra")
    finalized: bool = Field(False, description="Se as margens já foram somadas")

    @property
    def efficiency(self) -> float:
        """Aproveitamento percentual da barra"""
        return (self.stock_length - self.remaining_length) / self.stock_length * 100


# ============================================================
# Resultado
# ============================================================

class CostBreakdown(BaseModel):
    material_cost: float = 0.0
    cutting_cost: float = 0.0
    setup_cost: float = 0.0
    waste_cost: float = 0.0
    time_cost: float = 0.0
    energy_cost: float = 0.0
    total_cost: float = 0.0


class WasteDistribution(BaseModel):
    """Histograma de categorias de sobra"""
    minimal: int = 0
    small: int = 0
    medium: int = 0
    large: int = 0
    excessive: int = 0
    reclaimable: int = 0
    total_pieces: int = 0


class WasteStatistics(BaseModel):
    total_waste: float = 0.0
    average_waste: float = 0.0
    min_waste: float = 0.0
    max_waste: float = 0.0
    std_waste: float = 0.0
    waste_percentage: float = 0.0
    reclaimable_percentage: float = 0.0
    excessive_cut_indices: List[int] = Field(default_factory=list)


class PatternUsage(BaseModel):
    pattern: str
    count: int


class StockSummary(BaseModel):
    """Resumo de uso por comprimento de estoque"""
    stock_length: float
    cut_count: int
    patterns: List[PatternUsage] = Field(default_factory=list)
    avg_waste: float = 0.0
    total_waste: float = 0.0
    efficiency: float = 0.0


class WorkOrderBreakdown(BaseModel):
    work_order_id: str
    piece_count: int


class PerformanceMetrics(BaseModel):
    algorithm_complexity: str
    convergence_rate: float
    memory_usage: float
    cpu_usage: float
    scalability: float


class ValidationReport(BaseModel):
    is_valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class AdvancedOptimizationResult(BaseModel):
    """Resultado completo da otimização"""
    algorithm: SolutionPath = Field(..., description="Caminho que produziu o plano")
    cuts: List[Cut] = Field(..., description="Plano por barra")
    efficiency: float = Field(..., ge=0, le=100, description="Aproveitamento total (%)")
    total_waste: float = Field(..., ge=0, description="Sobra total (mm)")
    total_cost: float = Field(..., description="Custo total")
    cost_breakdown: CostBreakdown
    stock_count: int
    total_length: float
    total_segments: int
    average_cuts_per_stock: float
    setup_time: float
    cutting_time: float
    total_time: float
    cost_per_meter: float
    waste_percentage: float
    reclaimable_waste_percentage: float
    waste_distribution: WasteDistribution
    waste_statistics: WasteStatistics
    stock_summary: List[StockSummary] = Field(default_factory=list)
    work_orders: List[WorkOrderBreakdown] = Field(default_factory=list)
    quality_score: float
    optimization_score: float
    confidence: float
    efficiency_category: str
    cutting_complexity: float
    total_kerf_loss: float
    total_safety_reserve: float
    performance_metrics: PerformanceMetrics
    validation: ValidationReport = Field(default_factory=ValidationReport)
    execution_time_ms: float = Field(0.0, description="Tempo de processamento (ms)")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Metadados adicionais")

    @field_validator("efficiency")
    @classmethod
    def round_efficiency(cls, v):
        return round(v, 6)
