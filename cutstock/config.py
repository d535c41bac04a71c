"""
Configuração do otimizador CutStock

Valores padrão ajustáveis; qualquer campo pode ser sobrescrito por variável de
ambiente CUTSTOCK_<NOME_DO_CAMPO> (ex.: CUTSTOCK_LOOK_AHEAD_DEPTH=5).
"""

import os
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


DEFAULT_STOCK_LENGTH = 6100.0

# Folga de ponto flutuante em todas as comparações de encaixe (mm)
LENGTH_EPSILON = 1e-9

# Limites de categoria de desperdício (mm) - MINIMAL < 50 <= SMALL < 100 <= ...
WASTE_CATEGORY_LIMITS = (50.0, 100.0, 200.0, 500.0)

# Tabela de decisão do analisador: (máx. comprimentos únicos, máx. demanda, complexidade, limite de padrões)
PROBLEM_SIZE_TABLE = (
    (10, 500, "low", None),
    (15, 1000, "medium", 50000),
    (20, 2000, "high", 30000),
)
MAX_PATTERN_COMPLEXITY = 1_000_000


class OverproductionPolicy(BaseModel):
    """Tolerância de excesso de produção (peças por comprimento) por caminho de solução"""
    pattern_search: int = Field(0, ge=0, description="Busca por padrões - exige quantidade exata")
    greedy: int = Field(2, ge=0, description="Fallback guloso - excesso tolerado com aviso")

    def for_path(self, path: str) -> int:
        if path == "pattern-search":
            return self.pattern_search
        return self.greedy


class SolverSettings(BaseModel):
    """Parâmetros ajustáveis do otimizador"""
    default_stock_length: float = Field(DEFAULT_STOCK_LENGTH, gt=0)
    min_pattern_utilization: float = Field(0.30, ge=0, le=1, description="Utilização mínima de um padrão")
    max_pattern_nodes: int = Field(2_000_000, ge=1, description="Teto de nós visitados na enumeração de padrões")
    max_search_states: int = Field(10000, ge=1, description="Teto absoluto de estados da busca")
    min_search_states: int = Field(1000, ge=1)
    states_per_pattern: int = Field(100, ge=1)
    max_search_successors: int = Field(2_000_000, ge=1, description="Teto de sucessores gerados na busca")
    max_search_seconds: float = Field(30.0, gt=0, description="Tempo máximo da busca (s)")
    waste_normalization: float = Field(10.0, gt=0)
    fragment_penalty_factor: float = Field(0.95, gt=0, le=1)
    look_ahead_depth: int = Field(3, ge=0)
    overproduction: OverproductionPolicy = Field(default_factory=OverproductionPolicy)
    accounting_tolerance: float = Field(0.01, gt=0)
    setup_time_per_bar: float = Field(5.0, ge=0, description="Minutos de preparação por barra")
    cutting_time_per_segment: float = Field(2.0, ge=0, description="Minutos de corte por segmento")

    def adaptive_state_limit(self, pattern_count: int, ceiling: Optional[int] = None) -> int:
        """Limite de estados escalado pelo número de padrões"""
        limit = min(self.max_search_states, max(self.min_search_states, pattern_count * self.states_per_pattern))
        if ceiling is not None:
            limit = min(limit, ceiling)
        return limit


_ENV_PREFIX = "CUTSTOCK_"


def load_settings(environ: Optional[Dict[str, str]] = None,
                  dotenv_path: Optional[str] = None) -> SolverSettings:
    """
    Carrega as configurações a partir de variáveis de ambiente

    Args:
        environ: Mapeamento de ambiente (padrão: os.environ, após carregar o .env)
        dotenv_path: Arquivo .env a carregar (padrão: o .env mais próximo)

    Returns:
        Configurações validadas
    """
    if environ is None:
        load_dotenv(dotenv_path)
        environ = os.environ
    values = {}
    for name in SolverSettings.model_fields:
        if name == "overproduction":
            continue
        raw = environ.get(_ENV_PREFIX + name.upper())
        if raw is not None:
            values[name] = raw

    policy = {}
    for path in ("pattern_search", "greedy"):
        raw = environ.get(f"{_ENV_PREFIX}OVERPRODUCTION_{path.upper()}")
        if raw is not None:
            policy[path] = raw
    if policy:
        values["overproduction"] = OverproductionPolicy(**policy)

    return SolverSettings(**values)
