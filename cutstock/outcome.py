"""
Resultado etiquetado de uma estratégia de otimização
"""

from dataclasses import dataclass, field
from typing import List, Union

from .exceptions import PlanInvariantError
from .models import Cut


@dataclass(frozen=True)
class Ok:
    """Plano obtido"""
    cuts: List[Cut] = field(default_factory=list)


@dataclass(frozen=True)
class Retryable:
    """Estratégia falhou de forma esperada; outra pode ser tentada"""
    reason: str
    code: str = "RETRYABLE"


@dataclass(frozen=True)
class Fatal:
    """Invariante violada; não deve ser reprocessada"""
    error: PlanInvariantError


Outcome = Union[Ok, Retryable, Fatal]
