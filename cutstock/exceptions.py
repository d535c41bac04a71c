"""
Hierarquia de exceções do CutStock

Três famílias:
- entrada inválida (rejeitada antes de qualquer cálculo)
- falhas recuperáveis (geração de padrões / busca), convertidas em fallback guloso
- violações de invariantes do plano (erros de programação, fatais)
"""

from typing import Any, Dict, Optional


class CutStockError(Exception):
    """Exceção base para todos os erros do CutStock"""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"[{self.code}] {self.message} | Details: {self.details}"
        return f"[{self.code}] {self.message}"


# ============================================================
# Entrada inválida
# ============================================================

class InvalidInputError(CutStockError, ValueError):
    """Dados de entrada rejeitados antes da otimização"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="INVALID_INPUT", details=details)


# ============================================================
# Falhas recuperáveis (disparam o fallback guloso)
# ============================================================

class RecoverableError(CutStockError):
    """Falha esperada de uma estratégia; o chamador tenta outra"""
    pass


class NoPatternsFoundError(RecoverableError):
    """Nenhum comprimento de estoque admite um padrão de corte"""

    def __init__(self, stock_lengths, item_lengths):
        super().__init__(
            "Nenhum padrão de corte válido encontrado. As peças podem ser maiores "
            f"que os estoques disponíveis ({', '.join(str(s) for s in stock_lengths)}mm).",
            code="NO_PATTERNS_FOUND",
            details={"stock_lengths": list(stock_lengths), "item_lengths": list(item_lengths)},
        )


class SearchExhaustedError(RecoverableError):
    """A busca por prioridade não encontrou solução dentro dos orçamentos"""

    LIMITS = {
        "states": "limite de estados",
        "successors": "limite de sucessores gerados",
        "time": "limite de tempo",
        "exhausted": "fila esgotada",
    }

    def __init__(self, max_states: int, pattern_count: int, reason: str = "states"):
        super().__init__(
            f"Busca encerrada sem solução exata ({pattern_count} padrões, "
            f"{self.LIMITS.get(reason, reason)}, até {max_states} estados)",
            code="SEARCH_EXHAUSTED",
            details={"max_states": max_states, "pattern_count": pattern_count, "reason": reason},
        )


# ============================================================
# Violações de invariantes (fatais)
# ============================================================

class PlanInvariantError(CutStockError):
    """Invariante do plano de corte violada - indica erro de programação"""
    pass


class CutOverflowError(PlanInvariantError):
    """Peça colocada excederia o espaço útil da barra"""

    def __init__(self, cut_id: str, item_length: float, used_length: float, available: float):
        overflow = used_length + item_length - available
        super().__init__(
            f"Peça de {item_length}mm não cabe na barra {cut_id}: "
            f"usado {used_length:.2f}mm, disponível {available:.2f}mm, excesso {overflow:.3f}mm",
            code="CUT_OVERFLOW",
            details={"cut_id": cut_id, "item_length": item_length,
                     "used_length": used_length, "available": available},
        )


class AccountingViolationError(PlanInvariantError):
    """usado + restante diverge do comprimento da barra além da tolerância"""

    def __init__(self, cut_id: str, used_length: float, remaining_length: float,
                 stock_length: float, tolerance: float):
        total = used_length + remaining_length
        super().__init__(
            f"Violação de contabilidade na barra {cut_id}: usado={used_length}mm + "
            f"restante={remaining_length}mm = {total}mm ≠ estoque={stock_length}mm "
            f"(diferença {abs(total - stock_length):.3f}mm, tolerância {tolerance}mm)",
            code="ACCOUNTING_VIOLATION",
            details={"cut_id": cut_id, "used_length": used_length,
                     "remaining_length": remaining_length, "stock_length": stock_length},
        )


class SegmentCountMismatchError(PlanInvariantError):
    """segment_count diverge do número real de segmentos"""

    def __init__(self, cut_id: str, segment_count: int, actual: int):
        super().__init__(
            f"Barra {cut_id}: segment_count={segment_count} mas {actual} segmentos",
            code="SEGMENT_COUNT_MISMATCH",
            details={"cut_id": cut_id, "segment_count": segment_count, "actual": actual},
        )


# ============================================================
# Demanda
# ============================================================

class DemandError(CutStockError):
    """Plano não atende a demanda solicitada"""

    def __init__(self, errors, code: str):
        super().__init__(
            "Plano de corte não atende a demanda: " + "; ".join(errors),
            code=code,
            details={"errors": list(errors)},
        )
        self.errors = list(errors)


class DemandShortageError(DemandError):
    """Faltam peças no plano final"""

    def __init__(self, errors):
        super().__init__(errors, code="DEMAND_SHORTAGE")


class DemandMismatchError(DemandError):
    """Excesso de produção além da tolerância configurada"""

    def __init__(self, errors):
        super().__init__(errors, code="DEMAND_MISMATCH")
