# credit/cet.py
from __future__ import annotations
import logging
import math
from typing import Iterable, Optional, Sequence
import numpy as np
from finance.tvm import am_to_aa
from .amortization import AmortizationEntry

_LOG = logging.getLogger(__name__)

def calcular_tir(fluxos: Sequence[float], chute: float = 0.01, max_iter: int = 1000,
                 tol: float = 1e-6) -> Optional[float]:
    """
    TIR por período via Newton-Raphson sobre o VPL:
        f(i)  = Σ CF_t / (1+i)^t
        f'(i) = Σ -t * CF_t / (1+i)^(t+1)
    Devolve None quando não dá para determinar a taxa (derivada nula, passo
    não finito ou sem convergência em max_iter iterações). Zero é um
    resultado calculado, não sinal de falha.
    """
    cf = np.asarray(fluxos, dtype=float)
    if cf.size < 2:
        return None
    t = np.arange(cf.size, dtype=float)
    taxa = float(chute)

    with np.errstate(all="ignore"):
        for _ in range(max_iter):
            base = 1.0 + taxa
            f = float(np.sum(cf / base ** t))
            df = float(np.sum(-t * cf / base ** (t + 1.0)))
            if df == 0 or not math.isfinite(df):
                _LOG.debug("calcular_tir: derivada nula/indefinida em i=%s", taxa)
                return None
            nova = taxa - f / df
            if not math.isfinite(nova):
                return None
            if abs(nova - taxa) < tol:
                return nova
            taxa = nova

    _LOG.debug("calcular_tir: sem convergência em %d iterações", max_iter)
    return None

def anualizar_taxa(i_am: float) -> float:
    """Taxa mensal -> anual composta: (1+i)^12 - 1"""
    return am_to_aa(i_am)

def fluxo_de_caixa(valor_liberado: float, parcelas: Iterable[float]) -> list[float]:
    """Saída inicial negativa seguida das parcelas."""
    return [-valor_liberado] + [float(p) for p in parcelas]

def calcular_cet(valor_financiado: float, tabela: Iterable[AmortizationEntry]) -> Optional[float]:
    """
    CET anual (%) a partir do valor financiado e da tabela de pagamentos.
    None quando a TIR não pôde ser determinada.
    """
    tir = calcular_tir(fluxo_de_caixa(valor_financiado, (e.parcela for e in tabela)))
    if tir is None:
        return None
    return anualizar_taxa(tir) * 100.0
