# finance/tvm.py
from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

_CENTI = Decimal("0.01")

def aa_to_am(i_aa: float) -> float:
    """Converte taxa efetiva ao ano para efetiva ao mês: (1+i)^1/12 - 1"""
    return (1.0 + i_aa) ** (1.0 / 12.0) - 1.0

def am_to_aa(i_am: float) -> float:
    """Converte taxa efetiva ao mês para efetiva ao ano: (1+i)^12 - 1"""
    return (1.0 + i_am) ** 12.0 - 1.0

def annual_pct_to_monthly(annual_pct: float) -> float:
    """
    Taxa anual em % (ex.: 13.65) -> taxa mensal efetiva decimal (ex.: 0.0107).
    """
    return aa_to_am(annual_pct / 100.0)

def monthly_to_annual_pct(i_am: float) -> float:
    """Taxa mensal decimal -> taxa anual efetiva em %."""
    return am_to_aa(i_am) * 100.0

def taxa_nominal_am(annual_pct: float) -> float:
    """
    Convenção do crédito: taxa nominal anual em % dividida por 12 (sem composição).
    Taxas negativas viram zero.
    """
    return max(0.0, annual_pct) / 100.0 / 12.0

def pos_para_pre(pct_indice: Optional[float], indice_aa: Optional[float]) -> Optional[float]:
    """
    Converte "X% do índice" em taxa pré equivalente (% a.a.).
    O índice anual é levado à taxa mensal efetiva, recomposto para o ano e
    escalado por pct_indice/100. Sem índice (ou sem percentual) retorna None.
    """
    if pct_indice is None or indice_aa is None:
        return None
    return monthly_to_annual_pct(annual_pct_to_monthly(indice_aa)) * (pct_indice / 100.0)

def pmt_price(vp: float, i: float, n: int) -> float:
    """
    Parcela constante (Tabela Price): VP*i / (1 - (1+i)^-n); com i = 0, VP/n.
    """
    if i == 0:
        return vp / n
    return (vp * i) / (1.0 - (1.0 + i) ** (-n))

def round2(v: float) -> float:
    """Arredonda para centavos, meio para cima (0.125 -> 0.13)."""
    return float(Decimal(repr(v)).quantize(_CENTI, rounding=ROUND_HALF_UP))

def round_half_up(v: float) -> int:
    """Arredonda para o inteiro mais próximo, meio para cima."""
    return int(Decimal(repr(v)).quantize(Decimal(1), rounding=ROUND_HALF_UP))
