# finance/taxes.py
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple
from .products import ProductDescriptor

# IOF regressivo (Decreto 6.306/2007, anexo): % do rendimento, dia 1 .. dia 30
TABELA_IOF = (
    96, 93, 90, 86, 83, 80, 76, 73, 70, 66,
    63, 60, 56, 53, 50, 46, 43, 40, 36, 33,
    30, 26, 23, 20, 16, 13, 10, 6, 3, 0,
)

def aliquota_ir_por_dias(dias: int) -> float:
    """
    Tabela regressiva (Lei 11.033/2004, art. 1º; IN RFB 1.585/2015):
    - até 180 dias: 22,5%
    - 181 a 360:    20,0%
    - 361 a 720:    17,5%
    - acima de 720: 15,0%
    Retorna fração (ex.: 0.225).
    """
    if dias <= 180:
        return 0.225
    if dias <= 360:
        return 0.20
    if dias <= 720:
        return 0.175
    return 0.15

def aliquota_iof_por_dias(dias: float) -> float:
    """
    Fração do rendimento retida de IOF para resgates antes de 30 dias.
    Dias fracionários contam pelo dia cheio anterior; 0 dia usa a linha do dia 1.
    """
    if dias >= 30:
        return 0.0
    d = max(1, min(30, math.floor(dias)))
    return TABELA_IOF[d - 1] / 100.0

def calcular_ir(d: ProductDescriptor, rendimento: float, dias: int) -> float:
    """IR regressivo da renda fixa tributável. Nunca sobre rendimento <= 0."""
    if d.renda_variavel or d.isento_ir or rendimento <= 0:
        return 0.0
    return rendimento * aliquota_ir_por_dias(dias)

def calcular_iof(d: ProductDescriptor, rendimento: float, dias: float) -> Tuple[float, float]:
    """Retorna (iof, alíquota aplicada)."""
    if not d.sujeito_iof or d.isento_ir or dias >= 30:
        return 0.0, 0.0
    aliq = aliquota_iof_por_dias(dias)
    iof = rendimento * aliq if rendimento > 0 else 0.0
    return iof, aliq

def ir_ganho_capital(rendimento: float, dividendos: float, aliquota: float) -> float:
    """
    IR sobre ganho de capital da renda variável: incide só sobre
    (rendimento - dividendos) positivo. Prejuízo não gera crédito.
    """
    ganho = rendimento - dividendos
    if ganho <= 0 or not aliquota or aliquota <= 0:
        return 0.0
    return ganho * aliquota

@dataclass(frozen=True)
class Impostos:
    ir: float = 0.0
    iof: float = 0.0
    aliquota_iof: float = 0.0

def calcular_impostos(d: Optional[ProductDescriptor], rendimento: float, dias: int,
                      dividendos: float = 0.0, aliquota_ganho_capital: float = 0.0) -> Impostos:
    if d is None:
        return Impostos()
    if d.renda_variavel:
        return Impostos(ir=ir_ganho_capital(rendimento, dividendos, aliquota_ganho_capital))
    iof, aliq_iof = calcular_iof(d, rendimento, dias)
    return Impostos(ir=calcular_ir(d, rendimento, dias), iof=iof, aliquota_iof=aliq_iof)


# --- IOF sobre operações de crédito ---

@dataclass(frozen=True)
class IofCredito:
    fixo: float
    diario: float
    total: float
    limitado: bool

def iof_credito(valor_financiado: float, amortizacoes: Iterable[float], iof_fixo_pct: float = 0.0,
                iof_diario_pct: float = 0.0, teto_pct: float = 0.0, dias_por_periodo: int = 30) -> IofCredito:
    """
    IOF do crédito: alíquota fixa sobre o valor financiado + alíquota diária
    sobre cada amortização pelos dias em aberto (no máximo 365).
    Com teto_pct > 0, o total fica limitado a teto_pct% do valor financiado.
    """
    fixo = valor_financiado * (iof_fixo_pct or 0.0) / 100.0
    diario = 0.0
    for k, amort in enumerate(amortizacoes, start=1):
        dias = min(k * dias_por_periodo, 365)
        diario += amort * (iof_diario_pct or 0.0) / 100.0 * dias
    total = fixo + diario
    limitado = False
    if teto_pct and teto_pct > 0:
        teto = valor_financiado * teto_pct / 100.0
        if total > teto:
            total, limitado = teto, True
    return IofCredito(fixo=fixo, diario=diario, total=total, limitado=limitado)
