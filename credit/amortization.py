# credit/amortization.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import List
from finance.tvm import pmt_price, round2, round_half_up

class Metodo(str, Enum):
    PRICE = "price"
    SAC = "sac"
    CONSORCIO = "consorcio"

@dataclass(frozen=True)
class AmortizationEntry:
    mes: int
    parcela: float
    amortizacao: float
    juros: float
    saldo: float
    taxa_adm: float = 0.0   # só consórcio

def _validar(P: float, n: int) -> None:
    if n is None or n < 1:
        raise ValueError(f"Prazo deve ser pelo menos 1 período (recebido {n!r}).")
    if P < 0:
        raise ValueError("Valor financiado não pode ser negativo.")

def _fechar(tabela: List[AmortizationEntry], P: float) -> List[AmortizationEntry]:
    """
    Ajuste do último período: o resíduo de arredondamento vai para a última
    amortização/parcela, de modo que a soma das amortizações bata com P e o
    saldo final seja exatamente zero.
    """
    if not tabela:
        return tabela
    pago_antes = sum(e.amortizacao for e in tabela[:-1])
    ult = tabela[-1]
    amort = round2(P - pago_antes)
    diff = amort - ult.amortizacao
    tabela[-1] = AmortizationEntry(ult.mes, round2(ult.parcela + diff), amort, ult.juros, 0.0, ult.taxa_adm)
    return tabela

def tabela_price(P: float, r: float, n: int) -> List[AmortizationEntry]:
    """Parcelas constantes; juros = saldo * r; amortização = parcela - juros."""
    _validar(P, n)
    pmt = pmt_price(P, r, n)
    saldo = P
    tabela = []
    for mes in range(1, n + 1):
        juros = round2(saldo * r)
        amort = round2(pmt - juros)
        saldo = max(0.0, saldo - amort)
        tabela.append(AmortizationEntry(mes, round2(pmt), amort, juros, round2(saldo)))
    return _fechar(tabela, P)

def _amortizacoes_constantes(P: float, n: int) -> List[float]:
    """
    P/n em centavos: os centavos que sobram vão para os primeiros períodos,
    então as amortizações nunca crescem e somam exatamente P.
    """
    total = round_half_up(P * 100)
    base, resto = divmod(total, n)
    return [(base + (1 if k < resto else 0)) / 100.0 for k in range(n)]

def tabela_sac(P: float, r: float, n: int) -> List[AmortizationEntry]:
    """Amortização constante P/n; parcelas decrescentes."""
    _validar(P, n)
    saldo = P
    tabela = []
    for mes, amort in enumerate(_amortizacoes_constantes(P, n), start=1):
        juros = round2(saldo * r)
        saldo = max(0.0, saldo - amort)
        tabela.append(AmortizationEntry(mes, round2(amort + juros), amort, juros, round2(saldo)))
    return _fechar(tabela, P)

def tabela_consorcio(P: float, n: int, taxa_adm_pct: float = 0.0) -> List[AmortizationEntry]:
    """
    Modelo simplificado: parcela = P/n + (P * taxa_adm%) / n, sem juros.
    """
    _validar(P, n)
    adm = round2(P * (taxa_adm_pct or 0.0) / 100.0 / n)
    saldo = P
    tabela = []
    for mes, amort in enumerate(_amortizacoes_constantes(P, n), start=1):
        saldo = max(0.0, saldo - amort)
        tabela.append(AmortizationEntry(mes, round2(amort + adm), amort, 0.0, round2(saldo), adm))
    return _fechar(tabela, P)

def gerar_tabela(metodo: Metodo, P: float, r: float, n: int, taxa_adm_pct: float = 0.0) -> List[AmortizationEntry]:
    metodo = Metodo(metodo)
    if metodo is Metodo.PRICE:
        return tabela_price(P, r, n)
    if metodo is Metodo.SAC:
        return tabela_sac(P, r, n)
    return tabela_consorcio(P, n, taxa_adm_pct)
