# credit/restructure.py
from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Tuple
from finance.tvm import pmt_price, round2
from .amortization import AmortizationEntry, Metodo

_LOG = logging.getLogger(__name__)

MAX_ITERACOES = 10_000
TOLERANCIA = 0.005

class Politica(str, Enum):
    REDUZIR_PRAZO = "reduzir_prazo"
    REDUZIR_PARCELA = "reduzir_parcela"

@dataclass(frozen=True)
class RestructuringRequest:
    valor: float
    politica: Politica
    mes: int

@dataclass(frozen=True)
class RestructuringResult:
    tabela: Tuple[AmortizationEntry, ...]
    aplicada: bool = True
    convergiu: bool = True

def _reduzir_prazo(saldo: float, r: float, metodo: Metodo, parcela_fixa: float,
                   amort_constante: float) -> Tuple[List[AmortizationEntry], bool]:
    """Mantém a parcela (Price) ou a amortização (SAC) e encurta o prazo."""
    novas = []
    iteracoes = 0
    while saldo > TOLERANCIA and iteracoes < MAX_ITERACOES:
        iteracoes += 1
        juros = round2(saldo * r)
        if metodo is Metodo.PRICE:
            amort = round2(parcela_fixa - juros)
            if amort <= 0:
                # juros >= parcela: quita o que restar
                amort = round2(saldo)
        else:
            amort = amort_constante
        amort = round2(min(amort, saldo))
        saldo = round2(max(0.0, saldo - amort))
        novas.append(AmortizationEntry(0, round2(juros + amort), amort, juros, saldo))
    return novas, saldo <= TOLERANCIA

def _reduzir_parcela(saldo: float, r: float, metodo: Metodo, restantes: int) -> List[AmortizationEntry]:
    """Mantém o número de períodos restantes e recalcula a parcela."""
    novas = []
    pmt = pmt_price(saldo, r, restantes)
    amort_sac = round2(saldo / restantes)
    for j in range(1, restantes + 1):
        juros = round2(saldo * r)
        if j == restantes:
            amort = round2(saldo)   # último período absorve o resíduo
        elif metodo is Metodo.PRICE:
            amort = round2(pmt - juros)
        else:
            amort = amort_sac
        amort = round2(min(amort, saldo))
        saldo = round2(max(0.0, saldo - amort))
        novas.append(AmortizationEntry(0, round2(juros + amort), amort, juros, saldo))
    return novas

def amortizacao_extra(tabela: List[AmortizationEntry], pedido: RestructuringRequest, metodo: Metodo,
                      taxa_am: float, valor_financiado: float, prazo: int) -> RestructuringResult:
    """
    Aplica uma amortização extraordinária após o pagamento do mês pedido e
    reconstrói o restante conforme a política. A tabela original não é
    alterada; mês fora do intervalo ou valor não positivo devolvem a tabela
    original com aplicada=False.
    """
    base = tuple(tabela or ())
    mes = pedido.mes
    if not base or mes is None or not isinstance(mes, int) or mes < 1 or mes > len(base):
        return RestructuringResult(base, aplicada=False)
    if pedido.valor is None or not pedido.valor > 0:
        return RestructuringResult(base, aplicada=False)
    metodo = Metodo(metodo)
    if metodo is Metodo.CONSORCIO:
        raise ValueError("Amortização extraordinária disponível apenas para Price e SAC.")

    nova = list(base[:mes - 1])

    alvo = base[mes - 1]
    extra = min(pedido.valor, alvo.saldo)
    saldo = round2(max(0.0, alvo.saldo - pedido.valor))
    nova.append(replace(alvo, parcela=round2(alvo.parcela + extra),
                        amortizacao=round2(alvo.amortizacao + extra), saldo=saldo))

    convergiu = True
    if saldo > TOLERANCIA:
        if Politica(pedido.politica) is Politica.REDUZIR_PRAZO:
            parcela_fixa = round2(base[0].parcela)
            amort_constante = round2(valor_financiado / prazo)
            resto, convergiu = _reduzir_prazo(saldo, taxa_am, metodo, parcela_fixa, amort_constante)
            if not convergiu:
                _LOG.warning("amortizacao_extra: limite de %d iterações atingido, saldo não zerou", MAX_ITERACOES)
        else:
            restantes = prazo - mes
            resto = _reduzir_parcela(saldo, taxa_am, metodo, restantes) if restantes > 0 else []
        nova.extend(resto)

    return RestructuringResult(tuple(replace(e, mes=i) for i, e in enumerate(nova, start=1)),
                               convergiu=convergiu)
