# credit/loan.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
from finance.taxes import iof_credito
from finance.tvm import round2, taxa_nominal_am
from .amortization import AmortizationEntry, Metodo, gerar_tabela
from .cet import calcular_cet, calcular_tir, anualizar_taxa, fluxo_de_caixa
from .restructure import RestructuringRequest, amortizacao_extra

_LOG = logging.getLogger(__name__)

class Modalidade(str, Enum):
    EMPRESTIMO = "emprestimo"
    FINANCIAMENTO = "financiamento"
    CONSORCIO = "consorcio"

@dataclass
class CreditParams:
    modalidade: Modalidade = Modalidade.EMPRESTIMO
    valor: float = 0.0
    entrada: float = 0.0
    prazo_meses: int = 12
    taxa_aa: float = 0.0               # % a.a. nominal (mensal = taxa/12)
    metodo: Metodo = Metodo.PRICE      # consórcio ignora
    taxa_adm_pct: float = 0.0          # consórcio: % sobre o crédito
    iof_fixo_pct: float = 0.0
    iof_diario_pct: float = 0.0
    teto_iof_pct: float = 0.0
    seguro_pct: float = 0.0            # % sobre o valor financiado
    amortizacao_extra: Optional[RestructuringRequest] = None

@dataclass(frozen=True)
class CreditSummary:
    modalidade: Modalidade
    metodo: Metodo
    valor: float
    entrada: float
    valor_financiado: float
    taxa_aa: float
    taxa_am: float
    primeira_parcela: float
    media_parcelas: float
    total_pago: float
    total_juros: float
    iof_fixo: float
    iof_diario: float
    iof_total: float
    iof_limitado: bool
    valor_seguro: float
    total_pago_com_encargos: float
    total_juros_com_encargos: float
    cet_aa: Optional[float]
    parcelas: int
    amortizacao_extra_aplicada: bool = False
    reestruturacao_convergiu: bool = True

@dataclass(frozen=True)
class CreditSimulation:
    tabela: Tuple[AmortizationEntry, ...]
    resumo: CreditSummary

def simular_credito(params: CreditParams) -> CreditSimulation:
    """
    Empréstimo / financiamento / consórcio:
    - valor financiado = valor - entrada
    - tabela Price/SAC (ou consórcio) com amortização extra opcional
    - IOF (fixo + diário, com teto) e seguro entram no CET, que é calculado
      sobre o valor efetivamente liberado
    """
    modalidade = Modalidade(params.modalidade)
    metodo = Metodo.CONSORCIO if modalidade is Modalidade.CONSORCIO else Metodo(params.metodo)
    if metodo is Metodo.CONSORCIO and params.amortizacao_extra is not None:
        raise ValueError("Consórcio não aceita amortização extraordinária.")
    financiado = max(0.0, (params.valor or 0.0) - (params.entrada or 0.0))
    n = int(params.prazo_meses)
    r = 0.0 if metodo is Metodo.CONSORCIO else taxa_nominal_am(params.taxa_aa or 0.0)

    tabela = tuple(gerar_tabela(metodo, financiado, r, n, params.taxa_adm_pct))
    aplicada, convergiu = False, True
    if params.amortizacao_extra is not None:
        res = amortizacao_extra(list(tabela), params.amortizacao_extra, metodo, r, financiado, n)
        tabela, aplicada, convergiu = res.tabela, res.aplicada, res.convergiu

    total_pago = sum(e.parcela for e in tabela)
    iof = iof_credito(financiado, (e.amortizacao for e in tabela), params.iof_fixo_pct,
                      params.iof_diario_pct, params.teto_iof_pct)
    if iof.limitado:
        _LOG.info("simular_credito: IOF limitado ao teto de %s%%", params.teto_iof_pct)
    seguro = financiado * (params.seguro_pct or 0.0) / 100.0
    encargos = iof.total + seguro

    liberado = financiado - encargos
    if encargos:
        tir = calcular_tir(fluxo_de_caixa(liberado, (e.parcela for e in tabela)))
        cet = None if tir is None else anualizar_taxa(tir) * 100.0
    else:
        cet = calcular_cet(financiado, tabela)

    resumo = CreditSummary(
        modalidade=modalidade,
        metodo=metodo,
        valor=round2(params.valor or 0.0),
        entrada=round2(params.entrada or 0.0),
        valor_financiado=round2(financiado),
        taxa_aa=params.taxa_aa,
        taxa_am=r,
        primeira_parcela=tabela[0].parcela if tabela else 0.0,
        media_parcelas=round2(total_pago / len(tabela)) if tabela else 0.0,
        total_pago=round2(total_pago),
        total_juros=round2(total_pago - financiado),
        iof_fixo=round2(iof.fixo),
        iof_diario=round2(iof.diario),
        iof_total=round2(iof.total),
        iof_limitado=iof.limitado,
        valor_seguro=round2(seguro),
        total_pago_com_encargos=round2(total_pago + encargos),
        total_juros_com_encargos=round2(total_pago + encargos - financiado),
        cet_aa=None if cet is None else round2(cet),
        parcelas=len(tabela),
        amortizacao_extra_aplicada=aplicada,
        reestruturacao_convergiu=convergiu,
    )
    return CreditSimulation(tabela=tabela, resumo=resumo)
