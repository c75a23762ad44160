# simulate.py
from __future__ import annotations
import math
from finance.models import InvestmentParams, GrossSimulation, SimulationResult
from finance.products import ProductDescriptor, TaxaResolvida, TipoDesconhecidoError, descritor_de, resolver_taxa
from finance.taxes import calcular_impostos
from finance.tvm import round2, round_half_up

ADMIN_FEE_MAX = 0.99

def _taxa_adm_segura(fee) -> float:
    """Taxa de administração mensal limitada a [0, 0.99)."""
    if fee is None or not math.isfinite(fee):
        return 0.0
    return max(0.0, min(fee, ADMIN_FEE_MAX))

def _renda_fixa(params: InvestmentParams, i_am: float, periodos: int, fee_am: float):
    saldo = params.valor_inicial or 0.0
    pmt = params.aporte or 0.0
    evolucao = []
    for _ in range(periodos):
        if params.aporte_no_comeco and pmt > 0:
            saldo += pmt
        saldo *= (1.0 + i_am)
        if not params.aporte_no_comeco and pmt > 0:
            saldo += pmt
        # custo mensal sobre o patrimônio
        if fee_am:
            saldo -= saldo * fee_am
        evolucao.append(saldo)
    return saldo, evolucao, 0.0, 0.0

def _renda_variavel(params: InvestmentParams, d: ProductDescriptor, periodos: int, fee_am: float):
    """
    Evolução por cotas: saldo = cotas * preço. Aportes compram cotas antes ou
    depois da valorização do mês; dividendos saem a cada N meses.
    """
    preco = params.preco_cota if params.preco_cota and params.preco_cota > 0 else 1.0
    valorizacao = params.valorizacao_am if params.valorizacao_am is not None else d.valorizacao_padrao_am
    freq = max(1, int(params.frequencia_dividendos_meses or 1))
    dy = params.dividend_yield_aa or 0.0
    pmt = params.aporte or 0.0
    trx = params.taxa_transacao or 0.0

    cotas = params.valor_inicial / preco if params.valor_inicial and params.valor_inicial > 0 else 0.0
    saldo = cotas * preco
    total_dividendos = 0.0
    total_taxas = 0.0
    evolucao = []

    for mes in range(1, periodos + 1):
        if params.aporte_no_comeco and pmt > 0:
            cotas += pmt / preco
        preco *= (1.0 + valorizacao)
        if not params.aporte_no_comeco and pmt > 0:
            cotas += pmt / preco
        saldo = cotas * preco

        if dy and mes % freq == 0:
            bruto = cotas * preco * (dy / 100.0) * (freq / 12.0)
            liquido = bruto - bruto * (params.aliquota_dividendos or 0.0)
            total_dividendos += liquido
            if params.reinvestir_dividendos:
                taxa = liquido * trx
                total_taxas += taxa
                if preco > 0:
                    cotas += (liquido - taxa) / preco
                saldo = cotas * preco

        if fee_am:
            saldo -= saldo * fee_am
        evolucao.append(saldo)

    return saldo, evolucao, total_dividendos, total_taxas

def simular_bruto(params: InvestmentParams) -> GrossSimulation:
    """
    Evolução período a período antes dos impostos.
    Prazo zero devolve um único ponto igual ao aporte inicial.
    """
    d = descritor_de(params.tipo)
    if d is None:
        raise TipoDesconhecidoError(f"Tipo de investimento desconhecido: {params.tipo!r}")

    meses = params.meses
    if meses is None or not math.isfinite(meses):
        raise ValueError(f"Prazo inválido: {params.prazo!r}")
    if meses <= 0:
        v = round2(params.valor_inicial or 0.0)
        return GrossSimulation(evolucao=(v,), saldo_final=v, total_investido=v, rendimento_bruto=0.0,
                               total_dividendos=0.0, total_taxas_transacao=0.0, meses=0.0, dias=0,
                               periodos=0, descritor=d)

    taxa: TaxaResolvida = resolver_taxa(params, d)
    periodos = math.ceil(meses)
    dias = max(0, round_half_up(meses * (365.0 / 12.0)))
    fee_am = _taxa_adm_segura(params.taxa_adm_am)

    if d.renda_variavel:
        saldo, evolucao, dividendos, taxas = _renda_variavel(params, d, periodos, fee_am)
    else:
        saldo, evolucao, dividendos, taxas = _renda_fixa(params, taxa.i_am, periodos, fee_am)

    total_investido = (params.valor_inicial or 0.0) + (params.aporte or 0.0) * periodos
    return GrossSimulation(
        evolucao=tuple(evolucao),
        saldo_final=saldo,
        total_investido=total_investido,
        rendimento_bruto=saldo - total_investido,
        total_dividendos=dividendos,
        total_taxas_transacao=taxas,
        meses=meses,
        dias=dias,
        periodos=periodos,
        descritor=d,
        i_am=taxa.i_am,
        modo=taxa.modo,
        indice_nome=taxa.indice_nome,
        indice_aa=taxa.indice_aa,
        taxa_exibicao_aa=taxa.taxa_exibicao_aa,
    )

def aplicar_impostos(bruto: GrossSimulation, params: InvestmentParams) -> SimulationResult:
    """
    IR/IOF no resgate e números líquidos:
    - rendimento líquido = bruto - IR - IOF
    - valor final = total investido + rendimento líquido
    - rentabilidade a.a. composta, com prazo mínimo de 1 dia
    """
    if bruto.periodos == 0:
        v = bruto.saldo_final
        return SimulationResult(rendimento_bruto=0.0, ir=0.0, iof=0.0, rendimento_liquido=0.0, valor_final=v,
                                rentabilidade_aa_pct=0.0, evolucao=bruto.evolucao, total_investido=v,
                                modo=params.modo_taxa, arredondado=params.arredondar)

    impostos = calcular_impostos(bruto.descritor, bruto.rendimento_bruto, bruto.dias,
                                 bruto.total_dividendos, params.aliquota_ganho_capital)
    liquido = bruto.rendimento_bruto - impostos.ir - impostos.iof
    valor_final = bruto.total_investido + liquido
    anos = max(1.0 / 365.0, bruto.meses / 12.0)
    if bruto.total_investido > 0:
        rentab = ((valor_final / bruto.total_investido) ** (1.0 / anos) - 1.0) * 100.0
    else:
        rentab = 0.0

    r = round2 if params.arredondar else (lambda v: v)
    exib = bruto.taxa_exibicao_aa
    return SimulationResult(
        rendimento_bruto=r(bruto.rendimento_bruto),
        ir=r(impostos.ir),
        iof=r(impostos.iof),
        rendimento_liquido=r(liquido),
        valor_final=r(valor_final),
        rentabilidade_aa_pct=r(rentab),
        evolucao=tuple(r(v) for v in bruto.evolucao),
        total_investido=r(bruto.total_investido),
        total_dividendos=r(bruto.total_dividendos),
        total_taxas_transacao=r(bruto.total_taxas_transacao),
        ganho_capital=r(bruto.ganho_capital),
        aliquota_iof=impostos.aliquota_iof,
        modo=bruto.modo,
        indice_nome=bruto.indice_nome,
        indice_aa=bruto.indice_aa,
        taxa_exibicao_aa=None if exib is None else r(exib),
        arredondado=params.arredondar,
    )

def simular_investimento(params: InvestmentParams) -> SimulationResult:
    return aplicar_impostos(simular_bruto(params), params)
