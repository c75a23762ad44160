import pytest
from finance.models import InvestmentParams
from finance.products import InstrumentType, RateMode, TermUnit, IndiceIndisponivelError, TipoDesconhecidoError
from simulate import simular_investimento, simular_bruto, ADMIN_FEE_MAX

def _cdb_pre(**kw):
    base = dict(tipo=InstrumentType.CDB, valor_inicial=1000.0, prazo=12, taxa_juros=12.0, modo_taxa=RateMode.PRE)
    base.update(kw)
    return InvestmentParams(**base)

def test_cdb_pre_um_ano():
    res = simular_investimento(_cdb_pre())
    assert res.rendimento_bruto == pytest.approx(120.0, abs=0.01)
    assert res.ir == pytest.approx(21.0, abs=0.01)    # 365 dias -> 17,5%
    assert res.iof == 0.0
    assert res.valor_final == pytest.approx(1099.0, abs=0.01)
    assert res.rentabilidade_aa_pct == pytest.approx(9.9, abs=0.01)
    assert len(res.evolucao) == 12

def test_cdb_resgate_em_15_dias_paga_iof():
    bruto = simular_bruto(_cdb_pre(prazo=15, unidade_prazo=TermUnit.DIAS))
    assert bruto.dias == 15 and bruto.periodos == 1
    res = simular_investimento(_cdb_pre(prazo=15, unidade_prazo=TermUnit.DIAS))
    assert res.aliquota_iof == 0.5
    assert res.iof == pytest.approx(bruto.rendimento_bruto * 0.5, abs=0.01)
    assert res.ir == pytest.approx(bruto.rendimento_bruto * 0.225, abs=0.01)

def test_lci_isenta():
    res = simular_investimento(InvestmentParams(tipo=InstrumentType.LCI, valor_inicial=1000.0, prazo=12,
                                                taxa_juros=8.0, modo_taxa=RateMode.PRE))
    assert res.ir == 0.0 and res.iof == 0.0
    assert res.valor_final == pytest.approx(1080.0, abs=0.01)

@pytest.mark.parametrize("tipo", ["lci", "lca", "cri", "cra", "debentures_incentivadas"])
def test_isentos_sem_imposto_mesmo_em_prazo_curto(tipo):
    res = simular_investimento(InvestmentParams(tipo=tipo, valor_inicial=1000.0, prazo=10,
                                                unidade_prazo=TermUnit.DIAS, taxa_juros=12.0))
    assert res.ir == 0.0 and res.iof == 0.0

def test_prazo_zero():
    res = simular_investimento(_cdb_pre(prazo=0))
    assert res.evolucao == (1000.0,)
    assert res.valor_final == 1000.0
    assert res.rendimento_bruto == res.ir == res.iof == 0.0

def test_prazo_em_anos():
    res = simular_investimento(_cdb_pre(prazo=2, unidade_prazo=TermUnit.ANOS))
    assert len(res.evolucao) == 24
    assert res.ir == pytest.approx(res.rendimento_bruto * 0.15, abs=0.01)

def test_aporte_no_comeco_rende_no_mes():
    i_am = (1.12) ** (1 / 12) - 1
    comeco = simular_investimento(_cdb_pre(valor_inicial=0.0, aporte=100.0, prazo=1, aporte_no_comeco=True))
    fim = simular_investimento(_cdb_pre(valor_inicial=0.0, aporte=100.0, prazo=1))
    assert comeco.evolucao[0] == pytest.approx(100 * (1 + i_am), abs=0.01)
    assert fim.evolucao[0] == 100.0
    assert comeco.total_investido == fim.total_investido == 100.0

def test_taxa_adm_limitada():
    res = simular_investimento(_cdb_pre(taxa_juros=0.0, prazo=1, taxa_adm_am=5.0))
    assert res.evolucao[0] == pytest.approx(1000.0 * (1 - ADMIN_FEE_MAX))
    assert res.ir == 0.0

def test_pos_sem_indice_levanta():
    with pytest.raises(IndiceIndisponivelError):
        simular_investimento(_cdb_pre(taxa_juros=110.0, modo_taxa=RateMode.POS))

def test_tipo_desconhecido():
    with pytest.raises(TipoDesconhecidoError):
        simular_investimento(InvestmentParams(tipo="poupanca", valor_inicial=100.0, prazo=12))

def test_tesouro_ipca():
    res = simular_investimento(InvestmentParams(tipo=InstrumentType.TESOURO_IPCA, valor_inicial=1000.0,
                                                prazo=12, taxa_juros=6.0, ipca_aa=4.0))
    assert res.rendimento_bruto == pytest.approx(100.0, abs=0.01)
    assert res.valor_final == pytest.approx(1082.5, abs=0.01)
    assert res.indice_nome == "IPCA"

def test_fii_dividendos_sem_reinvestir():
    p = InvestmentParams(tipo=InstrumentType.FII, valor_inicial=1200.0, prazo=12, preco_cota=10.0,
                         valorizacao_am=0.0, dividend_yield_aa=12.0, frequencia_dividendos_meses=1)
    res = simular_investimento(p)
    assert res.total_dividendos == pytest.approx(144.0, abs=0.01)
    assert res.evolucao[-1] == pytest.approx(1200.0)
    assert res.ir == 0.0

def test_fii_dividendos_reinvestidos():
    p = InvestmentParams(tipo=InstrumentType.FII, valor_inicial=1200.0, prazo=12, preco_cota=10.0,
                         valorizacao_am=0.0, dividend_yield_aa=12.0, reinvestir_dividendos=True)
    res = simular_investimento(p)
    assert res.evolucao[-1] == pytest.approx(1200 * 1.01 ** 12, abs=0.01)
    assert res.total_dividendos == pytest.approx(res.rendimento_bruto, abs=0.01)
    assert res.ir == 0.0

def test_acoes_ir_sobre_ganho_de_capital():
    p = InvestmentParams(tipo=InstrumentType.ACOES, valor_inicial=1000.0, prazo=12, preco_cota=50.0,
                         valorizacao_am=0.01)
    res = simular_investimento(p)
    assert res.rendimento_bruto == pytest.approx(1000 * (1.01 ** 12 - 1), abs=0.01)
    assert res.ir == pytest.approx(res.rendimento_bruto * 0.2, abs=0.01)

def test_fii_valorizacao_padrao():
    p = InvestmentParams(tipo=InstrumentType.FII, valor_inicial=1000.0, prazo=1, preco_cota=10.0)
    assert simular_investimento(p).evolucao[0] == pytest.approx(1008.0)

def test_sem_arredondamento():
    res = simular_investimento(_cdb_pre(prazo=15, unidade_prazo=TermUnit.DIAS, arredondar=False))
    assert not res.arredondado
    assert res.rendimento_bruto == pytest.approx(1000 * (1.12 ** (1 / 12) - 1))
    assert res.rendimento_bruto != round(res.rendimento_bruto, 2)

@pytest.mark.parametrize("prazo", [float("nan"), float("inf")])
def test_prazo_nao_numerico(prazo):
    with pytest.raises(ValueError, match="Prazo inválido"):
        simular_investimento(_cdb_pre(prazo=prazo))
