import pytest
from credit.amortization import Metodo
from credit.loan import CreditParams, Modalidade, simular_credito
from credit.restructure import Politica, RestructuringRequest

def test_emprestimo_price():
    sim = simular_credito(CreditParams(valor=10000, prazo_meses=12, taxa_aa=12))
    s = sim.resumo
    assert s.taxa_am == pytest.approx(0.01)
    assert s.primeira_parcela == 888.49
    assert s.parcelas == 12
    assert s.total_pago == pytest.approx(888.49 * 12, abs=0.1)
    assert s.cet_aa == pytest.approx((1.01 ** 12 - 1) * 100, abs=0.05)
    assert s.iof_total == 0.0

def test_entrada_reduz_financiado():
    s = simular_credito(CreditParams(modalidade=Modalidade.FINANCIAMENTO, valor=10000, entrada=2000,
                                     prazo_meses=12, taxa_aa=12, metodo=Metodo.SAC)).resumo
    assert s.valor_financiado == 8000.0
    assert s.metodo is Metodo.SAC
    assert s.primeira_parcela == pytest.approx(8000 / 12 + 80, abs=0.01)

def test_consorcio():
    s = simular_credito(CreditParams(modalidade=Modalidade.CONSORCIO, valor=12000, prazo_meses=12,
                                     taxa_aa=30, taxa_adm_pct=15)).resumo
    assert s.metodo is Metodo.CONSORCIO
    assert s.taxa_am == 0.0
    assert s.primeira_parcela == 1150.0
    assert s.total_juros == pytest.approx(1800.0)
    assert s.cet_aa > 0

def test_encargos_aumentam_cet():
    sem = simular_credito(CreditParams(valor=10000, prazo_meses=12, taxa_aa=12)).resumo
    com = simular_credito(CreditParams(valor=10000, prazo_meses=12, taxa_aa=12, iof_fixo_pct=0.38,
                                       seguro_pct=1.0)).resumo
    assert com.iof_fixo == 38.0
    assert com.valor_seguro == 100.0
    assert com.total_pago_com_encargos == pytest.approx(com.total_pago + 138.0)
    assert com.cet_aa > sem.cet_aa

def test_teto_do_iof():
    s = simular_credito(CreditParams(valor=10000, prazo_meses=12, taxa_aa=12, iof_fixo_pct=0.38,
                                     iof_diario_pct=0.0082, teto_iof_pct=0.5)).resumo
    assert s.iof_limitado
    assert s.iof_total == 50.0

def test_amortizacao_extra_no_resumo():
    extra = RestructuringRequest(2000, Politica.REDUZIR_PRAZO, 6)
    s = simular_credito(CreditParams(valor=10000, prazo_meses=24, taxa_aa=12, amortizacao_extra=extra)).resumo
    assert s.amortizacao_extra_aplicada and s.reestruturacao_convergiu
    assert s.parcelas < 24

def test_consorcio_sem_amortizacao_extra():
    extra = RestructuringRequest(1000, Politica.REDUZIR_PRAZO, 3)
    with pytest.raises(ValueError):
        simular_credito(CreditParams(modalidade=Modalidade.CONSORCIO, valor=12000, prazo_meses=12,
                                     taxa_adm_pct=15, amortizacao_extra=extra))
