import pytest
from credit.amortization import Metodo, gerar_tabela, tabela_price, tabela_sac, tabela_consorcio

def test_price_parcelas_constantes():
    tab = tabela_price(10000, 0.01, 24)
    assert len(tab) == 24
    assert all(e.parcela == 470.73 for e in tab[:-1])
    assert abs(tab[-1].parcela - 470.73) < 0.5
    assert sum(e.amortizacao for e in tab) == pytest.approx(10000, abs=0.01)
    assert tab[-1].saldo == 0.0

def test_saldo_nao_cresce():
    for metodo in (Metodo.PRICE, Metodo.SAC):
        tab = gerar_tabela(metodo, 10000, 0.015, 36)
        saldos = [e.saldo for e in tab]
        assert saldos == sorted(saldos, reverse=True)

def test_sac_amortizacao_constante():
    tab = tabela_sac(12000, 0.01, 12)
    assert all(e.amortizacao == 1000.0 for e in tab)
    assert tab[0].parcela == 1120.0
    parcelas = [e.parcela for e in tab]
    assert parcelas == sorted(parcelas, reverse=True)
    assert tab[-1].saldo == 0.0

def test_sac_centavos_restantes_no_inicio():
    tab = tabela_sac(10000, 0.01, 3)
    assert [e.amortizacao for e in tab] == [3333.34, 3333.33, 3333.33]
    assert sum(e.amortizacao for e in tab) == pytest.approx(10000)

def test_sac_prazo_longo_parcelas_nunca_crescem():
    tab = tabela_sac(10000, 0.005, 300)
    parcelas = [e.parcela for e in tab]
    assert parcelas == sorted(parcelas, reverse=True)
    assert all(abs(e.amortizacao - 10000 / 300) < 0.01 for e in tab)
    assert sum(e.amortizacao for e in tab) == pytest.approx(10000, abs=0.001)
    assert tab[-1].saldo == 0.0

def test_consorcio_parcelas_nunca_crescem():
    tab = tabela_consorcio(10000, 300, 10)
    parcelas = [e.parcela for e in tab]
    assert parcelas == sorted(parcelas, reverse=True)
    assert tab[-1].saldo == 0.0

def test_consorcio():
    tab = tabela_consorcio(12000, 12, 15)
    assert all(e.parcela == 1150.0 and e.juros == 0.0 and e.taxa_adm == 150.0 for e in tab)
    assert tab[-1].saldo == 0.0

def test_taxa_zero():
    tab = tabela_price(1200, 0.0, 12)
    assert all(e.parcela == 100.0 and e.juros == 0.0 for e in tab)

def test_prazo_invalido():
    with pytest.raises(ValueError):
        tabela_price(1000, 0.01, 0)
    with pytest.raises(ValueError):
        gerar_tabela("sac", -1, 0.01, 12)
