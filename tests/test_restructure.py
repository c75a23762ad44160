import pytest
from credit import restructure
from credit.amortization import Metodo, tabela_price, tabela_sac, tabela_consorcio
from credit.restructure import Politica, RestructuringRequest, amortizacao_extra

def _price():
    return tabela_price(10000, 0.01, 24)

def test_reduzir_prazo_price():
    base = _price()
    res = amortizacao_extra(base, RestructuringRequest(2000, Politica.REDUZIR_PRAZO, 6), Metodo.PRICE,
                            0.01, 10000, 24)
    tab = res.tabela
    assert res.aplicada and res.convergiu
    assert len(tab) < 24
    assert [e.mes for e in tab] == list(range(1, len(tab) + 1))
    assert tab[5].parcela == pytest.approx(base[5].parcela + 2000)
    assert all(e.parcela == base[0].parcela for i, e in enumerate(tab[:-1]) if i != 5)
    assert tab[-1].saldo == 0.0

def test_reduzir_parcela_price():
    base = _price()
    res = amortizacao_extra(base, RestructuringRequest(2000, Politica.REDUZIR_PARCELA, 6), Metodo.PRICE,
                            0.01, 10000, 24)
    tab = res.tabela
    assert len(tab) == 24
    assert tuple(tab[:5]) == tuple(base[:5])
    assert tab[6].parcela < base[6].parcela
    assert tab[-1].saldo == 0.0

def test_reduzir_prazo_sac():
    base = tabela_sac(12000, 0.01, 12)
    res = amortizacao_extra(base, RestructuringRequest(3000, Politica.REDUZIR_PRAZO, 4), Metodo.SAC,
                            0.01, 12000, 12)
    assert len(res.tabela) == 9
    assert all(e.amortizacao == 1000.0 for e in res.tabela[4:])
    assert res.tabela[-1].saldo == 0.0

def test_extra_quita_o_saldo():
    base = tabela_price(1000, 0.01, 6)
    res = amortizacao_extra(base, RestructuringRequest(999999, Politica.REDUZIR_PRAZO, 3), Metodo.PRICE,
                            0.01, 1000, 6)
    assert len(res.tabela) == 3
    assert res.tabela[-1].saldo == 0.0
    assert res.tabela[2].parcela == pytest.approx(base[2].parcela + base[2].saldo)

@pytest.mark.parametrize("mes", [0, 25, 99])
def test_mes_fora_do_intervalo(mes):
    base = _price()
    res = amortizacao_extra(base, RestructuringRequest(1000, Politica.REDUZIR_PRAZO, mes), Metodo.PRICE,
                            0.01, 10000, 24)
    assert res.tabela == tuple(base)
    assert not res.aplicada

def test_tabela_original_preservada():
    base = _price()
    copia = list(base)
    amortizacao_extra(base, RestructuringRequest(2000, Politica.REDUZIR_PARCELA, 6), Metodo.PRICE,
                      0.01, 10000, 24)
    assert base == copia

def test_limite_de_iteracoes(monkeypatch):
    monkeypatch.setattr(restructure, "MAX_ITERACOES", 2)
    res = amortizacao_extra(_price(), RestructuringRequest(100, Politica.REDUZIR_PRAZO, 6), Metodo.PRICE,
                            0.01, 10000, 24)
    assert not res.convergiu
    assert len(res.tabela) == 8
    assert res.tabela[-1].saldo > 0

def test_consorcio_nao_aceita():
    base = tabela_consorcio(12000, 12, 15)
    with pytest.raises(ValueError):
        amortizacao_extra(base, RestructuringRequest(1000, Politica.REDUZIR_PRAZO, 3), Metodo.CONSORCIO,
                          0.0, 12000, 12)

def test_reduzir_parcela_sac():
    base = tabela_sac(12000, 0.01, 12)
    res = amortizacao_extra(base, RestructuringRequest(3001, Politica.REDUZIR_PARCELA, 4), Metodo.SAC,
                            0.01, 12000, 12)
    tab = res.tabela
    assert len(tab) == 12
    assert tab[3].saldo == 4999.0
    assert all(e.amortizacao == 624.88 for e in tab[4:11])
    assert tab[-1].amortizacao == pytest.approx(4999.0 - 7 * 624.88)
    assert tab[-1].saldo == 0.0

@pytest.mark.parametrize("valor", [-500, 0])
def test_valor_nao_positivo_nao_altera_tabela(valor):
    base = _price()
    res = amortizacao_extra(base, RestructuringRequest(valor, Politica.REDUZIR_PRAZO, 6), Metodo.PRICE,
                            0.01, 10000, 24)
    assert res.tabela == tuple(base)
    assert not res.aplicada
