from credit.amortization import tabela_sac
from finance.models import InvestmentParams
from finance.products import InstrumentType, RateMode
from compare import comparar_alternativas
from report.tables import df_comparacao, df_evolucao, df_amortizacao

def _itens():
    p = InvestmentParams(tipo=InstrumentType.CDB, valor_inicial=1000.0, prazo=12, taxa_juros=12.0,
                         modo_taxa=RateMode.PRE, cdi_aa=13.65, selic_aa=13.75)
    return comparar_alternativas(p)

def test_df_comparacao_ordenado():
    df = df_comparacao(_itens())
    vf = df["Valor final líquido (R$)"].tolist()
    assert vf == sorted(vf, reverse=True)
    assert df["Selecionado"].sum() == 1

def test_df_comparacao_vazio():
    assert df_comparacao([]).empty

def test_df_evolucao():
    itens = _itens()
    df = df_evolucao(itens)
    assert len(df) == 12
    assert df.index[0] == 1
    assert list(df.columns) == [it.rotulo for it in itens]

def test_df_amortizacao():
    df = df_amortizacao(tabela_sac(12000, 0.01, 12))
    assert list(df.columns) == ["Mês", "Parcela", "Amortização", "Juros", "Saldo devedor", "Taxa adm."]
    assert len(df) == 12
    assert df["Amortização"].sum() == 12000
