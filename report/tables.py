# report/tables.py
from __future__ import annotations
from dataclasses import asdict
from typing import Iterable, List
import pandas as pd

from credit.amortization import AmortizationEntry
from finance.models import ComparisonItem

def df_comparacao(itens: List[ComparisonItem]) -> pd.DataFrame:
    """Uma linha por alternativa, ordenada pelo valor final líquido."""
    rows = []
    for it in itens:
        r = it.resultado
        rows.append({
            "Aplicação": it.rotulo,
            "Selecionado": it.selecionado,
            "Total investido (R$)": r.total_investido,
            "Rendimento bruto (R$)": r.rendimento_bruto,
            "IR (R$)": r.ir,
            "IOF (R$)": r.iof,
            "Valor final líquido (R$)": r.valor_final,
            "Rentabilidade (% a.a.)": r.rentabilidade_aa_pct,
        })
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    return df.sort_values("Valor final líquido (R$)", ascending=False).reset_index(drop=True)

def df_evolucao(itens: List[ComparisonItem]) -> pd.DataFrame:
    """Saldo bruto mês a mês, uma coluna por alternativa (séries de tamanhos diferentes viram NaN)."""
    series = {it.rotulo: pd.Series(it.resultado.evolucao, dtype=float) for it in itens}
    df = pd.DataFrame(series)
    df.index = pd.RangeIndex(1, len(df) + 1, name="Mes")
    return df

def df_amortizacao(tabela: Iterable[AmortizationEntry]) -> pd.DataFrame:
    cols = {"mes": "Mês", "parcela": "Parcela", "amortizacao": "Amortização",
            "juros": "Juros", "saldo": "Saldo devedor", "taxa_adm": "Taxa adm."}
    df = pd.DataFrame([asdict(e) for e in tabela], columns=list(cols))
    return df.rename(columns=cols)
