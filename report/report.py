# report/report.py
from __future__ import annotations
import os
from datetime import datetime
from typing import List, Dict
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from reportlab.lib.units import cm
from reportlab.lib.utils import ImageReader

from credit.loan import CreditSimulation
from finance.models import ComparisonItem
from .tables import df_comparacao, df_evolucao, df_amortizacao

def salvar_csv(csv_path: str, itens: List[ComparisonItem]) -> None:
    """Saldo bruto mês a mês; séries mais curtas ficam com células vazias."""
    df = df_evolucao(itens).round(2).rename(columns=lambda rotulo: f"{rotulo} (bruto)")
    df.to_csv(csv_path, sep=";", encoding="utf-8")

def grafico_png(png_path: str, itens: List[ComparisonItem]) -> None:
    plt.figure()
    for it in itens:
        ev = it.resultado.evolucao
        plt.plot(range(1, len(ev) + 1), ev, label=f"{it.rotulo} (bruto)")
    plt.title("Evolução (mês a mês) – valores brutos antes do IR")
    plt.xlabel("Meses"); plt.ylabel("Saldo (R$)")
    plt.legend(fontsize="small"); plt.tight_layout(); plt.savefig(png_path, dpi=150); plt.close()

def html_relatorio(html_path: str, params: Dict, itens: List[ComparisonItem], png_path: str, csv_path: str) -> None:
    tabela = df_comparacao(itens).to_html(index=False, float_format=lambda v: f"{v:,.2f}")
    indices = "".join(
        f"<tr><th>{nome}</th><td>{params[chave]:.2f}%</td></tr>"
        for nome, chave in (("CDI (a.a.)", "cdi_aa"), ("Selic (a.a.)", "selic_aa"), ("IPCA (a.a.)", "ipca_aa"))
        if params.get(chave) is not None
    )
    html = f"""<!doctype html>
<html lang="pt-br"><head><meta charset="utf-8">
<title>Relatório – Simulador de Investimentos</title>
<style>
body{{font-family:Arial,Helvetica,sans-serif;margin:2rem}}
h1,h2{{margin:.3rem 0}} small{{color:#555}}
table{{border-collapse:collapse;width:100%;margin:1rem 0}}
th,td{{border:1px solid #ddd;padding:8px;text-align:right}}
th{{background:#f2f2f2}} td:first-child,th:first-child{{text-align:left}}
blockquote{{background:#fafafa;border-left:4px solid #ccc;padding:.5rem 1rem}}
</style></head><body>
<h1>Relatório – Simulador de Investimentos</h1>
<small>Gerado em {datetime.now().strftime("%d/%m/%Y %H:%M:%S")}</small>

<h2>Parâmetros</h2>
<table>
<tr><th>Produto</th><td>{params['produto']}</td></tr>
<tr><th>Horizonte</th><td>{params['prazo']} {params['unidade_prazo']}</td></tr>
<tr><th>Valor inicial</th><td>R$ {params['valor_inicial']:.2f}</td></tr>
<tr><th>Aporte</th><td>R$ {params['aporte']:.2f}</td></tr>
<tr><th>Aporte no começo?</th><td>{'Sim' if params['aporte_no_comeco'] else 'Não'}</td></tr>
{indices}
</table>

<h2>Resultados (com custos + IR/IOF no resgate)</h2>
{tabela}

<h2>Gráfico (bruto)</h2>
<img src="{os.path.basename(png_path)}" alt="Gráfico" style="max-width:100%;height:auto"/>

<h2>CSV</h2>
<p><a href="{os.path.basename(csv_path)}">{os.path.basename(csv_path)}</a></p>

<blockquote><b>Notas:</b><br>
1) Taxa de administração mensal aplicada sobre o saldo ao fim de cada mês.<br>
2) IR regressivo e IOF (resgates antes de 30 dias) aplicados sobre o rendimento no resgate.<br>
3) Alternativas pré/pós convertidas pelo índice informado, descontado um spread por prazo e liquidez.</blockquote>
</body></html>"""
    with open(html_path, "w", encoding="utf-8") as f:
        f.write(html)

def pdf_relatorio(pdf_path: str, params: Dict, itens: List[ComparisonItem], png_path: str) -> None:
    """
    Gera PDF simples com sumário e o gráfico.
    """
    c = canvas.Canvas(pdf_path, pagesize=A4)
    w, h = A4
    x, y = 2*cm, h - 2*cm

    def draw_line(txt: str, dy=0.6*cm, bold=False):
        nonlocal y
        y -= dy
        if bold:
            c.setFont("Helvetica-Bold", 11)
        else:
            c.setFont("Helvetica", 10)
        c.drawString(x, y, txt)

    c.setFont("Helvetica-Bold", 14)
    c.drawString(x, y, "Relatório – Simulador de Investimentos")
    c.setFont("Helvetica", 9)
    c.drawRightString(w-2*cm, y, datetime.now().strftime("%d/%m/%Y %H:%M:%S"))

    draw_line(f"Produto: {params['produto']} | Horizonte: {params['prazo']} {params['unidade_prazo']}", dy=1.0*cm)
    draw_line(f"Valor inicial: R$ {params['valor_inicial']:.2f} | Aporte: R$ {params['aporte']:.2f} | "
              f"Aporte no começo? {'Sim' if params['aporte_no_comeco'] else 'Não'}")

    draw_line("Resultados (com custos + IR/IOF):", dy=0.8*cm, bold=True)
    c.setFont("Helvetica-Bold", 9)
    y -= 0.5*cm
    c.drawString(x, y, "Aplicação")
    c.drawRightString(x+9*cm, y, "Investido")
    c.drawRightString(x+13.5*cm, y, "Impostos")
    c.drawRightString(w-2*cm, y, "VF Líquido")

    c.setFont("Helvetica", 9)
    for it in sorted(itens, key=lambda k: k.resultado.valor_final, reverse=True):
        r = it.resultado
        y -= 0.5*cm
        if y < 6*cm:
            c.showPage()
            y = h - 2*cm
        c.drawString(x, y, it.rotulo[:45])
        c.drawRightString(x+9*cm, y, f"R$ {r.total_investido:,.2f}")
        c.drawRightString(x+13.5*cm, y, f"R$ {r.ir + r.iof:,.2f}")
        c.drawRightString(w-2*cm, y, f"R$ {r.valor_final:,.2f}")

    if os.path.exists(png_path):
        c.showPage()
        c.setFont("Helvetica-Bold", 12)
        c.drawString(2*cm, h - 2*cm, "Gráfico – Evolução (bruto)")
        img = ImageReader(png_path)
        img_w = 17*cm
        c.drawImage(img, 2*cm, h - 2*cm - 12*cm, width=img_w, height=12*cm, preserveAspectRatio=True, anchor='n')

    c.save()

def salvar_tabela_csv(csv_path: str, sim: CreditSimulation) -> None:
    df_amortizacao(sim.tabela).to_csv(csv_path, sep=";", index=False, float_format="%.2f")

def pdf_credito(pdf_path: str, sim: CreditSimulation) -> None:
    """Resumo do crédito + tabela de amortização paginada."""
    s = sim.resumo
    c = canvas.Canvas(pdf_path, pagesize=A4)
    w, h = A4
    x, y = 2*cm, h - 2*cm

    c.setFont("Helvetica-Bold", 14)
    c.drawString(x, y, f"Simulação de crédito – {s.modalidade.value} ({s.metodo.value})")
    c.setFont("Helvetica", 9)
    c.drawRightString(w-2*cm, y, datetime.now().strftime("%d/%m/%Y %H:%M:%S"))

    cet = "n/d" if s.cet_aa is None else f"{s.cet_aa:.2f}% a.a."
    linhas = [
        f"Valor: R$ {s.valor:,.2f} | Entrada: R$ {s.entrada:,.2f} | Financiado: R$ {s.valor_financiado:,.2f}",
        f"Juros: {s.taxa_aa:.2f}% a.a. ({s.taxa_am*100:.4f}% a.m.) | Parcelas: {s.parcelas}",
        f"Primeira parcela: R$ {s.primeira_parcela:,.2f} | Média: R$ {s.media_parcelas:,.2f}",
        f"Total pago: R$ {s.total_pago:,.2f} | Juros: R$ {s.total_juros:,.2f}",
        f"IOF: R$ {s.iof_total:,.2f}{' (teto)' if s.iof_limitado else ''} | Seguro: R$ {s.valor_seguro:,.2f}",
        f"Total com encargos: R$ {s.total_pago_com_encargos:,.2f} | CET: {cet}",
    ]
    y -= 0.4*cm
    c.setFont("Helvetica", 10)
    for txt in linhas:
        y -= 0.6*cm
        c.drawString(x, y, txt)

    cols = [("Mês", x + 1.2*cm), ("Parcela", x + 4.5*cm), ("Amortização", x + 8*cm),
            ("Juros", x + 11.5*cm), ("Saldo", w - 2*cm)]

    def cabecalho():
        nonlocal y
        y -= 0.9*cm
        c.setFont("Helvetica-Bold", 9)
        for nome, pos in cols:
            c.drawRightString(pos, y, nome)
        c.setFont("Helvetica", 9)

    cabecalho()
    for e in sim.tabela:
        y -= 0.45*cm
        if y < 2*cm:
            c.showPage()
            y = h - 1.5*cm
            cabecalho()
            y -= 0.45*cm
        valores = (str(e.mes), f"{e.parcela:,.2f}", f"{e.amortizacao:,.2f}", f"{e.juros:,.2f}", f"{e.saldo:,.2f}")
        for (_, pos), v in zip(cols, valores):
            c.drawRightString(pos, y, v)

    c.save()
