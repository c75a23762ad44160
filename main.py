# main.py
from __future__ import annotations
import logging
import os
from datetime import datetime
from typing import Optional

# --- Simuladores ---
from finance.models import InvestmentParams
from finance.products import InstrumentType, RateMode, TermUnit, DESCRITORES
from simulate import simular_investimento
from compare import comparar_alternativas
from credit.amortization import Metodo
from credit.loan import CreditParams, Modalidade, simular_credito
from credit.restructure import Politica, RestructuringRequest

# --- Relatórios ---
from report.tables import df_comparacao, df_amortizacao
from report.report import salvar_csv, grafico_png, html_relatorio, pdf_relatorio, salvar_tabela_csv, pdf_credito


# =========================
# Helpers de entrada
# =========================
def _input_float(msg: str, default: float) -> float:
    raw = input(f"{msg} [{default}]: ").strip()
    return float(raw.replace(",", ".") or default)

def _input_opt_float(msg: str) -> Optional[float]:
    raw = input(f"{msg} [vazio = não informado]: ").strip()
    return float(raw.replace(",", ".")) if raw else None

def _input_int(msg: str, default: int) -> int:
    raw = input(f"{msg} [{default}]: ").strip()
    return int(raw or default)

def _input_bool(msg: str, default: bool=False) -> bool:
    raw = input(f"{msg} [{'s' if default else 'n'}]: ").strip().lower()
    if raw == "":
        return default
    return raw.startswith("s")

def _input_choice(msg: str, options: list[str], default: str) -> str:
    raw = input(f"{msg} ({'/'.join(options)}) [{default}]: ").strip().lower()
    return raw if raw in options else default


# =========================
# Menu
# =========================
def menu():
    print("\n=== Simulador Financeiro (Investimentos + Crédito) ===")
    print("1) Simular investimento e comparar alternativas")
    print("2) Simular empréstimo / financiamento / consórcio")
    print("3) Relatório de investimentos (HTML + CSV + PNG + PDF)")
    print("0) Sair")


# =========================
# Montagem de parâmetros
# =========================
def ler_params_investimento() -> InvestmentParams:
    tipos = [t.value for t in DESCRITORES]
    tipo = InstrumentType(_input_choice("Produto", tipos, "cdb"))
    d = DESCRITORES[tipo]
    p = InvestmentParams(tipo=tipo)
    p.prazo = _input_float("Prazo", 12)
    p.unidade_prazo = TermUnit(_input_choice("Unidade do prazo", [u.value for u in TermUnit], "meses"))
    p.valor_inicial = _input_float("Valor inicial", 10000.0)
    p.aporte = _input_float("Aporte mensal", 0.0)
    p.aporte_no_comeco = _input_bool("Aportar no começo do mês?", False)
    p.cdi_aa = _input_opt_float("CDI atual (% a.a.)")
    p.selic_aa = _input_opt_float("Selic atual (% a.a.)")
    p.ipca_aa = _input_opt_float("IPCA atual (% a.a.)")
    if d.renda_variavel:
        p.preco_cota = _input_float("Preço da cota/ação", 100.0)
        p.valorizacao_am = _input_float("Valorização mensal (fração, ex.: 0.008)", d.valorizacao_padrao_am)
        p.dividend_yield_aa = _input_float("Dividend yield (% a.a.)", 8.0)
        p.frequencia_dividendos_meses = _input_int("Pagamento de dividendos a cada N meses", 1)
        p.reinvestir_dividendos = _input_bool("Reinvestir dividendos?", True)
        p.aliquota_ganho_capital = _input_float("IR sobre ganho de capital (fração)", p.aliquota_ganho_capital)
    else:
        if len(d.modos) > 1:
            p.modo_taxa = RateMode(_input_choice("Tipo de taxa", ["pre", "pos"], "pre"))
        else:
            p.modo_taxa = d.modo_padrao
        if d.indexador != "SELIC":
            label = "Taxa real (% a.a.)" if d.indexador == "IPCA" else (
                "Percentual do índice (%)" if p.modo_taxa is RateMode.POS else "Taxa pré (% a.a.)")
            p.taxa_juros = _input_float(label, 100.0 if p.modo_taxa is RateMode.POS else 12.0)
    p.taxa_adm_am = _input_float("Taxa de administração mensal (fração)", 0.0)
    return p

def _params_relatorio(p: InvestmentParams) -> dict:
    return dict(produto=DESCRITORES[InstrumentType(p.tipo)].rotulo, prazo=p.prazo,
                unidade_prazo=TermUnit(p.unidade_prazo).value, valor_inicial=p.valor_inicial,
                aporte=p.aporte, aporte_no_comeco=p.aporte_no_comeco,
                cdi_aa=p.cdi_aa, selic_aa=p.selic_aa, ipca_aa=p.ipca_aa)


# =========================
# Ações do menu
# =========================
def acao_investimento():
    print("\n-- Parâmetros --")
    p = ler_params_investimento()
    try:
        res = simular_investimento(p)
    except ValueError as e:
        print(f"Não foi possível simular: {e}")
        return

    print(f"\nTotal investido: R$ {res.total_investido:,.2f}")
    print(f"Rendimento bruto: R$ {res.rendimento_bruto:,.2f} | IR: R$ {res.ir:,.2f} | IOF: R$ {res.iof:,.2f}")
    print(f"Valor final líquido: R$ {res.valor_final:,.2f} ({res.rentabilidade_aa_pct:.2f}% a.a.)")

    itens = comparar_alternativas(p, res)
    print("\nComparação (valor final líquido):")
    print(df_comparacao(itens).to_string(index=False))


def acao_credito():
    print("\n-- Crédito --")
    modalidade = Modalidade(_input_choice("Modalidade", [m.value for m in Modalidade], "emprestimo"))
    cp = CreditParams(modalidade=modalidade)
    cp.valor = _input_float("Valor", 10000.0)
    cp.entrada = _input_float("Entrada", 0.0)
    cp.prazo_meses = _input_int("Prazo (meses)", 12)
    if modalidade is Modalidade.CONSORCIO:
        cp.taxa_adm_pct = _input_float("Taxa de administração total (%)", 15.0)
    else:
        cp.taxa_aa = _input_float("Juros (% a.a.)", 12.0)
        cp.metodo = Metodo(_input_choice("Sistema", ["price", "sac"], "price"))
        cp.iof_fixo_pct = _input_float("IOF fixo (%)", 0.38)
        cp.iof_diario_pct = _input_float("IOF diário (%)", 0.0082)
        cp.teto_iof_pct = _input_float("Teto do IOF (%)", 3.38)
        cp.seguro_pct = _input_float("Seguro (% do financiado)", 0.0)
        extra = _input_float("Amortização extra (0 = nenhuma)", 0.0)
        if extra > 0:
            mes = _input_int("Mês da amortização extra", 6)
            politica = Politica(_input_choice("Política", [x.value for x in Politica], "reduzir_prazo"))
            cp.amortizacao_extra = RestructuringRequest(extra, politica, mes)

    try:
        sim = simular_credito(cp)
    except ValueError as e:
        print(f"Não foi possível simular: {e}")
        return

    s = sim.resumo
    print("\n" + df_amortizacao(sim.tabela).to_string(index=False))
    print(f"\nFinanciado: R$ {s.valor_financiado:,.2f} | Parcelas: {s.parcelas} | 1ª parcela: R$ {s.primeira_parcela:,.2f}")
    print(f"Total pago: R$ {s.total_pago:,.2f} | Juros: R$ {s.total_juros:,.2f}")
    print(f"IOF: R$ {s.iof_total:,.2f}{' (teto aplicado)' if s.iof_limitado else ''} | Seguro: R$ {s.valor_seguro:,.2f}")
    print(f"CET: {'não determinado' if s.cet_aa is None else f'{s.cet_aa:.2f}% a.a.'}")
    if s.amortizacao_extra_aplicada and not s.reestruturacao_convergiu:
        print("Atenção: a reconstrução após a amortização extra não zerou o saldo.")

    if _input_bool("Salvar CSV + PDF da tabela?", False):
        outdir = "saida_credito"
        os.makedirs(outdir, exist_ok=True)
        base = datetime.now().strftime("%Y%m%d_%H%M%S")
        csv_path = os.path.join(outdir, f"tabela_{base}.csv")
        pdf_path = os.path.join(outdir, f"credito_{base}.pdf")
        salvar_tabela_csv(csv_path, sim)
        pdf_credito(pdf_path, sim)
        print(f"• CSV: {csv_path}\n• PDF: {pdf_path}")


def acao_relatorio():
    print("\n-- Relatório completo --")
    p = ler_params_investimento()
    itens = comparar_alternativas(p)
    if not itens:
        print("Nenhuma alternativa pôde ser simulada com os parâmetros informados.")
        return

    outdir = "saida_relatorio"
    os.makedirs(outdir, exist_ok=True)
    base = datetime.now().strftime("%Y%m%d_%H%M%S")
    csv_path = os.path.join(outdir, f"evolucao_{base}.csv")
    png_path = os.path.join(outdir, f"grafico_{base}.png")
    html_path = os.path.join(outdir, f"relatorio_{base}.html")
    pdf_path = os.path.join(outdir, f"relatorio_{base}.pdf")

    salvar_csv(csv_path, itens)
    grafico_png(png_path, itens)
    params = _params_relatorio(p)
    html_relatorio(html_path, params, itens, png_path, csv_path)
    pdf_relatorio(pdf_path, params, itens, png_path)

    print("\nArquivos gerados:")
    print(f"• CSV:  {csv_path}")
    print(f"• PNG:  {png_path}")
    print(f"• HTML: {html_path}")
    print(f"• PDF:  {pdf_path}")


# =========================
# Loop principal
# =========================
def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    while True:
        menu()
        op = input("Escolha: ").strip()
        if op == "1":
            acao_investimento()
        elif op == "2":
            acao_credito()
        elif op == "3":
            acao_relatorio()
        elif op == "0":
            print("Até mais!")
            break
        else:
            print("Opção inválida.")


if __name__ == "__main__":
    main()
