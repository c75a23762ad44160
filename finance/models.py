# finance/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union
from .products import InstrumentType, RateMode, TermUnit, ProductDescriptor

@dataclass
class InvestmentParams:
    """
    Parâmetros de uma simulação, já validados e convertidos para número.
    Taxas anuais e índices em % (12.0 = 12% a.a.); custos e alíquotas em fração
    (0.001 = 0,1% a.m.; 0.2 = 20%). Campos opcionais ausentes ficam None.
    """
    tipo: Union[InstrumentType, str]
    valor_inicial: float = 0.0
    aporte: float = 0.0                      # aporte recorrente por período
    aporte_no_comeco: bool = False
    prazo: float = 0.0
    unidade_prazo: TermUnit = TermUnit.MESES
    taxa_juros: Optional[float] = None       # pré: % a.a.; pós: % do índice
    modo_taxa: Optional[RateMode] = None
    selic_aa: Optional[float] = None
    cdi_aa: Optional[float] = None
    ipca_aa: Optional[float] = None
    taxa_adm_am: float = 0.0                 # fração ao mês sobre o saldo
    # renda variável
    dividend_yield_aa: Optional[float] = None  # % a.a.
    frequencia_dividendos_meses: int = 1
    preco_cota: Optional[float] = None
    valorizacao_am: Optional[float] = None     # fração ao mês
    aliquota_ganho_capital: float = 0.2
    aliquota_dividendos: float = 0.0
    reinvestir_dividendos: bool = False
    taxa_transacao: float = 0.0                # fração sobre o dividendo reinvestido
    arredondar: bool = True

    @property
    def meses(self) -> float:
        if self.unidade_prazo == TermUnit.ANOS:
            return self.prazo * 12.0
        if self.unidade_prazo == TermUnit.DIAS:
            return self.prazo / (365.0 / 12.0)
        return self.prazo


@dataclass(frozen=True)
class GrossSimulation:
    evolucao: Tuple[float, ...]
    saldo_final: float
    total_investido: float
    rendimento_bruto: float
    total_dividendos: float
    total_taxas_transacao: float
    meses: float
    dias: int
    periodos: int
    descritor: Optional[ProductDescriptor]
    i_am: float = 0.0
    modo: Optional[RateMode] = None
    indice_nome: Optional[str] = None
    indice_aa: Optional[float] = None
    taxa_exibicao_aa: Optional[float] = None

    @property
    def ganho_capital(self) -> float:
        return self.rendimento_bruto - self.total_dividendos


@dataclass(frozen=True)
class SimulationResult:
    rendimento_bruto: float
    ir: float
    iof: float
    rendimento_liquido: float
    valor_final: float
    rentabilidade_aa_pct: float
    evolucao: Tuple[float, ...]
    total_investido: float
    total_dividendos: float = 0.0
    total_taxas_transacao: float = 0.0
    ganho_capital: float = 0.0
    aliquota_iof: float = 0.0
    modo: Optional[RateMode] = None
    indice_nome: Optional[str] = None
    indice_aa: Optional[float] = None
    taxa_exibicao_aa: Optional[float] = None
    arredondado: bool = True


@dataclass(frozen=True)
class ComparisonItem:
    id: str
    rotulo: str
    tipo: InstrumentType
    resultado: SimulationResult
    selecionado: bool = False
    params: Optional[InvestmentParams] = field(default=None, compare=False, repr=False)
