# finance/products.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union, TYPE_CHECKING
from .tvm import annual_pct_to_monthly

if TYPE_CHECKING:
    from .models import InvestmentParams


class InstrumentType(str, Enum):
    CDB = "cdb"
    LCI = "lci"
    LCA = "lca"
    CRI = "cri"
    CRA = "cra"
    DEBENTURES = "debentures"
    DEBENTURES_INCENTIVADAS = "debentures_incentivadas"
    TESOURO_SELIC = "tesouro_selic"
    TESOURO_PREFIXADO = "tesouro_prefixado"
    TESOURO_IPCA = "tesouro_ipca+"
    FUNDO_DI = "fund_di"
    FII = "fii"
    ACOES = "stock"


class RateMode(str, Enum):
    PRE = "pre"
    POS = "pos"


class TermUnit(str, Enum):
    MESES = "meses"
    ANOS = "anos"
    DIAS = "dias"


class Familia(str, Enum):
    RENDA_FIXA = "renda_fixa"
    RENDA_VARIAVEL = "renda_variavel"


class IndiceIndisponivelError(ValueError):
    """Taxa depende de um índice (CDI/SELIC/IPCA) que não foi informado."""


class TipoDesconhecidoError(ValueError):
    """Tipo de investimento fora da tabela de descritores."""


@dataclass(frozen=True)
class ProductDescriptor:
    tipo: InstrumentType
    rotulo: str
    familia: Familia
    modos: Tuple[RateMode, ...] = ()
    modo_padrao: Optional[RateMode] = None
    indexador: Optional[str] = None       # "SELIC" / "IPCA": taxa fixa pelo índice
    isento_ir: bool = False
    sujeito_iof: bool = False
    ajuste_pre: float = 0.0               # p.p. somados à pré sintetizada na comparação
    valorizacao_padrao_am: float = 0.0    # renda variável: valorização mensal da cota

    @property
    def conversivel(self) -> bool:
        return RateMode.PRE in self.modos and RateMode.POS in self.modos

    @property
    def renda_variavel(self) -> bool:
        return self.familia is Familia.RENDA_VARIAVEL

    def modo_efetivo(self, modo: Optional[RateMode]) -> Optional[RateMode]:
        """Modo pedido se permitido para o tipo; senão o modo padrão."""
        if modo is not None and RateMode(modo) in self.modos:
            return RateMode(modo)
        return self.modo_padrao


_AMBOS = (RateMode.PRE, RateMode.POS)
_RF = Familia.RENDA_FIXA
_RV = Familia.RENDA_VARIAVEL

DESCRITORES: Dict[InstrumentType, ProductDescriptor] = {d.tipo: d for d in (
    ProductDescriptor(InstrumentType.CDB, "CDB", _RF, _AMBOS, RateMode.PRE, sujeito_iof=True),
    ProductDescriptor(InstrumentType.LCI, "LCI", _RF, _AMBOS, RateMode.PRE, isento_ir=True),
    ProductDescriptor(InstrumentType.LCA, "LCA", _RF, _AMBOS, RateMode.PRE, isento_ir=True),
    ProductDescriptor(InstrumentType.CRI, "CRI", _RF, _AMBOS, RateMode.PRE, isento_ir=True),
    ProductDescriptor(InstrumentType.CRA, "CRA", _RF, _AMBOS, RateMode.PRE, isento_ir=True),
    ProductDescriptor(InstrumentType.DEBENTURES, "Debêntures", _RF, _AMBOS, RateMode.PRE, ajuste_pre=-2.0),
    ProductDescriptor(InstrumentType.DEBENTURES_INCENTIVADAS, "Debêntures Incentivadas (isentas)", _RF,
                      _AMBOS, RateMode.PRE, isento_ir=True),
    ProductDescriptor(InstrumentType.TESOURO_SELIC, "Tesouro Selic", _RF, (RateMode.POS,), RateMode.POS,
                      indexador="SELIC", sujeito_iof=True),
    ProductDescriptor(InstrumentType.TESOURO_PREFIXADO, "Tesouro Prefixado", _RF, (RateMode.PRE,), RateMode.PRE,
                      sujeito_iof=True),
    ProductDescriptor(InstrumentType.TESOURO_IPCA, "Tesouro IPCA+", _RF, (RateMode.PRE,), RateMode.PRE,
                      indexador="IPCA", sujeito_iof=True),
    ProductDescriptor(InstrumentType.FUNDO_DI, "Fundo DI", _RF, (RateMode.POS,), RateMode.POS, sujeito_iof=True),
    ProductDescriptor(InstrumentType.FII, "FII", _RV, valorizacao_padrao_am=0.008),
    ProductDescriptor(InstrumentType.ACOES, "Ações", _RV),
)}

FALLBACK_COMPARACAO = (
    InstrumentType.CDB, InstrumentType.LCI, InstrumentType.TESOURO_SELIC, InstrumentType.TESOURO_PREFIXADO,
)

def descritor_de(tipo: Union[InstrumentType, str]) -> Optional[ProductDescriptor]:
    try:
        return DESCRITORES.get(InstrumentType(tipo))
    except ValueError:
        return None

def tipos_da_familia(familia: Familia) -> list[InstrumentType]:
    return [t for t, d in DESCRITORES.items() if d.familia is familia]

def rotulo_de(tipo: Union[InstrumentType, str]) -> str:
    d = descritor_de(tipo)
    return d.rotulo if d else str(getattr(tipo, "value", tipo))


# --- taxas mensais por regra de indexação (entradas em % a.a.) ---

def taxa_prefixado_am(taxa_aa: float) -> float:
    return annual_pct_to_monthly(taxa_aa)

def taxa_pos_am(percentual_indice: float, indice_aa: float) -> float:
    """Ex.: 110% do CDI -> mensal do CDI * 1.10"""
    return annual_pct_to_monthly(indice_aa) * (percentual_indice / 100.0)

def taxa_tesouro_selic_am(selic_aa: float) -> float:
    return annual_pct_to_monthly(selic_aa)

def taxa_ipca_am(taxa_real_aa: float, ipca_aa: float) -> float:
    """
    Composição aditiva simples: (real + IPCA) anual -> mensal.
    """
    return annual_pct_to_monthly(taxa_real_aa + ipca_aa)


@dataclass(frozen=True)
class TaxaResolvida:
    i_am: float
    modo: Optional[RateMode]
    indice_nome: Optional[str] = None
    indice_aa: Optional[float] = None
    taxa_exibicao_aa: Optional[float] = None


def indice_referencia(params: "InvestmentParams") -> Tuple[Optional[str], Optional[float]]:
    """Índice de referência do pós-fixado: CDI se houver, senão SELIC."""
    if params.cdi_aa is not None:
        return "CDI", params.cdi_aa
    if params.selic_aa is not None:
        return "SELIC", params.selic_aa
    return None, None

def resolver_taxa(params: "InvestmentParams", d: ProductDescriptor) -> TaxaResolvida:
    """
    Taxa mensal efetiva do produto. Levanta IndiceIndisponivelError quando a
    regra do tipo exige um índice ausente.
    """
    if d.renda_variavel:
        return TaxaResolvida(0.0, None)

    taxa = params.taxa_juros or 0.0
    modo = d.modo_efetivo(params.modo_taxa)

    if d.indexador == "SELIC":
        if params.selic_aa is None:
            raise IndiceIndisponivelError(f"{d.rotulo}: Selic atual não informada.")
        return TaxaResolvida(taxa_tesouro_selic_am(params.selic_aa), modo, "SELIC",
                             params.selic_aa, params.selic_aa)

    if d.indexador == "IPCA":
        if params.ipca_aa is None:
            raise IndiceIndisponivelError(f"{d.rotulo}: IPCA atual não informado.")
        return TaxaResolvida(taxa_ipca_am(taxa, params.ipca_aa), modo, "IPCA",
                             params.ipca_aa, taxa + params.ipca_aa)

    if modo is RateMode.POS:
        nome, indice = indice_referencia(params)
        if indice is None:
            raise IndiceIndisponivelError(f"{d.rotulo}: taxa pós-fixada sem índice (CDI/SELIC).")
        return TaxaResolvida(taxa_pos_am(taxa, indice), modo, nome, indice, indice * (taxa / 100.0))

    return TaxaResolvida(taxa_prefixado_am(taxa), modo, taxa_exibicao_aa=taxa)
