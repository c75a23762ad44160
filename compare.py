# compare.py
from __future__ import annotations
import copy
import logging
from typing import List, Optional, Tuple
from finance.models import InvestmentParams, SimulationResult, ComparisonItem
from finance.products import (
    InstrumentType, RateMode, ProductDescriptor, FALLBACK_COMPARACAO,
    descritor_de, tipos_da_familia, indice_referencia, rotulo_de,
)
from finance.spread import SpreadConfig, spread_por_prazo
from finance.tvm import pos_para_pre
from simulate import simular_investimento

_LOG = logging.getLogger(__name__)

Taxa = Tuple[Optional[float], Optional[RateMode]]

def _fmt_pct(v: Optional[float]) -> str:
    return f"{v:.2f}%" if isinstance(v, (int, float)) else "-"

def _id(tipo: InstrumentType, modo: Optional[RateMode]) -> str:
    return f"{tipo.value}_{modo.value}" if modo else tipo.value

def _anos(params: InvestmentParams) -> float:
    try:
        anos = params.meses / 12.0
    except TypeError:
        return 1.0
    return anos if anos == anos else 1.0  # NaN -> 1 ano

class _Conversor:
    """Reexpressa a taxa pedida na convenção (pré/pós) de outro produto."""

    def __init__(self, params: InvestmentParams, config: SpreadConfig):
        self.base = params.taxa_juros
        self.base_modo = RateMode(params.modo_taxa) if params.modo_taxa else None
        self.ipca = params.ipca_aa
        self.selic = params.selic_aa
        _, self.indice = indice_referencia(params)
        self.config = config
        self.spread = spread_por_prazo(_anos(params), config=config)

    def _pre_de_pos(self, pct: Optional[float], spread: float) -> Optional[float]:
        pre = pos_para_pre(pct, self.indice)
        return None if pre is None else max(0.0, pre - spread)

    def pre_equivalente(self, d: ProductDescriptor) -> Optional[float]:
        if self.base is not None and self.base_modo is RateMode.PRE:
            return max(0.0, self.base + d.ajuste_pre)
        if d.tipo is InstrumentType.TESOURO_PREFIXADO:
            # título público: só um leve ajuste de emissor, sem spread de prazo
            spread = max(0.0, self.config.ajuste_emissor * 0.5)
        else:
            spread = self.spread - d.ajuste_pre
        if self.base is not None and self.base_modo is RateMode.POS:
            return self._pre_de_pos(self.base, spread)
        if d.tipo is InstrumentType.TESOURO_PREFIXADO:
            return None
        return self._pre_de_pos(100.0, spread)

    def pos_equivalente(self) -> Optional[float]:
        if self.base is not None and self.base_modo is RateMode.POS:
            return self.base
        return 100.0 if self.indice is not None else None

    def taxa_para(self, d: ProductDescriptor, modo: Optional[RateMode]) -> Taxa:
        if d.renda_variavel:
            return self.base, None
        if d.indexador == "SELIC":
            return (100.0 if self.selic is not None else None), RateMode.POS
        if d.indexador == "IPCA":
            pre = self.pre_equivalente(d)
            if pre is None or self.ipca is None:
                return None, RateMode.PRE
            return max(0.0, pre - self.ipca), RateMode.PRE
        if modo is RateMode.POS:
            return self.pos_equivalente(), RateMode.POS
        return self.pre_equivalente(d), RateMode.PRE

def _rotulo_selecionado(params: InvestmentParams, d: ProductDescriptor, modo: Optional[RateMode]) -> str:
    if modo is RateMode.PRE and d.indexador is None:
        return f"{d.rotulo} (Pré - {_fmt_pct(params.taxa_juros)})"
    if modo is RateMode.POS and d.indexador is None:
        _, idx = indice_referencia(params)
        if idx is not None and params.taxa_juros is not None:
            return f"{d.rotulo} (Pós - {_fmt_pct(params.taxa_juros)} do índice (~{_fmt_pct(idx * params.taxa_juros / 100)}))"
        return f"{d.rotulo} (Pós - {_fmt_pct(params.taxa_juros)} do índice)"
    return d.rotulo

def _rotulo_alternativa(d: ProductDescriptor, modo: Optional[RateMode]) -> str:
    if not d.conversivel:
        return d.rotulo
    return f"{d.rotulo} (Pré)" if modo is RateMode.PRE else f"{d.rotulo} (Pós - % CDI)"

def _candidatos(d: ProductDescriptor) -> List[Tuple[ProductDescriptor, Optional[RateMode]]]:
    out = []
    for tipo in tipos_da_familia(d.familia):
        alt = descritor_de(tipo)
        if alt.renda_variavel:
            out.append((alt, None))
        elif alt.conversivel:
            out.extend([(alt, RateMode.PRE), (alt, RateMode.POS)])
        else:
            out.append((alt, alt.modo_padrao))
    return out

def comparar_alternativas(params: InvestmentParams, resultado_selecionado: Optional[SimulationResult] = None,
                          spread: Optional[SpreadConfig] = None) -> List[ComparisonItem]:
    """
    Cesta de comparação para o produto pedido: o próprio (reaproveitando o
    resultado já calculado, se houver) e as alternativas da mesma família,
    cada uma simulada sobre uma cópia dos parâmetros.
    """
    config = spread or SpreadConfig()
    conv = _Conversor(params, config)
    itens: List[ComparisonItem] = []
    ids = set()

    def empurrar(id_: str, rotulo: str, d: ProductDescriptor, p: InvestmentParams,
                 selecionado: bool = False, resultado: Optional[SimulationResult] = None) -> None:
        if id_ in ids:
            return
        try:
            r = resultado if resultado is not None else simular_investimento(p)
        except ValueError as e:
            _LOG.warning("comparar_alternativas: %s ignorado (%s)", id_, e)
            return
        itens.append(ComparisonItem(id=id_, rotulo=rotulo, tipo=d.tipo, resultado=r,
                                    selecionado=selecionado, params=p))
        ids.add(id_)

    def variante(d: ProductDescriptor, taxa: Optional[float], modo: Optional[RateMode]) -> InvestmentParams:
        p = copy.deepcopy(params)
        p.tipo = d.tipo
        p.taxa_juros = taxa
        p.modo_taxa = modo
        return p

    d_sel = descritor_de(params.tipo)
    if d_sel is None:
        _LOG.info("comparar_alternativas: tipo %r fora da tabela, usando cesta padrão", params.tipo)
        for tipo in FALLBACK_COMPARACAO:
            d = descritor_de(tipo)
            taxa, modo = conv.taxa_para(d, d.modo_padrao)
            p = variante(d, taxa, modo)
            # sem taxa equivalente a cesta padrão rende zero, nunca fica vazia
            if d.indexador == "SELIC" and p.selic_aa is None:
                p.selic_aa = 0.0
            elif d.indexador != "SELIC" and taxa is None:
                p.taxa_juros, p.modo_taxa = 0.0, RateMode.PRE
            empurrar(f"fallback_{tipo.value}", rotulo_de(tipo), d, p)
        return itens

    modo_sel = None if d_sel.renda_variavel else d_sel.modo_efetivo(params.modo_taxa)
    empurrar(_id(d_sel.tipo, modo_sel), _rotulo_selecionado(params, d_sel, modo_sel), d_sel,
             copy.deepcopy(params), selecionado=True, resultado=resultado_selecionado)

    for d, modo in _candidatos(d_sel):
        id_ = _id(d.tipo, modo)
        if id_ in ids:
            continue
        taxa, modo_alt = conv.taxa_para(d, modo)
        if taxa is None and d.indexador != "SELIC" and not d.renda_variavel:
            _LOG.debug("comparar_alternativas: sem taxa equivalente para %s", id_)
            continue
        empurrar(id_, _rotulo_alternativa(d, modo), d, variante(d, taxa, modo_alt))

    return itens
