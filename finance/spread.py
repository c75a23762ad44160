# finance/spread.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

@dataclass
class SpreadConfig:
    curto: float = 0.5                 # p.p., prazo até 1 ano
    medio: float = 0.8                 # p.p., até 3 anos
    longo: float = 1.2                 # p.p., acima de 3 anos
    fixo: Optional[float] = None       # se informado, ignora as faixas acima
    ajuste_emissor: float = 0.0        # risco de crédito do emissor (ex.: banco menor -> 0.5)

def spread_base(anos: float, config: SpreadConfig) -> float:
    if config.fixo is not None:
        return config.fixo
    if anos <= 1:
        return config.curto
    if anos <= 3:
        return config.medio
    return config.longo

def premio_liquidez(anos: float) -> float:
    """Prêmio de liquidez simples, crescente com o prazo (p.p.)."""
    if anos <= 1:
        return 0.1
    if anos <= 3:
        return 0.25
    if anos <= 7:
        return 0.4
    return 0.6

def spread_por_prazo(anos: float, ajuste_emissor: Optional[float] = None,
                     config: Optional[SpreadConfig] = None) -> float:
    """
    Spread total (p.p.) descontado ao converter pós -> pré:
    faixa por prazo + prêmio de liquidez + ajuste do emissor, nunca negativo.
    """
    cfg = config or SpreadConfig()
    ajuste = cfg.ajuste_emissor if ajuste_emissor is None else ajuste_emissor
    return max(0.0, spread_base(anos, cfg) + premio_liquidez(anos) + ajuste)
