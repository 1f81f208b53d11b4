"""
Runtime configuration for Neuswap exchanges.

Values come from keyword arguments or, via `ExchangeConfig.from_env()`, from
environment variables:

- NEUSWAP_SHARE_NAME    share ledger name   (default "Neuswap-V1")
- NEUSWAP_SHARE_SYMBOL  share ledger symbol (default "NEU-V1")
- NEUSWAP_FEE_BPS       swap input haircut in bps (default 0, clamped to [0, 9999])

or, via `ExchangeConfig.from_yaml(path)`, from a YAML mapping with the keys
`share_name`, `share_symbol` and `fee_bps`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from .kernels.python.cpmm_swap_v1 import BPS_DENOM
from .state.shares import SHARE_NAME, SHARE_SYMBOL


def _env_int(env: Mapping[str, str], name: str, default: int, *, lo: int, hi: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        return int(default)
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


def _env_str(env: Mapping[str, str], name: str, default: str) -> str:
    raw = env.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


_CONFIG_KEYS = frozenset({"share_name", "share_symbol", "fee_bps"})


@dataclass(frozen=True)
class ExchangeConfig:
    """Per-exchange settings. The price precision is fixed and not configurable."""

    share_name: str = SHARE_NAME
    share_symbol: str = SHARE_SYMBOL
    # Swap fee seam. Zero keeps the plain x*y=k output formula.
    fee_bps: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.share_name, str) or not self.share_name:
            raise ValueError("share_name must be a non-empty string")
        if not isinstance(self.share_symbol, str) or not self.share_symbol:
            raise ValueError("share_symbol must be a non-empty string")
        if not isinstance(self.fee_bps, int) or isinstance(self.fee_bps, bool):
            raise TypeError("fee_bps must be an int")
        if not (0 <= self.fee_bps < BPS_DENOM):
            raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}): {self.fee_bps}")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ExchangeConfig":
        src = os.environ if env is None else env
        return cls(
            share_name=_env_str(src, "NEUSWAP_SHARE_NAME", SHARE_NAME),
            share_symbol=_env_str(src, "NEUSWAP_SHARE_SYMBOL", SHARE_SYMBOL),
            fee_bps=_env_int(src, "NEUSWAP_FEE_BPS", 0, lo=0, hi=BPS_DENOM - 1),
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ExchangeConfig":
        raw = Path(path).read_text(encoding="utf-8")
        root = yaml.safe_load(raw)
        if root is None:
            return cls()
        if not isinstance(root, dict):
            raise ValueError("exchange config must be a mapping")
        unknown = sorted(set(root) - _CONFIG_KEYS)
        if unknown:
            raise ValueError(f"unknown exchange config keys: {unknown}")
        kwargs: dict[str, Any] = {k: root[k] for k in _CONFIG_KEYS if k in root}
        return cls(**kwargs)
