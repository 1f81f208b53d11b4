"""
Exchange registry: at most one exchange per token.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from ..config import ExchangeConfig
from ..errors import ExchangeExists
from ..state.balances import ZERO_ADDRESS, Address
from ..state.native import NativeLedger
from ..state.token import TokenLedger
from .exchange import Exchange

logger = logging.getLogger(__name__)


class Factory:
    """Deploys exchanges and records them by token address."""

    def __init__(self, native: NativeLedger, *, address: Address, config: Optional[ExchangeConfig] = None) -> None:
        if not address:
            raise ValueError("factory address must be non-empty")
        self.address = address
        self.native = native
        self.config = config
        self._exchanges: Dict[Address, Exchange] = {}

    def create_exchange(self, token: TokenLedger) -> Exchange:
        if not token.address or token.address == ZERO_ADDRESS:
            raise ValueError("invalid token address")
        if token.address in self._exchanges:
            raise ExchangeExists(f"exchange already exists for token {token.address}")

        exchange = Exchange(token, self.native, factory=self.address, config=self.config)
        self._exchanges[token.address] = exchange
        logger.info("created exchange %s for token %s", exchange.address, token.address)
        return exchange

    def get_exchange(self, token_address: Address) -> Optional[Exchange]:
        return self._exchanges.get(token_address)

    def __len__(self) -> int:
        return len(self._exchanges)
