"""
Neuswap exchange: reserve and liquidity accounting for one token/native pair.

The exchange owns one PoolState and one ShareLedger. The token ledger and the
native ledger are collaborators it calls into.

Execution model:
- every state-changing call runs inside `_transaction`, which rejects
  re-entry and moves the attached value in;
- inputs are pulled first, then the reserve counter and share balances are
  updated, then outputs are pushed (tokens before native value);
- each pull, mint and burn this exchange performs records its inverse in a
  per-call undo log. On failure the log is replayed newest first and the pool
  record is restored. Collaborator ledgers are never restored wholesale, so
  moves made by other exchanges during the call stay committed.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Callable, Iterator, List, Optional, Tuple

from ..config import ExchangeConfig
from ..errors import (
    InsufficientBalance,
    InsufficientOutputAmount,
    InsufficientQuoteAmount,
    InvalidAmount,
    ReentrantCall,
)
from ..state.balances import ZERO_ADDRESS, Address, Amount, require_address, require_amount
from ..state.native import NativeLedger
from ..state.pool import PoolState, compute_exchange_address
from ..state.shares import ShareLedger
from ..state.token import TokenLedger
from .cpmm import compute_deposit, compute_withdrawal, get_amount, get_price

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Call:
    """Execution context of one transaction: who is calling and how much value is attached."""

    sender: Address
    value: Amount = 0


class Exchange:
    """
    Constant-product exchange between the native asset ("eth") and one token.

    Args:
        token: Quote token ledger
        native: Native value ledger shared by every participant
        factory: Identity that deployed this exchange
        address: Exchange identity; derived from (factory, token) when omitted
        config: Share metadata and the swap fee seam
    """

    def __init__(
        self,
        token: TokenLedger,
        native: NativeLedger,
        *,
        factory: Address,
        address: Optional[Address] = None,
        config: Optional[ExchangeConfig] = None,
    ) -> None:
        if not token.address or token.address == ZERO_ADDRESS:
            raise ValueError("invalid token address")
        self.config = config if config is not None else ExchangeConfig()
        self.token = token
        self.native = native
        addr = address if address is not None else compute_exchange_address(factory, token.address)
        self.pool = PoolState(address=addr, token=token.address, factory=factory)
        self.shares = ShareLedger(addr, name=self.config.share_name, symbol=self.config.share_symbol)
        self._entered = False
        self._undo: List[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # Identity and share views
    # ------------------------------------------------------------------

    @property
    def address(self) -> Address:
        return self.pool.address

    @property
    def factory_address(self) -> Address:
        return self.pool.factory

    @property
    def name(self) -> str:
        return self.shares.name

    @property
    def symbol(self) -> str:
        return self.shares.symbol

    def total_supply(self) -> Amount:
        return self.shares.total_supply()

    def balance_of(self, holder: Address) -> Amount:
        return self.shares.balance_of(holder)

    def transfer(self, call: Call, to: Address, amount: Amount) -> bool:
        """Move the caller's own shares to `to`."""
        with self._transaction(call, payable=False):
            return self.shares.transfer(call.sender, to, amount)

    # ------------------------------------------------------------------
    # Reserve and price queries
    # ------------------------------------------------------------------

    def get_reserve(self) -> Amount:
        """Token reserve: the token ledger's balance for this exchange."""
        return self.token.balance_of(self.address)

    def get_base_reserve(self) -> Amount:
        return self.pool.base_reserve

    def get_price(self, input_reserve: Amount, output_reserve: Amount) -> int:
        return get_price(input_reserve, output_reserve)

    def get_token_amount(self, eth_sold: Amount) -> Amount:
        """Tokens paid out for selling `eth_sold` at the current reserves."""
        return get_amount(eth_sold, self.pool.base_reserve, self.get_reserve(), self.config.fee_bps)

    def get_eth_amount(self, token_sold: Amount) -> Amount:
        """Native value paid out for selling `token_sold` at the current reserves."""
        return get_amount(token_sold, self.get_reserve(), self.pool.base_reserve, self.config.fee_bps)

    # ------------------------------------------------------------------
    # Liquidity
    # ------------------------------------------------------------------

    def add_liquidity(self, call: Call, token_amount: Amount) -> Amount:
        """
        Deposit `call.value` native plus up to `token_amount` tokens.

        Empty pool: all of `token_amount` is pulled and `call.value` shares are
        minted. Live pool: exactly floor(value * token_reserve / base_reserve)
        tokens are pulled and floor(value * total_shares / base_reserve) shares
        are minted; `token_amount` is only an upper bound.

        Returns:
            Shares minted to the caller

        Raises:
            InsufficientQuoteAmount: If `token_amount` is below the required amount
            TransferFailed: If the caller lacks the value, tokens or allowance
        """
        require_amount("token_amount", token_amount)
        with self._transaction(call):
            total_shares = self.shares.total_supply()
            res = compute_deposit(
                base_reserve=self.pool.base_reserve,
                token_reserve=self.get_reserve(),
                total_shares=total_shares,
                base_in=call.value,
                token_offered=token_amount,
            )
            if total_shares > 0 and token_amount < res.token_used:
                raise InsufficientQuoteAmount(
                    f"insufficient token amount: offered {token_amount} < required {res.token_used}"
                )

            if res.token_used > 0:
                self._pull_tokens(call.sender, res.token_used)
            self.pool.base_reserve = res.new_base_reserve
            self._mint(call.sender, res.shares_minted)

        logger.debug(
            "add_liquidity sender=%s eth=%s token=%s shares=%s",
            call.sender,
            call.value,
            res.token_used,
            res.shares_minted,
        )
        return res.shares_minted

    def remove_liquidity(self, call: Call, shares: Amount) -> Tuple[Amount, Amount]:
        """
        Burn `shares` of the caller and pay out a pro-rata slice of both reserves.

        Returns:
            Tuple of (eth_amount, token_amount) sent to the caller
        """
        require_amount("shares", shares)
        with self._transaction(call, payable=False):
            held = self.shares.balance_of(call.sender)
            if shares > held:
                raise InsufficientBalance(f"insufficient balance: {held} < {shares}")
            eth_amount, token_amount = compute_withdrawal(
                base_reserve=self.pool.base_reserve,
                token_reserve=self.get_reserve(),
                total_shares=self.shares.total_supply(),
                shares=shares,
            )

            self._burn(call.sender, shares)
            self.pool.base_reserve -= eth_amount
            self.token.transfer(self.address, call.sender, token_amount)
            self.native.transfer(self.address, call.sender, eth_amount)

        logger.debug(
            "remove_liquidity sender=%s shares=%s eth=%s token=%s",
            call.sender,
            shares,
            eth_amount,
            token_amount,
        )
        return eth_amount, token_amount

    # ------------------------------------------------------------------
    # Swaps
    # ------------------------------------------------------------------

    def eth_to_token_swap(self, call: Call, min_tokens: Amount) -> Amount:
        """Sell `call.value` native for tokens sent to the caller."""
        return self.eth_to_token_transfer(call, min_tokens, call.sender)

    def eth_to_token_transfer(self, call: Call, min_tokens: Amount, recipient: Address) -> Amount:
        """
        Sell `call.value` native for at least `min_tokens` tokens sent to `recipient`.

        Pricing uses the base reserve as it was before this call's value arrived.
        """
        require_amount("min_tokens", min_tokens)
        require_address("recipient", recipient)
        with self._transaction(call):
            tokens_bought = get_amount(
                call.value,
                self.pool.base_reserve,
                self.get_reserve(),
                self.config.fee_bps,
            )
            if tokens_bought < min_tokens:
                raise InsufficientOutputAmount(
                    f"insufficient output amount: {tokens_bought} < {min_tokens}"
                )

            self.pool.base_reserve += call.value
            self.token.transfer(self.address, recipient, tokens_bought)

        logger.debug(
            "eth_to_token sender=%s recipient=%s eth_in=%s token_out=%s",
            call.sender,
            recipient,
            call.value,
            tokens_bought,
        )
        return tokens_bought

    def token_to_eth_swap(self, call: Call, tokens_sold: Amount, min_eth: Amount) -> Amount:
        """
        Sell `tokens_sold` (pulled via allowance) for at least `min_eth` native.
        """
        require_amount("tokens_sold", tokens_sold)
        require_amount("min_eth", min_eth)
        with self._transaction(call, payable=False):
            eth_bought = get_amount(
                tokens_sold,
                self.get_reserve(),
                self.pool.base_reserve,
                self.config.fee_bps,
            )
            if eth_bought < min_eth:
                raise InsufficientOutputAmount(
                    f"insufficient output amount: {eth_bought} < {min_eth}"
                )

            if tokens_sold > 0:
                self._pull_tokens(call.sender, tokens_sold)
            self.pool.base_reserve -= eth_bought
            self.native.transfer(self.address, call.sender, eth_bought)

        logger.debug(
            "token_to_eth sender=%s token_in=%s eth_out=%s",
            call.sender,
            tokens_sold,
            eth_bought,
        )
        return eth_bought

    # ------------------------------------------------------------------
    # Invariants
    # ------------------------------------------------------------------

    def verify_invariants(self) -> bool:
        """Check share conservation and the pool emptiness invariant."""
        if not self.shares.verify_supply():
            return False
        return self.pool.verify_invariant(self.get_reserve(), self.shares.total_supply())

    # ------------------------------------------------------------------
    # Transaction plumbing
    # ------------------------------------------------------------------

    @contextmanager
    def _transaction(self, call: Call, *, payable: bool = True) -> Iterator[None]:
        """
        Run one state-changing call atomically.

        Rejects re-entry and receives the attached value. On any exception the
        undo log is replayed and the pool record restored before re-raising.
        """
        if self._entered:
            raise ReentrantCall()
        require_address("sender", call.sender)
        require_amount("value", call.value)
        if not payable and call.value != 0:
            raise InvalidAmount(f"call does not accept value: {call.value}")

        self._entered = True
        self._undo = []
        pool_snapshot = replace(self.pool)
        try:
            if call.value > 0:
                self._pull_value(call.sender, call.value)
            yield
        except Exception as exc:
            self._rollback(pool_snapshot)
            logger.warning("call from %s rolled back: %s", call.sender, exc)
            raise
        finally:
            self._undo = []
            self._entered = False

    def _rollback(self, pool_snapshot: PoolState) -> None:
        while self._undo:
            self._undo.pop()()
        self.pool = pool_snapshot

    # Pulls, mints and burns record their inverse. Pushes are the last step of
    # every operation and are never undone.

    def _pull_value(self, sender: Address, amount: Amount) -> None:
        self.native.transfer(sender, self.address, amount)
        self._undo.append(lambda: self.native.transfer(self.address, sender, amount))

    def _pull_tokens(self, owner: Address, amount: Amount) -> None:
        self.token.transfer_from(self.address, owner, self.address, amount)
        self._undo.append(lambda: self.token.transfer(self.address, owner, amount))

    def _mint(self, holder: Address, amount: Amount) -> None:
        self.shares.mint(self.address, holder, amount)
        self._undo.append(lambda: self.shares.burn(self.address, holder, amount))

    def _burn(self, holder: Address, amount: Amount) -> None:
        self.shares.burn(self.address, holder, amount)
        self._undo.append(lambda: self.shares.mint(self.address, holder, amount))
