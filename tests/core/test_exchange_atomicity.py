# [TESTER] v1

from __future__ import annotations

import logging
import random

import pytest

from neuswap import (
    Call,
    Exchange,
    ExchangeError,
    Factory,
    NativeLedger,
    ReentrantCall,
    TokenLedger,
    TransferFailed,
)

WEI = 10**18
OWNER = "0x" + "aa" * 20
USERS = ["0x" + c * 20 for c in ("b1", "b2", "b3")]
TOKEN_ADDRESS = "0x" + "11" * 20


class _ReentrantToken(TokenLedger):
    """Token whose pull-transfer calls back into the exchange before completing."""

    exchange: Exchange | None = None

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        if self.exchange is not None:
            self.exchange.add_liquidity(Call(owner, 0), 0)
        return super().transfer_from(spender, owner, to, amount)


class _SiblingDepositToken(TokenLedger):
    """Token whose pull-transfer deposits into another exchange and then fails."""

    sibling: Exchange | None = None

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        if self.sibling is not None:
            self.sibling.add_liquidity(Call(owner, 100), 200)
            raise TransferFailed("token paused")
        return super().transfer_from(spender, owner, to, amount)


class _FreezableToken(TokenLedger):
    """Token whose push-transfers can be switched off."""

    frozen = False

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        if self.frozen:
            raise TransferFailed("token frozen")
        return super().transfer(sender, to, amount)


class _Untouchable:
    address = "0x" + "99" * 20

    def __getattr__(self, name: str) -> object:
        raise AssertionError(f"collaborator accessed: {name}")


def _ledgers(token_cls: type = TokenLedger) -> tuple[TokenLedger, NativeLedger]:
    native = NativeLedger()
    native.mint(OWNER, 1_000 * WEI)
    token = token_cls("NEETU", "NEU", 1_000_000 * WEI, OWNER, address=TOKEN_ADDRESS)
    return token, native


def test_failed_pull_rolls_back_attached_value() -> None:
    token, native = _ledgers()
    exchange = Exchange(token, native, factory=OWNER)
    token.approve(OWNER, exchange.address, 100 * WEI)

    with pytest.raises(TransferFailed, match="allowance"):
        exchange.add_liquidity(Call(OWNER, 100 * WEI), 200 * WEI)

    assert native.balance_of(OWNER) == 1_000 * WEI
    assert native.balance_of(exchange.address) == 0
    assert exchange.get_base_reserve() == 0
    assert exchange.total_supply() == 0
    assert exchange.balance_of(OWNER) == 0
    assert token.allowance(OWNER, exchange.address) == 100 * WEI


def test_attached_value_must_be_held_by_sender() -> None:
    token, native = _ledgers()
    exchange = Exchange(token, native, factory=OWNER)
    token.approve(OWNER, exchange.address, 200 * WEI)

    with pytest.raises(TransferFailed, match="insufficient value"):
        exchange.add_liquidity(Call(OWNER, 1_001 * WEI), 200 * WEI)

    assert exchange.get_reserve() == 0
    assert native.balance_of(OWNER) == 1_000 * WEI


def test_negative_value_is_rejected() -> None:
    token, native = _ledgers()
    exchange = Exchange(token, native, factory=OWNER)
    with pytest.raises(ExchangeError):
        exchange.add_liquidity(Call(OWNER, -1), 0)


def test_reentrant_call_is_rejected_and_rolled_back() -> None:
    token, native = _ledgers(_ReentrantToken)
    exchange = Exchange(token, native, factory=OWNER)
    token.exchange = exchange
    token.approve(OWNER, exchange.address, 200 * WEI)

    with pytest.raises(ReentrantCall):
        exchange.add_liquidity(Call(OWNER, 100 * WEI), 200 * WEI)

    assert exchange.total_supply() == 0
    assert exchange.get_base_reserve() == 0
    assert native.balance_of(OWNER) == 1_000 * WEI

    # The guard is released once the failed call unwinds.
    token.exchange = None
    assert exchange.add_liquidity(Call(OWNER, 100 * WEI), 200 * WEI) == 100 * WEI


def test_rollback_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    token, native = _ledgers()
    exchange = Exchange(token, native, factory=OWNER)
    with caplog.at_level(logging.WARNING, logger="neuswap.core.exchange"):
        with pytest.raises(TransferFailed):
            exchange.add_liquidity(Call(OWNER, 1 * WEI), 1 * WEI)
    assert any("rolled back" in r.getMessage() for r in caplog.records)


def test_failed_call_keeps_deposit_committed_by_sibling_exchange() -> None:
    native = NativeLedger()
    native.mint(OWNER, 2_000 * WEI)
    attacker = USERS[0]
    native.mint(attacker, 101)
    evil = _SiblingDepositToken("Evil", "EVL", 1_000 * WEI, OWNER, address=TOKEN_ADDRESS)
    other = TokenLedger("Other", "OTH", 1_000_000 * WEI, OWNER, address="0x" + "22" * 20)
    factory = Factory(native, address=OWNER)
    ex1 = factory.create_exchange(evil)
    ex2 = factory.create_exchange(other)

    other.approve(OWNER, ex2.address, 2_000 * WEI)
    ex2.add_liquidity(Call(OWNER, 1_000 * WEI), 2_000 * WEI)
    other.transfer(OWNER, attacker, 200)
    other.approve(attacker, ex2.address, 200)
    supply_before = native.total_supply()

    evil.sibling = ex2
    with pytest.raises(TransferFailed, match="paused"):
        ex1.add_liquidity(Call(attacker, 1), 10)

    # ex1 refunds only the value it pulled; the deposit ex2 accepted stays paid for.
    assert native.balance_of(attacker) == 1
    assert ex2.balance_of(attacker) == 100
    assert ex2.get_base_reserve() == 1_000 * WEI + 100
    assert native.balance_of(ex2.address) == ex2.get_base_reserve()
    assert native.balance_of(ex1.address) == ex1.get_base_reserve() == 0
    assert ex1.total_supply() == 0
    assert native.total_supply() == supply_before
    assert ex1.verify_invariants()
    assert ex2.verify_invariants()


def test_failed_token_push_refunds_value_and_restores_pool() -> None:
    token, native = _ledgers(_FreezableToken)
    exchange = Exchange(token, native, factory=OWNER)
    token.approve(OWNER, exchange.address, 200 * WEI)
    exchange.add_liquidity(Call(OWNER, 100 * WEI), 200 * WEI)

    token.frozen = True
    with pytest.raises(TransferFailed, match="frozen"):
        exchange.eth_to_token_swap(Call(OWNER, 1 * WEI), 0)
    with pytest.raises(TransferFailed, match="frozen"):
        exchange.remove_liquidity(Call(OWNER), 10 * WEI)

    assert native.balance_of(OWNER) == 900 * WEI
    assert exchange.get_base_reserve() == 100 * WEI
    assert native.balance_of(exchange.address) == 100 * WEI
    assert exchange.balance_of(OWNER) == 100 * WEI
    assert exchange.total_supply() == 100 * WEI
    assert exchange.get_reserve() == 200 * WEI


def test_share_transfer_does_not_touch_asset_ledgers() -> None:
    token, native = _ledgers()
    exchange = Exchange(token, native, factory=OWNER)
    token.approve(OWNER, exchange.address, 200 * WEI)
    exchange.add_liquidity(Call(OWNER, 100 * WEI), 200 * WEI)

    exchange.token = _Untouchable()  # type: ignore[assignment]
    exchange.native = _Untouchable()  # type: ignore[assignment]
    assert exchange.transfer(Call(OWNER), USERS[0], 40 * WEI)
    with pytest.raises(ExchangeError):
        exchange.transfer(Call(USERS[1]), OWNER, 1)

    assert exchange.balance_of(USERS[0]) == 40 * WEI
    assert exchange.balance_of(OWNER) == 60 * WEI


def test_random_sequences_conserve_shares_and_reserves() -> None:
    rng = random.Random(20240601)
    token, native = _ledgers()
    exchange = Exchange(token, native, factory=OWNER)
    for user in USERS:
        native.mint(user, 1_000 * WEI)
        token.transfer(OWNER, user, 10_000 * WEI)
        token.approve(user, exchange.address, 10**40)

    failures = 0
    for _ in range(400):
        user = rng.choice(USERS)
        op = rng.choice(("add", "remove", "eth_in", "token_in"))
        try:
            if op == "add":
                value = rng.randint(0, 20 * WEI)
                offered = rng.randint(0, 60 * WEI)
                exchange.add_liquidity(Call(user, value), offered if value else 0)
            elif op == "remove":
                held = exchange.balance_of(user)
                exchange.remove_liquidity(Call(user), rng.randint(0, held))
            elif op == "eth_in":
                exchange.eth_to_token_swap(Call(user, rng.randint(0, 5 * WEI)), 0)
            else:
                exchange.token_to_eth_swap(Call(user), rng.randint(0, 10 * WEI), 0)
        except ExchangeError:
            failures += 1

        holders = exchange.shares.holders()
        assert sum(holders.values()) == exchange.total_supply()
        assert native.balance_of(exchange.address) == exchange.get_base_reserve()
        assert exchange.verify_invariants()

    assert failures < 400
