#!/usr/bin/env python3
"""
Offline Neuswap walkthrough: seed a pool, quote prices, swap both ways, withdraw.

Amounts on the command line are whole units; 1 unit = 10**18 base units.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from neuswap import Call, ExchangeConfig, ExchangeError, Factory, NativeLedger, TokenLedger

UNIT = 10**18

log = logging.getLogger("neuswap.demo")


def _fmt(amount: int) -> str:
    whole, frac = divmod(amount, UNIT)
    return f"{whole}.{frac:018d}".rstrip("0").rstrip(".") if frac else str(whole)


def run(*, eth: int, tokens: int, swap_eth: int, swap_tokens: int, config: ExchangeConfig) -> int:
    owner = "0x" + "aa" * 20
    trader = "0x" + "bb" * 20

    native = NativeLedger()
    native.mint(owner, 10 * eth * UNIT)
    native.mint(trader, 10 * max(swap_eth, 1) * UNIT)
    token = TokenLedger("Demo Token", "DMO", 10 * tokens * UNIT, owner, address="0x" + "11" * 20)
    token.transfer(owner, trader, swap_tokens * UNIT)

    factory = Factory(native, address=owner, config=config)
    exchange = factory.create_exchange(token)
    print(f"[demo] exchange={exchange.address} shares={exchange.name}/{exchange.symbol} fee_bps={config.fee_bps}")

    token.approve(owner, exchange.address, tokens * UNIT)
    minted = exchange.add_liquidity(Call(owner, eth * UNIT), tokens * UNIT)
    print(f"[demo] seeded eth={eth} token={tokens} shares={_fmt(minted)}")

    base, quote = exchange.get_base_reserve(), exchange.get_reserve()
    print(f"[demo] price eth->token={exchange.get_price(base, quote)} token->eth={exchange.get_price(quote, base)} (x1000)")

    try:
        quoted = exchange.get_token_amount(swap_eth * UNIT)
        bought = exchange.eth_to_token_swap(Call(trader, swap_eth * UNIT), quoted)
        print(f"[demo] trader sold {swap_eth} eth for {_fmt(bought)} token")

        token.approve(trader, exchange.address, swap_tokens * UNIT)
        quoted = exchange.get_eth_amount(swap_tokens * UNIT)
        got = exchange.token_to_eth_swap(Call(trader), swap_tokens * UNIT, quoted)
        print(f"[demo] trader sold {swap_tokens} token for {_fmt(got)} eth")

        eth_out, token_out = exchange.remove_liquidity(Call(owner), exchange.balance_of(owner))
        print(f"[demo] owner withdrew eth={_fmt(eth_out)} token={_fmt(token_out)}")
    except ExchangeError as exc:
        print(f"[demo] FAIL: {exc}")
        return 1

    if not exchange.verify_invariants():
        print("[demo] FAIL: invariants do not hold")
        return 1
    print("[demo] OK")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Offline Neuswap walkthrough")
    parser.add_argument("--eth", type=int, default=1000, help="Initial eth liquidity (units)")
    parser.add_argument("--tokens", type=int, default=2000, help="Initial token liquidity (units)")
    parser.add_argument("--swap-eth", type=int, default=1, help="Eth sold by the trader (units)")
    parser.add_argument("--swap-tokens", type=int, default=2, help="Tokens sold by the trader (units)")
    parser.add_argument("--config", type=Path, default=None, help="YAML exchange config (overrides NEUSWAP_* env vars)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if min(args.eth, args.tokens) <= 0 or min(args.swap_eth, args.swap_tokens) < 0:
        parser.error("liquidity must be positive and swap amounts non-negative")

    config = ExchangeConfig.from_yaml(args.config) if args.config else ExchangeConfig.from_env()
    log.debug("config=%s", config)
    return run(eth=args.eth, tokens=args.tokens, swap_eth=args.swap_eth, swap_tokens=args.swap_tokens, config=config)


if __name__ == "__main__":
    raise SystemExit(main())
