# [TESTER] v1

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("NEUSWAP_SHARE_NAME", "NEUSWAP_SHARE_SYMBOL", "NEUSWAP_FEE_BPS"):
        monkeypatch.delenv(name, raising=False)


def test_demo_runs_end_to_end(capsys: pytest.CaptureFixture[str]) -> None:
    from tools.neuswap_demo import main

    assert main([]) == 0
    out = capsys.readouterr().out
    assert "price eth->token=500 token->eth=2000" in out
    assert "trader sold 1 eth for 1.998001998001998001 token" in out
    assert "[demo] OK" in out


def test_demo_with_fee_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    from tools.neuswap_demo import main

    cfg = tmp_path / "exchange.yaml"
    cfg.write_text("fee_bps: 30\nshare_symbol: DEMO-LP\n", encoding="utf-8")

    assert main(["--config", str(cfg), "--swap-eth", "0"]) == 0
    out = capsys.readouterr().out
    assert "shares=Neuswap-V1/DEMO-LP fee_bps=30" in out
