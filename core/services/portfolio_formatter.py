"""Turn balances and prices into display-ready portfolio records."""

from typing import Mapping

from core.models.domain.portfolio import (
    PortfolioSnapshot,
    PortfolioTotal,
    PortfolioView,
    TokenHolding,
)
from core.models.domain.price import PriceRecord
from core.networks import network_emoji
from core.utils import format_compact_number


def format_portfolio(
    network_id: str,
    balances: Mapping[str, float],
    prices: Mapping[str, PriceRecord],
) -> PortfolioView:
    """Build per-token lines and totals for one network.

    USD and RUB values are each computed from their own unit price. Tokens
    without a price contribute zero.

    Args:
        network_id: Network the balances belong to
        balances: Quantity per symbol, in display order
        prices: Price record per symbol

    Returns:
        PortfolioView with one TokenHolding per balance entry
    """
    emoji = network_emoji(network_id)
    holdings: list[TokenHolding] = []
    total_usd = 0.0
    total_rub = 0.0

    for symbol, balance in balances.items():
        price = prices.get(symbol)
        usd = balance * price.price if price else 0.0
        rub = balance * price.price_rub if price else 0.0
        total_usd += usd
        total_rub += rub

        holdings.append(
            TokenHolding(
                symbol=symbol,
                balance=balance,
                balance_formatted=f"{balance:.4f}",
                usd_value=f"{usd:.2f}",
                rub_value=f"{rub:.2f}",
                display_text=f"{emoji} {symbol}: {balance:.4f} • ${usd:.2f} • ₽{rub:.2f}",
            )
        )

    return PortfolioView(
        network_id=network_id,
        tokens=holdings,
        total=PortfolioTotal(usd=f"{total_usd:.2f}", rub=f"{total_rub:.2f}"),
    )


def render_wallet_message(snapshot: PortfolioSnapshot) -> str:
    """Plain-text wallet summary: non-zero holdings and the total."""
    emoji = network_emoji(snapshot.network_id)
    lines = [f"{emoji} {snapshot.network_name}", f"Address: {snapshot.address}", ""]

    held = [token for token in snapshot.view.tokens if token.balance > 0]
    if held:
        lines.extend(token.display_text for token in held)
    else:
        lines.append("No tokens on this network yet")

    total = snapshot.view.total
    lines.extend(["", f"Total: ${total.usd} • ₽{total.rub}"])

    if snapshot.degraded_symbols:
        lines.append(
            "⚠️ Some balances are temporarily unavailable: "
            + ", ".join(snapshot.degraded_symbols)
        )
    return "\n".join(lines)


def render_price_message(record: PriceRecord) -> str:
    """Two-line price card: unit prices, then 24h change, volume and ATH."""
    change_emoji = "🔺" if record.change_24h >= 0 else "🔻"
    change_sign = "+" if record.change_24h >= 0 else ""
    ath = record.ath if record.ath is not None else record.price
    trophy = "🏆 " if record.price >= ath else ""

    return "\n".join(
        [
            f"💰 {record.symbol}: $ {record.price:.2f} | ₽ {record.price_rub:.2f}",
            f"{change_emoji} {change_sign}{record.change_24h:.1f}% • "
            f"🅥 $ {format_compact_number(record.volume_24h)} • "
            f"🅐🅣🅗 {trophy}$ {ath:.2f}",
        ]
    )
