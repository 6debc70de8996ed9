"""Chart rendering for the analytics view."""

from __future__ import annotations

import io
from typing import Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from .analytics import CategorySpend, MonthPoint  # noqa: E402

INCOME_COLOR = "#10B981"
EXPENSE_COLOR = "#EF4444"
NET_COLOR = "#3B82F6"


def build_spending_chart(spending: Sequence[CategorySpend], *, currency: str = "$") -> Figure:
    """Create a matplotlib donut chart of spending by category.

    Wedges use each category's own colour; the legend carries amounts and shares.
    """

    fig, ax = plt.subplots(figsize=(10, 7))
    sizes = [float(item.amount) for item in spending]
    grand_total = sum(sizes)

    if sizes and grand_total > 0:
        wedges, _texts, autotexts = ax.pie(
            sizes,
            labels=None,
            autopct=lambda pct: f"{pct:.1f}%" if pct > 4 else "",
            wedgeprops=dict(width=0.45, edgecolor="white", linewidth=1.5),
            startangle=90,
            colors=[item.color for item in spending],
            pctdistance=0.78,
        )
        for autotext in autotexts:
            autotext.set_fontsize(9)
            autotext.set_fontweight("bold")
            autotext.set_color("white")

        ax.text(0, 0.08, "Total Spending", ha="center", va="center", fontsize=11, color="#666")
        ax.text(
            0,
            -0.08,
            f"{currency}{grand_total:,.0f}",
            ha="center",
            va="center",
            fontsize=18,
            fontweight="bold",
            color="#1F2937",
        )

        legend_labels = [
            f"{item.name}: {currency}{size:,.0f} ({size / grand_total * 100:.1f}%)"
            for item, size in zip(spending, sizes)
        ]
        ax.legend(
            wedges,
            legend_labels,
            title="Categories",
            title_fontsize=11,
            loc="center left",
            bbox_to_anchor=(1.02, 0.5),
            fontsize=9,
            framealpha=0.9,
        )
        ax.axis("equal")
        ax.set_title("Spending by Category", fontsize=16, fontweight="bold", pad=20)
    else:
        ax.text(0.5, 0.5, "No expense data", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")

    fig.tight_layout()
    return fig


def build_trend_chart(series: Sequence[MonthPoint], *, currency: str = "$") -> Figure:
    """Grouped income/expense bars per month with a net line."""

    fig, ax = plt.subplots(figsize=(10, 5))
    if not series:
        ax.text(0.5, 0.5, "No data", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")
        fig.tight_layout()
        return fig

    positions = list(range(len(series)))
    width = 0.38
    incomes = [float(point.income) for point in series]
    expenses = [float(point.expense) for point in series]
    nets = [float(point.net) for point in series]

    ax.bar([p - width / 2 for p in positions], incomes, width, label="Income", color=INCOME_COLOR)
    ax.bar([p + width / 2 for p in positions], expenses, width, label="Expenses", color=EXPENSE_COLOR)
    ax.plot(positions, nets, marker="o", color=NET_COLOR, linewidth=2, label="Net")
    ax.axhline(0, color="#9CA3AF", linewidth=0.8)

    ax.set_xticks(positions)
    ax.set_xticklabels([f"{point.label} {point.year}" for point in series])
    ax.yaxis.set_major_formatter(lambda value, _pos: f"{currency}{value:,.0f}")
    ax.set_title("Income vs Expenses", fontsize=16, fontweight="bold", pad=16)
    ax.grid(axis="y", alpha=0.3)
    ax.legend(loc="upper left", framealpha=0.9)
    fig.tight_layout()
    return fig


def figure_to_png(fig: Figure, *, dpi: int = 120) -> bytes:
    """Render ``fig`` as PNG bytes and release it."""

    buffer = io.BytesIO()
    try:
        fig.savefig(buffer, format="png", bbox_inches="tight", dpi=dpi)
    finally:
        plt.close(fig)
    return buffer.getvalue()
