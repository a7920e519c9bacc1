"""Charts attached to period reports."""

import io
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import matplotlib

matplotlib.use('Agg')  # Non-interactive backend for servers
import matplotlib.pyplot as plt
import numpy as np

_COLORS = [
    '#FF6B6B', '#4ECDC4', '#45B7D1', '#96CEB4', '#FFEAA7',
    '#DDA0DD', '#98D8C8', '#F7DC6F', '#BB8FCE', '#85C1E9', '#F8B500',
]


def _save(fig) -> io.BytesIO:
    """Save figure to a BytesIO buffer and close it."""
    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=150, bbox_inches='tight',
                facecolor='white', edgecolor='none')
    buf.seek(0)
    plt.close(fig)
    return buf


def _strip_emoji(category: str) -> str:
    # DejaVu has no emoji glyphs; labels keep only the name part
    return category.split(' ', 1)[1] if ' ' in category else category


class VisualizationService:
    """Creates charts for period reports."""

    def __init__(self, currency: str = ""):
        self.currency = currency

    def pie_chart(self, data: Dict[str, float], title: str) -> Optional[io.BytesIO]:
        """Donut chart of spending per category."""
        if not data:
            return None

        plt.style.use('seaborn-v0_8-whitegrid')

        labels = [_strip_emoji(cat) for cat in data]
        values = list(data.values())
        total = sum(values)

        fig, ax = plt.subplots(figsize=(7, 7))
        wedges, _ = ax.pie(
            values,
            colors=_COLORS[:len(values)],
            startangle=90,
            wedgeprops=dict(width=0.45, edgecolor='white', linewidth=2),
        )

        ax.text(
            0, 0, f'Total\n{total:,.0f} {self.currency}'.strip(),
            ha='center', va='center',
            fontsize=16, fontweight='bold',
            color='#2c3e50',
        )

        legend_labels = [
            f'{label}  {val:,.0f} ({val / total * 100:.1f}%)'
            for label, val in zip(labels, values)
        ]
        ax.legend(
            wedges, legend_labels,
            loc='upper center',
            bbox_to_anchor=(0.5, -0.02),
            ncol=1,
            fontsize=11,
            frameon=False,
        )

        ax.set_title(title, fontsize=17, fontweight='bold', pad=16)
        fig.subplots_adjust(bottom=0.25)
        return _save(fig)

    def bar_chart(self, daily_data: List[Tuple[str, float]], title: str) -> Optional[io.BytesIO]:
        """Bar per day with an average line."""
        if not daily_data:
            return None

        plt.style.use('seaborn-v0_8-whitegrid')
        fig, ax = plt.subplots(figsize=(8, 6))

        amounts = np.array([d[1] for d in daily_data], dtype=float)
        date_labels = [datetime.strptime(d[0], '%Y-%m-%d').strftime('%a\n%d.%m') for d in daily_data]
        x = np.arange(len(daily_data))

        max_amount = amounts.max() or 1
        colors = plt.cm.RdYlGn_r(amounts / max_amount)
        bars = ax.bar(x, amounts, color=colors, edgecolor='white', linewidth=1.5, width=0.7)

        for bar, amount in zip(bars, amounts):
            ax.annotate(
                f'{amount:,.0f}',
                xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
                xytext=(0, 4),
                textcoords="offset points",
                ha='center', va='bottom',
                fontsize=11, fontweight='bold',
            )

        ax.set_xticks(x)
        ax.set_xticklabels(date_labels, fontsize=10)
        ax.set_ylabel(f'Amount ({self.currency})' if self.currency else 'Amount', fontsize=13, fontweight='bold')
        ax.set_title(title, fontsize=17, fontweight='bold', pad=16)

        avg = float(amounts.mean())
        ax.axhline(y=avg, color='#E74C3C', linestyle='--', linewidth=2,
                   label=f'Avg: {avg:,.2f}  •  Total: {amounts.sum():,.2f}')
        ax.legend(loc='upper right', fontsize=11)

        plt.tight_layout()
        return _save(fig)


__all__ = ["VisualizationService"]
