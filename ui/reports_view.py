'''
    File Name: reports_view.py
    Version: 2.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''
import logging
from PyQt6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QSizePolicy, QComboBox
from PyQt6.QtCore import Qt

from matplotlib.figure import Figure
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas, NavigationToolbar2QT

from reports import metrics
from utils.formatting import format_currency, format_percentage, month_label

logger = logging.getLogger(__name__)

CHART_TYPES = {
    "Expenses by Category": "category",
    "Monthly Trend": "month",
    "Income vs Expenses": "summary",
}
COLORS = ["#4c72b0", "#dd8452", "#55a868", "#c44e52", "#8172b3", "#937860", "#da8bc3", "#8c8c8c", "#ccb974", "#64b5cd"]
INCOME_COLOR = "#55a868"
EXPENSE_COLOR = "#c44e52"
BALANCE_COLOR = "#4c72b0"
MAX_CATEGORY_BARS = 10


class ReportsView(QWidget):
    """Reports view with a matplotlib canvas and several charts.

    Features:
    - Expenses by category (top 10 bars), monthly trend and income vs expenses
    - Empty state messaging when there is nothing to plot
    - Summary statistics computed by `reports.metrics`
    - Data refresh from the repository, honouring the active filters
    """

    def __init__(self, parent=None, repository=None, filters=None):
        super().__init__(parent)
        self.repository = repository
        self.filters = dict(filters or {})
        self._transactions = []
        self._current_chart_type = "category"

        self._figure = Figure(figsize=(10, 6), dpi=100)
        self._canvas = FigureCanvas(self._figure)
        self._canvas.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self._toolbar = NavigationToolbar2QT(self._canvas, self)

        # Single axis reused for all plots
        self._ax = self._figure.add_subplot(111)

        self.setup_ui()

        try:
            self._load_data()
            self.plot_data()
        except Exception:
            logger.exception("Failed to initialize ReportsView")

    def setup_ui(self) -> None:
        """Build the UI: title, chart selector, toolbar, canvas, stats display and refresh button."""
        main_layout = QVBoxLayout()

        title = QLabel("Reports & Statistics")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        title.setStyleSheet("font-weight: bold; font-size: 14px;")
        main_layout.addWidget(title)

        controls_layout = QHBoxLayout()

        chart_label = QLabel("Chart Type:")
        self._chart_combo = QComboBox()
        self._chart_combo.addItems(list(CHART_TYPES))
        self._chart_combo.currentTextChanged.connect(self._on_chart_type_changed)

        controls_layout.addWidget(chart_label)
        controls_layout.addWidget(self._chart_combo)
        controls_layout.addStretch()

        refresh_btn = QPushButton("Refresh")
        refresh_btn.clicked.connect(self.refresh)
        controls_layout.addWidget(refresh_btn)

        main_layout.addLayout(controls_layout)

        main_layout.addWidget(self._toolbar)
        main_layout.addWidget(self._canvas)

        self._stats_label = QLabel("")
        self._stats_label.setWordWrap(True)
        self._stats_label.setStyleSheet("padding: 5px; border-radius: 3px;")
        main_layout.addWidget(self._stats_label)

        self.setLayout(main_layout)

    def _on_chart_type_changed(self, chart_type: str) -> None:
        self._current_chart_type = CHART_TYPES.get(chart_type, "category")
        self.plot_data()

    def _load_data(self) -> None:
        """Load (filtered) transactions from the repository."""
        self._transactions = []
        if self.repository is None:
            logger.debug("No repository available for ReportsView")
            return
        self._transactions = self.repository.filter(self.filters)
        logger.debug("Loaded %d transactions for reports", len(self._transactions))

    def set_transactions(self, transactions) -> None:
        self._transactions = list(transactions)
        self.plot_data()

    def refresh(self) -> None:
        try:
            self._load_data()
            self.plot_data()
        except Exception:
            logger.exception("Failed to refresh reports")

    def _update_stats(self) -> None:
        if not self._transactions:
            self._stats_label.setText("No transactions available")
            return

        s = metrics.summary(self._transactions)
        top = s["top_expense_category"]
        top_text = f"{top['category']} ({format_currency(top['amount'])})" if top else "-"
        stats = s["expense_stats"]
        self._stats_label.setText(
            f"Income: {format_currency(s['income'])} | "
            f"Expenses: {format_currency(s['expenses'])} | "
            f"Balance: {format_currency(s['balance'])} | "
            f"Savings rate: {format_percentage(s['savings_rate'])}\n"
            f"Transactions: {s['count']} | "
            f"Avg daily expense: {format_currency(s['average_daily_expense'])} | "
            f"Median expense: {format_currency(stats['median'])} | "
            f"Top category: {top_text}"
        )

    def plot_data(self) -> None:
        """Plot based on current chart type and available data."""
        self._ax.clear()

        if not self._transactions:
            self._ax.text(0.5, 0.5, "No transactions available\nAdd transactions to see statistics",
                          ha="center", va="center", fontsize=12, color="#666666")
            self._ax.set_xticks([])
            self._ax.set_yticks([])
            self._update_stats()
            self._canvas.draw()
            return

        try:
            if self._current_chart_type == "category":
                self._plot_by_category(self._ax, self._transactions)
            elif self._current_chart_type == "month":
                self._plot_by_month(self._ax, self._transactions)
            elif self._current_chart_type == "summary":
                self._plot_summary(self._ax, self._transactions)

            self._update_stats()
            self._figure.tight_layout()
            self._canvas.draw()
        except Exception:
            logger.exception("Failed to plot data for chart type: %s", self._current_chart_type)
            self._ax.clear()
            self._ax.text(0.5, 0.5, "Error rendering chart", ha="center", va="center")
            self._canvas.draw()

    def _plot_by_category(self, ax, transactions) -> None:
        """Bar chart of the largest expense categories."""
        by_category = metrics.expenses_by_category(transactions)
        if not by_category:
            ax.text(0.5, 0.5, "No expenses in the selected period", ha="center", va="center")
            return

        ranked = sorted(by_category.items(), key=lambda item: item[1], reverse=True)[:MAX_CATEGORY_BARS]
        labels = [name for name, _ in ranked]
        values = [amount for _, amount in ranked]
        bar_colors = [COLORS[i % len(COLORS)] for i in range(len(ranked))]

        ax.bar(range(len(ranked)), values, color=bar_colors)
        ax.set_xticks(range(len(ranked)))
        ax.set_xticklabels(labels, rotation=45, ha="right")
        ax.set_ylabel("Amount ($)")
        ax.set_title("Expenses by Category")
        ax.grid(axis="y", alpha=0.3)

    def _plot_by_month(self, ax, transactions) -> None:
        """Income, expenses and balance per month."""
        trend = metrics.monthly_trend(transactions)
        if not trend:
            ax.text(0.5, 0.5, "Date data unavailable", ha="center", va="center")
            return

        months = sorted(trend)
        x = range(len(months))
        ax.plot(x, [trend[m]["income"] for m in months], marker="o", linewidth=2, color=INCOME_COLOR, label="Income")
        ax.plot(x, [trend[m]["expenses"] for m in months], marker="o", linewidth=2, color=EXPENSE_COLOR, label="Expenses")
        balance = [trend[m]["balance"] for m in months]
        ax.plot(x, balance, marker="o", linewidth=2, linestyle="--", color=BALANCE_COLOR, label="Balance")
        ax.fill_between(x, balance, alpha=0.15, color=BALANCE_COLOR)
        ax.axhline(0, color="#999999", linewidth=0.8)
        ax.set_xticks(list(x))
        ax.set_xticklabels([month_label(m) for m in months], rotation=45, ha="right")
        ax.set_ylabel("Amount ($)")
        ax.set_title("Monthly Trend")
        ax.legend()
        ax.grid(alpha=0.3)

    def _plot_summary(self, ax, transactions) -> None:
        """Income, expenses and balance side by side."""
        values = {
            "Income": metrics.total_income(transactions),
            "Expenses": metrics.total_expenses(transactions),
            "Balance": metrics.net_balance(transactions),
        }
        colors = [INCOME_COLOR, EXPENSE_COLOR, BALANCE_COLOR]
        bars = ax.bar(range(len(values)), list(values.values()), color=colors)

        for bar, value in zip(bars, values.values()):
            ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height(),
                    format_currency(value), ha="center", va="bottom", fontsize=10)

        ax.axhline(0, color="#999999", linewidth=0.8)
        ax.set_xticks(range(len(values)))
        ax.set_xticklabels(list(values))
        ax.set_ylabel("Amount ($)")
        ax.set_title("Income vs Expenses")
        ax.grid(axis="y", alpha=0.3)
