"""Report models describing the financial analysis returned by the model.

Attributes are snake_case; the JSON exchanged with the model and handed to
renderers uses camelCase, so dump with ``model_dump(by_alias=True)``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError
from pydantic.alias_generators import to_camel

ChangeType = Literal["positive", "negative"]
RatioCategoryName = Literal["Profitability", "Liquidity", "Solvency", "Efficiency"]

RATIO_CATEGORIES = ("Profitability", "Liquidity", "Solvency", "Efficiency")


class ReportModel(BaseModel):
    """Base for every report record: immutable, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class SummaryCard(ReportModel):
    title: str
    value: str
    change: str
    change_type: ChangeType


class StatementItem(ReportModel):
    """A single statement line; ``is_bold`` marks subtotals and totals."""

    item: str
    value: str
    is_bold: bool


class Ratio(ReportModel):
    name: str
    value: str
    insight: str
    definition: str


class RatioCategory(ReportModel):
    category: RatioCategoryName
    ratios: List[Ratio]


class ChartData(ReportModel):
    """Parallel label/value sequences for a single chart."""

    labels: List[str]
    data: List[float]


class BalanceSheetChartData(ReportModel):
    assets: ChartData
    liabilities_and_equity: ChartData


class TrendAnalysis(ReportModel):
    labels: List[str]
    revenue_data: List[float]
    expense_data: List[float]
    net_income_data: List[float]
    interpretation: str


class ExpenseBreakdown(ReportModel):
    labels: List[str]
    data: List[float]
    interpretation: str


class VarianceAnalysis(ReportModel):
    labels: List[str]
    actual_data: List[float]
    budget_data: List[float]
    interpretation: str


class WaterfallAnalysis(ReportModel):
    labels: List[str]
    data: List[float]
    interpretation: str


class RatioTrendDataset(ReportModel):
    label: str
    data: List[float]


class RatioTrendAnalysis(ReportModel):
    labels: List[str]
    datasets: List[RatioTrendDataset]
    interpretation: str


class KeyRisk(ReportModel):
    risk: str
    recommendation: str


class BreakevenAnalysis(ReportModel):
    """Breakeven point, formatted for display and raw for charting."""

    breakeven_revenue: str
    interpretation: str
    breakeven_revenue_value: float
    current_revenue_value: float


class AnalystView(ReportModel):
    insights: str
    trend_analysis: TrendAnalysis
    expense_breakdown: ExpenseBreakdown
    variance_analysis: VarianceAnalysis
    waterfall_analysis: WaterfallAnalysis
    ratio_trend_analysis: RatioTrendAnalysis
    ratios_interpretation: str
    breakeven_analysis: BreakevenAnalysis
    forecast: str


class FinancialAnalysis(ReportModel):
    """Top-level report: statements, charts, ratios and commentary."""

    summary_cards: List[SummaryCard]
    income_statement: List[StatementItem]
    balance_sheet: List[StatementItem]
    cash_flow_statement: List[StatementItem]
    pnl_interpretation: str
    ratios: List[RatioCategory]
    executive_summary: List[str]
    key_risks: List[KeyRisk]
    analyst_view: AnalystView
    income_statement_chart_data: ChartData
    balance_sheet_chart_data: BalanceSheetChartData
    cash_flow_chart_data: ChartData

    # Cleared for reports built with model_construct from a body that failed
    # validation; their nested values are the raw JSON mappings and lists.
    _checked: bool = PrivateAttr(default=True)

    @classmethod
    def unchecked(cls, payload: Dict[str, Any]) -> "FinancialAnalysis":
        """Wrap a camelCase body without validating it."""
        report = cls.model_construct(**payload)
        report._checked = False
        return report

    @property
    def checked(self) -> bool:
        return self._checked

    def to_wire(self) -> Dict[str, Any]:
        """camelCase mapping of the report, for checked and unchecked reports alike."""
        if self._checked:
            return self.model_dump(by_alias=True)
        fields = type(self).model_fields
        return {fields[name].alias or name: value for name, value in self.__dict__.items()}

    def ratio_category(self, name: str) -> List[Ratio]:
        """Return the ratios filed under ``name`` (empty when absent).

        On an unchecked report only groups that validate are considered.
        """
        for group in self.__dict__.get("ratios") or []:
            if not isinstance(group, RatioCategory):
                try:
                    group = RatioCategory.model_validate(group)
                except ValidationError:
                    continue
            if group.category == name:
                return list(group.ratios)
        return []
