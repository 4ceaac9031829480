from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

import pytest

from ledger_lens.config import Config
from ledger_lens.services.analysis_client import AnalysisClient

SAMPLE_CSV = """Date,Outlet,Description,Category,Amount
2024-01-05,Marina,Coffee sales,Revenue,12500.00
2024-01-09,Marina,Bean purchase,COGS,-4200.00
2024-01-15,Deira,Coffee sales,Revenue,9800.50
2024-02-03,Deira,Rent,Operating Expense,-3000.00
2024-02-11,Marina,Coffee sales,Revenue,13100.00
"""


class FakeGemini:
    """Stands in for GeminiClient: records requests, replays a canned reply."""

    def __init__(self, reply: str = "", error: Optional[BaseException] = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    async def generate(self, messages, *, temperature=0.2, response_format=None) -> str:
        self.calls.append(
            {
                "messages": messages,
                "temperature": temperature,
                "response_format": response_format,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply

    async def aclose(self) -> None:
        self.closed = True

    @property
    def last_prompt(self) -> str:
        return self.calls[-1]["messages"][-1]["content"]


def _chart(labels, data):
    return {"labels": labels, "data": data}


BASE_PAYLOAD: Dict[str, Any] = {
    "summaryCards": [
        {"title": "Total Revenue", "value": "AED 35,400.50", "change": "+4.8%", "changeType": "positive"},
        {"title": "Gross Markup", "value": "742.9%", "change": "-1.2%", "changeType": "negative"},
    ],
    "incomeStatement": [
        {"item": "Revenue", "value": "AED 35,400.50", "isBold": False},
        {"item": "Cost of Goods Sold", "value": "AED 4,200.00", "isBold": False},
        {"item": "Gross Profit", "value": "AED 31,200.50", "isBold": True},
        {"item": "Net Income", "value": "AED 28,200.50", "isBold": True},
    ],
    "balanceSheet": [
        {"item": "Cash", "value": "AED 28,200.50", "isBold": False},
        {"item": "Total Assets", "value": "AED 28,200.50", "isBold": True},
    ],
    "cashFlowStatement": [
        {"item": "Net Cash from Operating Activities", "value": "AED 28,200.50", "isBold": True},
    ],
    "pnlInterpretation": "Revenue is concentrated in Marina and margins are strong.",
    "ratios": [
        {
            "category": "Profitability",
            "ratios": [
                {
                    "name": "Net Profit Margin",
                    "value": "79.7%",
                    "insight": "Very high for a cafe.",
                    "definition": "Net income divided by revenue.",
                }
            ],
        },
        {
            "category": "Liquidity",
            "ratios": [
                {
                    "name": "Current Ratio",
                    "value": "4.2",
                    "insight": "Ample short-term cover.",
                    "definition": "Current assets divided by current liabilities.",
                }
            ],
        },
    ],
    "executiveSummary": ["Revenue grew month on month.", "Rent is the largest fixed cost."],
    "keyRisks": [
        {"risk": "Single supplier for beans.", "recommendation": "Qualify a second supplier."}
    ],
    "analystView": {
        "insights": "The business is profitable and cash generative.",
        "trendAnalysis": {
            "labels": ["2024-01", "2024-02"],
            "revenueData": [22300.5, 13100],
            "expenseData": [4200, 3000],
            "netIncomeData": [18100.5, 10100],
            "interpretation": "February revenue dipped.",
        },
        "expenseBreakdown": {
            "labels": ["COGS", "Rent"],
            "data": [4200, 3000],
            "interpretation": "COGS dominates.",
        },
        "varianceAnalysis": {
            "labels": ["Revenue", "Expenses"],
            "actualData": [35400.5, 7200],
            "budgetData": [37170.53, 6840],
            "interpretation": "Revenue slightly under budget.",
        },
        "waterfallAnalysis": {
            "labels": ["Revenue", "Cost of Goods Sold", "Operating Expenses"],
            "data": [35400.5, -4200, -3000],
            "interpretation": "Costs are modest.",
        },
        "ratioTrendAnalysis": {
            "labels": ["2024-01", "2024-02"],
            "datasets": [
                {"label": "Net Profit Margin", "data": [81.2, 77.1]},
                {"label": "Current Ratio", "data": [4.0, 4.2]},
                {"label": "Cash Conversion Cycle", "data": [12, 10]},
            ],
            "interpretation": "Margins eased while liquidity improved.",
        },
        "ratiosInterpretation": "Profitability leads the radar.",
        "breakevenAnalysis": {
            "breakevenRevenue": "AED 3,417.00",
            "interpretation": "Breakeven is far below current revenue.",
            "breakevenRevenueValue": 3417.0,
            "currentRevenueValue": 35400.5,
        },
        "forecast": "Expect revenue near AED 36,000.00 next month.",
    },
    "incomeStatementChartData": _chart(
        ["Revenue", "COGS", "Gross Profit", "Operating Expenses", "Net Income"],
        [35400.5, 4200, 31200.5, 3000, 28200.5],
    ),
    "balanceSheetChartData": {
        "assets": _chart(["Current Assets", "Non-Current Assets"], [28200.5, 0]),
        "liabilitiesAndEquity": _chart(
            ["Current Liabilities", "Long-Term Liabilities", "Total Equity"], [0, 0, 28200.5]
        ),
    },
    "cashFlowChartData": _chart(
        ["Operating Activities", "Investing Activities", "Financing Activities", "Net Change in Cash"],
        [28200.5, 0, 0, 28200.5],
    ),
}


@pytest.fixture
def payload() -> Dict[str, Any]:
    return copy.deepcopy(BASE_PAYLOAD)


@pytest.fixture
def csv_data() -> str:
    return SAMPLE_CSV


@pytest.fixture
def config() -> Config:
    return Config(api_key="test-key")


@pytest.fixture
def make_client(config):
    """Return a factory building an AnalysisClient around a FakeGemini."""

    def _make(reply: str = "", error: Optional[BaseException] = None, **overrides):
        cfg = Config(**{**config.__dict__, **overrides}) if overrides else config
        fake = FakeGemini(reply=reply, error=error)
        return AnalysisClient(cfg, gemini=fake), fake

    return _make


@pytest.fixture
def fake_gemini_cls():
    return FakeGemini
