"""Output-shape constraint sent with the full analysis request.

The schema mirrors ``FinancialAnalysis`` field for field (camelCase wire names).
Every object lists all of its properties as required and forbids extras, which
is what chat-completions strict structured output expects.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from ledger_lens.domain.models.analysis import RATIO_CATEGORIES, FinancialAnalysis
from ledger_lens.errors import ResponseParseError

logger = logging.getLogger(__name__)

SCHEMA_NAME = "financial_analysis"

_STRING: Dict[str, Any] = {"type": "string"}
_NUMBER: Dict[str, Any] = {"type": "number"}
_BOOLEAN: Dict[str, Any] = {"type": "boolean"}


def _string(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


def _array(items: Dict[str, Any], description: str = "") -> Dict[str, Any]:
    node: Dict[str, Any] = {"type": "array", "items": items}
    if description:
        node["description"] = description
    return node


def _object(properties: Dict[str, Any], description: str = "") -> Dict[str, Any]:
    node: Dict[str, Any] = {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }
    if description:
        node["description"] = description
    return node


def _chart(description: str) -> Dict[str, Any]:
    return _object(
        {"labels": _array(_STRING), "data": _array(_NUMBER)},
        description,
    )


_STATEMENT_ITEM = _object({"item": _STRING, "value": _STRING, "isBold": _BOOLEAN})

_SUMMARY_CARD = _object(
    {
        "title": _STRING,
        "value": _STRING,
        "change": _STRING,
        "changeType": {"type": "string", "enum": ["positive", "negative"]},
    }
)

_RATIO = _object(
    {
        "name": _STRING,
        "value": _STRING,
        "insight": _STRING,
        "definition": _string(
            "A concise definition of the ratio, explaining what it measures and why it is important."
        ),
    }
)

_RATIO_CATEGORY = _object(
    {
        "category": {
            "type": "string",
            "enum": list(RATIO_CATEGORIES),
            "description": "Category of the financial ratios.",
        },
        "ratios": _array(_RATIO),
    }
)

_KEY_RISK = _object(
    {
        "risk": _string("A concise description of a key financial risk identified from the data."),
        "recommendation": _string(
            "A concrete, actionable recommendation to mitigate the identified risk."
        ),
    }
)

_ANALYST_VIEW = _object(
    {
        "insights": _string(
            "A detailed, narrative-style commentary on the financial health, trends, and key "
            "findings. Should be a single paragraph of 3-5 sentences."
        ),
        "trendAnalysis": _object(
            {
                "labels": _array(_string("Time periods, e.g., months or quarters.")),
                "revenueData": _array(_NUMBER),
                "expenseData": _array(_NUMBER),
                "netIncomeData": _array(_NUMBER),
                "interpretation": _string(
                    "A concise, 1-2 sentence interpretation of the trend analysis chart."
                ),
            }
        ),
        "expenseBreakdown": _object(
            {
                "labels": _array(_string("Expense categories.")),
                "data": _array(_NUMBER),
                "interpretation": _string(
                    "A concise, 1-2 sentence interpretation of the expense breakdown chart."
                ),
            }
        ),
        "varianceAnalysis": _object(
            {
                "labels": _array(_string("Categories or time periods for variance analysis.")),
                "actualData": _array(_NUMBER),
                "budgetData": _array(_NUMBER),
                "interpretation": _string(
                    "A concise, 1-2 sentence interpretation of the variance analysis chart."
                ),
            }
        ),
        "waterfallAnalysis": _object(
            {
                "labels": _array(
                    _STRING,
                    "Labels for the main P&L components, specifically "
                    "['Revenue', 'Cost of Goods Sold', 'Operating Expenses'].",
                ),
                "data": _array(
                    _NUMBER,
                    "Corresponding numeric values. Revenue must be positive, and all costs "
                    "must be negative.",
                ),
                "interpretation": _string(
                    "A concise, 1-2 sentence interpretation of the cash flow waterfall chart."
                ),
            }
        ),
        "ratioTrendAnalysis": _object(
            {
                "labels": _array(_STRING, "Time periods, matching the trendAnalysis labels."),
                "datasets": _array(
                    _object(
                        {
                            "label": _string("Name of the financial ratio."),
                            "data": _array(
                                _NUMBER,
                                "The calculated value of the ratio for each corresponding "
                                "time period.",
                            ),
                        }
                    )
                ),
                "interpretation": _string(
                    "A concise, 1-2 sentence interpretation of the key ratio trends chart."
                ),
            }
        ),
        "ratiosInterpretation": _string(
            "A concise, 1-2 sentence interpretation of the key ratios radar chart."
        ),
        "breakevenAnalysis": _object(
            {
                "breakevenRevenue": _string(
                    "The calculated breakeven point in terms of revenue, formatted as a "
                    "currency string."
                ),
                "interpretation": _string(
                    "A concise, 1-2 sentence interpretation of the breakeven point."
                ),
                "breakevenRevenueValue": {
                    "type": "number",
                    "description": "The raw numeric value for the breakeven revenue.",
                },
                "currentRevenueValue": {
                    "type": "number",
                    "description": "The raw numeric value for the most recent period's revenue.",
                },
            }
        ),
        "forecast": _string(
            "A brief, data-driven forecast for future revenues and expenses for the next "
            "period. 1-2 sentences."
        ),
    }
)

FINANCIAL_ANALYSIS_SCHEMA: Dict[str, Any] = _object(
    {
        "summaryCards": _array(_SUMMARY_CARD),
        "incomeStatement": _array(_STATEMENT_ITEM),
        "balanceSheet": _array(_STATEMENT_ITEM),
        "cashFlowStatement": _array(_STATEMENT_ITEM),
        "pnlInterpretation": _string(
            "A brief, 2-3 sentence commentary on the key insights from all three financial "
            "statements, highlighting key drivers of profitability, financial position, and "
            "cash flow."
        ),
        "ratios": _array(_RATIO_CATEGORY, "A list of financial ratio categories."),
        "executiveSummary": _array(
            _STRING, "A bulleted list of 3-4 key takeaways for a busy executive."
        ),
        "keyRisks": _array(_KEY_RISK),
        "analystView": _ANALYST_VIEW,
        "incomeStatementChartData": _chart(
            "Data for the Income Statement bar chart. Labels should be "
            "['Revenue', 'COGS', 'Gross Profit', 'Operating Expenses', 'Net Income']."
        ),
        "balanceSheetChartData": _object(
            {
                "assets": _chart(
                    "Data for the Assets doughnut chart. Labels should be major asset "
                    "categories like 'Current Assets' and 'Non-Current Assets'."
                ),
                "liabilitiesAndEquity": _chart(
                    "Data for the Liabilities & Equity doughnut chart. Labels should be major "
                    "categories like 'Current Liabilities', 'Long-Term Liabilities', and "
                    "'Total Equity'."
                ),
            }
        ),
        "cashFlowChartData": _chart(
            "Data for the Cash Flow bar chart. Labels should be ['Operating Activities', "
            "'Investing Activities', 'Financing Activities', 'Net Change in Cash']."
        ),
    }
)


def required_fields(schema: Mapping[str, Any] = FINANCIAL_ANALYSIS_SCHEMA) -> List[str]:
    """Top-level required property names of ``schema``."""
    return list(schema.get("required", []))


def analysis_response_format() -> Dict[str, Any]:
    """Chat-completions ``response_format`` payload for the full analysis."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": SCHEMA_NAME,
            "schema": FINANCIAL_ANALYSIS_SCHEMA,
            "strict": True,
        },
    }


def validate_payload(payload: Any, *, strict: bool = True) -> FinancialAnalysis:
    """Turn a parsed response body into a FinancialAnalysis.

    With ``strict`` a missing or mistyped field raises ResponseParseError. Without
    it a body that fails validation is still handed back, unchecked, as long as it
    is a JSON object.
    """
    if not isinstance(payload, dict):
        raise ResponseParseError(
            f"Expected a JSON object for the analysis, got {type(payload).__name__}."
        )
    try:
        return FinancialAnalysis.model_validate(payload)
    except ValidationError as exc:
        if strict:
            raise ResponseParseError(
                f"Analysis response failed validation ({exc.error_count()} errors)."
            ) from exc
        logger.warning(
            "Analysis response failed validation (%s errors); returning it unchecked",
            exc.error_count(),
        )
        return FinancialAnalysis.unchecked(payload)
