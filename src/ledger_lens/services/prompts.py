"""Instruction texts for the four analysis requests."""
from __future__ import annotations

from typing import Optional

SYSTEM_PROMPT = (
    "You are an expert Financial Accountant and Analyst. "
    "Work only from the transaction data you are given and never invent figures."
)

# Synthetic budget used for variance analysis, relative to actuals.
BUDGET_REVENUE_FACTOR = 1.05
BUDGET_EXPENSE_FACTOR = 0.95

REQUIRED_RATIOS = {
    "Profitability": [
        "Gross Profit Margin",
        "Net Profit Margin",
        "Return on Assets (ROA)",
        "Return on Equity (ROE)",
        "Gross Markup Percentage",
    ],
    "Liquidity": ["Current Ratio", "Quick Ratio"],
    "Solvency": ["Debt-to-Equity Ratio", "Debt-to-Asset Ratio"],
    "Efficiency": [
        "Asset Turnover",
        "Inventory Turnover",
        "Days Sales Outstanding (DSO)",
        "Days Inventory Outstanding (DIO)",
        "Days Payable Outstanding (DPO)",
        "Cash Conversion Cycle (CCC)",
    ],
}

TREND_RATIOS = ["Net Profit Margin", "Current Ratio", "Cash Conversion Cycle"]


def currency_example(currency_code: str) -> str:
    return f"{currency_code} 1,234.56"


def _csv_block(csv_data: str) -> str:
    return f"```csv\n{csv_data.strip()}\n```"


def outlet_scope(outlet: Optional[str]) -> str:
    """Scope sentence: filter to one outlet, or consolidate all of them."""
    if outlet:
        return (
            f'The user has selected a specific outlet: "{outlet}". Your entire analysis MUST '
            "be filtered to only include data and transactions relevant to this single outlet."
        )
    return (
        "The analysis should be a consolidated report, covering all outlets/branches "
        "found in the data."
    )


def _ratio_lines() -> str:
    return "\n".join(
        f"    - **{category} Ratios:** {', '.join(names)}."
        for category, names in REQUIRED_RATIOS.items()
    )


def build_analysis_prompt(csv_data: str, outlet: Optional[str], currency_code: str) -> str:
    budget_revenue = round(BUDGET_REVENUE_FACTOR * 100)
    budget_expense = round(BUDGET_EXPENSE_FACTOR * 100)
    trend_ratios = ", ".join(f"'{name}'" for name in TREND_RATIOS)
    categories = ", ".join(f"'{name}'" for name in REQUIRED_RATIOS)
    return f"""Analyze the following financial transaction data from a CSV file.
{outlet_scope(outlet)}
Your primary task is to generate the three core financial statements: an Income Statement, a Balance Sheet, and a Cash Flow Statement. You must infer these statements from the raw transaction data, making plausible assumptions where necessary.

**Core Financial Statements Generation:**
1. **Income Statement:** Generate a standard, multi-step income statement.
2. **Balance Sheet:** From the transactions, infer a plausible balance sheet. The fundamental accounting equation (Assets = Liabilities + Equity) MUST hold true. Make reasonable assumptions for accounts like Cash, Accounts Receivable, Inventory and Accounts Payable, and calculate Retained Earnings from the net income on the income statement.
3. **Cash Flow Statement:** Generate a statement of cash flows, categorizing activities into Operating, Investing, and Financing. The Net Change in Cash should align with the change in the Cash account on the balance sheet.

**Chart Data Generation (for Manager View):**
4. **Income Statement Chart:** From the full statement, generate summarized data for a bar chart.
5. **Balance Sheet Charts:** From the full statement, generate summarized data for two doughnut charts (Assets, and Liabilities & Equity).
6. **Cash Flow Chart:** Generate summarized data for a bar chart showing cash flows from the three activities and the net change.

**Additional Analysis Requirements:**
7. **Executive Summary & Risks:** Provide a 3-4 bullet point executive summary and identify the top 2-3 key financial risks, each with a concise, actionable recommendation.
8. **Profitability & Cost Structure Analysis:**
    - You MUST calculate and display the **Gross Markup Percentage** [`(Gross Profit / COGS) * 100`] as a summary card, within the Income Statement (after Gross Profit), and as a Key Financial Ratio with a clear definition.
    - You MUST perform a **Breakeven Analysis**. Estimate variable and fixed costs from the transaction data to calculate the breakeven point in terms of revenue. You MUST provide both the formatted string value and the raw numeric values for breakeven revenue and current revenue.
9. **Comprehensive Key Ratios:** For EACH ratio, provide its value, a concise insight, and a clear definition. These ratios MUST be grouped into the following categories: {categories}. The list of ratios MUST include, but is not limited to:
{_ratio_lines()}
10. **Analyst View Data:** For the 'ratioTrendAnalysis', you MUST provide time-series data for the following key ratios for EACH period in the dataset: {trend_ratios}. You may include other relevant ratios like 'Debt-to-Equity Ratio' as well.
11. **Variance Analysis:** Create a plausible budget by assuming budget revenue is {budget_revenue}% of actuals and budget expenses are {budget_expense}% of actuals.
12. **Commentary:** Provide concise interpretations for ALL charts and a summary commentary for the overall financial statements.

**General Instructions:**
- Group transactions by month for time-series analysis.
- Use {currency_code} formatting for currency (e.g., {currency_example(currency_code)}).
- Provide your complete analysis strictly in the requested JSON format.

Financial Data:
{_csv_block(csv_data)}
"""


def build_forecast_prompt(
    csv_data: str, revenue_growth_pct: float, expense_growth_pct: float, currency_code: str
) -> str:
    return f"""Based on the provided financial transaction data, generate a brief, data-driven forecast for the next period.
The user wants to see a projection with a {revenue_growth_pct}% growth in revenue and a {expense_growth_pct}% growth in expenses compared to the last period in the data.
The response should be a concise paragraph (2-3 sentences). Format currency values as {currency_code} (e.g., {currency_example(currency_code)}).

Financial Data:
{_csv_block(csv_data)}
"""


def build_outlets_prompt(csv_data: str) -> str:
    return f"""Analyze the provided CSV data and identify if there is a column that represents different outlets, branches, stores, or locations.
Common column names for this are 'Outlet', 'Branch', 'Location', 'Store'.
If you find such a column, return a JSON array of the unique string values from that column.
For example: ["Outlet A", "Outlet B", "Outlet C"].
If no such column is found, return an empty JSON array [].
The returned value should be only the JSON array.

CSV Data:
{_csv_block(csv_data)}
"""


def build_query_prompt(csv_data: str, query: str, currency_code: str) -> str:
    return f"""Your task is to answer a user's question based *only* on the financial data provided below.
- Analyze the data thoroughly to find the answer.
- If the data does not contain the necessary information to answer the question, clearly state that the information is not available in the provided data.
- Keep your answer concise and to the point.
- Format any currency values in {currency_code} (e.g., {currency_example(currency_code)}).

Financial Data:
{_csv_block(csv_data)}

User's Question: "{query.strip()}"
"""
