"""XBRL concept → canonical metric mappings.

Each canonical metric maps to an ordered list of taxonomy concepts. Order is
priority: when several concepts tag the same segment/period the earlier one
wins. For the consolidated metrics every concept is still evaluated, since
filers rename concepts over the years (e.g. Revenues →
RevenueFromContractWithCustomerExcludingAssessedTax) and the first concept
in the list may only carry stale data.
"""

from __future__ import annotations

from typing import NamedTuple


# ═══════════════════════════════════════════════════════════════════════════
#  Concept entry
# ═══════════════════════════════════════════════════════════════════════════

class ConceptEntry(NamedTuple):
    xbrl_concept: str       # tag name (without us-gaap: / dei: prefix)
    display_name: str       # human label


US_GAAP = "us-gaap"
DEI = "dei"


# ═══════════════════════════════════════════════════════════════════════════
#  Consolidated metrics (facts["us-gaap"])
# ═══════════════════════════════════════════════════════════════════════════

REVENUE: list[ConceptEntry] = [
    ConceptEntry("Revenues", "Total Revenue"),
    ConceptEntry("RevenueFromContractWithCustomerExcludingAssessedTax",
                 "Revenue from Contract with Customer"),
    ConceptEntry("RevenueFromContractWithCustomerIncludingAssessedTax",
                 "Revenue from Contract with Customer (incl. tax)"),
    ConceptEntry("SalesRevenueNet", "Net Sales Revenue"),
    ConceptEntry("SalesRevenueGoodsNet", "Net Goods Revenue"),
    ConceptEntry("InterestAndDividendIncomeOperating",
                 "Interest and Dividend Income"),             # banks
    ConceptEntry("InterestIncomeExpenseNet", "Net Interest Income"),  # banks alt
    ConceptEntry("TotalRevenuesAndOtherIncome", "Total Revenues and Other Income"),
]

COGS: list[ConceptEntry] = [
    ConceptEntry("CostOfGoodsAndServicesSold", "Cost of Goods and Services Sold"),
    ConceptEntry("CostOfRevenue", "Cost of Revenue"),
    ConceptEntry("CostOfGoodsSold", "Cost of Goods Sold"),
]

OPEX: list[ConceptEntry] = [
    ConceptEntry("OperatingExpenses", "Operating Expenses"),
    ConceptEntry("CostsAndExpenses", "Costs and Expenses"),
    ConceptEntry("NoninterestExpense", "Non-Interest Expense"),   # banks
    ConceptEntry("OperatingCostsAndExpenses", "Operating Costs and Expenses"),
    ConceptEntry("SellingGeneralAndAdministrativeExpense", "SG&A"),
]

CAPEX: list[ConceptEntry] = [
    ConceptEntry("PaymentsToAcquirePropertyPlantAndEquipment", "Purchases of PP&E"),
    ConceptEntry("CapitalExpenditureDiscontinuedOperations",
                 "Capital Expenditure (discontinued ops)"),
    ConceptEntry("PaymentsToAcquireProductiveAssets", "Purchases of Productive Assets"),
]

NET_INCOME: list[ConceptEntry] = [
    ConceptEntry("NetIncomeLoss", "Net Income"),
    ConceptEntry("ProfitLoss", "Profit (incl. NCI)"),
    ConceptEntry("NetIncomeLossAvailableToCommonStockholdersBasic",
                 "Net Income to Common"),
    ConceptEntry("ComprehensiveIncomeNetOfTax", "Comprehensive Income"),
]

# Response key → ordered concept list. Dict order is response order.
CONCEPT_MAP: dict[str, list[ConceptEntry]] = {
    "revenue": REVENUE,
    "cogs": COGS,
    "opex": OPEX,
    "capex": CAPEX,
    "netIncome": NET_INCOME,
}


# ═══════════════════════════════════════════════════════════════════════════
#  Entity-descriptive metrics (facts["dei"])
# ═══════════════════════════════════════════════════════════════════════════

EMPLOYEES: list[ConceptEntry] = [
    ConceptEntry("EntityNumberOfEmployees", "Number of Employees"),
]


# ═══════════════════════════════════════════════════════════════════════════
#  Segment revenue (XBRL instance documents)
# ═══════════════════════════════════════════════════════════════════════════

# Narrower than REVENUE: bank interest lines are never segment revenue.
SEGMENT_REVENUE: list[ConceptEntry] = [
    ConceptEntry("Revenues", "Total Revenue"),
    ConceptEntry("RevenueFromContractWithCustomerExcludingAssessedTax",
                 "Revenue from Contract with Customer"),
    ConceptEntry("RevenueFromContractWithCustomerIncludingAssessedTax",
                 "Revenue from Contract with Customer (incl. tax)"),
    ConceptEntry("SalesRevenueNet", "Net Sales Revenue"),
    ConceptEntry("SalesRevenueGoodsNet", "Net Goods Revenue"),
    ConceptEntry("TotalRevenuesAndOtherIncome", "Total Revenues and Other Income"),
]

# Prefixed concept name → priority (lower wins)
SEGMENT_REVENUE_PRIORITY: dict[str, int] = {
    f"{US_GAAP}:{entry.xbrl_concept}": i for i, entry in enumerate(SEGMENT_REVENUE)
}

# Lowercased prefixed name → canonical prefixed name, for plain XBRL tags
SEGMENT_REVENUE_TAGS: dict[str, str] = {
    name.lower(): name for name in SEGMENT_REVENUE_PRIORITY
}

# Preferred dimension for business segments (ASC 280)
BUSINESS_SEGMENT_AXIS = "StatementBusinessSegmentsAxis"
