"""Application-wide constants for portfolio calculations.

Numbers that tune the valuation, allocation, tax and intelligence logic live
here, grouped by concern, so the calculation modules stay free of magic
numbers.
"""


class ValuationConstants:
    """Constants for holding valuation."""

    # Live vs stored snapshot difference above which a drift warning is logged
    DRIFT_TOLERANCE = 0.01

    # Bucket for holdings whose category is not one of the fixed four
    OTHER_CATEGORY = "Other"


class AllocationConstants:
    """Constants for allocation targets and gap analysis."""

    DEFAULT_TARGETS = {
        "Core": 25.0,
        "Growth": 55.0,
        "Hedge": 10.0,
        "Liquidity": 10.0,
    }
    DEFAULT_REBALANCE_THRESHOLD = 5.0

    # Completion (current / target) band counted as on target
    PERFECT_COMPLETION_MIN = 95.0
    PERFECT_COMPLETION_MAX = 105.0

    # Callout severity bands, in completion points away from 100%
    CALLOUT_SEVERE = 20.0
    CALLOUT_MODERATE = 5.0

    # Priority bands, in percentage points of gap
    PRIORITY_HIGH_GAP = 5.0
    PRIORITY_MEDIUM_GAP = 2.0


class TaxConstants:
    """Constants for the SRS tax estimate."""

    SRS_CAP_EMPLOYMENT_PASS = 35700.0
    SRS_CAP_RESIDENT = 15000.0

    # Days left before the year-end deadline for each urgency tier
    URGENCY_CRITICAL_DAYS = 60
    URGENCY_HIGH_DAYS = 120
    URGENCY_MEDIUM_DAYS = 240

    DAYS_PER_MONTH = 30

    # Only surface the employment pass advantage when it is worth this much
    MIN_EP_ADVANTAGE_ACTION = 1000.0

    # US situs estate tax applies above a small exemption for non-residents
    US_ESTATE_TAX_RATE = 0.40
    US_DOMICILED_ETFS = frozenset(
        {
            "VOO", "VTI", "QQQ", "SPY", "IVV", "VXUS", "VEA", "VWO", "VTV",
            "VUG", "VBR", "VBK", "VO", "VOE", "VB", "ARKK", "ARKQ",
        }
    )
    IRISH_ALTERNATIVES = {
        "VOO": "VUAA.L",
        "SPY": "CSPX.L",
        "IVV": "CSPX.L",
        "VTI": "VWRA.L",
        "QQQ": "EQQQ.L",
        "VXUS": "VWRA.L",
        "VEA": "VEVE.L",
        "VWO": "VFEM.L",
    }


class IntelligenceConstants:
    """Constants for the intelligence report."""

    MAX_ACTIONS = 3
    REFRESH_INTERVAL_MINUTES = 60

    # Liquidity held above target is assumed to miss this annual return
    CASH_DRAG_RETURN = 0.07
    CASH_DRAG_MIN_GAP = 5.0

    UNDERWEIGHT_MIN_AMOUNT = 10000.0
    UNDERWEIGHT_IMPACT = 0.02

    CONCENTRATION_PERCENT = 20.0
    CONCENTRATION_IMPACT = 0.05

    FIRST_MILESTONE = 1000000.0


class ExchangeRateConstants:
    """Constants for exchange rate handling."""

    # Used when no stored rates exist and the feed is unreachable
    FALLBACK_RATES = {
        ("SGD", "USD"): 0.74,
        ("SGD", "INR"): 63.50,
        ("USD", "SGD"): 1.35,
        ("USD", "INR"): 85.50,
        ("INR", "SGD"): 0.0157,
        ("INR", "USD"): 0.0117,
    }
    HISTORY_DEFAULT_DAYS = 30


class PriceRefreshConstants:
    """Constants for the price refresh job."""

    # Symbols priced by hand; the feed is never asked for them
    MANUAL_SYMBOLS = frozenset({"NIFTY100", "GOLD"})
    MANUAL_SYMBOL_MARKERS = ("CASH",)

    CRYPTO_SYMBOLS = frozenset({"BTC", "ETH", "WBTC", "USDC"})

    # A failed refresh still counts as fresh if the last price is this recent
    PREVIOUS_PRICE_MAX_AGE_HOURS = 24

    HISTORY_PERIOD = "5d"


class APIConstants:
    """Constants for API behavior, limits, and defaults."""

    DEFAULT_PAGE_SIZE = 100
    MAX_PAGE_SIZE = 1000
