"""
Derived portfolio figures: total investment, net revenue and ROI.

Amounts have no upper bound, so all arithmetic runs in a decimal context whose
precision is sized to the inputs. Sums are exact and the ROI quotient always
fits its two-decimal quantization.
"""

from decimal import ROUND_HALF_UP, Decimal, getcontext, localcontext
from typing import Iterable, List, Sequence

from portfolio_tracker.models.portfolio import PortfolioMetrics
from portfolio_tracker.models.transaction import Transaction, TransactionType

ZERO = Decimal("0")
CENT = Decimal("0.01")


def _precision_for(values: Sequence[Decimal]) -> int:
    """Digits needed to add the values exactly and divide any two of their sums."""
    width = max(
        (len(v.as_tuple().digits) + abs(v.as_tuple().exponent) for v in values),
        default=0,
    )
    # a sum of n values grows by at most len(str(n)) digits
    return max(getcontext().prec, 2 * (width + len(str(len(values)))) + 10)


def _sum_amounts(transactions: List[Transaction], txn_type: TransactionType) -> Decimal:
    amounts = [txn.amount for txn in transactions if txn.type is txn_type]
    with localcontext() as ctx:
        ctx.prec = _precision_for(amounts)
        return sum(amounts, ZERO)


def total_investment(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of debit (outflow) amounts."""
    return _sum_amounts(list(transactions), TransactionType.DEBIT)


def net_revenue(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of credit (inflow) amounts."""
    return _sum_amounts(list(transactions), TransactionType.CREDIT)


def net_roi(investment: Decimal, revenue: Decimal) -> Decimal:
    """
    Return on investment as a percentage, rounded to 2 decimal places.

    Defined as exactly 0 when nothing was invested.
    """
    if investment == ZERO:
        return ZERO
    with localcontext() as ctx:
        ctx.prec = _precision_for([investment, revenue])
        roi = (revenue - investment) / investment * 100
        return roi.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_metrics(transactions: Iterable[Transaction]) -> PortfolioMetrics:
    """
    Compute aggregate metrics for a transaction list.

    An empty list yields all-zero metrics.
    """
    txns = list(transactions)
    if not txns:
        return PortfolioMetrics()

    investment = total_investment(txns)
    revenue = net_revenue(txns)
    return PortfolioMetrics(
        total_investment=investment,
        net_revenue=revenue,
        net_roi=net_roi(investment, revenue),
    )
