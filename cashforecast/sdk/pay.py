"""Paycheck computation.

Derives the net amount deposited each pay period from a PaycheckConfig.

The config is first resolved into one of three closed input variants
(NetPayInput, DirectGrossInput, HourlyGrossInput). Internal helpers return
a PayResult carrying either a value or a failure reason; the public
functions convert failures to NaN, which is the sentinel the rest of the
forecast pipeline checks for (generators emit nothing on NaN net pay).
"""

import math
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from enum import Enum
from typing import List, Optional, Union

from .schemas import DeductionLine, NetPayBreakdown, PayFrequency, PaycheckConfig


NAN = float("nan")

# Weekly gross -> per-period gross
PERIODS_PER_YEAR = {
    "weekly": 52,
    "biweekly": 26,
    "semimonthly": 24,
    "monthly": 12,
}


class PayFailure(Enum):
    """Why a pay figure could not be derived."""

    MISSING_INPUT = "missing_input"
    INVALID_RANGE = "invalid_range"


@dataclass(frozen=True)
class PayResult:
    """A derived pay figure or the reason it is unavailable."""

    value: float = NAN
    failure: Optional[PayFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def or_nan(self) -> float:
        return self.value if self.ok else NAN


@dataclass(frozen=True)
class NetPayInput:
    """Net amount entered directly."""

    net_pay_amount: Optional[float]


@dataclass(frozen=True)
class DirectGrossInput:
    """Gross entered directly, net calculated from deductions."""

    gross_pay_amount: Optional[float]


@dataclass(frozen=True)
class HourlyGrossInput:
    """Gross derived from hourly rate and weekly hours."""

    pay_frequency: PayFrequency
    hourly_rate: Optional[float]
    hours_per_week: Optional[float]


PayInput = Union[NetPayInput, DirectGrossInput, HourlyGrossInput]


def resolve_pay_input(config: PaycheckConfig) -> PayInput:
    """Pick the input variant the config's modes select."""
    if config.paycheck_input_mode == "net":
        return NetPayInput(net_pay_amount=config.net_pay_amount)
    if config.gross_input_mode == "hourly":
        return HourlyGrossInput(
            pay_frequency=config.pay_frequency,
            hourly_rate=config.hourly_rate,
            hours_per_week=config.hours_per_week,
        )
    return DirectGrossInput(gross_pay_amount=config.gross_pay_amount)


def _is_finite(value: Optional[float]) -> bool:
    return value is not None and isinstance(value, (int, float)) and math.isfinite(value)


def round_to_cents(value: float) -> float:
    """Round to the cent, halves toward +inf (-0.005 -> 0.0, 0.005 -> 0.01).

    NaN and infinities pass through.
    """
    if not math.isfinite(value):
        return value
    cents = (Decimal(repr(value)) * 100 + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR)
    return float(cents / 100)


def _hourly_gross(frequency: str, hourly_rate: Optional[float], hours_per_week: Optional[float]) -> PayResult:
    if not _is_finite(hourly_rate) or not _is_finite(hours_per_week):
        return PayResult(failure=PayFailure.MISSING_INPUT)
    if hourly_rate <= 0 or hours_per_week <= 0:
        return PayResult(failure=PayFailure.INVALID_RANGE)

    weekly_gross = hourly_rate * hours_per_week
    if frequency == "biweekly":
        gross = weekly_gross * 2
    elif frequency in ("semimonthly", "monthly"):
        gross = (weekly_gross * 52) / PERIODS_PER_YEAR[frequency]
    else:
        gross = weekly_gross
    return PayResult(value=round_to_cents(gross))


def compute_gross_pay_from_hourly(
    pay_frequency: str,
    hourly_rate: Optional[float],
    hours_per_week: Optional[float],
) -> float:
    """Per-period gross pay from an hourly rate.

    Args:
        pay_frequency: weekly, biweekly, semimonthly or monthly
        hourly_rate: Dollars per hour
        hours_per_week: Hours worked per week

    Returns:
        Gross per period rounded to the cent, or NaN if either input is
        missing, non-finite or not positive.
    """
    return _hourly_gross(pay_frequency, hourly_rate, hours_per_week).or_nan()


def _gross_for(pay_input: PayInput) -> PayResult:
    if isinstance(pay_input, HourlyGrossInput):
        return _hourly_gross(pay_input.pay_frequency, pay_input.hourly_rate, pay_input.hours_per_week)

    gross = pay_input.gross_pay_amount
    if gross is None:
        return PayResult(failure=PayFailure.MISSING_INPUT)
    if not math.isfinite(gross) or gross <= 0:
        return PayResult(value=gross, failure=PayFailure.INVALID_RANGE)
    return PayResult(value=gross)


def sum_deduction_lines(lines: List[DeductionLine], gross_pay: float) -> float:
    """Sum fixed and percent-of-gross lines.

    Lines with a negative or non-finite value are skipped entirely.
    """
    total = 0.0
    for line in lines:
        if not _is_finite(line.value) or line.value < 0:
            continue
        if line.type == "percentOfGross":
            total += (line.value / 100) * gross_pay
        else:
            total += line.value
    return total


def compute_net_pay_breakdown(config: PaycheckConfig) -> NetPayBreakdown:
    """Break a paycheck into gross, deduction totals and net.

    In 'net' mode only net_pay is populated (every other field is 0) and
    the literal is not checked for positivity.

    In 'calculate' mode a missing or non-positive gross makes every field
    except gross_pay NaN rather than showing a partial breakdown. A
    non-finite loan repayment propagates NaN into the totals without
    blocking the other sums.

    Each field is rounded to the cent on its own, so the parts can differ
    from the reported totals by a cent.
    """
    pay_input = resolve_pay_input(config)

    if isinstance(pay_input, NetPayInput):
        amount = pay_input.net_pay_amount
        net_pay = round_to_cents(amount) if amount is not None else NAN
        return NetPayBreakdown(
            gross_pay=0,
            pretax_total=0,
            taxes_total=0,
            posttax_total=0,
            loan_repayment_amount=0,
            total_withheld_deducted=0,
            net_pay=net_pay,
        )

    gross = _gross_for(pay_input)
    if not gross.ok:
        return NetPayBreakdown(
            gross_pay=gross.value,
            pretax_total=NAN,
            taxes_total=NAN,
            posttax_total=NAN,
            loan_repayment_amount=NAN,
            total_withheld_deducted=NAN,
            net_pay=NAN,
        )

    gross_pay = gross.value
    pretax_total = sum_deduction_lines(config.pretax_deductions, gross_pay)
    taxes_total = sum_deduction_lines(config.taxes_withheld, gross_pay)
    posttax_total = sum_deduction_lines(config.posttax_deductions, gross_pay)
    loan_repayment = (
        max(0.0, config.loan_repayment_amount) if _is_finite(config.loan_repayment_amount) else NAN
    )

    total_withheld_deducted = pretax_total + taxes_total + posttax_total + loan_repayment
    net_pay = gross_pay - total_withheld_deducted

    return NetPayBreakdown(
        gross_pay=round_to_cents(gross_pay),
        pretax_total=round_to_cents(pretax_total),
        taxes_total=round_to_cents(taxes_total),
        posttax_total=round_to_cents(posttax_total),
        loan_repayment_amount=round_to_cents(loan_repayment),
        total_withheld_deducted=round_to_cents(total_withheld_deducted),
        net_pay=round_to_cents(net_pay),
    )


def compute_net_pay(config: PaycheckConfig) -> float:
    """Net pay per period, or NaN if it cannot be derived."""
    return compute_net_pay_breakdown(config).net_pay
