"""Recurring series generation."""

import uuid
from decimal import Decimal
from typing import Callable, Optional

from budgetbook.domain.entities import (
    MAX_NAME_LENGTH,
    GeneratedSeries,
    LineItemDraft,
    RecurrenceMode,
    RecurringSeriesSpec,
    ValuationMode,
    validate_amount,
    validate_name,
)
from budgetbook.domain.errors import ValidationError
from budgetbook.domain.periods import parse_period, scheduled_date, sequence_periods, validate_day

MIN_SERIES_LENGTH = 2
MAX_SERIES_LENGTH = 60


def installment_name(name: str, index: int, count: int) -> str:
    """Return the name of the ``index``-th (1-based) installment."""
    return f"{name} ({index}/{count})"


class SeriesGenerator:
    """Builds the line item drafts of a new recurring series."""

    def __init__(self, id_factory: Optional[Callable[[], str]] = None):
        """Initialize series generator.

        Args:
            id_factory: Callable returning a fresh series ID (defaults to uuid4)
        """
        self.id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def validate(self, spec: RecurringSeriesSpec) -> None:
        """Reject malformed series input.

        Raises:
            ValidationError: If the count, start period, name, amount or day
                is invalid
        """
        if not MIN_SERIES_LENGTH <= spec.count <= MAX_SERIES_LENGTH:
            raise ValidationError(
                f"A {spec.mode.value} series needs between {MIN_SERIES_LENGTH} and "
                f"{MAX_SERIES_LENGTH} occurrences, got {spec.count}"
            )
        parse_period(spec.start_period)
        name = validate_name(spec.name)
        if spec.mode == RecurrenceMode.INSTALLMENTS:
            # The widest suffix is the last one, e.g. " (12/12)"
            room = MAX_NAME_LENGTH - (len(installment_name(name, spec.count, spec.count)) - len(name))
            if len(name) > room:
                raise ValidationError(
                    f"Name must be at most {room} characters for {spec.count} installments"
                )
        validate_amount(spec.amount)
        if spec.scheduled_day is not None:
            validate_day(spec.scheduled_day)

    def generate(self, spec: RecurringSeriesSpec) -> GeneratedSeries:
        """Generate the drafts of a series, all sharing one series ID.

        Installments repeat the full amount in every occurrence rather than
        dividing it. Sum-mode groups start at zero and are filled by their
        children later.

        Args:
            spec: Series description

        Returns:
            GeneratedSeries with one draft per period, in period order
        """
        self.validate(spec)

        series_id = self.id_factory()
        name = spec.name.strip()
        periods = sequence_periods(spec.start_period, spec.count)
        if spec.is_group and spec.valuation_mode == ValuationMode.SUM:
            amount = Decimal("0")
        else:
            amount = spec.amount

        drafts = []
        for index, period in enumerate(periods, start=1):
            if spec.mode == RecurrenceMode.INSTALLMENTS:
                draft_name = installment_name(name, index, spec.count)
            else:
                draft_name = name
            drafts.append(
                LineItemDraft(
                    kind=spec.kind,
                    name=draft_name,
                    amount=amount,
                    period=period,
                    completed=spec.completed,
                    scheduled_date=scheduled_date(period, spec.scheduled_day),
                    category_id=spec.category_id,
                    is_group=spec.is_group,
                    valuation_mode=spec.valuation_mode,
                    series_id=series_id,
                )
            )

        return GeneratedSeries(series_id=series_id, drafts=tuple(drafts))
