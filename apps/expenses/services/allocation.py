"""
Split Allocation Module
=======================

Cent-precise allocation of an expense total between group members.

All arithmetic happens on integer minor units (1 rupee = 100 paise), so a
split always sums exactly to the total. Amounts are converted to ``Decimal``
only when entering and leaving this module.

Classes:
    SplitLine: One participant's signed share of an expense.
    SplitAllocator: Equal, custom and credit allocation.

Example:
    Splitting a dinner three ways::

        from decimal import Decimal
        from apps.expenses.choices import SplitType
        from apps.expenses.services.allocation import SplitAllocator

        lines = SplitAllocator.allocate(
            total=Decimal('10.00'),
            strategy=SplitType.EQUAL_ALL,
            participants=['alice', 'bob', 'carol'],
        )
        # [SplitLine('alice', Decimal('3.34')),
        #  SplitLine('bob', Decimal('3.33')),
        #  SplitLine('carol', Decimal('3.33'))]
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Hashable, List, NamedTuple, Optional, Sequence

from apps.expenses.choices import SplitType

from .exceptions import (
    EmptyCustomSetError,
    InvalidShareError,
    NoParticipantsError,
    SameParticipantError,
    TotalMismatchError,
)

MINOR_UNITS_PER_MAJOR = 100
CENT = Decimal('0.01')

EQUAL_STRATEGIES = (SplitType.EQUAL_ALL, SplitType.EQUAL_SELECTED)


class SplitLine(NamedTuple):
    """Allocated delta for one participant. Positive means owed."""

    participant: Hashable
    amount: Decimal


def to_minor_units(amount: Any) -> int:
    """Convert a decimal amount to an integer count of paise (half-up)."""
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    units = (amount * MINOR_UNITS_PER_MAJOR).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    return int(units)


def from_minor_units(units: int) -> Decimal:
    """Convert paise back to a two-decimal ``Decimal``."""
    return (Decimal(units) / Decimal(MINOR_UNITS_PER_MAJOR)).quantize(CENT)


def parse_share(raw: Any) -> Optional[Decimal]:
    """
    Parse one custom share entry.

    Returns None for a blank entry (participant not taking part).

    Raises:
        InvalidShareError: If the entry is not a finite, non-negative number.
    """
    if raw is None:
        return None

    text = str(raw).strip()
    if not text:
        return None

    try:
        value = Decimal(text)
    except InvalidOperation:
        raise InvalidShareError()

    if not value.is_finite() or value < 0:
        raise InvalidShareError()

    try:
        value.quantize(CENT)
    except InvalidOperation:
        # Too many digits to represent in paise
        raise InvalidShareError()

    return value


class SplitAllocator:
    """
    Pure allocator turning a total and a split strategy into split lines.

    The allocator holds no state, performs no I/O and never touches the
    database. Persisting its output is the caller's job: each returned
    ``SplitLine`` becomes one ``ExpenseSplit`` row.

    Methods:
        allocate: Equal or custom split of an expense.
        allocate_credit: Two-line split for a direct repayment.
    """

    @staticmethod
    def allocate(
        total: Decimal,
        strategy: str,
        participants: Sequence[Hashable],
        custom_shares: Optional[Dict[Hashable, Any]] = None,
    ) -> List[SplitLine]:
        """
        Allocate ``total`` between ``participants`` using ``strategy``.

        Args:
            total: Positive amount with at most two decimal places. Callers
                validate this before calling.
            strategy: One of ``SplitType`` values.
            participants: Participant ids in listing order. The order decides
                who receives remainder paise on equal splits.
            custom_shares: For ``SplitType.CUSTOM``, a mapping of participant
                to decimal string. Blank entries are skipped. When
                ``participants`` is empty the mapping's own order is used.

        Returns:
            list[SplitLine]: Positive lines, in participant order.

        Raises:
            NoParticipantsError: Equal split with no participants.
            InvalidShareError: A custom share is unparseable or negative.
            EmptyCustomSetError: No custom share is positive.
            TotalMismatchError: Custom shares do not sum to the total.
            ValueError: Unknown strategy or non-positive total.
        """
        total_units = to_minor_units(total)
        if total_units <= 0:
            raise ValueError("Total must be a positive amount")

        if strategy in EQUAL_STRATEGIES:
            return SplitAllocator._calculate_equal_splits(total_units, participants)

        if strategy == SplitType.CUSTOM:
            shares = custom_shares or {}
            order = list(participants) if participants else list(shares)
            return SplitAllocator._calculate_custom_splits(total_units, order, shares)

        raise ValueError(f"Unknown split strategy: {strategy}")

    @staticmethod
    def _calculate_equal_splits(total_units, participants):
        """
        Split paise as evenly as possible.

        Algorithm:
            1. ``base = total // N``
            2. ``remainder = total - base * N``
            3. First ``remainder`` participants get ``base + 1`` paise
            4. Rest get ``base``

        Note:
            The first participants in the supplied order receive the extra
            paise. Reordering participants moves the extra paise, never the
            total.
        """
        if not participants:
            raise NoParticipantsError()

        count = len(participants)
        base_units = total_units // count
        remainder_units = total_units - base_units * count

        lines = []
        for index, participant in enumerate(participants):
            share_units = base_units + (1 if index < remainder_units else 0)
            lines.append(SplitLine(participant, from_minor_units(share_units)))

        allocated = sum(to_minor_units(line.amount) for line in lines)
        if allocated != total_units:
            raise ValueError(
                f"Split calculation error: {allocated} != {total_units}"
            )

        return lines

    @staticmethod
    def _calculate_custom_splits(total_units, participants, custom_shares):
        """
        Verify caller-supplied shares against the total.

        Shares are compared as integer paise, never as decimals or floats.
        Zero shares are accepted but produce no line.
        """
        accepted = []
        for participant in participants:
            value = parse_share(custom_shares.get(participant))
            if value is None:
                continue
            share_units = to_minor_units(value)
            if share_units > 0:
                accepted.append((participant, share_units))

        if not accepted:
            raise EmptyCustomSetError()

        if sum(units for _, units in accepted) != total_units:
            raise TotalMismatchError()

        return [
            SplitLine(participant, from_minor_units(units))
            for participant, units in accepted
        ]

    @staticmethod
    def allocate_credit(total: Decimal, payer: Hashable, recipient: Hashable) -> List[SplitLine]:
        """
        Build the two lines of a direct repayment.

        The payer's balance moves down by ``total`` and the recipient's moves
        up by the same amount, so the lines always cancel out.

        Returns:
            list[SplitLine]: ``[(payer, -total), (recipient, +total)]``

        Raises:
            SameParticipantError: If payer and recipient are the same.
            ValueError: If the total is not positive.
        """
        if payer == recipient:
            raise SameParticipantError()

        total_units = to_minor_units(total)
        if total_units <= 0:
            raise ValueError("Total must be a positive amount")

        amount = from_minor_units(total_units)
        return [
            SplitLine(payer, -amount),
            SplitLine(recipient, amount),
        ]
