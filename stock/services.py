"""
Stock — Service Layer

The ledger: balance derivation, recording stock in/out, administrative
balance adjustments and undo. Every write for a product runs inside one
transaction holding that product's row lock, so balance checks and the
append they guard can never interleave with another writer.
INSERT ONLY — never update or delete StockMovement.

@file stock/services.py
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q, Sum
from django.utils import timezone

from catalog.models import Product
from core.constants import (
    ADJUSTMENT_KEY_PREFIX,
    ADJUSTMENT_NOTE_PREFIX,
    AUDIT_ACTION_ADMIN_FLAG,
    STOCK_STATUS_HEALTHY,
    STOCK_STATUS_NEGATIVE,
    STOCK_STATUS_ZERO,
    UNDO_KEY_PREFIX,
    UNDO_NOTE_PREFIX,
)
from core.exceptions import (
    DuplicateSubmissionError,
    InactiveProductError,
    InsufficientStockError,
    InvalidInputError,
    InvalidQuantityError,
    ResourceNotFoundError,
    StockInDeficitError,
)
from core.services import AuditService

from .models import StockAdjustment, StockMovement

logger = logging.getLogger('waretrack')

ZERO = Decimal('0')
QUANTUM = Decimal('0.001')
MAX_MAGNITUDE = Decimal('1e11')


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def stock_status(balance) -> str:
    if balance < 0:
        return STOCK_STATUS_NEGATIVE
    if balance == 0:
        return STOCK_STATUS_ZERO
    return STOCK_STATUS_HEALTHY


def format_quantity(value: Decimal) -> str:
    """10.000 -> "10", 2.500 -> "2.5"."""
    if value == 0:
        return '0'
    return f'{value.normalize():f}'


def to_quantity(value, *, positive: bool = True) -> Decimal:
    """
    Coerce user input to an exact Decimal with at most three decimal
    places. With ``positive`` the value must also be greater than zero.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidQuantityError()
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidQuantityError(detail='Quantity must be a number.')

    if not number.is_finite():
        raise InvalidQuantityError(detail='Quantity must be a finite number.')
    if positive and number <= 0:
        raise InvalidQuantityError(detail='Quantity must be greater than zero.')
    if abs(number) >= MAX_MAGNITUDE:
        raise InvalidQuantityError(detail='Quantity is too large.')
    if number != number.quantize(QUANTUM):
        raise InvalidQuantityError(detail='Quantity can have at most 3 decimal places.')
    return number.quantize(QUANTUM)


def _check_magnitude(value: Decimal, detail: str) -> None:
    """Balances and differences must fit the ledger columns too."""
    if abs(value) >= MAX_MAGNITUDE:
        raise InvalidQuantityError(detail=detail)


def _lock_product(product_id) -> Product:
    """Take the per-product row lock. Must run inside transaction.atomic."""
    try:
        return Product.objects.select_for_update().get(pk=product_id)
    except (Product.DoesNotExist, ValidationError, ValueError):
        raise ResourceNotFoundError(detail='Product not found.')


def _append_movement(**fields) -> StockMovement:
    """
    Insert one movement. A unique-key violation on idempotency_key is a
    duplicate submission; any other integrity error propagates.
    """
    movement = StockMovement(**fields)
    try:
        with transaction.atomic():
            movement.save()
    except IntegrityError:
        if StockMovement.objects.filter(idempotency_key=fields['idempotency_key']).exists():
            raise DuplicateSubmissionError()
        raise
    return movement


# ---------------------------------------------------------------------------
# Balance resolver
# ---------------------------------------------------------------------------

IN_SUM = Sum('quantity', filter=Q(direction=StockMovement.Direction.IN))
OUT_SUM = Sum('quantity', filter=Q(direction=StockMovement.Direction.OUT))


class BalanceService:
    """Balances are always derived from the ledger, never stored."""

    @staticmethod
    def balance_of(product_id) -> Decimal:
        """Current balance of one product: SUM(in) - SUM(out), 0 when no movements."""
        result = StockMovement.objects.filter(product_id=product_id).aggregate(
            in_sum=IN_SUM,
            out_sum=OUT_SUM,
        )
        return (result['in_sum'] or ZERO) - (result['out_sum'] or ZERO)

    @staticmethod
    def balance_map_of(product_ids=None) -> dict:
        """
        Balances for many products in one grouped aggregate. Every
        requested id is present in the result (0 when it has no
        movements); with no ids, every product that has movements.
        """
        qs = StockMovement.objects.all()
        if product_ids is not None:
            product_ids = list(product_ids)
            qs = qs.filter(product_id__in=product_ids)

        rows = (
            qs.order_by()
            .values('product_id')
            .annotate(in_sum=IN_SUM, out_sum=OUT_SUM)
        )
        balances = {
            row['product_id']: (row['in_sum'] or ZERO) - (row['out_sum'] or ZERO)
            for row in rows
        }
        for product_id in product_ids or []:
            balances.setdefault(product_id, ZERO)
        return balances


# ---------------------------------------------------------------------------
# Transaction recorder
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RecordedMovement:
    movement: StockMovement
    balance_after: Decimal
    previous_balance: Decimal
    flagged: bool = False


class StockService:
    """Stock in / stock out and movement history."""

    @staticmethod
    @transaction.atomic
    def record_movement(
        *,
        product_id,
        direction: str,
        quantity,
        entered_by,
        idempotency_key: str,
        note: str = '',
    ) -> RecordedMovement:
        """
        Record one stock movement.

        Dispatches may never take the balance below zero: a balance that
        is already zero or negative refuses any dispatch, and a dispatch
        larger than the balance is refused with the exact maximum.
        Dispatches above LARGE_DISPATCH_ADMIN_FLAG_THRESHOLD are accepted
        but flagged for admin review.
        """
        quantity = to_quantity(quantity)
        if direction not in StockMovement.Direction.values:
            raise InvalidInputError(detail=f'Invalid direction: {direction!r}. Expected "in" or "out".')
        idempotency_key = (idempotency_key or '').strip()
        if not idempotency_key:
            raise InvalidInputError(detail='An idempotency key is required.')

        product = _lock_product(product_id)
        if not product.is_active:
            raise InactiveProductError(
                detail='This product is inactive. Reactivate it before recording stock.',
            )

        if StockMovement.objects.filter(idempotency_key=idempotency_key).exists():
            raise DuplicateSubmissionError()

        previous = BalanceService.balance_of(product.pk)
        if direction == StockMovement.Direction.OUT:
            if previous <= 0:
                raise StockInDeficitError(
                    detail=(
                        f"This item's stock is currently in deficit ({format_quantity(previous)}). "
                        'Please receive stock before dispatching.'
                    ),
                )
            if quantity > previous:
                maximum = format_quantity(previous)
                raise InsufficientStockError(
                    detail=(
                        f'Cannot dispatch {format_quantity(quantity)}: only {maximum} in stock. '
                        f'Enter {maximum} or less.'
                    ),
                )
            balance_after = previous - quantity
        else:
            balance_after = previous + quantity
            _check_magnitude(
                balance_after,
                f'Cannot receive {format_quantity(quantity)}: the resulting balance is too large.',
            )

        movement = _append_movement(
            product=product,
            direction=direction,
            quantity=quantity,
            balance_after=balance_after,
            note=(note or '').strip(),
            entered_by=entered_by,
            idempotency_key=idempotency_key,
        )
        logger.info(
            'StockMovement %s %s qty=%s product=%s balance=%s by %s',
            direction, movement.pk, quantity, product.pk, balance_after, entered_by,
        )

        flagged = (
            direction == StockMovement.Direction.OUT
            and quantity > Decimal(settings.LARGE_DISPATCH_ADMIN_FLAG_THRESHOLD)
        )
        if flagged:
            logger.warning(
                '[ADMIN FLAG] Large dispatch: %s x %s by %s (movement %s)',
                format_quantity(quantity), product, entered_by, movement.pk,
            )
            AuditService.log(
                actor=entered_by,
                action=AUDIT_ACTION_ADMIN_FLAG,
                model_name='StockMovement',
                object_id=str(movement.pk),
                new_values={
                    'product_id': product.pk,
                    'direction': direction,
                    'quantity': quantity,
                    'balance_after': balance_after,
                    'threshold': settings.LARGE_DISPATCH_ADMIN_FLAG_THRESHOLD,
                },
            )

        return RecordedMovement(
            movement=movement,
            balance_after=balance_after,
            previous_balance=previous,
            flagged=flagged,
        )

    @staticmethod
    def movement_queryset():
        return StockMovement.objects.select_related(
            'product__category', 'product__color', 'product__unit', 'entered_by',
        ).order_by('-created_at')

    @staticmethod
    def product_history(product_id):
        """All movements of one product, newest first."""
        return StockService.movement_queryset().filter(product_id=product_id)

    @staticmethod
    def recent_movements(*, user=None, limit: int | None = None):
        """Latest movements overall, or only those entered by ``user``."""
        qs = StockService.movement_queryset()
        if user is not None:
            qs = qs.filter(entered_by=user)
        return qs[:limit or settings.RECENT_MOVEMENTS_LIMIT]


# ---------------------------------------------------------------------------
# Adjustment engine
# ---------------------------------------------------------------------------

class AdjustmentService:
    """Administrative corrections after a physical count."""

    @staticmethod
    @transaction.atomic
    def adjust_balance(*, product_id, new_balance, reason: str, adjusted_by) -> StockAdjustment:
        """
        Set a product's balance to ``new_balance`` (negative allowed).

        Always writes a StockAdjustment; when the balance actually changes
        a corrective movement carrying the difference is appended, so the
        derived balance equals ``new_balance`` afterwards. The returned
        adjustment has ``movement`` set to that movement or None.
        """
        reason = (reason or '').strip()
        if not reason:
            raise InvalidInputError(detail='A reason is required for stock adjustments.')
        new_balance = to_quantity(new_balance, positive=False)

        product = _lock_product(product_id)
        old_balance = BalanceService.balance_of(product.pk)
        _check_magnitude(
            new_balance - old_balance,
            f'Cannot adjust from {format_quantity(old_balance)} to {format_quantity(new_balance)}: '
            'the difference is too large.',
        )

        adjustment = StockAdjustment(
            product=product,
            old_balance=old_balance,
            new_balance=new_balance,
            reason=reason,
            adjusted_by=adjusted_by,
        )
        adjustment.save()

        diff = new_balance - old_balance
        movement = None
        if diff != 0:
            movement = _append_movement(
                product=product,
                direction=StockMovement.Direction.IN if diff > 0 else StockMovement.Direction.OUT,
                quantity=abs(diff),
                balance_after=new_balance,
                note=f'{ADJUSTMENT_NOTE_PREFIX}{reason}',
                entered_by=adjusted_by,
                idempotency_key=f'{ADJUSTMENT_KEY_PREFIX}{adjustment.pk}',
            )
        adjustment.movement = movement

        logger.info(
            'Stock adjusted: %s -> %s product=%s by %s (%s)',
            format_quantity(old_balance), format_quantity(new_balance),
            product.pk, adjusted_by, reason,
        )
        return adjustment

    @staticmethod
    def list_adjustments():
        return StockAdjustment.objects.select_related(
            'product__category', 'product__color', 'product__unit', 'adjusted_by',
        ).order_by('-created_at')


# ---------------------------------------------------------------------------
# Undo coordinator
# ---------------------------------------------------------------------------

class UndoService:
    """
    Reverses a movement by appending its opposite. Refusals are silent:
    the caller gets None and the reason goes to the log.
    """

    @staticmethod
    def _skip(movement_id, reason: str) -> None:
        logger.info('Undo of movement %s skipped: %s', movement_id, reason)

    @staticmethod
    @transaction.atomic
    def undo_movement(*, movement_id, requested_by) -> StockMovement | None:
        try:
            target = StockMovement.objects.get(pk=movement_id)
        except (StockMovement.DoesNotExist, ValidationError, ValueError):
            UndoService._skip(movement_id, 'movement not found')
            return None

        product = _lock_product(target.product_id)

        if target.entered_by_id != requested_by.pk and not requested_by.is_admin:
            UndoService._skip(movement_id, f'{requested_by} is neither the author nor an admin')
            return None
        if target.note.startswith(UNDO_NOTE_PREFIX):
            UndoService._skip(movement_id, 'movement is itself an undo')
            return None

        undo_note = f'{UNDO_NOTE_PREFIX}{target.pk}'
        if StockMovement.objects.filter(product=product, note__startswith=undo_note).exists():
            UndoService._skip(movement_id, 'already undone')
            return None

        balance = BalanceService.balance_of(product.pk)
        if target.direction == StockMovement.Direction.IN:
            direction = StockMovement.Direction.OUT
            if balance < target.quantity:
                UndoService._skip(
                    movement_id,
                    f'balance {format_quantity(balance)} is below {format_quantity(target.quantity)}',
                )
                return None
            balance_after = balance - target.quantity
        else:
            direction = StockMovement.Direction.IN
            balance_after = balance + target.quantity
            if abs(balance_after) >= MAX_MAGNITUDE:
                UndoService._skip(movement_id, 'resulting balance is too large')
                return None

        epoch_ms = int(timezone.now().timestamp() * 1000)
        movement = _append_movement(
            product=product,
            direction=direction,
            quantity=target.quantity,
            balance_after=balance_after,
            note=undo_note,
            entered_by=requested_by,
            idempotency_key=f'{UNDO_KEY_PREFIX}{target.pk}:{epoch_ms}',
        )
        logger.info(
            'Movement %s undone by %s (compensating movement %s)',
            target.pk, requested_by, movement.pk,
        )
        return movement
