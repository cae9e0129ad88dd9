"""
Stock — Views

Ledger endpoints: record and list movements, undo, live balances and
admin balance adjustments.

@file stock/views.py
"""

import uuid

from django.conf import settings
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from catalog.models import Product
from core.exceptions import InvalidInputError, ResourceNotFoundError
from core.pagination import LedgerCursorPagination
from users.permissions import IsActiveUser, IsAdmin

from .serializers import (
    AdjustmentCreateSerializer,
    AdjustmentReadSerializer,
    MovementCreateSerializer,
    MovementReadSerializer,
)
from .services import (
    AdjustmentService,
    BalanceService,
    StockService,
    UndoService,
    format_quantity,
    stock_status,
)


class MovementViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    The movement log. Any active user may record stock in/out and undo
    their own entries; admins may undo anyone's.
    """

    permission_classes = [IsActiveUser]
    serializer_class = MovementReadSerializer
    pagination_class = LedgerCursorPagination
    filterset_fields = ['product', 'direction', 'entered_by']
    search_fields = ['note', 'product__sku_code']

    def get_queryset(self):
        qs = StockService.movement_queryset()
        if self.request.query_params.get('mine') in ('1', 'true'):
            qs = qs.filter(entered_by=self.request.user)
        return qs

    def create(self, request, *args, **kwargs):
        ser = MovementCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        result = StockService.record_movement(
            product_id=data['product'],
            direction=data['direction'],
            quantity=data['quantity'],
            idempotency_key=data['idempotency_key'],
            note=data['note'],
            entered_by=request.user,
        )
        return Response({
            'success': True,
            'data': {
                **MovementReadSerializer(result.movement).data,
                'previous_balance': result.previous_balance,
                'flagged': result.flagged,
            },
        }, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='undo')
    def undo(self, request, pk=None):
        # Refused undos answer 204 too.
        UndoService.undo_movement(movement_id=pk, requested_by=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'], url_path='recent')
    def recent(self, request):
        user = request.user if request.query_params.get('mine') in ('1', 'true') else None
        movements = StockService.recent_movements(user=user)
        return Response({
            'success': True,
            'data': MovementReadSerializer(movements, many=True).data,
        })


class BalanceListView(APIView):
    """GET /v1/stock/balances/?product=<id>&product=<id> — live balances."""
    permission_classes = [IsActiveUser]

    def get(self, request):
        raw_ids = request.query_params.getlist('product')
        try:
            product_ids = [uuid.UUID(value) for value in raw_ids] or None
        except ValueError:
            raise InvalidInputError(detail='product must be a list of product ids.')

        balances = BalanceService.balance_map_of(product_ids)
        return Response({
            'success': True,
            'data': [
                {
                    'product': product_id,
                    'balance': balance,
                    'status': stock_status(balance),
                }
                for product_id, balance in balances.items()
            ],
            'meta': {
                'large_dispatch_warning_threshold': settings.LARGE_DISPATCH_WARNING_THRESHOLD,
            },
        })


class BalanceDetailView(APIView):
    """GET /v1/stock/balances/{product_id}/ — one product's live balance."""
    permission_classes = [IsActiveUser]

    def get(self, request, product_id):
        if not Product.objects.filter(pk=product_id).exists():
            raise ResourceNotFoundError(detail='Product not found.')
        balance = BalanceService.balance_of(product_id)
        return Response({
            'success': True,
            'data': {
                'product': product_id,
                'balance': balance,
                'status': stock_status(balance),
            },
        })


class AdjustmentViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """Admin balance corrections after a physical count."""

    permission_classes = [IsActiveUser, IsAdmin]
    serializer_class = AdjustmentReadSerializer
    filterset_fields = ['product', 'adjusted_by']
    ordering = ['-created_at']

    def get_queryset(self):
        return AdjustmentService.list_adjustments()

    def create(self, request, *args, **kwargs):
        ser = AdjustmentCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        adjustment = AdjustmentService.adjust_balance(
            product_id=data['product'],
            new_balance=data['new_balance'],
            reason=data['reason'],
            adjusted_by=request.user,
        )
        movement = adjustment.movement
        return Response({
            'success': True,
            'data': {
                **AdjustmentReadSerializer(adjustment).data,
                'movement': MovementReadSerializer(movement).data if movement else None,
                'message': (
                    f'Stock adjusted: {format_quantity(adjustment.old_balance)} '
                    f'→ {format_quantity(adjustment.new_balance)}'
                ),
            },
        }, status=status.HTTP_201_CREATED)
