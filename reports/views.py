"""
Reports — Views

Read-only report endpoints. The dashboard and the negative-stock list
are open to every active user; the rest are admin only.

@file reports/views.py
"""

from rest_framework.response import Response
from rest_framework.views import APIView

from catalog.serializers import ProductReadSerializer
from core.exceptions import InvalidInputError
from stock.serializers import MovementReadSerializer
from users.permissions import IsActiveUser, IsAdmin

from .services import ReportService, reporting_today


def _int_param(request, name):
    raw = request.query_params.get(name)
    if raw in (None, ''):
        return None
    try:
        value = int(raw)
    except ValueError:
        raise InvalidInputError(detail=f'{name} must be a whole number.')
    if value <= 0:
        raise InvalidInputError(detail=f'{name} must be positive.')
    return value


class DashboardView(APIView):
    """GET /v1/reports/dashboard/ — home screen counters."""
    permission_classes = [IsActiveUser]

    def get(self, request):
        return Response({'success': True, 'data': ReportService.dashboard_stats()})


class DailyReportView(APIView):
    """GET /v1/reports/daily/?date=YYYY-MM-DD — defaults to today."""
    permission_classes = [IsActiveUser, IsAdmin]

    def get(self, request):
        date_str = request.query_params.get('date') or reporting_today().isoformat()
        summary = ReportService.daily_summary(date_str)
        return Response({
            'success': True,
            'data': {
                'date': summary['date'],
                'totals': summary['totals'],
                'movements': MovementReadSerializer(summary['movements'], many=True).data,
            },
        })


class LargeDispatchesView(APIView):
    """GET /v1/reports/large-dispatches/?threshold=&limit="""
    permission_classes = [IsActiveUser, IsAdmin]

    def get(self, request):
        movements = ReportService.large_dispatches(
            threshold=_int_param(request, 'threshold'),
            limit=_int_param(request, 'limit'),
        )
        return Response({
            'success': True,
            'data': MovementReadSerializer(movements, many=True).data,
        })


class NegativeMovementsView(APIView):
    """GET /v1/reports/negative-movements/?limit="""
    permission_classes = [IsActiveUser, IsAdmin]

    def get(self, request):
        movements = ReportService.negative_balance_movements(limit=_int_param(request, 'limit'))
        return Response({
            'success': True,
            'data': MovementReadSerializer(movements, many=True).data,
        })


class NegativeStockView(APIView):
    """GET /v1/reports/negative-stock/ — products currently below zero."""
    permission_classes = [IsActiveUser]

    def get(self, request):
        products = ReportService.negative_stock_products()
        return Response({
            'success': True,
            'data': ProductReadSerializer(products, many=True).data,
        })
