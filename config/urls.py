"""
WareTrack — Root URL Configuration

All API endpoints are namespaced under /api/v1/.
The DRF browsable API is available for route inspection in development.

@file config/urls.py
"""

from django.contrib import admin
from django.urls import include, path
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.reverse import reverse

admin.site.site_header = 'WareTrack Administration'
admin.site.site_title = 'WareTrack'
admin.site.index_title = 'Warehouse Inventory Ledger'


@api_view(['GET'])
@permission_classes([AllowAny])
def api_root(request, format=None):
    """WareTrack API v1 — endpoint directory."""
    return Response({
        'auth': {
            'login': reverse('api-v1:auth:login', request=request, format=format),
            'refresh': reverse('api-v1:auth:token-refresh', request=request, format=format),
            'me': reverse('api-v1:auth:me', request=request, format=format),
        },
        'users': reverse('api-v1:users:user-list', request=request, format=format),
        'catalog': {
            'categories': reverse('api-v1:catalog:category-list', request=request, format=format),
            'colors': reverse('api-v1:catalog:color-list', request=request, format=format),
            'units': reverse('api-v1:catalog:unit-list', request=request, format=format),
            'products': reverse('api-v1:catalog:product-list', request=request, format=format),
        },
        'stock': {
            'movements': reverse('api-v1:stock:movement-list', request=request, format=format),
            'balances': reverse('api-v1:stock:balance-list', request=request, format=format),
            'adjustments': reverse('api-v1:stock:adjustment-list', request=request, format=format),
        },
        'reports': {
            'dashboard': reverse('api-v1:reports:dashboard', request=request, format=format),
            'daily': reverse('api-v1:reports:daily', request=request, format=format),
            'large_dispatches': reverse('api-v1:reports:large-dispatches', request=request, format=format),
            'negative_movements': reverse('api-v1:reports:negative-movements', request=request, format=format),
            'negative_stock': reverse('api-v1:reports:negative-stock', request=request, format=format),
        },
    })


api_v1_patterns = [
    path('', api_root, name='api-root'),
    path('auth/', include('users.urls', namespace='auth')),
    path('users/', include('users.urls_users', namespace='users')),
    path('catalog/', include('catalog.urls', namespace='catalog')),
    path('stock/', include('stock.urls', namespace='stock')),
    path('reports/', include('reports.urls', namespace='reports')),
]

urlpatterns = [
    path('admin/', admin.site.urls),

    # DRF session auth (powers the "Log in" button on the browsable API)
    path('api/auth/', include('rest_framework.urls', namespace='rest_framework')),

    # Versioned API
    path('api/v1/', include((api_v1_patterns, 'api-v1'))),
]
