"""
Stock — URL Configuration

@file stock/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import AdjustmentViewSet, BalanceDetailView, BalanceListView, MovementViewSet

app_name = 'stock'

router = DefaultRouter()
router.register('movements', MovementViewSet, basename='movement')
router.register('adjustments', AdjustmentViewSet, basename='adjustment')

urlpatterns = [
    path('balances/', BalanceListView.as_view(), name='balance-list'),
    path('balances/<uuid:product_id>/', BalanceDetailView.as_view(), name='balance-detail'),
    path('', include(router.urls)),
]
