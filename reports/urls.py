"""
Reports — URL Configuration

@file reports/urls.py
"""

from django.urls import path

from .views import (
    DailyReportView,
    DashboardView,
    LargeDispatchesView,
    NegativeMovementsView,
    NegativeStockView,
)

app_name = 'reports'

urlpatterns = [
    path('dashboard/', DashboardView.as_view(), name='dashboard'),
    path('daily/', DailyReportView.as_view(), name='daily'),
    path('large-dispatches/', LargeDispatchesView.as_view(), name='large-dispatches'),
    path('negative-movements/', NegativeMovementsView.as_view(), name='negative-movements'),
    path('negative-stock/', NegativeStockView.as_view(), name='negative-stock'),
]
