"""
Catalog — URL Configuration

@file catalog/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import CategoryViewSet, ColorViewSet, ProductViewSet, UnitViewSet

app_name = 'catalog'

router = DefaultRouter()
router.register('categories', CategoryViewSet, basename='category')
router.register('colors', ColorViewSet, basename='color')
router.register('units', UnitViewSet, basename='unit')
router.register('products', ProductViewSet, basename='product')

urlpatterns = [
    path('', include(router.urls)),
]
