"""
Catalog — Views

Lookup ViewSets (categories, colors, units) and the product ViewSet.
Product payloads always carry the live ledger balance.

@file catalog/views.py
"""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from stock.serializers import MovementReadSerializer
from stock.services import StockService
from users.permissions import IsActiveUser, IsAdminOrReadOnly

from .models import Category, Color, Product, Unit
from .serializers import (
    CategorySerializer,
    ColorSerializer,
    ProductCreateSerializer,
    ProductReadSerializer,
    ProductUpdateSerializer,
    UnitSerializer,
)
from .services import LookupService, ProductService


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

class LookupViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """List/retrieve for any active user; create for admins. No deletes."""

    permission_classes = [IsActiveUser, IsAdminOrReadOnly]
    search_fields = ['name']
    ordering = ['name']
    pagination_class = None

    def perform_create(self, serializer):
        serializer.instance = self.create_lookup(
            actor=self.request.user, **serializer.validated_data,
        )


class CategoryViewSet(LookupViewSet):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer

    def create_lookup(self, **kwargs):
        return LookupService.create_category(**kwargs)


class ColorViewSet(LookupViewSet):
    queryset = Color.objects.all()
    serializer_class = ColorSerializer

    def create_lookup(self, **kwargs):
        return LookupService.create_color(**kwargs)


class UnitViewSet(LookupViewSet):
    queryset = Unit.objects.all()
    serializer_class = UnitSerializer

    def create_lookup(self, **kwargs):
        return LookupService.create_unit(**kwargs)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

class ProductViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Product variants with their derived balances.

    Operators only see active products; admins see everything and may
    create or update. Products are never deleted.
    """

    permission_classes = [IsActiveUser, IsAdminOrReadOnly]
    serializer_class = ProductReadSerializer
    filterset_fields = ['category', 'color', 'unit', 'is_active']
    search_fields = ['category__name', 'color__name', 'size_label', 'unit__name', 'sku_code']
    ordering_fields = ['category__name', 'color__name', 'size_label', 'created_at']
    ordering = ['category__name', 'color__name', 'size_label']

    def get_queryset(self):
        qs = Product.objects.select_related('category', 'color', 'unit')
        if not self.request.user.is_admin:
            qs = qs.filter(is_active=True)
        return qs

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            products = ProductService.with_balances(page)
            return self.get_paginated_response(ProductReadSerializer(products, many=True).data)
        products = ProductService.with_balances(queryset)
        return Response(ProductReadSerializer(products, many=True).data)

    def retrieve(self, request, *args, **kwargs):
        [product] = ProductService.with_balances([self.get_object()])
        return Response(ProductReadSerializer(product).data)

    def create(self, request, *args, **kwargs):
        ser = ProductCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        product = ProductService.create_product(
            category_id=data['category'],
            color_id=data['color'],
            unit_id=data['unit'],
            size_label=data['size_label'],
            skip_duplicate_check=data['skip_duplicate_check'],
            actor=request.user,
        )
        [product] = ProductService.with_balances([product])
        return Response(ProductReadSerializer(product).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        ser = ProductUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        product = ProductService.update_product(
            product_id=self.get_object().pk,
            actor=request.user,
            **ser.validated_data,
        )
        [product] = ProductService.with_balances([product])
        return Response(ProductReadSerializer(product).data)

    @action(detail=False, methods=['get'], url_path='search')
    def search(self, request):
        products = ProductService.with_balances(
            ProductService.search_products(request.query_params.get('q', '')),
        )
        return Response(ProductReadSerializer(products, many=True).data)

    @action(detail=True, methods=['get'], url_path='history')
    def history(self, request, pk=None):
        product = self.get_object()
        movements = StockService.product_history(product.pk)
        page = self.paginate_queryset(movements)
        if page is not None:
            return self.get_paginated_response(MovementReadSerializer(page, many=True).data)
        return Response(MovementReadSerializer(movements, many=True).data)
