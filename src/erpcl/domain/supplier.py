"""Supplier price search and comparison service."""

from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Optional, Sequence
from urllib.parse import quote

from erpcl.api import fallbacks, mappers
from erpcl.api.base import Backend
from erpcl.api.loader import LoadResult, load
from erpcl.domain.entities import (
    ComparisonResult,
    PriceRange,
    Product,
    ProductCategory,
    SearchResult,
    Store,
    SupplierPriceStats,
)
from erpcl.domain.errors import ValidationError
from erpcl.utils.money import round_pesos

SEARCH_LIMIT = 50
COMPARE_LIMIT = 20


def price_range(products: Iterable[Product]) -> PriceRange:
    """Min, max and half-up rounded average price of ``products``."""
    prices = [p.price for p in products]
    if not prices:
        return PriceRange(min=None, max=None, average=None)
    return PriceRange(
        min=min(prices),
        max=max(prices),
        average=round_pesos(Decimal(sum(prices)) / len(prices)),
    )


def supplier_stats(products: Sequence[Product]) -> tuple[SupplierPriceStats, ...]:
    """Per-supplier price statistics, in order of first appearance."""
    grouped: dict[str, list[Product]] = {}
    for product in products:
        grouped.setdefault(product.supplier, []).append(product)
    stats = []
    for supplier, items in grouped.items():
        prices = price_range(items)
        stats.append(
            SupplierPriceStats(
                supplier=supplier,
                supplier_key=items[0].supplier_key,
                product_count=len(items),
                average_price=prices.average or 0,
                min_price=prices.min,
                max_price=prices.max,
            )
        )
    return tuple(stats)


def filter_products(
    products: Iterable[Product],
    min_price: Optional[int] = None,
    max_price: Optional[int] = None,
    available_only: bool = False,
) -> tuple[Product, ...]:
    """Client-side price range and availability filter."""
    return tuple(
        p
        for p in products
        if (min_price is None or p.price >= min_price)
        and (max_price is None or p.price <= max_price)
        and (not available_only or p.available)
    )


def with_price_range(result: ComparisonResult) -> ComparisonResult:
    """Fill in the price range from the products when the backend left it out."""
    if result.price_range.min is not None or not result.products:
        return result
    return replace(result, price_range=price_range(result.products))


def sample_comparison(product_name: str) -> ComparisonResult:
    needle = product_name.lower()
    products = tuple(p for p in fallbacks.PRODUCTS if needle in p.name.lower())
    return ComparisonResult(
        product_name=product_name,
        total_products=len(products),
        suppliers=supplier_stats(products),
        products=products,
        price_range=price_range(products),
    )


def _require_query(value: str, what: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{what} is required")
    return value


class SupplierIntegrationService:
    """Searches and compares products across external supplier stores."""

    def __init__(self, backend: Backend):
        """Initialize supplier integration service.

        Args:
            backend: Backend instance
        """
        self.backend = backend

    def search(
        self,
        query: str,
        category: Optional[str] = None,
        suppliers: Optional[Sequence[str]] = None,
        limit: int = SEARCH_LIMIT,
    ) -> LoadResult[SearchResult]:
        """Search products in the supplier stores.

        Raises:
            ValidationError: If the query is empty
        """
        query = _require_query(query, "Search term")
        return load(
            self.backend,
            "/supplier-integration/search",
            fallback=fallbacks.search_result(query),
            params={
                "q": query,
                "category": category or None,
                "suppliers": ",".join(suppliers) if suppliers else None,
                "limit": limit,
            },
            mapper=mappers.search_result_to_domain,
        )

    def compare(
        self, product_name: str, category: Optional[str] = None, limit: int = COMPARE_LIMIT
    ) -> LoadResult[ComparisonResult]:
        """Compare prices of one product across suppliers.

        Raises:
            ValidationError: If the product name is empty
        """
        product_name = _require_query(product_name, "Product name")
        return load(
            self.backend,
            f"/supplier-integration/compare/{quote(product_name, safe='')}",
            fallback=sample_comparison(product_name),
            params={"productName": product_name, "category": category or None, "limit": limit},
            mapper=lambda data: with_price_range(mappers.comparison_to_domain(data)),
        )

    def categories(self) -> LoadResult[tuple[ProductCategory, ...]]:
        return load(
            self.backend,
            "/supplier-integration/categories",
            fallback=fallbacks.PRODUCT_CATEGORIES,
            mapper=mappers.categories_to_domain,
        )

    def stores(self) -> LoadResult[tuple[Store, ...]]:
        return load(
            self.backend,
            "/supplier-integration/stores",
            fallback=fallbacks.STORES,
            mapper=mappers.stores_to_domain,
        )
