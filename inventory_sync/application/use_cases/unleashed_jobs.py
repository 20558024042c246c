"""
Jobs concretos Unleashed -> tienda: órdenes, productos y categorías.

Ninguno crea registros: los productos, categorías y órdenes nacen en la
tienda; el sync solo los enriquece.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Sequence

from sqlalchemy.orm import Session

from inventory_sync.application.services.reconciliation import NaturalKey
from inventory_sync.application.services.transforms import (
    UNCHANGED,
    FieldMapping,
    RecordHandle,
    title_with_url_segment,
    to_float,
)
from inventory_sync.application.use_cases.sync_job import ClearAbsent, SyncJob, SyncJobConfig
from inventory_sync.domain.status_translator import OrderStatusTranslator
from inventory_sync.infrastructure.database.models import (
    OrderModel,
    ProductCategoryModel,
    ProductModel,
)
from inventory_sync.infrastructure.external.notifications import Notifier
from inventory_sync.infrastructure.external.unleashed.fetcher import PaginatedFetcher
from inventory_sync.infrastructure.repositories.record_repository import LocalRecordRepository


def order_job_config(source_id: Optional[str] = None) -> SyncJobConfig:
    return SyncJobConfig(
        job_name="OrderUpdate",
        title="Unleashed: Update Orders",
        resource="SalesOrders",
        model=OrderModel,
        natural_key=NaturalKey(remote_field="OrderNumber", local_field="reference"),
        watermark_key="LastModifiedOn",
        source_id=source_id,
        local_unique_fields=("reference",),
        remote_unique_fields=("OrderNumber",),
        email_subject="API Unleashed Software - Update Order Results",
    )


def product_job_config() -> SyncJobConfig:
    return SyncJobConfig(
        job_name="ProductUpdate",
        title="Unleashed: Update Products",
        resource="Products",
        model=ProductModel,
        natural_key=NaturalKey(remote_field="ProductCode", local_field="internal_item_id"),
        field_mappings=(
            FieldMapping("ProductDescription", "title", transform=title_with_url_segment()),
            FieldMapping("DefaultSellPrice", "base_price", transform=to_float),
            FieldMapping("Guid", "guid"),
        ),
        watermark_key="LastModifiedOn",
        # El endpoint Products interpreta modifiedSince en UTC (los demás no)
        normalize_filter_timezone=True,
        local_unique_fields=("internal_item_id", "title"),
        remote_unique_fields=("ProductCode",),
        email_subject="API Unleashed Software - Update Product Results",
    )


def product_category_job_config() -> SyncJobConfig:
    return SyncJobConfig(
        job_name="ProductCategoryUpdate",
        title="Unleashed: Update Product Categories",
        resource="ProductGroups",
        model=ProductCategoryModel,
        natural_key=NaturalKey(
            remote_field="Guid",
            local_field="guid",
            fallback_remote_field="GroupName",
            fallback_local_field="title",
        ),
        field_mappings=(
            FieldMapping("GroupName", "title", transform=title_with_url_segment()),
            FieldMapping("Guid", "guid"),
        ),
        watermark_key=None,
        local_unique_fields=("title", "guid"),
        remote_unique_fields=("GroupName", "Guid"),
        clear_absent=ClearAbsent(remote_key_field="Guid", local_field="guid"),
        email_subject="API Unleashed Software - Update Product Categories Results",
    )


class OrderSyncJob(SyncJob):
    """Actualiza el estado de las órdenes con el de su Sales Order en Unleashed."""

    def __init__(
        self,
        *,
        session: Session,
        fetcher: PaginatedFetcher,
        translator: Optional[OrderStatusTranslator] = None,
        source_id: Optional[str] = None,
        config: Optional[SyncJobConfig] = None,
        **kwargs,
    ) -> None:
        super().__init__(config or order_job_config(source_id), session=session, fetcher=fetcher, **kwargs)
        self.translator = translator or OrderStatusTranslator()

    def build_field_mappings(self) -> Sequence[FieldMapping]:
        def translate_status(value: Any, handle: RecordHandle) -> str:
            return self.translator.translate(value)

        return (FieldMapping("OrderStatus", "status", transform=translate_status, required=True),)


class ProductSyncJob(SyncJob):
    """Actualiza título, precio base, guid y categoría de los productos existentes."""

    def __init__(
        self,
        *,
        session: Session,
        fetcher: PaginatedFetcher,
        config: Optional[SyncJobConfig] = None,
        **kwargs,
    ) -> None:
        super().__init__(config or product_job_config(), session=session, fetcher=fetcher, **kwargs)
        self._categories = LocalRecordRepository(session, ProductCategoryModel)

    def resolve_parent(self, value: Any, handle: RecordHandle) -> Any:
        """
        ProductGroup -> id de categoría: primero por Guid, luego por GroupName.
        Si no se encuentra, la categoría actual del producto no se toca.
        """
        if not isinstance(value, dict):
            return UNCHANGED
        category = self._categories.find_by("guid", value.get("Guid"))
        if category is None:
            category = self._categories.find_by("title", value.get("GroupName"))
        return category.id if category is not None else UNCHANGED

    def build_field_mappings(self) -> Sequence[FieldMapping]:
        return (
            *self.config.field_mappings,
            FieldMapping("ProductGroup", "parent_id", transform=self.resolve_parent),
        )


class ProductCategorySyncJob(SyncJob):
    """Actualiza título y guid de las categorías y desvincula guids ausentes."""

    def __init__(
        self,
        *,
        session: Session,
        fetcher: PaginatedFetcher,
        config: Optional[SyncJobConfig] = None,
        **kwargs,
    ) -> None:
        super().__init__(config or product_category_job_config(), session=session, fetcher=fetcher, **kwargs)


JOB_BUILDERS: Dict[str, Callable[..., SyncJob]] = {
    "orders": OrderSyncJob,
    "products": ProductSyncJob,
    "categories": ProductCategorySyncJob,
}

# Categorías primero: productos resuelven su categoría por guid
JOB_ORDER = ("categories", "products", "orders")


def build_job(
    name: str,
    *,
    session: Session,
    fetcher: PaginatedFetcher,
    notifier: Optional[Notifier] = None,
    settings=None,
) -> SyncJob:
    """
    Construye un job por nombre ('orders', 'products', 'categories').

    settings aporta la zona del watermark y el source_id de las órdenes.
    """
    try:
        builder = JOB_BUILDERS[name]
    except KeyError:
        raise ValueError(f"Job desconocido: {name}") from None

    kwargs: Dict[str, Any] = {"session": session, "fetcher": fetcher, "notifier": notifier}
    if settings is not None:
        kwargs["watermark_timezone"] = settings.WATERMARK_TIMEZONE
        if name == "orders":
            kwargs["source_id"] = settings.default_source_id
    return builder(**kwargs)
