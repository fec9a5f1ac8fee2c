"""
Product catalog service.

Products hold the default description, price and tax rate offered on
document forms.
"""

import logging
from uuid import UUID, uuid4

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction, compute_changes
from core.models import Product, ProductCreate, ProductUpdate
from utils.user_context import get_current_user_id
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

_UPDATABLE_COLUMNS = {"name", "description", "unit_price", "tax_rate_percent"}


class ProductService:
    """Service for product catalog operations."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def create(self, data: ProductCreate) -> Product:
        user_id = get_current_user_id()
        now = now_utc()

        row = self.postgres.execute_returning(
            """
            INSERT INTO products (
                id, user_id, name, description,
                unit_price, tax_rate_percent,
                is_deleted, created_at, updated_at
            ) VALUES (
                %s, %s, %s, %s,
                %s, %s,
                FALSE, %s, %s
            )
            RETURNING *
            """,
            (
                uuid4(), user_id, data.name, data.description,
                data.unit_price, data.tax_rate_percent,
                now, now
            )
        )[0]

        product = Product.model_validate(row)

        self.audit.log_change(
            entity_type="product",
            entity_id=product.id,
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json", exclude_none=True)}
        )
        logger.info("Created product %s (%s)", product.name, product.id)

        return product

    def get_by_id(self, product_id: UUID) -> Product | None:
        row = self.postgres.execute_single(
            "SELECT * FROM products WHERE id = %s AND is_deleted = FALSE",
            (product_id,)
        )

        if row is None:
            return None

        return Product.model_validate(row)

    def list_all(self, limit: int = 100) -> list[Product]:
        """Live products ordered by name."""
        rows = self.postgres.execute(
            """
            SELECT * FROM products
            WHERE is_deleted = FALSE
            ORDER BY name ASC
            LIMIT %s
            """,
            (limit,)
        )

        return [Product.model_validate(row) for row in rows]

    def update(self, product_id: UUID, data: ProductUpdate) -> Product:
        """
        Update product fields.

        Raises:
            ValueError: If product not found
        """
        current = self.get_by_id(product_id)
        if current is None:
            raise ValueError(f"Product {product_id} not found")

        updates = {
            k: v for k, v in data.model_dump(exclude_none=True).items()
            if k in _UPDATABLE_COLUMNS
        }
        if not updates:
            return current

        set_parts = [f"{field} = %s" for field in updates]
        params = list(updates.values())

        set_parts.append("updated_at = %s")
        params.append(now_utc())
        params.append(product_id)

        row = self.postgres.execute_returning(
            f"""
            UPDATE products
            SET {', '.join(set_parts)}
            WHERE id = %s
            RETURNING *
            """,
            tuple(params)
        )[0]

        updated = Product.model_validate(row)

        changes = compute_changes(
            current.model_dump(mode="json"),
            updated.model_dump(mode="json")
        )
        if changes:
            self.audit.log_change(
                entity_type="product",
                entity_id=product_id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        return updated
