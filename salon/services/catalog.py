# salon/services/catalog.py
"""
Catalog of bookable items.

Turns active services and combos into BookableItem values:
- service → single component, best discount applied to its price
- combo   → duration = Σ component duration × quantity, combo price
"""

import logging
from datetime import date

from sqlalchemy.orm import Session, joinedload

from ..models.generated import (
    Combos as DBCombo,
    ComboServices as DBComboService,
    Discounts as DBDiscount,
    Services as DBService,
)
from .discount_resolver import (
    calculate_discounted_price,
    find_best_discount,
    is_discount_active,
)
from .slots.domain import ITEM_COMBO, ITEM_SERVICE, ITEM_TYPES, BookableItem

logger = logging.getLogger(__name__)


class ItemNotFound(LookupError):
    """No active service/combo with the requested id."""

    def __init__(self, item_type: str, item_id: int):
        self.item_type = item_type
        self.item_id = item_id
        super().__init__(f"Active {item_type} {item_id} not found")


class CatalogStore:
    """Read-only access to services, combos and discounts."""

    def __init__(self, db: Session, today: date | None = None):
        self.db = db
        self.today = today or date.today()

    # ── Public API ───────────────────────────────────────────────────────

    def get_active_bookable_item(self, item_id: int, item_type: str = ITEM_SERVICE) -> BookableItem:
        if item_type not in ITEM_TYPES:
            raise ValueError(f"item_type must be one of {ITEM_TYPES}, got {item_type!r}")

        if item_type == ITEM_SERVICE:
            service = (
                self.db.query(DBService)
                .filter(DBService.id == item_id, DBService.is_active == 1)
                .first()
            )
            if not service:
                raise ItemNotFound(item_type, item_id)
            return self._service_item(service, self._active_discounts([service.id]))

        combo = self._combo_query().filter(DBCombo.id == item_id).first()
        item = self._combo_item(combo) if combo and self._combo_is_live(combo) else None
        if item is None:
            raise ItemNotFound(item_type, item_id)
        return item

    def list_bookable_items(self, category_id: int | None = None) -> list[BookableItem]:
        """
        All bookable items sorted by name.

        With category_id: services of that category, plus combos having
        at least one component service in it.
        """
        services = (
            self.db.query(DBService)
            .filter(DBService.is_active == 1)
            .all()
        )
        discounts = self._active_discounts([s.id for s in services])

        items = [self._service_item(s, discounts) for s in services]
        category_by_service = {s.id: s.category_id for s in services}

        for combo in self._combo_query().all():
            if not self._combo_is_live(combo):
                continue
            item = self._combo_item(combo)
            if item is not None:
                items.append(item)

        if category_id is not None:
            items = [
                i for i in items
                if (i.type == ITEM_SERVICE and i.category_id == category_id)
                or (i.type == ITEM_COMBO and any(
                    category_by_service.get(sid) == category_id
                    for sid in i.component_service_ids
                ))
            ]

        return sorted(items, key=lambda i: i.name)

    # ── Builders ─────────────────────────────────────────────────────────

    def _service_item(self, service: DBService, discounts: list[DBDiscount]) -> BookableItem:
        own = [d for d in discounts if d.service_id == service.id]
        best = find_best_discount(own, service.price_cents)
        final_price = (
            calculate_discounted_price(service.price_cents, best)
            if best else service.price_cents
        )

        return BookableItem(
            id=service.id,
            name=service.name,
            type=ITEM_SERVICE,
            duration_minutes=service.duration_minutes,
            component_service_ids=(service.id,),
            original_price_cents=service.price_cents,
            final_price_cents=final_price,
            savings_cents=service.price_cents - final_price,
            applied_discount_id=best.id if best else None,
            category_id=service.category_id,
            description=service.description,
        )

    def _combo_item(self, combo: DBCombo) -> BookableItem | None:
        component_ids: list[int] = []
        duration = 0

        for cs in combo.combo_services:
            if cs.service is None:
                continue
            duration += cs.service.duration_minutes * (cs.quantity or 1)
            if cs.service_id not in component_ids:
                component_ids.append(cs.service_id)

        if not component_ids or duration <= 0:
            logger.warning(f"Combo {combo.id} has no bookable services, skipping")
            return None

        return BookableItem(
            id=combo.id,
            name=combo.name,
            type=ITEM_COMBO,
            duration_minutes=duration,
            component_service_ids=tuple(component_ids),
            original_price_cents=combo.original_price_cents,
            final_price_cents=combo.total_price_cents,
            savings_cents=combo.original_price_cents - combo.total_price_cents,
            description=combo.description,
        )

    # ── Queries ──────────────────────────────────────────────────────────

    def _combo_query(self):
        return (
            self.db.query(DBCombo)
            .options(joinedload(DBCombo.combo_services).joinedload(DBComboService.service))
            .filter(DBCombo.is_active == 1)
        )

    def _combo_is_live(self, combo: DBCombo) -> bool:
        today_str = self.today.isoformat()
        if combo.start_date and combo.start_date[:10] > today_str:
            return False
        if combo.end_date and combo.end_date[:10] < today_str:
            return False
        return True

    def _active_discounts(self, service_ids: list[int]) -> list[DBDiscount]:
        if not service_ids:
            return []
        discounts = (
            self.db.query(DBDiscount)
            .filter(DBDiscount.service_id.in_(service_ids))
            .order_by(DBDiscount.id)
            .all()
        )
        return [d for d in discounts if is_discount_active(d, self.today)]
