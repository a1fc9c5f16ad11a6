# salon/routers/catalog.py
# Read-only: services/combos/discounts are edited by the admin back-office

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.catalog import BookableItemRead
from ..services.catalog import CatalogStore, ItemNotFound

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/items", response_model=list[BookableItemRead])
def list_items(category_id: int | None = None, db: Session = Depends(get_db)):
    items = CatalogStore(db).list_bookable_items(category_id=category_id)
    return [BookableItemRead(**asdict(i)) for i in items]


@router.get("/items/{item_type}/{item_id}", response_model=BookableItemRead)
def get_item(item_type: str, item_id: int, db: Session = Depends(get_db)):
    try:
        item = CatalogStore(db).get_active_bookable_item(item_id, item_type)
    except ItemNotFound:
        raise HTTPException(status_code=404, detail="Not found")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return BookableItemRead(**asdict(item))
