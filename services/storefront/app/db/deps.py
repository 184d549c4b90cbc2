from __future__ import annotations

import os
from collections.abc import Generator

from fastapi import Depends, Request
from services.storefront.app.services.order_service import OrderService
from services.storefront.app.services.sql_stores import (
    SqlCartStore,
    SqlOrderStore,
    SqlProductCatalog,
    SqlUserDirectory,
)
from sqlalchemy.orm import Session


def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


def get_order_service(request: Request, db: Session = Depends(get_db)) -> OrderService:
    return OrderService(
        users=SqlUserDirectory(db),
        carts=SqlCartStore(db),
        orders=SqlOrderStore(db),
        catalog=SqlProductCatalog(db),
        notifier=request.app.state.notifier,
        shop_name=os.getenv("ELECTROHUB_SHOP_NAME", "ElectroHub"),
    )
