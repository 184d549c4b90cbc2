"""ElectroHub storefront API entrypoint."""

import os

from fastapi import FastAPI

from services.storefront.app.db.database import Database
from services.storefront.app.db.init_db import init_db
from services.storefront.app.routers.order import router as order_router
from services.storefront.app.routers.product import router as product_router
from services.storefront.app.services.notifier_factory import get_notifier
from services.storefront.app.utils.logging import configure_logging

app = FastAPI(title="ElectroHub API")

app.include_router(order_router)
app.include_router(product_router)


@app.on_event("startup")
def _startup() -> None:
    configure_logging()

    database = Database.from_env()
    database.open()
    init_db(database)

    app.state.database = database
    app.state.notifier = get_notifier()


@app.on_event("shutdown")
def _shutdown() -> None:
    app.state.database.close()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", 8000)))
