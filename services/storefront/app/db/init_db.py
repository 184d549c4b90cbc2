from __future__ import annotations

import os

from services.storefront.app.db.database import Database
from services.storefront.app.db.models import Base


def init_db(database: Database) -> None:
    if os.getenv("ELECTROHUB_DB_AUTO_CREATE", "true").strip().lower() not in {
        "1",
        "true",
        "yes",
        "y",
    }:
        return

    Base.metadata.create_all(bind=database.open())
