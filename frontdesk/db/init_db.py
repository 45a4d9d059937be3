# frontdesk/db/init_db.py
from __future__ import annotations

import argparse
import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.db.base import Base
from frontdesk.db.session import engine as default_engine, SessionLocal

# Import all models so metadata is complete
from frontdesk import models  # noqa: F401
from frontdesk.models import Doctor, IpdBed

logger = logging.getLogger(__name__)


def create_tables(bind: Optional[Engine] = None) -> None:
    Base.metadata.create_all(bind=bind or default_engine)


def seed_masters(db: Session) -> None:
    """
    Seed a consulting doctor and a couple of beds when the tables are empty.
    Safe to run multiple times.
    """
    if not db.query(Doctor).first():
        db.add(Doctor(name="Duty Doctor", specialization="General Medicine"))
    if not db.query(IpdBed).first():
        db.add_all([
            IpdBed(bed_number="GW-01", room_number="101", bed_type="general"),
            IpdBed(bed_number="GW-02", room_number="101", bed_type="general"),
        ])
    db.commit()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create front-desk tables")
    parser.add_argument("--seed",
                        action="store_true",
                        help="also seed a doctor and beds")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    try:
        create_tables()
        logger.info("Tables created")
        if args.seed:
            db = SessionLocal()
            try:
                seed_masters(db)
                logger.info("Masters seeded")
            finally:
                db.close()
    except SQLAlchemyError:
        logger.exception("init_db failed")
        raise


if __name__ == "__main__":
    main()
