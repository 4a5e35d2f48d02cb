# carbon_api/database.py
import logging
import os
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base
from .config import settings

logger = logging.getLogger(__name__)

SQLALCHEMY_DATABASE_URL = settings.database_url

connect_args = {}
if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}
    db_file = make_url(SQLALCHEMY_DATABASE_URL).database
    if db_file and db_file != ":memory:":
        os.makedirs(os.path.dirname(os.path.abspath(db_file)), exist_ok=True)

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None, session_factory=None):
    """Create tables and seed the default emission factors.

    The service keeps running on the built-in factor table when the
    database cannot be reached.
    """
    from . import models, crud  # noqa: F401  (registers tables on Base)

    bind = bind or engine
    session_factory = session_factory or SessionLocal
    try:
        Base.metadata.create_all(bind=bind)
    except SQLAlchemyError as e:
        logger.warning(f"Database connection warning: {e} (using built-in factor table)")
        return False

    db = session_factory()
    try:
        inserted = crud.seed_emission_factors(db)
        if inserted:
            logger.info(f"Inserted {inserted} sample emission factors")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to insert sample data: {e}")
    finally:
        db.close()
    return True
