# carbon_api/config.py
"""
Runtime configuration for CarbonAPI.
Values come from the environment, optionally seeded from a .env file.
"""
import logging
import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_DB_PATH = os.path.join(BASE_DIR, "data", "carbon.db")


class Settings:
    def __init__(self):
        self.database_url = os.getenv("DATABASE_URL") or f"sqlite:///{DEFAULT_DB_PATH}"
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = int(os.getenv("PORT", "3000"))
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


settings = Settings()


def configure_logging(level=None):
    logging.basicConfig(
        level=getattr(logging, level or settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
