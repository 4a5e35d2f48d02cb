# carbon_api/__main__.py
import uvicorn
from .config import settings

if __name__ == "__main__":
    uvicorn.run("carbon_api.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
