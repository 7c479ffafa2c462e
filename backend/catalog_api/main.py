import logging

from fastapi import FastAPI

from .config import settings
from .redis_client import redis_client
from .routers import delivery_backoffice, delivery_client

logging.basicConfig(level=settings.log_level)

app = FastAPI(title="Catalog API")

app.include_router(delivery_backoffice.router)
app.include_router(delivery_client.router)


@app.get("/health")
def health():
    return {"redis": redis_client.ping() if redis_client is not None else None}
