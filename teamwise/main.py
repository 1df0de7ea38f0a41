import logging

from fastapi import FastAPI

from teamwise.api.routes import cycles, shifts
from teamwise.core.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Teamwise API", version="0.1.0")

app.include_router(cycles.router, prefix="/api/v1")
app.include_router(shifts.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    return {"status": "ok"}
