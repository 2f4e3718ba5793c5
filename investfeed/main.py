import logging

from fastapi import FastAPI

from investfeed.api.endpoints import admin, earnings, scorecard, sectors, stock
from investfeed.config import get_settings

logging.basicConfig(level=get_settings().log_level)

app = FastAPI(title="investfeed API", version="1.0.0")

app.include_router(stock.router)
app.include_router(earnings.router)
app.include_router(scorecard.router)
app.include_router(sectors.router)
app.include_router(admin.router)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "investfeed"}
