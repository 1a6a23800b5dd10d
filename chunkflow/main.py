# chunkflow/main.py
from fastapi import FastAPI
from chunkflow.api import uploads
from chunkflow.core.config import settings
from chunkflow.core.logging import setup_logging

setup_logging()

app = FastAPI(title=settings.APP_NAME)
app.include_router(uploads.router)

@app.get("/health")
def health():
    return {"status": "ok"}
