# file: main.py

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import LOG_LEVEL
from app.controllers.notification import router as notification_router
from app.services.firebase_app import initialize_firebase

logging.basicConfig(level=LOG_LEVEL)

app = FastAPI(title="Chat Notifications API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(notification_router, prefix="/api/notifications", tags=["notifications"])


@app.get("/")
async def root():
    return {"message": "Chat Notifications API is running"}


@app.on_event("startup")
async def startup_event():
    if os.getenv("TESTING") != "True":
        initialize_firebase()
