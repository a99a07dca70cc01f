#!/usr/bin/env python3
"""
Simple script to run the FastAPI server programmatically
"""
import uvicorn

from salon_backend.fastapi.core.init_settings import global_settings

if __name__ == "__main__":
    uvicorn.run(
        "salon_backend.fastapi.main:app",
        host="0.0.0.0",
        port=8000,
        reload=global_settings.ENV_MODE == "dev",
        log_level=global_settings.LOG_LEVEL.lower()
    )
