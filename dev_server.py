#!/usr/bin/env python3
"""
Development server startup script.
"""
import uvicorn

from shared.config.settings import settings

print(f"Starting environment settings for: {settings.environment}")

def main():
    """Development server entry point."""
    uvicorn.run(
        "invoice_tracker_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level="info"
    )

if __name__ == "__main__":
    main()
