"""Main application entry point."""

from whatsevent.config.environment import IS_PRODUCTION_ENVIRONMENT

if __name__ == "__main__":
    import uvicorn

    if not IS_PRODUCTION_ENVIRONMENT:
        # Reload needs an import string rather than the app instance
        uvicorn.run(
            "whatsevent.api.app:app",
            host="0.0.0.0",
            port=8000,
            reload=True,
            log_level="debug"
        )
    else:
        # Production mode - use string reference for proper multi-worker support
        uvicorn.run(
            "whatsevent.api.app:app",
            host="0.0.0.0",
            port=8000,
            reload=False,
            workers=4,
            log_level="info",
            proxy_headers=True,
            forwarded_allow_ips="*"
        )
