# pageimages/main.py
# Responsibility: Application entry point. Configures and launches the FastAPI app.

import uvicorn
from fastapi import FastAPI

from pageimages.config.settings import settings
from pageimages.routers import admin, pageimages


def create_app() -> FastAPI:
    """
    Factory function to create and configure the FastAPI application.
    """
    app = FastAPI(
        title="PageImages",
        description="Representative image selection and lookup for wiki pages.",
        version="1.0.0",
        debug=settings.SERVER.DEBUG
    )

    # Register Routers
    app.include_router(pageimages.router)
    app.include_router(admin.router)

    # Health Check
    @app.get("/health", tags=["System"])
    def health_check():
        return {"status": "ok", "version": "1.0.0"}

    return app

# Application instance
app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "pageimages.main:app",
        host=settings.SERVER.HOST,
        port=settings.SERVER.PORT,
        reload=settings.SERVER.DEBUG
    )
