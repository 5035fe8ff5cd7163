"""
Server startup script.
Run from project root: python run.py

Binds to 0.0.0.0 on PORT (default 8080). ROLE=primary|secondary and REGION
select how this instance answers /api/health.
"""
import uvicorn

from tournament_api.core.settings import get_settings

if __name__ == "__main__":
    settings = get_settings()
    print(f"Starting {settings.role.value} server on port {settings.port} (region: {settings.region})")
    print(f"Frontend: http://localhost:{settings.port}")
    print(f"API: http://localhost:{settings.port}/api/health")
    uvicorn.run(
        "tournament_api.main:app",
        host="0.0.0.0",
        port=settings.port,
    )
