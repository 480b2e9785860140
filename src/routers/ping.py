from fastapi import APIRouter

from src.dependencies import DatabaseDep, SettingsDep

router = APIRouter(tags=["health"])


@router.get("/ping")
def ping(settings: SettingsDep, database: DatabaseDep):
    """Liveness plus database reachability."""
    database_ok = database.health_check()
    return {
        "status": "ok" if database_ok else "degraded",
        "version": settings.app_version,
        "database": "connected" if database_ok else "unreachable",
    }
