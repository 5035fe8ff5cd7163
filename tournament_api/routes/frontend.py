"""Static frontend: serve a file from static/ when it exists, else index.html."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from tournament_api.core.settings import Settings
from tournament_api.deps import get_settings_dep

router = APIRouter(include_in_schema=False)


@router.get("/{full_path:path}")
def frontend(full_path: str, settings: Annotated[Settings, Depends(get_settings_dep)]):
    if full_path == "api" or full_path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Not found")
    static_dir = settings.static_dir.resolve()
    if full_path:
        candidate = (static_dir / full_path).resolve()
        if candidate.is_file() and static_dir in candidate.parents:
            return FileResponse(candidate)
    index = static_dir / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=404, detail="Frontend not built")
    return FileResponse(index)
