"""Project endpoints: resolved views, lifecycle, settlement reports."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from poolcascade.api.dependencies import get_project_service, get_session
from poolcascade.api.serializers import created_to_dict, model_to_dict, view_to_dict
from poolcascade.core.projects import ProjectService
from poolcascade.schemas import (
    AssetsBalanceRequest,
    AutoCreateMeteoradbcProject,
    AutoCreatePumpfunAmmProject,
    ProjectActiveRequest,
    ProjectCreate,
    ProjectUpdate,
    VestingFixRequest,
    VestingReviewRequest,
    VestingUpdateRequest,
)

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


# ---------------------------------------------------------------------------
# Collections and reports (static paths before /{project_id})
# ---------------------------------------------------------------------------

@router.get("")
async def list_projects(
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    views = await service.list_projects()
    return {"data": [view_to_dict(v) for v in views]}


@router.get("/slice")
async def list_projects_slice(
    page: int = Query(1),
    page_size: int = Query(10),
    order_field: str = Query("id"),
    order_type: str = Query("desc"),
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    views, meta = await service.list_projects_page(page, page_size, order_field, order_type)
    return {"data": [view_to_dict(v) for v in views], "pagination": meta}


@router.get("/latest")
async def latest_project(
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    view = await service.latest_project()
    if view is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No projects")
    return view_to_dict(view)


@router.get("/latest/active")
async def latest_active_project(
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    """Newest active project among the last five; empty object when none."""
    view = await service.latest_active_project()
    return view_to_dict(view) if view is not None else {}


@router.get("/profit-ranking")
async def profit_ranking(
    page: int = Query(1),
    page_size: int = Query(10),
    order_type: str = Query("desc"),
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    items, meta = await service.profit_ranking(page, page_size, order_type)
    data = []
    for item in items:
        row = model_to_dict(item["project"])
        row["project_profit"] = item["project_profit"]
        row["token"] = model_to_dict(item["token"])
        data.append(row)
    return {"data": data, "pagination": meta}


@router.post("/vesting-review")
async def vesting_review(
    body: VestingReviewRequest,
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    if body.start_id > body.end_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_id must be <= end_id",
        )
    review = await service.vesting_review(
        body.start_id, body.end_id, only_success=body.only_success
    )
    review["data"] = [model_to_dict(p) for p in review.pop("projects")]
    return review


@router.get("/error-vesting")
async def error_vesting(
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    projects = await service.error_vestings()
    return {"data": [model_to_dict(p) for p in projects]}


@router.post("/error-vesting/fix")
async def fix_error_vesting(
    body: VestingFixRequest,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    result = await service.fix_error_vestings(body.data)
    await session.commit()
    return result


@router.post("/auto-create/meteoradbc", status_code=status.HTTP_201_CREATED)
async def auto_create_meteoradbc(
    body: AutoCreateMeteoradbcProject,
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    created = await service.auto_create_meteoradbc_project(body)
    return {"message": "Meteora DBC project created", "data": created_to_dict(created)}


@router.post("/auto-create/pumpfun-amm", status_code=status.HTTP_201_CREATED)
async def auto_create_pumpfun_amm(
    body: AutoCreatePumpfunAmmProject,
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    created = await service.auto_create_pumpfun_amm_project(body)
    return {"message": "Pumpfun AMM project created", "data": created_to_dict(created)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    view = await service.create_project(body)
    await session.commit()
    return view_to_dict(view)


# ---------------------------------------------------------------------------
# Single project
# ---------------------------------------------------------------------------

@router.get("/{project_id}")
async def get_project(
    project_id: int,
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    """Project with its effective pool (migration redirect applied)."""
    view = await service.resolve_project(project_id)
    return view_to_dict(view)


@router.patch("/{project_id}")
async def update_project(
    project_id: int,
    body: ProjectUpdate,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    view = await service.update_project(project_id, body.model_dump(exclude_unset=True))
    await session.commit()
    return view_to_dict(view)


@router.post("/{project_id}/active")
async def set_project_active(
    project_id: int,
    body: ProjectActiveRequest,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    view = await service.set_project_active(project_id, body.is_active)
    await session.commit()
    return view_to_dict(view)


@router.post("/{project_id}/persist-redirect")
async def persist_redirect(
    project_id: int,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    view = await service.persist_redirect(project_id)
    await session.commit()
    return view_to_dict(view)


@router.post("/{project_id}/toggle-lock")
async def toggle_lock(
    project_id: int,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    project = await service.toggle_lock(project_id)
    await session.commit()
    return {"id": project.id, "is_locked": project.is_locked}


@router.put("/{project_id}/assets-balance")
async def update_assets_balance(
    project_id: int,
    body: AssetsBalanceRequest,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    project = await service.update_assets_balance(project_id, body.assets_balance)
    await session.commit()
    return model_to_dict(project)


@router.put("/{project_id}/vesting")
async def update_vesting(
    project_id: int,
    body: VestingUpdateRequest,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    project = await service.update_vesting(project_id, body.vesting)
    await session.commit()
    return model_to_dict(project)


@router.delete("/{project_id}")
async def delete_project(
    project_id: int,
    session: AsyncSession = Depends(get_session),
    service: ProjectService = Depends(get_project_service),
) -> dict[str, Any]:
    await service.delete_project(project_id)
    await session.commit()
    return {"ok": True, "id": project_id}
