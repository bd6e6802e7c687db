"""Stencil management endpoints (internal)."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from formflow.core.deps import get_db, get_hooks, verify_internal_secret
from formflow.core.hooks import HookRegistry
from formflow.schemas.stencils import StencilDraft, StencilOption, StencilRead, StencilWrite
from formflow.services.project_config import ProjectConfigStore
from formflow.services.stencil_service import StencilService

router = APIRouter(
    prefix="/stencils",
    tags=["stencils"],
    dependencies=[Depends(verify_internal_secret)],
)


def get_stencil_service(
    db: Session = Depends(get_db),
    hook_registry: HookRegistry = Depends(get_hooks),
) -> StencilService:
    service = StencilService(db, ProjectConfigStore(db), hook_registry)
    service.register_config_handlers()
    return service


def _build_draft(data: StencilWrite, stencil_id: UUID | None = None) -> StencilDraft:
    try:
        return StencilDraft(id=stencil_id, **data.model_dump())
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc


def _save(service: StencilService, draft: StencilDraft) -> StencilRead:
    if not service.save_stencil(draft):
        raise HTTPException(status_code=422, detail={"errors": draft.errors})
    stencil = service.get_stencil_by_id(draft.id) if draft.id else None
    if not stencil:
        raise HTTPException(status_code=500, detail="Stencil was not applied")
    return StencilRead.model_validate(stencil)


@router.get("", response_model=list[StencilRead])
def list_stencils(service: StencilService = Depends(get_stencil_service)):
    return service.get_all_stencils()


@router.get("/options", response_model=list[StencilOption])
def list_stencil_options(service: StencilService = Depends(get_stencil_service)):
    return service.get_stencil_options()


@router.post("", response_model=StencilRead, status_code=201)
def create_stencil(data: StencilWrite, service: StencilService = Depends(get_stencil_service)):
    return _save(service, _build_draft(data))


@router.put("/{stencil_id}", response_model=StencilRead)
def update_stencil(
    stencil_id: UUID,
    data: StencilWrite,
    service: StencilService = Depends(get_stencil_service),
):
    if not service.get_stencil_by_id(stencil_id):
        raise HTTPException(status_code=404, detail="Stencil not found")
    return _save(service, _build_draft(data, stencil_id))


@router.delete("/{stencil_id}", status_code=204)
def delete_stencil(stencil_id: UUID, service: StencilService = Depends(get_stencil_service)):
    if not service.delete_stencil_by_id(stencil_id):
        raise HTTPException(status_code=404, detail="Stencil not found")
