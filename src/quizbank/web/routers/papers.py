from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from quizbank.core.modules.paper.models import Paper
from quizbank.web.deps import AccountIdDep, AppDep
from quizbank.web.openapi import ErrorResponse

router = APIRouter(tags=["papers"])


class PaperRequest(BaseModel):
    """Paper fields."""

    title: str = Field(..., min_length=1, description="Paper title")


@router.get(
    "/papers",
    summary="List papers",
    description="Get all papers owned by the authenticated account.",
    operation_id="listPapers",
    responses={
        200: {"description": "List of papers"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_papers(app: AppDep, account_id: AccountIdDep) -> list[Paper]:
    return await app.get_papers(account_id)


@router.post(
    "/papers",
    summary="Create paper",
    operation_id="createPaper",
    responses={
        200: {"description": "Paper created"},
        400: {"model": ErrorResponse, "description": "Empty title"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_paper(req: PaperRequest, app: AppDep, account_id: AccountIdDep) -> Paper:
    return await app.create_paper(account_id, req.title)


@router.patch(
    "/papers/{paper_id}",
    summary="Update paper",
    operation_id="updatePaper",
    responses={
        200: {"description": "Paper updated"},
        400: {"model": ErrorResponse, "description": "Empty title"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Paper not found"},
    },
)
async def update_paper(paper_id: UUID, req: PaperRequest, app: AppDep, account_id: AccountIdDep) -> Paper:
    return await app.update_paper(account_id, paper_id, req.title)


@router.delete(
    "/papers/{paper_id}",
    summary="Delete paper",
    description="Delete a paper and all of its questions. Returns the deleted paper.",
    operation_id="deletePaper",
    responses={
        200: {"description": "Paper deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Paper not found"},
    },
)
async def delete_paper(paper_id: UUID, app: AppDep, account_id: AccountIdDep) -> Paper:
    return await app.delete_paper(account_id, paper_id)
