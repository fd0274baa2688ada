"""Question endpoints, nested under the owning paper."""

from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from quizbank.core.modules.question.models import Question
from quizbank.web.deps import AccountIdDep, AppDep
from quizbank.web.openapi import ErrorResponse

router = APIRouter(tags=["questions"])

_NOT_FOUND = {"model": ErrorResponse, "description": "Paper or question not found"}
_UNAUTHORIZED = {"model": ErrorResponse, "description": "Not authenticated"}


class CreateQuestionRequest(BaseModel):
    """Request to create a new question."""

    title: str = Field(..., min_length=1, description="Question text")


class UpdateQuestionRequest(BaseModel):
    """Partial question update, omitted fields stay unchanged."""

    title: str | None = Field(None, min_length=1, description="Question text")
    completed: bool | None = Field(None, description="Completion flag")


@router.get(
    "/papers/{paper_id}/questions",
    summary="List questions",
    operation_id="listQuestions",
    responses={200: {"description": "Questions of the paper"}, 401: _UNAUTHORIZED, 404: _NOT_FOUND},
)
async def list_questions(paper_id: UUID, app: AppDep, account_id: AccountIdDep) -> list[Question]:
    return await app.get_questions(account_id, paper_id)


@router.get(
    "/papers/{paper_id}/questions/{question_id}",
    summary="Get question",
    operation_id="getQuestion",
    responses={200: {"description": "Question"}, 401: _UNAUTHORIZED, 404: _NOT_FOUND},
)
async def get_question(paper_id: UUID, question_id: UUID, app: AppDep, account_id: AccountIdDep) -> Question:
    return await app.get_question(account_id, paper_id, question_id)


@router.post(
    "/papers/{paper_id}/questions",
    summary="Create question",
    operation_id="createQuestion",
    responses={200: {"description": "Question created"}, 401: _UNAUTHORIZED, 404: _NOT_FOUND},
)
async def create_question(
    paper_id: UUID, req: CreateQuestionRequest, app: AppDep, account_id: AccountIdDep
) -> Question:
    return await app.create_question(account_id, paper_id, req.title)


@router.patch(
    "/papers/{paper_id}/questions/{question_id}",
    summary="Update question",
    operation_id="updateQuestion",
    responses={
        200: {"description": "Question updated"},
        400: {"model": ErrorResponse, "description": "Nothing to update"},
        401: _UNAUTHORIZED,
        404: _NOT_FOUND,
    },
)
async def update_question(
    paper_id: UUID, question_id: UUID, req: UpdateQuestionRequest, app: AppDep, account_id: AccountIdDep
) -> Question:
    return await app.update_question(account_id, paper_id, question_id, req.title, req.completed)


@router.delete(
    "/papers/{paper_id}/questions/{question_id}",
    summary="Delete question",
    description="Delete a question. Returns the deleted question.",
    operation_id="deleteQuestion",
    responses={200: {"description": "Question deleted"}, 401: _UNAUTHORIZED, 404: _NOT_FOUND},
)
async def delete_question(paper_id: UUID, question_id: UUID, app: AppDep, account_id: AccountIdDep) -> Question:
    return await app.delete_question(account_id, paper_id, question_id)
