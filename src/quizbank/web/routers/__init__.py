from quizbank.web.routers.accounts import router as accounts_router
from quizbank.web.routers.papers import router as papers_router
from quizbank.web.routers.questions import router as questions_router

__all__ = [
    "accounts_router",
    "papers_router",
    "questions_router",
]
