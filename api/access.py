"""GET /api/access - the caller's access tier and trial banner data."""

from fastapi import APIRouter, Request

from access.evaluator import evaluate_access, needs_renewal, trial_days_left
from access.service import AccountService
from api.base import success_response
from utils.timezone import now_utc


def create_access_router(account_service: AccountService) -> APIRouter:
    router = APIRouter()

    @router.get("/access")
    def get_access(request: Request):
        account = account_service.get(request.state.user_id)
        now = now_utc()
        trial_days = account_service.config.trial_days

        result = evaluate_access(account, now, trial_days)
        return success_response({
            **result.model_dump(mode="json"),
            "trial_days_left": trial_days_left(account, now, trial_days),
            "needs_renewal": needs_renewal(account, now, trial_days),
            "is_admin": account.is_admin,
        }).model_dump(mode="json")

    return router
