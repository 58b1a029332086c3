"""Auth router: login, registration and logout relayed to the backend."""
import logging

from fastapi import APIRouter, Depends, Request, status

from ironease.api.dependencies import get_anonymous_client, get_api_client, limiter, mutation_limit
from ironease.api.schemas.auth import LoginRequest, RegistrationRequest, user_out
from ironease.clients.http import ApiClient
from ironease.services.auth_service import AuthService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _signed_in(svc: AuthService, user) -> dict:
    return {"token": svc.session.token, "user": user_out(user)}


@router.post("/login")
@limiter.limit(mutation_limit)
async def login(
    request: Request,
    body: LoginRequest,
    client: ApiClient = Depends(get_anonymous_client),
):
    svc = AuthService(client)
    user = await svc.login(body.email, body.password)
    return _signed_in(svc, user)


@router.post("/register/customer", status_code=status.HTTP_201_CREATED)
@limiter.limit(mutation_limit)
async def register_customer(
    request: Request,
    body: RegistrationRequest,
    client: ApiClient = Depends(get_anonymous_client),
):
    svc = AuthService(client)
    user = await svc.register_customer(body.to_payload())
    return _signed_in(svc, user)


@router.post("/register/shop", status_code=status.HTTP_201_CREATED)
@limiter.limit(mutation_limit)
async def register_shop(
    request: Request,
    body: RegistrationRequest,
    client: ApiClient = Depends(get_anonymous_client),
):
    svc = AuthService(client)
    user = await svc.register_shop(body.to_payload())
    return _signed_in(svc, user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(client: ApiClient = Depends(get_api_client)):
    await AuthService(client).logout()
    logger.info("Auth API: session closed")
