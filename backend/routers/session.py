from fastapi import APIRouter, Depends, Response

import config
from auth import COOKIE_NAME, SessionContext, get_session, is_admin_email, revoke_session, sign_session
from errors import Forbidden
from logging_config import get_logger
from schemas import DevSignInRequest, SessionOut, TokenOut

logger = get_logger("marketplace", component="auth")

router = APIRouter()


@router.get("", response_model=SessionOut)
def current_session(session: SessionContext = Depends(get_session)):
    return SessionOut(user_id=session.user_id, email=session.email, is_admin=session.is_admin)


@router.post("/sign_out")
def sign_out(response: Response, session: SessionContext = Depends(get_session)):
    if session.token:
        revoke_session(session.token)
    response.delete_cookie(COOKIE_NAME)
    logger.info("signed_out", extra={"user_id": str(session.user_id)})
    return {"ok": True}


# ----------------------------
# TEST ONLY: issue a session without the identity provider
# ----------------------------
@router.post("/dev_sign_in", response_model=TokenOut)
def dev_sign_in(payload: DevSignInRequest, response: Response):
    if not config.ALLOW_TEST_ENDPOINTS:
        raise Forbidden("Test endpoints disabled")

    token = sign_session(payload.user_id, payload.email)
    response.set_cookie(COOKIE_NAME, token, httponly=True, samesite="lax")
    logger.info(
        "dev_signed_in",
        extra={"user_id": str(payload.user_id), "is_admin": is_admin_email(payload.email)},
    )
    return TokenOut(access_token=token)
