from fastapi import APIRouter, Depends
from loguru import logger

import ru_market.constants as c
from ru_market.auth import get_session_context, require_session
from ru_market.cache import EntityCache, get_entity_cache
from ru_market.errors import BackendError
from ru_market.schemas import NavLink, Notice, SessionState
from ru_market.service.identity import (
    IdentityError,
    IdentityService,
    get_identity
)
from ru_market.session import SessionContext


router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


def get_nav_links(context: SessionContext) -> list[NavLink]:
    links = [NavLink(title='Marketplace', href=c.ROUTE_MARKETPLACE)]
    if context.is_authenticated:
        links += [
            NavLink(title='Sell Product', href=c.ROUTE_ADD_PRODUCT),
            NavLink(title='Profile', href=c.ROUTE_PROFILE),
        ]
    else:
        links.append(NavLink(title='Sign In', href=c.ROUTE_AUTH))
    return links


@router.get('/session', response_model=SessionState)
async def get_session_state(
    context: SessionContext = Depends(get_session_context)
):
    """
    Состояние сессии для навигации.
    """
    session = context.session
    return SessionState(
        is_authenticated=context.is_authenticated,
        user_id=session.user_id if session else None,
        email=session.email if session else None,
        links=get_nav_links(context)
    )


@router.post('/sign-out', response_model=Notice)
async def sign_out(
    context: SessionContext = Depends(get_session_context),
    identity: IdentityService = Depends(get_identity),
    cache: EntityCache = Depends(get_entity_cache)
):
    session = require_session(context)

    def on_session_change(event, new_session):
        if event == c.SESSION_EVENT_SIGNED_OUT:
            cache.invalidate(c.CACHE_KIND_PROFILE, session.user_id)
            logger.info(f'User {session.user_id} signed out')

    subscription = context.subscribe(on_session_change)
    try:
        await identity.sign_out(session.access_token)
        context.set_session(None)
    except IdentityError as ex:
        logger.error(f'Sign out failed: {ex}')
        raise BackendError(c.MESSAGE_SIGN_OUT_FAILED)
    finally:
        subscription.unsubscribe()
    return Notice(message=c.MESSAGE_SIGNED_OUT, redirect_to=c.ROUTE_HOME)
