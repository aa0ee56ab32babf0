"""
Authentication — Shopify App Bridge session token verification.

The embedded admin sends a short-lived HS256 JWT signed with the app
secret. The ``dest`` claim carries the shop URL; every route resolves
its store from that shop domain. Shopify Admin calls use the token of
the one installed shop, so sessions from any other shop are refused.
"""
import logging
from urllib.parse import urlsplit

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from fitment_hub.clients.shopify_client import ShopifyClient
from fitment_hub.container import get_shop_store
from fitment_hub.core.config import get_settings
from fitment_hub.core.exceptions import StoreNotFoundError
from fitment_hub.db.shop_store import ShopStore

logger = logging.getLogger(__name__)
security = HTTPBearer()


def shop_from_dest(dest: str | None) -> str | None:
    """Extract the bare shop domain from a ``dest`` claim URL."""
    if not dest:
        return None
    host = urlsplit(dest).netloc or dest
    return host.rstrip("/") or None


def verify_session_token(token: str) -> dict:
    """Decode and verify a session token, returning its claims."""
    settings = get_settings()
    if not settings.shopify_api_secret:
        raise JWTError("SHOPIFY_API_SECRET is not configured")
    return jwt.decode(
        token,
        settings.shopify_api_secret,
        algorithms=["HS256"],
        audience=settings.shopify_api_key,
    )


async def get_current_shop(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Validate the App Bridge session token and return shop context.

    Token validation includes signature, expiry and audience checks
    (performed by python-jose). The shop domain is taken from ``dest``.
    """
    token = credentials.credentials

    logger.debug("Validating session token")
    try:
        payload = verify_session_token(token)
    except JWTError as e:
        logger.warning(f"Authentication failed - JWT error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "code": "UNAUTHORIZED",
                "message": f"Invalid or expired session token: {str(e)}",
            },
        )

    shop = shop_from_dest(payload.get("dest"))
    if not shop:
        logger.warning("Authentication failed - missing dest claim")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "code": "UNAUTHORIZED",
                "message": "Invalid session token: missing shop",
            },
        )

    installed = ShopifyClient.normalize_store_domain(get_settings().shopify_store_domain)
    if installed and shop != installed:
        logger.warning(f"Authentication failed - shop {shop} is not the installed shop {installed}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "code": "SHOP_MISMATCH",
                "message": f"Session shop {shop} is not served by this backend",
            },
        )

    logger.debug(f"Authentication successful - shop: {shop}, user: {payload.get('sub')}")
    return {
        "shop": shop,
        "user_id": payload.get("sub"),
    }


async def get_current_store_id(
    current_shop: dict = Depends(get_current_shop),
    shop_store: ShopStore = Depends(get_shop_store),
) -> int:
    """Resolve the authenticated shop to its store id (404 if not installed)."""
    try:
        return await shop_store.get_store_id(current_shop["shop"])
    except StoreNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "STORE_NOT_FOUND", "message": str(e)},
        )
