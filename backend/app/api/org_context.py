import uuid

from fastapi import HTTPException, Request, status

from app.infra.logging import update_log_context
from app.settings import settings

ORG_HEADER = "X-Org-Id"


async def require_org_context(request: Request) -> uuid.UUID:
    """Resolve the tenant whose pricing settings a request operates on.

    The ``X-Org-Id`` header is trusted as sent and is not an authentication
    mechanism. Deployments must sit behind a gateway that authenticates the
    caller and sets or overwrites ``X-Org-Id`` before the request arrives here.
    """
    raw_org = request.headers.get(ORG_HEADER)
    if raw_org is not None and raw_org.strip():
        try:
            org_id = uuid.UUID(raw_org.strip())
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {ORG_HEADER} header"
            ) from None
    elif settings.allow_default_org:
        org_id = settings.default_org_id
    else:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    request.state.current_org_id = org_id
    update_log_context(org_id=str(org_id))
    return org_id
