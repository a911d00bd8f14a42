import re
from typing import Type

from fastapi import Depends, Header, HTTPException, Request, status

from rentmzansi.core.rate_limiting import CLIENT_ID_HEADER
from rentmzansi.core.storage import LocalStore
from rentmzansi.services.base import StoreService

_CLIENT_ID = re.compile(r"^[A-Za-z0-9_.\-]{1,64}$")


def get_root_store(request: Request) -> LocalStore:
    """Store built at startup (see main.lifespan)"""
    store = getattr(request.app.state, "storage", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage is not initialized"
        )
    return store


def get_store(
        root: LocalStore = Depends(get_root_store),
        client_id: str = Header("default", alias=CLIENT_ID_HEADER)
) -> LocalStore:
    """
    Namespace the store by client profile

    Each client id gets its own set of keys, the way each browser profile
    has its own local storage.
    """
    if not _CLIENT_ID.match(client_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {CLIENT_ID_HEADER} header"
        )
    return root.for_namespace(client_id)


class ServiceProvider:
    """Dependency class that builds a service bound to the caller's store"""

    def __init__(self, service_cls: Type[StoreService]):
        self.service_cls = service_cls

    def __call__(self, store: LocalStore = Depends(get_store)) -> StoreService:
        return self.service_cls(store)
