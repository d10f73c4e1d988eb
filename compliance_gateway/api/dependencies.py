"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from compliance_gateway.infrastructure.clients.xero import XeroClient
from compliance_gateway.infrastructure.clients.myob import MYOBClient

bearer_scheme = HTTPBearer(auto_error=False)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_access_token(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> str:
    """Platform access token passed through by the caller; token storage lives outside this service"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return credentials.credentials


def get_xero_client(access_token: str = Depends(get_access_token)) -> XeroClient:
    """Provide Xero API client instance"""
    return XeroClient(access_token)


def get_myob_client(access_token: str = Depends(get_access_token)) -> MYOBClient:
    """Provide MYOB API client instance"""
    return MYOBClient(access_token)
