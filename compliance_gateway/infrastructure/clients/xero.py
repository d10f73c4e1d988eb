"""Xero API HTTP client for fetching BAS reports"""

from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx
from compliance_gateway.domain.exceptions import AccountingAPIError
from compliance_gateway.config import settings


class XeroClient:
    """Client for the Xero accounting API (access token supplied by the caller)"""

    source = "xero"

    def __init__(
        self,
        access_token: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.access_token = access_token
        self.base_url = base_url or settings.xero_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    @staticmethod
    def authorization_url(state: str) -> str:
        """URL the bookkeeper is redirected to in order to grant access to an organisation"""
        params = {
            "response_type": "code",
            "client_id": settings.xero_client_id,
            "redirect_uri": settings.xero_redirect_uri,
            "scope": settings.xero_scopes,
            "state": state,
        }
        return f"{settings.xero_authorize_url}?{urlencode(params)}"

    def _headers(self, tenant_id: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "xero-tenant-id": tenant_id,
            "Accept": "application/json",
        }

    async def get_bas_report(self, tenant_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the BAS/GST report for one Xero organisation.

        Returns the first report object, or None when the payload carries no
        reports (left to the normalizer to reject).

        Raises:
            AccountingAPIError: On timeout, HTTP errors, or a non-JSON response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/Reports/{settings.xero_bas_report_id}",
                    headers=self._headers(tenant_id),
                )
                response.raise_for_status()
                data = response.json()
            except httpx.TimeoutException as e:
                raise AccountingAPIError(self.source, f"Xero API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise AccountingAPIError(self.source, f"Xero API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise AccountingAPIError(self.source, f"Xero API unreachable: {e}") from e
            except ValueError as e:
                raise AccountingAPIError(self.source, f"Invalid report payload from Xero: {e}") from e

        reports = data.get("Reports") if isinstance(data, dict) else None
        if not isinstance(reports, list) or not reports:
            return None
        return reports[0]
