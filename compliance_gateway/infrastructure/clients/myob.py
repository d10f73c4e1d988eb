"""MYOB AccountRight API HTTP client for fetching raw sales, purchase and payroll records"""

import asyncio
from datetime import date
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import httpx
from compliance_gateway.domain.exceptions import AccountingAPIError
from compliance_gateway.config import settings


class MYOBClient:
    """
    Client for the MYOB AccountRight API.

    MYOB has no BAS report endpoint, so the raw transaction lists are fetched
    and aggregated by the MYOB normalizer.
    """

    source = "myob"

    def __init__(
        self,
        access_token: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.access_token = access_token
        self.base_url = base_url or settings.myob_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    @staticmethod
    def authorization_url(state: str) -> str:
        """URL the bookkeeper is redirected to in order to grant access to a company file"""
        params = {
            "client_id": settings.myob_client_id,
            "redirect_uri": settings.myob_redirect_uri,
            "response_type": "code",
            "scope": settings.myob_scopes,
            "state": state,
        }
        return f"{settings.myob_authorize_url}?{urlencode(params)}"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "x-myobapi-key": settings.myob_client_id,
            "x-myobapi-version": "v2",
            "Accept": "application/json",
        }

    @staticmethod
    def _date_filter(from_date: date | None, to_date: date | None) -> Dict[str, str]:
        clauses = []
        if from_date:
            clauses.append(f"Date ge datetime'{from_date.isoformat()}'")
        if to_date:
            clauses.append(f"Date le datetime'{to_date.isoformat()}'")
        return {"$filter": " and ".join(clauses)} if clauses else {}

    async def _get_items(
        self,
        company_file_id: str,
        path: str,
        from_date: date | None,
        to_date: date | None,
    ) -> Optional[List[Any]]:
        """
        Fetch one collection from a company file.

        Returns the "Items" value as-is (None when missing) so the normalizer
        can tell a malformed payload from an empty period.

        Raises:
            AccountingAPIError: On timeout, HTTP errors, or a non-JSON response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/{company_file_id}/{path}",
                    headers=self._headers(),
                    params=self._date_filter(from_date, to_date),
                )
                response.raise_for_status()
                data = response.json()
            except httpx.TimeoutException as e:
                raise AccountingAPIError(self.source, f"MYOB API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise AccountingAPIError(self.source, f"MYOB API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise AccountingAPIError(self.source, f"MYOB API unreachable: {e}") from e
            except ValueError as e:
                raise AccountingAPIError(self.source, f"Invalid {path} payload from MYOB: {e}") from e

        return data.get("Items") if isinstance(data, dict) else None

    async def get_sales(self, company_file_id: str, from_date: date | None = None, to_date: date | None = None):
        return await self._get_items(company_file_id, settings.myob_sales_path, from_date, to_date)

    async def get_purchases(self, company_file_id: str, from_date: date | None = None, to_date: date | None = None):
        return await self._get_items(company_file_id, settings.myob_purchases_path, from_date, to_date)

    async def get_payroll(self, company_file_id: str, from_date: date | None = None, to_date: date | None = None):
        return await self._get_items(company_file_id, settings.myob_payroll_path, from_date, to_date)

    async def get_bas_inputs(
        self,
        company_file_id: str,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> Dict[str, Any]:
        """Fetch the sales, purchases and payroll lists the MYOB normalizer expects, concurrently"""
        sales, purchases, payroll = await asyncio.gather(
            self.get_sales(company_file_id, from_date, to_date),
            self.get_purchases(company_file_id, from_date, to_date),
            self.get_payroll(company_file_id, from_date, to_date),
        )
        return {"sales": sales, "purchases": purchases, "payroll": payroll}
