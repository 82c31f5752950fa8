#Purpose: The hosted data store "adapter/client".
#Sole responsibility: talk to the REST endpoint of the backend-as-a-service
#(PostgREST query syntax) via HTTP and return decoded rows.
#Encapsulates store-specific details:
#auth headers (apikey + bearer token)
#URL construction (/rest/v1/<table>)
#timeouts / error handling
#It should not contain estimation rules.

import logging
import os
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv

from .repository import DataAccessError

# Read the store URL and anon key from environment
# Example in .env:
# SUPABASE_URL=https://<project>.supabase.co
# SUPABASE_ANON_KEY=<anon key>
load_dotenv()
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class SupabaseRestClient:
    """
    REST Adapter / Client

    Sole responsibility:
    - Talk to the store via HTTP
    - Build PostgREST filters (column=eq.value, column=ilike.*text*)
    - Wrap every failure in DataAccessError
    """
    def __init__(self,
                 base_url: Optional[str] = None,
                 api_key: Optional[str] = None,
                 timeout: int = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or SUPABASE_URL or "").rstrip("/")
        self.api_key = api_key or SUPABASE_ANON_KEY
        self.timeout = timeout #seconds to wait for the store before giving up
        self.session = session or requests.Session()

        if not self.base_url:
            raise ValueError("Store URL not set. Please set SUPABASE_URL in the .env file.")

    #----------------
    # Internal helpers
    #----------------
    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _table_url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    @staticmethod
    def eq(value: Any) -> str:
        return f"eq.{value}"

    @staticmethod
    def ilike_contains(text: str) -> str:
        # PostgREST uses * as the wildcard inside URLs. LIKE metacharacters in
        # the text itself are escaped so they only match literally.
        escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return f"ilike.*{escaped}*"

    def _decode(self, response: requests.Response, table: str) -> Any:
        if response.status_code >= 400:
            raise DataAccessError(
                f"{table}: HTTP {response.status_code} {response.text[:200]}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise DataAccessError(f"{table}: response is not JSON") from e

    #----------------
    # Public methods
    #----------------
    def select(self,
               table: str,
               filters: Optional[Dict[str, str]] = None,
               *,
               columns: str = "*",
               order: Optional[str] = None,
               limit: Optional[int] = None,
               ) -> List[Row]:
        """
        GET /rest/v1/<table>?select=<columns>&<filters>

        Returns the decoded list of rows.
        """
        params: Dict[str, Any] = {"select": columns}
        params.update(filters or {})
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = limit

        logger.debug("select %s %s", table, params)
        try:
            response = self.session.get(
                self._table_url(table),
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DataAccessError(f"{table}: request failed: {e}") from e

        data = self._decode(response, table)
        if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
            raise DataAccessError(f"{table}: expected a list of rows")
        return data

    def insert(self, table: str, row: Row) -> Row:
        """
        POST /rest/v1/<table> and return the inserted row (Prefer: return=representation).
        """
        headers = self._headers()
        headers["Content-Type"] = "application/json"
        headers["Prefer"] = "return=representation"

        try:
            response = self.session.post(
                self._table_url(table),
                json=[row],
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DataAccessError(f"{table}: insert failed: {e}") from e

        data = self._decode(response, table)
        if isinstance(data, list):
            if not data:
                raise DataAccessError(f"{table}: insert returned no row")
            return data[0]
        return data
