"""
Supabase REST client
Thin async wrapper over the PostgREST and Storage HTTP APIs
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import httpx

logger = logging.getLogger(__name__)

Params = Union[Dict[str, Any], Sequence[Tuple[str, Any]]]

SINGLE_OBJECT = "application/vnd.pgrst.object+json"


class BackendError(Exception):
    """The backend answered with an error response"""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None, details: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.code = code
        self.details = details
        super().__init__(f"[{status_code}{' ' + code if code else ''}] {message}")

    @property
    def is_policy_denial(self) -> bool:
        """Row-level security refused the write for the key in use"""
        if self.code == "42501":
            return True
        return self.status_code in (401, 403) and "row-level security" in self.message.lower()

    @property
    def is_not_found(self) -> bool:
        # PGRST116: single object requested, zero rows matched
        return self.code == "PGRST116"


class BackendUnavailable(Exception):
    """The backend could not be reached or did not answer in time"""


class SupabaseClient:
    """Talk to a Supabase project over HTTP"""

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the client.

        Args:
            url: Project URL, e.g. https://<ref>.supabase.co
            api_key: Anon or service role key
            timeout: Upper bound in seconds for every request
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.url = url.rstrip("/")
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "User-Agent": "AfricurePharma-API/1.0"
        }
        self._client = httpx.AsyncClient(
            base_url=self.url,
            headers=self.headers,
            timeout=httpx.Timeout(timeout),
            transport=transport
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Supabase {method} {path} timed out")
            raise BackendUnavailable(f"Request to Supabase timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"Supabase {method} {path} failed: {e}")
            raise BackendUnavailable(f"Could not reach Supabase: {e}") from e

        if response.status_code >= 400:
            raise self._error_from(response)
        return response

    @staticmethod
    def _error_from(response: httpx.Response) -> BackendError:
        """Build a BackendError from a PostgREST or Storage error body"""
        message = response.reason_phrase or "Request failed"
        code = None
        details = None
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or message
            code = body.get("code")
            details = body.get("details") or body.get("hint")
            if code is not None:
                code = str(code)

        return BackendError(response.status_code, message, code=code, details=details)

    # PostgREST

    async def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored"""
        response = await self._request(
            "POST",
            f"/rest/v1/{table}",
            json=row,
            headers={"Prefer": "return=representation", "Accept": SINGLE_OBJECT}
        )
        return response.json()

    async def rpc(self, function: str, params: Dict[str, Any]) -> Any:
        """Call a database function"""
        response = await self._request("POST", f"/rest/v1/rpc/{function}", json=params)
        return response.json()

    async def select(
        self,
        table: str,
        params: Params,
        row_range: Optional[Tuple[int, int]] = None,
        single: bool = False
    ) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
        """
        Read rows

        Args:
            table: Table name
            params: PostgREST query parameters (select, order, filters)
            row_range: Inclusive (first, last) row positions
            single: Expect exactly one row and return it as a dict
        """
        headers = {}
        if row_range is not None:
            headers["Range-Unit"] = "items"
            headers["Range"] = f"{row_range[0]}-{row_range[1]}"
        if single:
            headers["Accept"] = SINGLE_OBJECT

        response = await self._request("GET", f"/rest/v1/{table}", params=params, headers=headers)
        return response.json()

    async def count(self, table: str, params: Optional[Params] = None) -> int:
        """Exact row count without transferring rows"""
        query: List[Tuple[str, Any]] = [("select", "*")]
        if params:
            query.extend(params.items() if isinstance(params, dict) else params)

        response = await self._request(
            "HEAD",
            f"/rest/v1/{table}",
            params=query,
            headers={"Prefer": "count=exact"}
        )
        # Content-Range: 0-24/3573 or */0
        content_range = response.headers.get("content-range", "")
        total = content_range.rsplit("/", 1)[-1]
        return int(total) if total.isdigit() else 0

    async def update(self, table: str, params: Params, values: Dict[str, Any]) -> Dict[str, Any]:
        """Update the single row matched by params and return it"""
        response = await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params=params,
            json=values,
            headers={"Prefer": "return=representation", "Accept": SINGLE_OBJECT}
        )
        return response.json()

    # Storage

    async def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> Dict[str, Any]:
        """Store an object; fails if the key is already taken"""
        response = await self._request(
            "POST",
            f"/storage/v1/object/{bucket}/{path}",
            content=content,
            headers={"Content-Type": content_type, "x-upsert": "false"}
        )
        return response.json()

    async def remove(self, bucket: str, paths: List[str]) -> None:
        await self._request("DELETE", f"/storage/v1/object/{bucket}", json={"prefixes": paths})

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.url}/storage/v1/object/public/{bucket}/{path}"
