"""
Waitlist storage: an abstract store, an in-memory store and a Supabase
(PostgREST) client.
"""

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import WaitlistConfigurationError, WaitlistConflictError, WaitlistStoreError

logger = logging.getLogger(__name__)

PLACEHOLDER_URL = "https://placeholder.supabase.co"

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


def normalize_email(email: str) -> str:
    return email.strip()


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass(frozen=True)
class WaitlistEntry:
    id: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict) -> "WaitlistEntry":
        return cls(
            id=str(row.get("id", "")),
            email=row["email"],
            created_at=_parse_timestamp(row.get("created_at")),
            updated_at=_parse_timestamp(row.get("updated_at")),
        )


class WaitlistStore(ABC):
    """Insert and look up waitlist emails"""

    @abstractmethod
    def insert(self, email: str) -> WaitlistEntry:
        """
        Add an email to the waitlist.

        Raises:
            WaitlistConflictError: if the email is already present
        """
        pass

    @abstractmethod
    def exists(self, email: str) -> bool:
        pass

    @abstractmethod
    def count(self) -> int:
        pass


class InMemoryWaitlistStore(WaitlistStore):
    """Process-local store, for tests and offline runs"""

    def __init__(self, emails: Optional[List[str]] = None):
        self._entries: Dict[str, WaitlistEntry] = {}
        for email in emails or []:
            self.insert(email)

    def insert(self, email: str) -> WaitlistEntry:
        email = normalize_email(email)
        if email in self._entries:
            raise WaitlistConflictError(email)
        now = datetime.now(timezone.utc)
        entry = WaitlistEntry(id=str(uuid.uuid4()), email=email, created_at=now, updated_at=now)
        self._entries[email] = entry
        return entry

    def exists(self, email: str) -> bool:
        return normalize_email(email) in self._entries

    def count(self) -> int:
        return len(self._entries)


class SupabaseWaitlistStore(WaitlistStore):
    """
    Waitlist table behind Supabase's PostgREST API.

    An unset or placeholder URL/key means "not configured": exists() then
    answers False, insert() and count() raise WaitlistConfigurationError.
    """

    def __init__(self, url: Optional[str], anon_key: Optional[str],
                 table: str = "waitlist", timeout: float = 10.0,
                 urlopen: Callable = urllib.request.urlopen):
        """
        Args:
            url: Project URL, e.g. https://xyz.supabase.co
            anon_key: Anonymous API key
            table: Table name
            timeout: Request timeout in seconds
            urlopen: Opener used for requests
        """
        self.url = (url or "").rstrip("/")
        self.anon_key = anon_key or ""
        self.table = table
        self.timeout = timeout
        self._urlopen = urlopen

    @property
    def configured(self) -> bool:
        return bool(self.url) and self.url != PLACEHOLDER_URL and bool(self.anon_key)

    def _require_configured(self):
        if not self.configured:
            raise WaitlistConfigurationError(
                "Supabase configuration is missing. Please check your environment variables."
            )

    def _endpoint(self, params: Optional[Dict[str, str]] = None) -> str:
        endpoint = f"{self.url}/rest/v1/{urllib.parse.quote(self.table)}"
        if params:
            endpoint += "?" + urllib.parse.urlencode(params)
        return endpoint

    def _request(self, method: str, params: Optional[Dict[str, str]] = None,
                 body=None, prefer: Optional[str] = None) -> Tuple[int, Dict[str, str], bytes]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.anon_key}",
            "Accept": "application/json",
        }
        data = None
        if body is not None:
            data = json.dumps(body).encode()
            headers["Content-Type"] = "application/json"
        if prefer:
            headers["Prefer"] = prefer

        request = urllib.request.Request(self._endpoint(params), data=data,
                                         headers=headers, method=method)
        with self._urlopen(request, timeout=self.timeout) as response:
            return response.status, dict(response.headers), response.read()

    @staticmethod
    def _error_code(error: urllib.error.HTTPError) -> str:
        try:
            payload = json.loads(error.read() or b"{}")
        except (ValueError, OSError):
            return ""
        return str(payload.get("code", "")) if isinstance(payload, dict) else ""

    def _call(self, action: str, method: str, **kwargs) -> Tuple[int, Dict[str, str], bytes]:
        """
        _request() with transport failures mapped to WaitlistStoreError.

        HTTPError is left to the caller, which knows what each status means.
        """
        try:
            return self._request(method, **kwargs)
        except urllib.error.HTTPError:
            raise
        except urllib.error.URLError as e:
            raise WaitlistStoreError(f"Waitlist service unreachable: {e.reason}") from e
        except (OSError, http.client.HTTPException) as e:
            raise WaitlistStoreError(f"{action} failed: {e!r}") from e

    @staticmethod
    def _decode(action: str, payload: bytes):
        try:
            return json.loads(payload or b"[]")
        except ValueError as e:
            raise WaitlistStoreError(f"{action} returned a non-JSON response: {e}") from e

    def insert(self, email: str) -> WaitlistEntry:
        self._require_configured()
        email = normalize_email(email)
        try:
            _, _, payload = self._call("Insert", "POST", body=[{"email": email}],
                                       prefer="return=representation")
        except urllib.error.HTTPError as e:
            code = self._error_code(e)
            if e.code == 409 or code == UNIQUE_VIOLATION:
                raise WaitlistConflictError(email) from e
            raise WaitlistStoreError(f"Insert failed ({e.code}): {e.reason}") from e

        rows = self._decode("Insert", payload)
        if not isinstance(rows, list) or not rows or not isinstance(rows[0], dict):
            raise WaitlistStoreError("Insert returned no row")
        try:
            return WaitlistEntry.from_row(rows[0])
        except (KeyError, ValueError) as e:
            raise WaitlistStoreError(f"Insert returned a malformed row: {e}") from e

    def exists(self, email: str) -> bool:
        if not self.configured:
            return False
        params = {"select": "email", "email": f"eq.{normalize_email(email)}"}
        try:
            _, _, payload = self._call("Lookup", "GET", params=params)
        except urllib.error.HTTPError as e:
            raise WaitlistStoreError(f"Lookup failed ({e.code}): {e.reason}") from e
        return bool(self._decode("Lookup", payload))

    def count(self) -> int:
        self._require_configured()
        try:
            _, headers, _ = self._call("Count", "HEAD", params={"select": "*"}, prefer="count=exact")
        except urllib.error.HTTPError as e:
            raise WaitlistStoreError(f"Count failed ({e.code}): {e.reason}") from e

        content_range = {k.lower(): v for k, v in headers.items()}.get("content-range", "")
        _, _, total = content_range.partition("/")
        if not total.isdigit():
            raise WaitlistStoreError(f"Unexpected Content-Range: {content_range!r}")
        return int(total)
