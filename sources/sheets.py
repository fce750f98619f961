"""Google Sheets price row source"""
import asyncio
import json
import logging
import threading
from typing import Any, Optional

import google_auth_httplib2
import httplib2
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .base import PriceSource, PriceSourceError
from config import (
    SPREADSHEET_ID, GOOGLE_CREDENTIALS, SHEET_RANGE,
    SHEET_HEADER_ROWS, SHEETS_SCOPES, FETCH_TIMEOUT_S,
)

logger = logging.getLogger(__name__)


class SheetsPriceSource(PriceSource):
    """
    Reads the latest price rows from a spreadsheet.

    Expected layout, one row per pair:
      A: timestamp | B: token in | C: token out | D: venue A price | E: venue B price

    The API resource is built on first use and reused for every later fetch.
    Each request gets its own HTTP connection with a socket timeout, since
    httplib2 connections can't be shared between threads.
    """

    def __init__(
        self,
        spreadsheet_id: Optional[str] = SPREADSHEET_ID,
        credentials_json: Optional[str] = GOOGLE_CREDENTIALS,
        sheet_range: str = SHEET_RANGE,
        header_rows: int = SHEET_HEADER_ROWS,
        timeout_s: float = FETCH_TIMEOUT_S,
        service: Any = None,
        name: str = "google-sheets",
    ):
        """
        Args:
            spreadsheet_id: ID from the sheet URL
            credentials_json: Service account key as a JSON string
            sheet_range: A1 range holding the rows
            header_rows: Rows at the top of the range to skip
            timeout_s: Socket timeout for each API request
            service: Prebuilt Sheets API resource; built from the credentials if omitted
        """
        super().__init__(name)
        self.spreadsheet_id = spreadsheet_id
        self.credentials_json = credentials_json
        self.sheet_range = sheet_range
        self.header_rows = max(header_rows, 0)
        self.timeout_s = timeout_s
        self._service = service
        self._credentials = None
        # Guards the one-time client build only, never a request
        self._build_lock = threading.Lock()

    def _load_credentials(self):
        if not self.spreadsheet_id:
            raise PriceSourceError("SPREADSHEET_ID is not set")
        if not self.credentials_json:
            raise PriceSourceError("GOOGLE_CREDENTIALS is not set")

        try:
            info = json.loads(self.credentials_json)
        except json.JSONDecodeError as e:
            raise PriceSourceError(f"GOOGLE_CREDENTIALS is not valid JSON: {e}") from e

        try:
            return service_account.Credentials.from_service_account_info(
                info, scopes=SHEETS_SCOPES
            )
        except ValueError as e:
            raise PriceSourceError(f"Invalid service account credentials: {e}") from e

    def _new_http(self) -> Optional[google_auth_httplib2.AuthorizedHttp]:
        """Fresh authorized connection; None when using an injected resource"""
        if self._credentials is None:
            return None
        return google_auth_httplib2.AuthorizedHttp(
            self._credentials, http=httplib2.Http(timeout=self.timeout_s)
        )

    def _get_service(self):
        """Build the API resource once. Blocking, so runs in a worker thread."""
        with self._build_lock:
            if self._service is not None:
                return self._service

            self._credentials = self._load_credentials()
            self._service = build("sheets", "v4", http=self._new_http(), cache_discovery=False)
            logger.info(f"[{self.name}] Sheets client ready for {self.spreadsheet_id}")
            return self._service

    def _read_values(self) -> list[list]:
        service = self._get_service()
        try:
            response = service.spreadsheets().values().get(
                spreadsheetId=self.spreadsheet_id,
                range=self.sheet_range,
            ).execute(http=self._new_http())
        except HttpError as e:
            raise PriceSourceError(f"Sheets API error: {e}") from e
        except (OSError, httplib2.HttpLib2Error) as e:
            raise PriceSourceError(f"Sheets request failed: {e}") from e
        return response.get("values") or []

    async def _fetch_rows(self) -> list[list]:
        rows = await asyncio.to_thread(self._read_values)

        if not rows:
            raise PriceSourceError("No data found in the spreadsheet.")

        return rows[self.header_rows:]

    async def close(self):
        if self._service is not None and hasattr(self._service, "close"):
            self._service.close()
        self._service = None
        self._credentials = None
