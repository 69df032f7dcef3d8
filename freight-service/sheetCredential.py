import gspread
from google.oauth2.service_account import Credentials
from dotenv import load_dotenv
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import Dict, Optional
import json
import logging
import os
import pytz
import threading

from models import CalculationResult

load_dotenv()

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
CALCULATIONS_WORKSHEET = "shipping_calculations"


def get_worksheet(sheet_id: Optional[str] = None):
    """Open the worksheet that calculation records are appended to"""
    creds_dict = json.loads(os.getenv('GOOGLE_CREDENTIALS_JSON'))
    creds = Credentials.from_service_account_info(creds_dict, scopes=SCOPES)

    client = gspread.authorize(creds)
    sheet = client.open_by_key(sheet_id or os.getenv('SHEET_ID'))
    return sheet.worksheet(CALCULATIONS_WORKSHEET)


def build_record(
    user_id: str,
    params: Dict,
    result: CalculationResult,
    timezone: str = "Asia/Bangkok"
) -> list:
    """Flatten one calculation into a worksheet row"""
    timestamp = datetime.now(pytz.timezone(timezone)).isoformat()
    return [
        timestamp,
        user_id or "unknown",
        json.dumps(params, ensure_ascii=False, default=str),
        result.weight,
        result.volume,
        result.fee,
        result.method.value,
        result.tier.value,
    ]


class CalculationRecorder:
    """
    Best-effort, non-blocking persistence of calculation records

    Writes run on a worker thread. Failures are logged and never reach
    the caller, so a sheet outage cannot delay or suppress a fee reply.
    """

    def __init__(self, worksheet_factory=get_worksheet, max_workers: int = 2):
        self._worksheet_factory = worksheet_factory
        self._worksheet = None
        self._worksheet_lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="recorder")

    def record(self, row: list) -> Future:
        """Queue a row for appending; returns immediately"""
        return self._executor.submit(self._write, row)

    def _write(self, row: list) -> bool:
        try:
            with self._worksheet_lock:
                if self._worksheet is None:
                    self._worksheet = self._worksheet_factory()
                worksheet = self._worksheet
            worksheet.append_row(row, value_input_option="RAW")
            logger.debug(f"Calculation recorded for user {row[1]}")
            return True
        except Exception as e:
            logger.error(f"Failed to record calculation: {str(e)}", exc_info=True)
            with self._worksheet_lock:
                self._worksheet = None
            return False

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)
