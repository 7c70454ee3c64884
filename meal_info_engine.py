import re
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

import requests

from config import Config

logger = logging.getLogger(__name__)

_BR_TAG = re.compile(r'<br\s*/?>', re.IGNORECASE)


# --- ERRORS ---

class MealInfoError(Exception):
    """Base class for everything that can go wrong while looking up a meal."""


class EmptyDateInput(MealInfoError):
    """Raised when a query is submitted without a date."""

    def __init__(self, message=Config.MSG_EMPTY_DATE):
        super().__init__(message)
        self.message = message


class TransportError(MealInfoError):
    """Raised when the API answers with a non-success status or cannot be reached."""

    def __init__(self, status=None, message=None):
        if message is None:
            message = f"HTTP error! status: {status}"
        super().__init__(message)
        self.status = status


class ParseError(MealInfoError):
    """Raised when the response body is not valid JSON."""


class NotFoundError(MealInfoError):
    """Raised when the payload has neither known response shape."""

    def __init__(self, message=Config.MSG_NOT_FOUND):
        super().__init__(message)


# --- RESPONSE MODEL ---

@dataclass(frozen=True)
class MealRecord:
    """One row of mealServiceDietInfo."""

    meal_code: str
    dish_names: str
    meal_name: str = ""

    @classmethod
    def from_row(cls, row):
        """Builds a record from an API row; a field of the wrong type raises NotFoundError."""
        for key in ('MMEAL_SC_CODE', 'DDISH_NM', 'MMEAL_SC_NM'):
            value = row.get(key)
            if value is not None and not isinstance(value, str):
                logger.error(f"Unexpected {type(value).__name__} in {key}")
                raise NotFoundError()
        return cls(
            meal_code=row.get('MMEAL_SC_CODE') or '',
            dish_names=row.get('DDISH_NM') or '',
            meal_name=row.get('MMEAL_SC_NM') or '',
        )


@dataclass(frozen=True)
class NoMealInformation:
    """The API reported INFO-200: nothing is served on that date."""


@dataclass(frozen=True)
class MealServiceData:
    rows: List[MealRecord] = field(default_factory=list)


MealResponse = Union[NoMealInformation, MealServiceData]


# --- PARSING ---

def parse_meal_data(payload) -> MealResponse:
    """
    Interprets a decoded NEIS payload.
    Only the two documented shapes are accepted; anything else raises NotFoundError.
    """
    if not isinstance(payload, dict):
        raise NotFoundError()

    result = payload.get('RESULT')
    if isinstance(result, dict) and result.get('CODE') == Config.NO_INFO_CODE:
        return NoMealInformation()

    diet_info = payload.get('mealServiceDietInfo')
    if isinstance(diet_info, list) and len(diet_info) > 1 and isinstance(diet_info[1], dict):
        rows = diet_info[1].get('row')
        if isinstance(rows, list):
            return MealServiceData(rows=[MealRecord.from_row(row) for row in rows if isinstance(row, dict)])

    raise NotFoundError()


def parse_menu_items(menu_string: str) -> List[str]:
    """Splits a DDISH_NM value (e.g. '밥<br/>국&amp;김치') into individual dishes."""
    text = _BR_TAG.sub('\n', menu_string)
    text = text.replace('&lt;', '<').replace('&gt;', '>').replace('&amp;', '&')
    items = []
    for piece in text.split('\n'):
        piece = piece.strip()
        if piece:
            items.append(piece)
    return items


def find_lunch(records: List[MealRecord]) -> Optional[MealRecord]:
    for record in records:
        if record.meal_code == Config.LUNCH_CODE:
            return record
    return None


def extract_lunch_menu(records: Optional[List[MealRecord]]) -> Optional[List[str]]:
    """
    Returns the lunch dishes for a list of records.
    None means the API had no records at all; a record list without a usable
    lunch entry gives a single placeholder item instead.
    """
    if not records:
        return None

    lunch = find_lunch(records)
    if lunch and lunch.dish_names:
        return parse_menu_items(lunch.dish_names)
    return [Config.MSG_NO_MENU]


# --- API CLIENT ---

class MealInfoClient:
    """
    Fetches meal information for one school from the NEIS open API.
    """

    def __init__(self, base_url=Config.NEIS_API_URL, office_code=Config.OFFICE_CODE,
                 school_code=Config.SCHOOL_CODE, timeout=Config.API_TIMEOUT):
        self.url = base_url
        self.office_code = office_code
        self.school_code = school_code
        self.timeout = timeout

    @staticmethod
    def format_query_date(date_string: str) -> str:
        """'2024-03-05' -> '20240305'"""
        return date_string.replace('-', '')

    def build_params(self, date_string):
        return {
            "ATPT_OFCDC_SC_CODE": self.office_code,
            "SD_SCHUL_CODE": self.school_code,
            "MLSV_YMD": self.format_query_date(date_string),
            "Type": Config.RESPONSE_TYPE,
        }

    def fetch_meal_info(self, date_string: str) -> MealResponse:
        """Requests one day of meal data and returns the parsed response variant."""
        params = self.build_params(date_string)
        logger.info(f"Fetching meal info for {params['MLSV_YMD']} (school {self.school_code})")

        try:
            resp = requests.get(self.url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Could not reach meal API: {e}")
            raise TransportError(message=f"Request failed: {e}") from e

        if not resp.ok:
            logger.error(f"Meal API returned status {resp.status_code}")
            raise TransportError(resp.status_code)

        try:
            payload = resp.json()
        except ValueError as e:
            logger.error(f"Meal API returned malformed JSON: {e}")
            raise ParseError(f"Malformed JSON in response: {e}") from e

        response = parse_meal_data(payload)
        if isinstance(response, NoMealInformation):
            logger.info(f"No meal information for {params['MLSV_YMD']}")
        else:
            logger.info(f"Received {len(response.rows)} meal records for {params['MLSV_YMD']}")
        return response
