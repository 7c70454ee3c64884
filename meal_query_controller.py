import threading
import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from config import Config
from display import Error, Loading, MealList, MealView, NoMeal, render
from meal_info_engine import (
    EmptyDateInput,
    MealInfoClient,
    NoMealInformation,
    extract_lunch_menu,
)

logger = logging.getLogger(__name__)


def today_iso():
    """Today's date as YYYY-MM-DD in the school's time zone."""
    return datetime.now(ZoneInfo(Config.TIMEZONE)).strftime('%Y-%m-%d')


def extract_menu(date_string, response):
    """Turns a parsed API response into the final display state for `date_string`."""
    if isinstance(response, NoMealInformation):
        return NoMeal()

    items = extract_lunch_menu(response.rows)
    if items is None:
        return NoMeal()
    return MealList(date=date_string, items=items)


class DeferredTask:
    """A callable scheduled to run once after a delay, cancellable until it fires."""

    def __init__(self, delay, callback):
        self._timer = threading.Timer(delay, callback)
        self._timer.daemon = True

    def start(self):
        self._timer.start()
        return self

    def cancel(self):
        self._timer.cancel()

    def wait(self, timeout=None):
        """Blocks until the callback has run or the task was cancelled."""
        self._timer.join(timeout)


class MealQueryController:
    """
    Owns the display state of one lunch page and the fetch-and-render cycle.

    The view is injected so the same controller drives the HTML page, the JSON
    endpoint and the tests. Overlapping submissions are not de-duplicated: the
    last one to finish decides what the view shows.
    """

    def __init__(self, view=None, client=None, show_error_details=False,
                 auto_query_delay=None):
        self.view = view if view is not None else MealView()
        self.client = client if client is not None else MealInfoClient()
        self.show_error_details = show_error_details
        self.auto_query_delay = Config.AUTO_QUERY_DELAY if auto_query_delay is None else auto_query_delay
        self.state = None
        self.last_date = None
        self.last_error = None
        self._initial_query = None

    def set_state(self, state):
        render(state, self.view)
        self.state = state
        return state

    def show_error(self, message, details=""):
        return self.set_state(Error(message, details))

    # --- QUERY SUBMISSION ---

    def submit(self, date_string):
        """Runs one query for `date_string` and returns the final display state."""
        self.last_error = None
        if not date_string:
            return self.show_error(EmptyDateInput().message)

        self.last_date = date_string
        self.set_state(Loading())

        try:
            response = self.client.fetch_meal_info(date_string)
            return self.set_state(extract_menu(date_string, response))
        except Exception as e:
            logger.error(f"급식정보 조회 오류: {e}")
            self.last_error = e
            details = str(e) if self.show_error_details else ""
            return self.show_error(Config.MSG_FETCH_FAILED, details)

    def submit_current_date(self):
        return self.submit(self.view.date_value)

    # --- LIFECYCLE ---

    def mount(self):
        """Defaults the date input to today and schedules the initial query."""
        self.view.date_value = today_iso()
        self._initial_query = DeferredTask(self.auto_query_delay, self.submit_current_date).start()
        logger.info(f"Initial query for {self.view.date_value} scheduled in {self.auto_query_delay}s")
        return self._initial_query

    def unmount(self):
        if self._initial_query is not None:
            self._initial_query.cancel()
            self._initial_query = None

    def wait_for_initial_query(self, timeout=None):
        if self._initial_query is not None:
            self._initial_query.wait(timeout)
