"""
Display states for the lunch page and the renderer that applies them to a view.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List

from config import Config


# --- DISPLAY STATES ---

@dataclass(frozen=True)
class Loading:
    name = "loading"


@dataclass(frozen=True)
class Error:
    message: str
    details: str = ""
    name = "error"

    def to_dict(self):
        return {"state": self.name, "message": self.message, "details": self.details}


@dataclass(frozen=True)
class MealList:
    date: str
    items: List[str] = field(default_factory=list)
    name = "meal"

    def to_dict(self):
        return {
            "state": self.name,
            "date": self.date,
            "title": meal_title(self.date),
            "items": list(self.items),
        }


@dataclass(frozen=True)
class NoMeal:
    name = "no_meal"

    def to_dict(self):
        return {"state": self.name}


# --- VIEW ---

@dataclass
class Section:
    """Handle for one page region. Text fields are always plain text."""

    element_id: str
    hidden: bool = True
    message: str = ""
    details: str = ""
    title: str = ""
    items: List[str] = field(default_factory=list)


class MealView:
    """
    The page surface: the date input plus the four mutually exclusive regions,
    addressed by the ids in Config.SECTION_IDS.
    """

    def __init__(self, date_value: str = ""):
        self.date_value = date_value
        self.sections = {section_id: Section(section_id) for section_id in Config.SECTION_IDS}

    @property
    def loading(self):
        return self.sections["loading"]

    @property
    def error(self):
        return self.sections["error"]

    @property
    def meal_info(self):
        return self.sections["mealInfo"]

    @property
    def no_meal(self):
        return self.sections["noMeal"]

    def hide_all_sections(self):
        for section in self.sections.values():
            section.hidden = True

    def visible_sections(self) -> List[str]:
        return [section_id for section_id, section in self.sections.items() if not section.hidden]


# --- FORMATTING ---

def format_date(date_string: str) -> str:
    """
    Formats an ISO date as a Korean label, e.g. '2024-01-01' -> '2024년 1월 1일 (월)'.
    Raises ValueError for anything that is not a valid calendar date.
    """
    day = date.fromisoformat(date_string)
    # date.weekday() is Monday-first, Config.WEEKDAYS is Sunday-first
    weekday = Config.WEEKDAYS[(day.weekday() + 1) % 7]
    return f"{day.year}년 {day.month}월 {day.day}일 ({weekday})"


def meal_title(date_string: str) -> str:
    return f"{format_date(date_string)} 급식정보"


# --- RENDERER ---

def render(state, view: MealView) -> MealView:
    """Shows exactly the region that belongs to `state` and hides the other three."""
    title = meal_title(state.date) if isinstance(state, MealList) else ""
    view.hide_all_sections()

    if isinstance(state, Loading):
        view.loading.hidden = False
    elif isinstance(state, Error):
        view.error.message = state.message
        view.error.details = state.details
        view.error.hidden = False
    elif isinstance(state, MealList):
        view.meal_info.title = title
        view.meal_info.items = list(state.items)
        view.meal_info.hidden = False
    elif isinstance(state, NoMeal):
        view.no_meal.hidden = False
    else:
        raise TypeError(f"Unknown display state: {state!r}")

    return view

