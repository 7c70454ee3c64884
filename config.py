"""
Configuration constants for the school lunch lookup
"""

class Config:
    """Application configuration and constants"""

    # NEIS API
    NEIS_API_URL = "https://open.neis.go.kr/hub/mealServiceDietInfo"
    OFFICE_CODE = "J10"  # 서울특별시교육청
    SCHOOL_CODE = "7531100"
    RESPONSE_TYPE = "json"

    # API settings
    API_TIMEOUT = None  # seconds; None waits forever
    NO_INFO_CODE = "INFO-200"

    # Meal-type codes
    LUNCH_CODE = "2"

    # Initial query on page load
    AUTO_QUERY_DELAY = 0.5  # seconds
    TIMEZONE = "Asia/Seoul"

    # Display
    WEEKDAYS = ["일", "월", "화", "수", "목", "금", "토"]
    SECTION_IDS = ["loading", "error", "mealInfo", "noMeal"]

    # User-facing messages
    MSG_EMPTY_DATE = "날짜를 선택해주세요."
    MSG_FETCH_FAILED = "급식정보를 불러오는 중 오류가 발생했습니다."
    MSG_NOT_FOUND = "급식정보를 찾을 수 없습니다."
    MSG_NO_MENU = "급식 메뉴 정보가 없습니다."

    # Rate limiting
    RATE_LIMIT_PER_DAY = 500
    RATE_LIMIT_PER_HOUR = 100
    RATE_LIMIT_PER_MINUTE = 30
