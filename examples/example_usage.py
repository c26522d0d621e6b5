"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

import importlib

from dotenv import load_dotenv

from config import get_settings_module

from src.timesheet_tracker.timesheet_tracker.container import build_container


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, secret_key=settings.SECRET_KEY)

    session = container.auth_service.authenticate(email="ann@example.com", password="longenough1")
    user = container.auth_service.validate_token(session.token)
    page = container.timesheet_service.list_weeks(user_id=user.user_id, page=1, limit=5)
    for ts in page.items:
        print(ts.week_start_date, ts.week_end_date, ts.total_hours, ts.status.value)


if __name__ == "__main__":
    main()
