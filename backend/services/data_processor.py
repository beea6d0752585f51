"""Data processing service for activities."""

from datetime import date, datetime, timedelta, timezone
from typing import Optional
import pandas as pd
from backend.models.activity import Activity, ActivitySummary, ChartData, ReportResponse
from backend.services.time_format import calculate_duration, duration_minutes, format_clock_time

UNCATEGORIZED = "Uncategorized"


class DataProcessor:
    """Bucket, summarise and reshape activity lists for charts and reports."""

    @staticmethod
    def today() -> date:
        """Current calendar day taken from the UTC system clock."""
        return datetime.now(timezone.utc).date()

    @staticmethod
    def window_days(days: int, today: Optional[date] = None) -> list[date]:
        """Every day of a trailing window ending today, oldest first."""
        if days < 1:
            raise ValueError("Window must cover at least one day")
        today = today or DataProcessor.today()
        return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]

    @staticmethod
    def daily_counts(
        activities: list[Activity], days: int = 7, today: Optional[date] = None
    ) -> dict[str, int]:
        """
        Count activities per day over a trailing window.

        Args:
            activities: Activities to bucket
            days: Window length in days
            today: Last day of the window (defaults to today)

        Returns:
            ISO day -> count for every day in the window, oldest first
        """
        window = DataProcessor.window_days(days, today)

        counts: dict[str, int] = {}
        if activities:
            df = pd.DataFrame({"date": [a.date.isoformat() for a in activities]})
            counts = {k: int(v) for k, v in df["date"].value_counts().items()}

        return {day.isoformat(): counts.get(day.isoformat(), 0) for day in window}

    @staticmethod
    def category_counts(
        activities: list[Activity], fallback: str = UNCATEGORIZED
    ) -> dict[str, int]:
        """
        Count activities per category.

        Activities without a category are counted under ``fallback``.
        Keys keep the order in which categories first appear.
        """
        if not activities:
            return {}

        categories = pd.Series([a.category for a in activities], dtype=object)
        categories = categories.fillna("").replace("", fallback)
        sizes = categories.groupby(categories, sort=False).size()
        return {str(k): int(v) for k, v in sizes.items()}

    @staticmethod
    def day_labels(days: list[str], style: str = "weekday") -> list[str]:
        """
        Chart labels for ISO days.

        Args:
            days: ISO day strings
            style: "weekday" (Mon) or "month_day" (Oct 19)
        """
        labels = []
        for day in days:
            parsed = date.fromisoformat(day)
            if style == "weekday":
                labels.append(parsed.strftime("%a"))
            else:
                labels.append(f"{parsed.strftime('%b')} {parsed.day}")
        return labels

    @staticmethod
    def to_chart(counts: dict[str, int], labels: Optional[list[str]] = None) -> ChartData:
        return ChartData(
            labels=labels if labels is not None else list(counts.keys()),
            values=list(counts.values()),
        )

    @staticmethod
    def calculate_summary(activities: list[Activity]) -> ActivitySummary:
        """
        Calculate summary statistics from activities.

        Args:
            activities: List of Activity instances

        Returns:
            ActivitySummary instance
        """
        if not activities:
            return ActivitySummary(total_activities=0, total_minutes=0)

        df = DataProcessor.activities_to_dataframe(activities)

        categories = DataProcessor.category_counts(activities)
        top_category = max(categories, key=categories.get) if categories else None

        per_day = df.groupby("date").size()
        busiest_day = per_day.idxmax() if len(per_day) else None

        return ActivitySummary(
            total_activities=len(activities),
            total_minutes=int(df["duration_minutes"].dropna().sum()),
            category_count=len(categories),
            top_category=top_category,
            busiest_day=busiest_day,
        )

    @staticmethod
    def filter_activities(
        activities: list[Activity],
        categories: Optional[list[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        fallback: str = UNCATEGORIZED,
    ) -> list[Activity]:
        """
        Filter activities by category and date range.

        Args:
            activities: List of activities to filter
            categories: Category labels to include
            start_date: First day to include
            end_date: Last day to include
            fallback: Label that matches activities without a category

        Returns:
            Filtered list of activities
        """
        filtered = activities

        if categories:
            filtered = [a for a in filtered if (a.category or fallback) in categories]

        if start_date:
            filtered = [a for a in filtered if a.date >= start_date]
        if end_date:
            filtered = [a for a in filtered if a.date <= end_date]

        return filtered

    @staticmethod
    def activities_to_dataframe(activities: list[Activity]) -> pd.DataFrame:
        """
        Convert activities to pandas DataFrame for reports.

        Args:
            activities: List of activities

        Returns:
            DataFrame with activity data and duration columns
        """
        if not activities:
            return pd.DataFrame()

        data = [activity.model_dump() for activity in activities]
        df = pd.DataFrame(data)

        df["duration_minutes"] = [
            duration_minutes(a.start_time, a.end_time) for a in activities
        ]
        df["duration"] = [calculate_duration(a.start_time, a.end_time) for a in activities]
        df["category"] = df["category"].fillna("").replace("", UNCATEGORIZED)

        return df

    @staticmethod
    def to_card(activity: Activity) -> dict:
        """Display fields for one activity in the list view."""
        card = activity.model_dump(mode="json")
        card["start_display"] = format_clock_time(activity.start_time)
        card["end_display"] = format_clock_time(activity.end_time)
        card["duration"] = calculate_duration(activity.start_time, activity.end_time)
        return card

    @staticmethod
    def build_report(
        activities: list[Activity],
        days: int,
        fallback: str = UNCATEGORIZED,
        today: Optional[date] = None,
    ) -> ReportResponse:
        """Daily and category buckets plus a summary for a trailing window."""
        daily = DataProcessor.daily_counts(activities, days, today)
        categories = DataProcessor.category_counts(activities, fallback)

        return ReportResponse(
            days=days,
            daily=daily,
            categories=categories,
            daily_chart=DataProcessor.to_chart(
                daily, DataProcessor.day_labels(list(daily), "month_day")
            ),
            category_chart=DataProcessor.to_chart(categories),
            summary=DataProcessor.calculate_summary(activities),
        )
