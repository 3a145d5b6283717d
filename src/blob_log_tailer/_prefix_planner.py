"""
Choose the key prefixes to list on a poll cycle.

Log segments are written under time-bucketed keys of the form `<base>/yyyy/mm/dd/HH/...` and every listing call has a
cost, so the narrowest set of prefixes that still covers everything modified after the watermark is listed:

1) A watermark inside the current hour only needs the current hour's bucket.
2) A watermark within the lookback window needs one prefix per calendar day, oldest day first.
3) Anything older (or no watermark at all) lists the base prefix once and pages through the results.
"""

import datetime

from pydantic import validate_call

from ._config import DAILY_PREFIX_LOOKBACK


@validate_call
def plan_prefixes(
    *,
    base_prefix: str,
    watermark: datetime.datetime | None,
    now: datetime.datetime | None = None,
) -> list[str]:
    """
    Compute the ordered sequence of prefixes to list for a watermark.

    No network calls are made; this is a pure function of the timestamps.

    Parameters
    ----------
    base_prefix : str
        The prefix under which all log segments of the application reside.
        A trailing slash is ignored.
    watermark : datetime.datetime or None
        The modification time of the most recently processed object.
        Naive values are interpreted as UTC.
    now : datetime.datetime, optional
        The current time; defaults to the current UTC time.

    Returns
    -------
    prefixes : list of str
    """
    base_prefix = base_prefix.rstrip("/")
    now = _as_utc(now) if now is not None else datetime.datetime.now(tz=datetime.timezone.utc)

    if watermark is None:
        return [base_prefix]
    watermark = _as_utc(watermark)

    current_hour = now.replace(minute=0, second=0, microsecond=0)
    if watermark >= current_hour:
        return [_join_prefix(base_prefix=base_prefix, bucket=current_hour.strftime("%Y/%m/%d/%H"))]

    today = now.date()
    start_of_lookback = datetime.datetime.combine(
        date=today - DAILY_PREFIX_LOOKBACK, time=datetime.time.min, tzinfo=datetime.timezone.utc
    )
    if watermark >= start_of_lookback:
        first_day = watermark.date()
        number_of_days = (today - first_day).days + 1
        return [
            _join_prefix(
                base_prefix=base_prefix, bucket=(first_day + datetime.timedelta(days=day)).strftime("%Y/%m/%d")
            )
            for day in range(number_of_days)
        ]

    return [base_prefix]


def _join_prefix(*, base_prefix: str, bucket: str) -> str:
    if base_prefix == "":
        return bucket
    return f"{base_prefix}/{bucket}"


def _as_utc(value: datetime.datetime) -> datetime.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)
