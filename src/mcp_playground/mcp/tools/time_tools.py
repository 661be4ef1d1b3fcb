"""Clock tools: current instant and wall time in an IANA timezone."""

from datetime import UTC, datetime
from email.utils import format_datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from mcp_playground.mcp.models import EmptyInput, TimezoneInput
from mcp_playground.mcp.tools.common import ToolContext, ToolResult, ToolTable


def _iso_utc(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a Z suffix."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _long_format(moment: datetime) -> str:
    # e.g. "Monday, October 19, 2026 at 4:33:00 AM EDT"
    hour = moment.hour % 12 or 12
    return (
        f"{moment:%A, %B} {moment.day}, {moment.year} at "
        f"{hour}:{moment:%M:%S %p} {moment.tzname()}"
    )


async def get_current_time(params: EmptyInput, ctx: ToolContext) -> ToolResult:
    now = ctx.clock().astimezone(UTC)
    iso = _iso_utc(now)
    return ToolResult.ok(
        iso=iso,
        rfc3339=iso,
        unix=int(now.timestamp()),
        utc=format_datetime(now, usegmt=True),
    )


async def get_timezone(params: TimezoneInput, ctx: ToolContext) -> ToolResult:
    try:
        zone = ZoneInfo(params.timezone)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return ToolResult.fail("invalid timezone")

    local = ctx.clock().astimezone(zone)
    offset = local.strftime("%z")
    return ToolResult.ok(
        timezone=params.timezone,
        time=_long_format(local),
        iso=local.isoformat(timespec="seconds"),
        utc_offset=f"{offset[:3]}:{offset[3:]}",
    )


TOOLS: ToolTable = {
    "get_current_time": (EmptyInput, get_current_time),
    "get_timezone": (TimezoneInput, get_timezone),
}
