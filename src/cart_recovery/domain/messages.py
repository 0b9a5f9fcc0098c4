"""Text message template for the recovery reminder."""

REMINDER_TEMPLATE = (
    "Hi{name}, you left something in your cart! "
    "Use code {code} for {percent}% off in the next hour: {url}"
)


def compose_reminder(name: str, code: str, url: str, percent: int = 10) -> str:
    """Render the reminder body. An empty name just drops the greeting name."""
    return REMINDER_TEMPLATE.format(
        name=f" {name}" if name else "",
        code=code,
        percent=percent,
        url=url,
    )
