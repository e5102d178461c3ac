"""
HTML error pages.

Rendered by the error-handling middleware for ``HttpException`` and
unhandled errors. In debug mode the exception class, message and traceback
are appended.
"""

from __future__ import annotations

import html
import traceback
from typing import Optional

ERROR_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Page Not Found",
    405: "Method Not Allowed",
    419: "Page Expired",
    429: "Too Many Requests",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
}

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title} - {app_name}</title>
    <style>
        body {{ font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Arial, sans-serif; background: #f8f9fa; color: #2c3e50; margin: 0; }}
        .container {{ max-width: 800px; margin: 50px auto; padding: 20px; background: white; border-radius: 8px; box-shadow: 0 2px 10px rgba(0,0,0,0.1); }}
        .error-code {{ font-size: 4em; font-weight: bold; color: #e74c3c; margin: 0; text-align: center; }}
        .error-title {{ font-size: 1.5em; margin: 10px 0; text-align: center; }}
        .error-message {{ color: #7f8c8d; text-align: center; margin: 20px 0; }}
        .debug-info {{ margin-top: 30px; padding: 20px; background: #f8f9fa; border-radius: 5px; font-family: "Courier New", monospace; font-size: 0.9em; overflow-x: auto; white-space: pre-wrap; }}
        .actions {{ text-align: center; margin-top: 30px; }}
    </style>
</head>
<body>
    <div class="container">
        <p class="error-code">{status}</p>
        <h1 class="error-title">{title}</h1>
        <p class="error-message">{message}</p>{debug}
        <div class="actions"><a href="/">Return to homepage</a></div>
    </div>
</body>
</html>"""


def error_title(status_code: int) -> str:
    return ERROR_TITLES.get(status_code, "Error")


def render_error_page(
    status_code: int,
    message: str,
    exception: Optional[BaseException] = None,
    debug: bool = False,
    app_name: str = "IslamWiki",
) -> str:
    """
    Render an HTML error page.

    Args:
        status_code: HTTP status code shown on the page
        message: Message shown to the user (escaped)
        exception: Exception whose details are shown in debug mode
        debug: Whether to include exception details
        app_name: Name shown in the page title

    Returns:
        The HTML document
    """
    debug_block = ""
    if debug and exception is not None:
        details = "".join(traceback.format_exception(type(exception), exception, exception.__traceback__))
        debug_block = (
            f'\n        <div class="debug-info"><strong>{html.escape(type(exception).__name__)}</strong>: '
            f"{html.escape(str(exception))}\n\n{html.escape(details)}</div>"
        )
    return PAGE_TEMPLATE.format(
        title=html.escape(error_title(status_code)),
        app_name=html.escape(app_name),
        status=status_code,
        message=html.escape(message),
        debug=debug_block,
    )
