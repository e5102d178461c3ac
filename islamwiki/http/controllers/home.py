"""
Home page controller.
"""

from __future__ import annotations

import html

from starlette.requests import Request
from starlette.responses import HTMLResponse

from islamwiki.extensions.manager import ExtensionManager
from islamwiki.server.core.config import Settings

from .base import Controller

HOME_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{app_name}</title>
</head>
<body>
    <h1>{app_name}</h1>
    <p>Welcome to {app_name}, a wiki for Islamic knowledge.</p>
    <h2>Extensions</h2>
    <ul>{extensions}
    </ul>
</body>
</html>"""


class HomeController(Controller):
    async def index(self, request: Request) -> HTMLResponse:
        settings = self.container.get(Settings) if self.container.has(Settings) else Settings()
        extensions = ""
        if self.container.has(ExtensionManager):
            for extension in self.container.get(ExtensionManager).get_loaded_extensions().values():
                extensions += f"\n        <li>{html.escape(extension.name)} {html.escape(extension.version)}</li>"
        if not extensions:
            extensions = "\n        <li>No extensions loaded</li>"
        app_name = html.escape(settings.app_name)
        return self.html(HOME_TEMPLATE.format(app_name=app_name, extensions=extensions))
