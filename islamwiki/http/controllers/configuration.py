"""
Configuration controller.

JSON endpoints over the ``ConfigurationManager``. Sensitive values are
masked on read. Updating a value requires an administrator session; the
route is registered behind ``AuthenticationMiddleware``.
"""

from __future__ import annotations

from typing import Any, Dict

from starlette.requests import Request
from starlette.responses import JSONResponse

from islamwiki.core.configuration import ConfigurationManager
from islamwiki.core.errors import HttpException
from islamwiki.http.utils import client_ip

from .base import Controller

MASKED_VALUE = "********"


class ConfigurationController(Controller):
    @property
    def manager(self) -> ConfigurationManager:
        return self.container.get(ConfigurationManager)

    async def categories(self, request: Request) -> JSONResponse:
        return self.json({"categories": list(self.manager.get_categories().values())})

    async def show(self, request: Request, category: str) -> JSONResponse:
        values = self.manager.get_category(category)
        if not values and category not in self.manager.get_categories():
            raise HttpException.not_found(f"Unknown configuration category: {category}")
        for config in values.values():
            if config["is_sensitive"]:
                config["value"] = MASKED_VALUE
        return self.json({"category": category, "configuration": values})

    async def update(self, request: Request, category: str, key: str) -> JSONResponse:
        """
        Set one configuration value.

        The value is read from a JSON body ``{"value": ...}`` or the ``value``
        form field.

        Raises:
            HttpException: 403 for non-admin users, 404 for unknown keys,
                400 for a missing value and 422 for rejected values
        """
        session = self.session(request)
        if session is None or not session.is_admin:
            raise HttpException.forbidden("Administrator access required")

        full_key = f"{category}.{key}"
        if not self.manager.has(full_key):
            raise HttpException.not_found(f"Unknown configuration key: {full_key}")

        payload = await self._read_payload(request)
        if "value" not in payload:
            raise HttpException.bad_request("Missing 'value'")

        request_info = {"ip_address": client_ip(request), "user_agent": request.headers.get("user-agent")}
        if not await self.manager.set_value(full_key, payload["value"], session.user_id, request_info):
            raise HttpException(422, f"Invalid value for {full_key}")

        self.logger.info(f"Configuration {full_key} updated by user {session.user_id}")
        return self.json({"key": full_key, "value": self.manager.get_value(full_key)})

    async def _read_payload(self, request: Request) -> Dict[str, Any]:
        if request.headers.get("content-type", "").startswith("application/json"):
            try:
                data = await request.json()
            except ValueError as e:
                raise HttpException.bad_request("Invalid JSON body") from e
            return data if isinstance(data, dict) else {}
        form = await request.form()
        return dict(form)
