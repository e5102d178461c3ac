"""
Route definition.

A route maps a set of HTTP methods and a path pattern onto a handler. Path
patterns use ``{name}`` placeholders, each matching exactly one path
segment::

    /wiki/{slug}            matches /wiki/Prayer, not /wiki/a/b
    /api/configuration/{category}/{key}
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Pattern, Tuple, Union
from urllib.parse import quote

PLACEHOLDER = re.compile(r"\{([^{}/]+)\}")
SEGMENT = "([^/]+)"

Handler = Union[str, Any]


def compile_pattern(pattern: str) -> Tuple[Pattern[str], List[str]]:
    """
    Compile a route pattern into an anchored regular expression.

    Args:
        pattern: Path pattern with ``{name}`` placeholders

    Returns:
        The compiled regex and the placeholder names in pattern order
    """
    parts = []
    names = []
    position = 0
    for placeholder in PLACEHOLDER.finditer(pattern):
        parts.append(re.escape(pattern[position : placeholder.start()]))
        parts.append(SEGMENT)
        names.append(placeholder.group(1).strip())
        position = placeholder.end()
    parts.append(re.escape(pattern[position:]))
    return re.compile(r"\A" + "".join(parts) + r"\Z"), names


class Route:
    """A single registered route."""

    def __init__(
        self,
        methods: Union[str, Iterable[str]],
        pattern: str,
        handler: Handler,
        middleware: Optional[Iterable[Any]] = None,
        name: Optional[str] = None,
    ) -> None:
        if isinstance(methods, str):
            methods = [methods]
        self.methods = frozenset(method.upper() for method in methods)
        self.pattern = pattern
        self.handler = handler
        self.middleware = list(middleware or [])
        self.name = name
        self.regex, self.param_names = compile_pattern(pattern)

    def __repr__(self) -> str:
        return f"Route(methods={sorted(self.methods)}, pattern={self.pattern!r}, name={self.name!r})"

    def allows(self, method: str) -> bool:
        return method.upper() in self.methods

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """
        Match a request path.

        Returns:
            Placeholder values keyed by name, or None when the path does not match
        """
        matched = self.regex.fullmatch(path)
        if matched is None:
            return None
        return dict(zip(self.param_names, matched.groups()))

    def build_path(self, **params: Any) -> str:
        """
        Substitute placeholder values into the pattern.

        Raises:
            ValueError: If a placeholder value is missing
        """
        missing = [name for name in self.param_names if name not in params]
        if missing:
            raise ValueError(f"Missing route parameters for {self.pattern}: {', '.join(missing)}")

        def substitute(placeholder: "re.Match[str]") -> str:
            return quote(str(params[placeholder.group(1).strip()]), safe="")

        return PLACEHOLDER.sub(substitute, self.pattern)


@dataclass
class RouteMatch:
    """Result of a successful route lookup."""

    route: Route
    params: Dict[str, str] = field(default_factory=dict)

    @property
    def handler(self) -> Handler:
        return self.route.handler

    @property
    def middleware(self) -> List[Any]:
        return self.route.middleware
