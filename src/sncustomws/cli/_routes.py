"""``sncustomws routes``: list the active routes.

Prints one row per route with its methods, path, handler, and the
override priority recorded for its mapping (``-`` when the route did not
take part in override resolution).
"""

import argparse
import sys

from sncustomws.cli._resolve import apply_properties, resolve_app
from sncustomws.errors import ConfigurationError


def run_routes(args: argparse.Namespace) -> None:
    try:
        app = resolve_app(args.app)
        apply_properties(app, args.properties)
    except (ModuleNotFoundError, AttributeError, TypeError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    try:
        router = app.router
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = router.routes
    if not routes:
        print("No routes registered.")
        return

    overrides = app.overrides
    rows: list[tuple[str, str, str, str]] = []
    for route in routes:
        handler = route.handler
        handler_name = f"{handler.__module__}.{handler.__qualname__}"
        priority = overrides.get(route.key) if route.key is not None else None
        rows.append(
            (
                ", ".join(sorted(route.methods)),
                route.path,
                handler_name,
                "-" if priority is None else str(priority),
            )
        )

    max_methods = max(6, *(len(r[0]) for r in rows))
    max_path = max(4, *(len(r[1]) for r in rows))
    max_handler = max(7, *(len(r[2]) for r in rows))

    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{:<{max_handler}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "HANDLER", "PRIORITY"))
    print("-" * min(max_methods + max_path + max_handler + 14, 100))
    for row in rows:
        print(fmt.format(*row))
