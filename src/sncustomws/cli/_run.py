"""``sncustomws run``: resolve an app and serve it with pounce."""

import argparse
import sys

from sncustomws.cli._resolve import apply_properties, resolve_app


def run_server(args: argparse.Namespace) -> None:
    try:
        app = resolve_app(args.app)
        apply_properties(app, args.properties)
    except (ModuleNotFoundError, AttributeError, TypeError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    app.run(host=args.host, port=args.port)
