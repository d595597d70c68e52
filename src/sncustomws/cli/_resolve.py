"""App import resolution for the CLI commands."""

import importlib
from collections.abc import Sequence

from sncustomws.app import App
from sncustomws.config import Properties


def resolve_app(import_string: str) -> App:
    """Resolve ``"module:attribute"`` to an App instance.

    The attribute defaults to ``app``. A callable that is not an App is
    treated as a factory and called with no arguments.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not an ``App``.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "app"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, App):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, App):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not an sncustomws.App instance"
        raise TypeError(msg)

    return obj


def apply_properties(app: App, files: Sequence[str]) -> None:
    """Layer the properties in *files* over *app*'s own, later files winning."""
    if files:
        app.properties = app.properties.with_overrides(Properties.load(*files))
