"""Locate the Dispatcher a command line points at.

``charon run`` and ``charon routes`` both take a target of the form
``package.module[:name]``.
"""

import importlib

from charon.app import Dispatcher

DEFAULT_ATTRIBUTE = "dispatcher"


def _split_target(target: str) -> tuple[str, str]:
    module_name, _, attribute = target.partition(":")
    if not module_name:
        msg = f"No module given in {target!r}; expected 'package.module[:name]'"
        raise ModuleNotFoundError(msg)
    return module_name, attribute or DEFAULT_ATTRIBUTE


def resolve_dispatcher(target: str) -> Dispatcher:
    """Import *target* and return the Dispatcher it names.

    ``name`` defaults to ``dispatcher``. When it refers to a function
    rather than a Dispatcher, the function is called with no arguments
    and must build one.

    Raises:
        ModuleNotFoundError: The module is missing or not named at all.
        AttributeError: The module has no such name.
        TypeError: The name, or what its builder returns, is not a Dispatcher.
    """
    module_name, attribute = _split_target(target)
    module = importlib.import_module(module_name)
    try:
        found = getattr(module, attribute)
    except AttributeError:
        msg = f"Module {module_name!r} has no attribute {attribute!r}"
        raise AttributeError(msg) from None

    if isinstance(found, Dispatcher):
        return found
    if not callable(found):
        msg = f"{target!r} is a {type(found).__name__}, not a charon.Dispatcher"
        raise TypeError(msg)

    try:
        built = found()
    except Exception as exc:
        msg = f"Building the dispatcher from {target!r} failed: {exc}"
        raise TypeError(msg) from exc
    if not isinstance(built, Dispatcher):
        msg = f"{target!r} returned a {type(built).__name__}, not a charon.Dispatcher"
        raise TypeError(msg)
    return built
