"""The active configuration for the current thread or task.

Startup, the CLI and request handlers read the configuration through
:func:`get_config`. Tests and one-off commands swap parts of it with
:func:`using_config`, which only lasts for the ``with`` block.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token

from pydantic import BaseModel

from book_catalog.runtime.config.config_data import ConfigData
from book_catalog.runtime.config.config_template import load_config

_active_config: ContextVar[ConfigData] = ContextVar(
    "book_catalog_config", default=load_config()
)


def get_config() -> ConfigData:
    return _active_config.get()


def set_config(config: ConfigData) -> Token[ConfigData]:
    """Replace the whole configuration for the current context."""
    return _active_config.set(config)


def _overlay(base: BaseModel, override: BaseModel) -> dict:
    """Collect the values of ``override`` that were set explicitly.

    Sections are walked recursively, so ``ConfigData(database=DatabaseConfig(
    skip_bootstrap=True))`` changes that one flag and keeps the rest of the
    database section. A section passed without any fields of its own replaces
    the base section whole.
    """
    updates = {}
    for name in type(override).model_fields:
        value = getattr(override, name)
        if isinstance(value, BaseModel) and value.model_fields_set:
            section = getattr(base, name)
            updates[name] = section.model_copy(update=_overlay(section, value))
        elif name in override.model_fields_set:
            updates[name] = value
    return updates


@contextmanager
def using_config(override: ConfigData | None = None) -> Iterator[ConfigData]:
    """Apply the explicitly set fields of ``override`` inside the block.

    Example:
        with using_config(ConfigData(database=DatabaseConfig(skip_bootstrap=True))):
            assert get_config().database.skip_bootstrap is True
    """
    if override is None:
        yield get_config()
        return

    if not isinstance(override, ConfigData):
        raise ValueError(f"override must be ConfigData or None, got {type(override)}")

    current = get_config()
    token = set_config(current.model_copy(update=_overlay(current, override)))
    try:
        yield get_config()
    finally:
        _active_config.reset(token)
