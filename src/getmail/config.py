"""Application configuration.

AppConfig is a frozen dataclass, immutable after creation, IDE-autocompletable.
``load_config()`` builds one from layered sources: TOML files in a config
directory (merged in alphabetical order, later files win), then environment
variables as a fallback for any key the files leave unset.
"""

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from types import MappingProxyType
from typing import Any

from getmail.errors import ConfigurationError
from getmail.routes import DEFAULT_ROUTER

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have defaults. Override what you need::

        config = AppConfig(debug=True, api_key="key", api_token="token")

    Keys not declared here (from config files) are kept in ``extra`` and
    reachable through ``get()``.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Application
    app_name: str = "getmail"
    version: str = "no-version"
    deployment_environment: str = "production"
    env_var_prefix: str = "GETMAIL_"

    # Logging
    log_tag: str = "GETMAIL"
    log_level: str = "info"

    # Security
    secret_key: str = ""  # Enables signed cookie sessions when set
    session_cookie: str = "getmail_session"
    api_key: str = ""
    api_token: str = ""

    # Mail
    mail_imap_host: str = ""
    mail_imap_port: int = 993
    mail_username: str = ""
    mail_password: str = ""
    mail_mailbox: str = "INBOX"
    min_subject_length: int = 5

    # Routing
    max_forward_depth: int = 8
    assets_dir: str | None = None  # None = assets bundled with the package
    router: Mapping[str, Any] = field(default_factory=lambda: DEFAULT_ROUTER)

    extra: Mapping[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a value by key, declared field or extra.

        ``None`` is returned as-is when a key exists with a null value,
        *default* only when the key is absent.
        """
        key = key.strip()
        if not key:
            return default
        if key in _FIELD_DEFAULTS and key != "extra":
            return getattr(self, key)
        return self.extra.get(key, default)


# Slotted dataclasses do not keep defaults as class attributes.
# Fields with a default_factory map to dataclasses.MISSING.
_FIELD_DEFAULTS: dict[str, Any] = {f.name: f.default for f in fields(AppConfig)}

# Sections that can only come from files (structured values)
_FILE_ONLY = frozenset({"router", "extra"})


def load_config(
    config_dir: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> AppConfig:
    """Build an ``AppConfig`` from config files and environment variables.

    Resolution order for each key, first hit wins:

    1. *overrides* (keyword arguments, mostly for tests)
    2. ``*.toml`` files in *config_dir*, merged alphabetically. Name them
       so the application-wide file sorts first and a local override file
       (e.g. ``zz.local.toml``) sorts last
    3. ``<env_var_prefix><KEY>`` environment variables (``GETMAIL_API_KEY``)
    4. The ``AppConfig`` default

    Raises ``ConfigurationError`` for unreadable files or values that
    cannot be converted to the field type.
    """
    merged: dict[str, Any] = {}
    if config_dir is not None:
        directory = Path(config_dir)
        if not directory.is_dir():
            msg = f"Config directory {str(directory)!r} does not exist."
            raise ConfigurationError(msg)
        for path in sorted(directory.glob("*.toml")):
            try:
                with path.open("rb") as fh:
                    merged.update(tomllib.load(fh))
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {path.name}: {exc}"
                raise ConfigurationError(msg) from exc
    merged.update(overrides)

    env = os.environ if environ is None else environ
    prefix = str(merged.get("env_var_prefix", _FIELD_DEFAULTS["env_var_prefix"]))

    known: dict[str, Any] = {}
    for name, default in _FIELD_DEFAULTS.items():
        if name in _FILE_ONLY:
            continue
        if name in merged:
            known[name] = _coerce(name, merged[name], default)
            continue
        env_value = env.get(f"{prefix}{name.upper()}")
        if env_value is not None:
            known[name] = _coerce(name, env_value, default)

    if "router" in merged:
        router = merged["router"]
        if not isinstance(router, Mapping):
            msg = "The [router] section must be a table."
            raise ConfigurationError(msg)
        known["router"] = MappingProxyType(dict(router))

    extra = {k: v for k, v in merged.items() if k not in _FIELD_DEFAULTS}
    return AppConfig(**known, extra=MappingProxyType(extra))


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Convert *value* to the type of the field's default."""
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        msg = f"Config key {name!r} expects a boolean, got {value!r}."
        raise ConfigurationError(msg)
    if isinstance(default, int):
        try:
            return int(value)
        except (TypeError, ValueError):
            msg = f"Config key {name!r} expects an integer, got {value!r}."
            raise ConfigurationError(msg) from None
    if value is None:
        return None
    return str(value)
