"""Locate the routing engine: CLI flag > environment > .env file."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import os
import sys
from pathlib import Path
from typing import Any

from dotenv import dotenv_values


ENV_VAR = "ROUTECHECK_ROUTES"
ENV_FILE = Path(".env")


class ConfigError(Exception):
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def engine_ref(cli_ref: str | None = None, env_file: Path = ENV_FILE) -> str:
    """Resolve the engine reference using the precedence chain."""
    ref = cli_ref or os.environ.get(ENV_VAR)
    if not ref and env_file.exists():
        ref = dotenv_values(env_file).get(ENV_VAR)
    if not ref:
        raise ConfigError(
            "ENGINE_REQUIRED",
            f"No routing engine given. Pass --routes module:attribute or set {ENV_VAR}.",
        )
    return ref


def _load_module(module_ref: str) -> Any:
    if module_ref.endswith(".py"):
        path = Path(module_ref).expanduser().resolve()
        if not path.exists():
            raise ConfigError("IMPORT_ERROR", f"File not found: {module_ref}")
        loaded = sys.modules.get(path.stem)
        if loaded is not None and getattr(loaded, "__file__", None) == str(path):
            return loaded
        name = path.stem if loaded is None else f"{path.stem}_{len(sys.modules)}"
        spec = importlib.util.spec_from_file_location(name, path)
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(name, None)
            raise ConfigError("IMPORT_ERROR", f"Cannot load '{module_ref}': {e}") from e
        return module
    try:
        return importlib.import_module(module_ref)
    except Exception as e:
        raise ConfigError("IMPORT_ERROR", f"Cannot import '{module_ref}': {e}") from e


def import_object(ref: str) -> Any:
    """Import ``module:attr.path`` or ``file.py:attr.path``."""
    module_ref, sep, attr_path = ref.rpartition(":")
    if not sep or not module_ref or not attr_path:
        raise ConfigError("IMPORT_ERROR", f"Expected 'module:attribute', got '{ref}'")
    obj = _load_module(module_ref)
    for name in attr_path.split("."):
        try:
            obj = getattr(obj, name)
        except AttributeError as e:
            raise ConfigError("IMPORT_ERROR", f"'{ref}' has no attribute '{name}'") from e
    return obj


def load_engine(ref: str) -> Any:
    """Import the routing engine; a callable without ``match`` is used as a factory."""
    engine = import_object(ref)
    if isinstance(engine, type) or (not hasattr(engine, "match") and callable(engine)):
        engine = engine()
    if not hasattr(engine, "match"):
        raise ConfigError("IMPORT_ERROR", f"'{ref}' is not a routing engine (no match method)")
    return engine
