from __future__ import annotations

import logging

from stockjournal.application.container import AppContainer, build_container
from stockjournal.config import get_app_paths, get_gateway_settings
from stockjournal.logging_config import setup_logging


def bootstrap(level: int = logging.INFO) -> AppContainer:
    paths = get_app_paths()
    setup_logging(paths.logs_dir, level=level)
    return build_container(get_gateway_settings())
