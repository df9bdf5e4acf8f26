"""Select the adapter variant named by the configuration."""

from __future__ import annotations

import logging
import random
from typing import Callable

from .config import BridgeConfig
from .core.adapters import DemoAdapter, GeminiAdapter, GeminiBackend, ModelAdapter

LOGGER = logging.getLogger(__name__)

BackendFactory = Callable[[BridgeConfig], GeminiBackend]


def create_adapter(
    config: BridgeConfig,
    *,
    backend_factory: BackendFactory | None = None,
    logger: logging.Logger | None = None,
) -> ModelAdapter:
    """Build the Live or Demo adapter for ``config``.

    Live mode needs ``backend_factory`` to construct the Gemini network client
    from the configuration.
    """

    log = logger or LOGGER

    if config.mode == "demo":
        rng = random.Random(config.demo_seed) if config.demo_seed is not None else None
        return DemoAdapter(
            rng=rng,
            response_delay=config.demo_response_delay,
            word_delay=config.demo_word_delay,
            logger=logger,
        )

    if backend_factory is None:
        msg = "live mode requires a backend_factory"
        raise ValueError(msg)

    log.info("using OAuth credentials file path=%s", config.oauth_creds_path)
    backend = backend_factory(config)
    return GeminiAdapter(backend, logger=logger)


__all__ = ["BackendFactory", "create_adapter"]
