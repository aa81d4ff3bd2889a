"""Anvil engine bootstrap: builds the service the host adapter talks to."""

from typing import Optional

from src.config import Settings, settings
from src.core.anvil.rules import AnvilRules
from src.core.event_bus import EventBus
from src.core.logging import get_logger, setup_logging
from src.services.anvil_service import AnvilService

logger = get_logger(__name__)


def create_anvil_service(
    app_settings: Optional[Settings] = None,
    event_bus: Optional[EventBus] = None,
) -> AnvilService:
    """Load data tables and wire an AnvilService.

    The host adapter owns the returned service for its lifetime and calls
    prepare / finish_interaction / click_output from its event callbacks.
    """
    app_settings = app_settings or settings
    setup_logging(app_settings.LOG_LEVEL)

    logger.info("Loading anvil rules...")
    rules = AnvilRules.from_settings(app_settings)
    logger.info(
        "Anvil rules loaded (%d enchant values, %d conflict groups, %d repair materials).",
        rules.tags.count(),
        len(rules.conflicts.groups),
        len(rules.unit_repair.materials()),
    )

    return AnvilService(event_bus or EventBus(), rules)
