from app.core.config import settings
from app.core.logging import get_logger, logger


def test_module_loggers_are_children_of_app_logger():
    module_logger = get_logger("app.chat.relay")

    assert module_logger.name == f"{settings.APP_NAME}.app.chat.relay"
    assert logger.propagate is False
    assert logger.handlers
