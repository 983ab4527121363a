"""FastAPI dependency injection and engine error translation."""

import logging
from contextlib import contextmanager

from fastapi import HTTPException

from src.config import Settings, settings
from src.engine.errors import InvalidInputError, NeverAmortizesError

logger = logging.getLogger(__name__)


def get_settings() -> Settings:
    return settings


@contextmanager
def engine_errors():
    """Turn engine validation failures into HTTP errors.

    A payment that never amortizes is a 422 with guidance rather than a bad
    request: each input is valid on its own.
    """
    try:
        yield
    except NeverAmortizesError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except InvalidInputError as e:
        logger.debug("Rejected calculator input: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
