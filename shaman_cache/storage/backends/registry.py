"""
Backend registry and resolution.

Maps each backend kind to its implementation and builds the backend selected by
a parsed connection URI.
"""

import logging
from typing import Dict, Optional, Type

from ...config import BackendKind, ConnectionTarget
from ..interfaces import Cacher
from .boltdb import BoltStorage
from .consul import ConsulStorage
from .postgres import PostgresStorage
from .scribble import ScribbleStorage

logger = logging.getLogger(__name__)


# Registry of available backend implementations
BACKEND_REGISTRY: Dict[BackendKind, Type[Cacher]] = {
    BackendKind.BOLTDB: BoltStorage,
    BackendKind.POSTGRES: PostgresStorage,
    BackendKind.SCRIBBLE: ScribbleStorage,
    BackendKind.CONSUL: ConsulStorage,
}


def get_backend(target: ConnectionTarget) -> Optional[Cacher]:
    """Build the backend selected by a connection target.

    Args:
        target: Parsed connection URI

    Returns:
        An uninitialized backend, or None for the `none` kind

    Raises:
        StorageError: If the URI is not usable by the selected backend
    """
    if target.kind is BackendKind.NONE:
        logger.debug("not using storage")
        return None

    backend_class = BACKEND_REGISTRY[target.kind]
    logger.debug("using %s storage", target.kind.value)
    return backend_class.from_uri(target.parts)
