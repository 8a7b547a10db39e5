"""PreferenceTree - the owner of the user and system roots.

A PreferenceTree composes one backing store, one lock, one persistence
coordinator and the two scope roots. The process-wide default tree is
created lazily, exactly once, on first use of PreferenceTree.default()
and is never torn down.
"""

import logging
import threading
from typing import Optional, Union

from ._common.config import Scope, StoreConfig
from . import xmlcodec
from .backends.base import BackingStore
from .errors import InvalidArgumentError, InvalidStateError, NullInputError
from .node import PreferenceNode
from .persistence import PersistenceCoordinator

logger = logging.getLogger(__name__)


class PreferenceTree:
    """Two independent preference trees (user and system) over one store.

    Example:
        >>> tree = PreferenceTree(StoreConfig.in_memory())
        >>> node = tree.user_root().node("com/example/app")
        >>> node.put_int("width", 640)
        >>> node.flush()
    """

    _default: Optional['PreferenceTree'] = None
    _default_config: Optional[StoreConfig] = None
    _default_lock = threading.Lock()

    def __init__(self, config: Optional[StoreConfig] = None, store: Optional[BackingStore] = None):
        """Create a tree.

        Args:
            config: Store configuration (defaults to StoreConfig.from_env())
            store: Backing store to use instead of the one config describes

        Raises:
            InvalidArgumentError: If config is invalid
        """
        self.config = config if config is not None else StoreConfig.from_env()
        if store is None:
            errors = self.config.validate()
            if errors:
                raise InvalidArgumentError("Invalid store configuration: " + "; ".join(errors))
            store = self.config.create_store()
        self.store = store
        self.lock = threading.RLock()
        self.coordinator = PersistenceCoordinator(store, self.lock)
        self._roots = {
            scope: PreferenceNode(self, scope, "", None)
            for scope in Scope
        }

    @classmethod
    def default(cls) -> 'PreferenceTree':
        """Return the process-wide tree, creating it on first call."""
        if cls._default is None:
            with cls._default_lock:
                if cls._default is None:
                    cls._default = cls(cls._default_config)
                    logger.info("Initialized default preference tree on %r", cls._default.store)
        return cls._default

    @classmethod
    def configure(cls, config: StoreConfig) -> None:
        """Set the configuration of the process-wide tree before its first use.

        Raises:
            NullInputError: If config is None
            InvalidStateError: If the default tree already exists
        """
        if config is None:
            raise NullInputError("config must not be None")
        with cls._default_lock:
            if cls._default is not None:
                raise InvalidStateError("The default preference tree is already initialized")
            cls._default_config = config

    def root(self, scope: Union[Scope, str]) -> PreferenceNode:
        """Return the root of the given scope ('user' or 'system')."""
        if scope is None:
            raise NullInputError("scope must not be None")
        try:
            scope = Scope(scope)
        except ValueError:
            raise InvalidArgumentError(f"Unknown scope: {scope!r}") from None
        return self._roots[scope]

    def user_root(self) -> PreferenceNode:
        return self._roots[Scope.USER]

    def system_root(self) -> PreferenceNode:
        return self._roots[Scope.SYSTEM]

    def import_preferences(self, stream) -> Scope:
        """Import an XML preferences document; see xmlcodec.import_preferences."""
        return xmlcodec.import_preferences(self, stream)

    def __repr__(self) -> str:
        return f"PreferenceTree(store={self.store!r})"
