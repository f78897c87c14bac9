# formsafe/core/service_base.py
"""
Base service class for backends the session stores talk to.

Services share one lazy initialization routine, one way of reporting
failures and one shutdown path.
"""
from abc import ABC, abstractmethod
from typing import Optional, Any, TypeVar, Generic
import logging
from formsafe.core.exceptions import ServiceError, ConfigurationError

# Type variable for service configuration
ConfigType = TypeVar('ConfigType')


class BaseService(ABC, Generic[ConfigType]):
    """Abstract base class for synchronous backend services."""

    def __init__(
        self,
        config: Optional[ConfigType] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.config = config
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self._initialized = False
        self._client = None

        self.service_name = self.__class__.__name__

    @abstractmethod
    def _initialize_client(self) -> Any:
        """
        Create and configure the underlying client.

        Raises:
            ConfigurationError: If configuration is invalid
        """

    def initialize(self) -> None:
        """
        Connect the service. Idempotent; later calls do nothing.

        Raises:
            ConfigurationError: If the configuration is unusable
            ServiceError: If the backend cannot be reached
        """
        if self._initialized:
            self.logger.debug(f"{self.service_name} already initialized")
            return

        try:
            self.logger.info(f"Initializing {self.service_name}...")
            self._validate_config()
            self._client = self._initialize_client()
            self._initialized = True
            self.logger.info(f"{self.service_name} initialized successfully")

        except ConfigurationError:
            raise
        except Exception as e:
            error_msg = f"Failed to initialize {self.service_name}"
            self.logger.error(error_msg, exc_info=True)
            raise ServiceError(
                error_msg,
                service_name=self.service_name,
                details={'original_error': str(e), 'error_type': type(e).__name__}
            ) from e

    def _validate_config(self) -> None:
        if self.config is None:
            raise ConfigurationError(
                f"No configuration provided for {self.service_name}",
                component=self.service_name
            )

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def client(self) -> Any:
        """
        Get the underlying client.

        Raises:
            ServiceError: If service is not initialized
        """
        if not self._initialized or self._client is None:
            raise ServiceError(
                f"{self.service_name} is not initialized. Call initialize() first.",
                service_name=self.service_name
            )
        return self._client

    def shutdown(self) -> None:
        """Release the client; the service can be initialized again afterwards."""
        if not self._initialized:
            return

        try:
            self.logger.info(f"Shutting down {self.service_name}...")
            self._cleanup()
        except Exception:
            # The service is reset either way
            self.logger.error(f"Error during {self.service_name} shutdown", exc_info=True)
        finally:
            self._client = None
            self._initialized = False

    def _cleanup(self) -> None:
        """Service-specific cleanup; override to close connections."""
