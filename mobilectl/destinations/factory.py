"""Destination client factory"""

from typing import Any, Dict, List, Optional, Type, Union

from ..api.exceptions import DestinationError
from ..constants import DestinationType, Platform, PLATFORM_DESTINATIONS
from ..utils.process_utils import CommandRunner
from .app_store_connect import AppStoreClient, TestFlightClient
from .base import DestinationClient
from .firebase import FirebaseClient
from .local import LocalClient
from .play_console import PlayConsoleClient


class DestinationFactory:
    """Factory for creating destination clients"""

    # Registry of destination clients
    _clients: Dict[DestinationType, Type[DestinationClient]] = {
        DestinationType.FIREBASE: FirebaseClient,
        DestinationType.PLAY_CONSOLE: PlayConsoleClient,
        DestinationType.LOCAL: LocalClient,
        DestinationType.TESTFLIGHT: TestFlightClient,
        DestinationType.APP_STORE: AppStoreClient,
    }

    @classmethod
    def parse(cls, destination: Union[str, DestinationType]) -> DestinationType:
        """Destination enum from its name

        Raises:
            DestinationError: Unknown destination name
        """
        if isinstance(destination, DestinationType):
            return destination
        normalized = str(destination).strip().lower().replace('_', '-')
        try:
            return DestinationType(normalized)
        except ValueError:
            raise DestinationError(str(destination), "unknown destination")

    @classmethod
    def create(cls, destination: Union[str, DestinationType], config: Dict[str, Any],
               runner: Optional[CommandRunner] = None) -> DestinationClient:
        """Create a destination client

        Args:
            destination: Destination type or name
            config: Destination configuration dictionary
            runner: Command runner handed to the client

        Returns:
            Destination client instance

        Raises:
            DestinationError: If the destination is not supported
        """
        destination_type = cls.parse(destination)
        if destination_type not in cls._clients:
            raise DestinationError(destination_type.value, "unsupported destination")
        return cls._clients[destination_type](config, runner=runner)

    @classmethod
    def register(cls, destination: DestinationType, client_class: Type[DestinationClient]):
        """Register a client class for a destination"""
        cls._clients[destination] = client_class

    @classmethod
    def supported_types(cls) -> List[str]:
        return [destination.value for destination in cls._clients]

    @classmethod
    def is_supported(cls, destination: str) -> bool:
        try:
            return cls.parse(destination) in cls._clients
        except DestinationError:
            return False

    @classmethod
    def destinations_for(cls, platform: Platform) -> List[DestinationType]:
        """Registered destinations that serve a platform, in attempt order"""
        return [
            destination for destination in PLATFORM_DESTINATIONS.get(platform, [])
            if destination in cls._clients
        ]
