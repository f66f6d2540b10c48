# mobilectl/destinations/__init__.py

"""Distribution destination clients"""

from .base import DestinationClient
from .firebase import FirebaseClient, app_id_from_google_services
from .play_console import PlayConsoleClient
from .app_store_connect import AppStoreConnectClient, TestFlightClient, AppStoreClient, read_api_key
from .local import LocalClient
from .factory import DestinationFactory

__all__ = [
    'DestinationClient',
    'FirebaseClient',
    'PlayConsoleClient',
    'AppStoreConnectClient',
    'TestFlightClient',
    'AppStoreClient',
    'LocalClient',
    'DestinationFactory',
    'app_id_from_google_services',
    'read_api_key',
]
