"""Base service class for domain services."""


class Service:
    """Base class for domain services.

    Services hold the rules that span issues, users and the map: report
    validation, admin-only triage, clustering and geocoding fallbacks.
    They never touch HTTP or the WebSocket.
    """

    pass
