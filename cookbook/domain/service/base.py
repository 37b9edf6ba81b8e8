"""Base class for domain services."""


class Service:
    """Marker base for comment and rating services.

    Services hold the rules that span several comments or reach outside
    the comment store, such as rating policy and recipe rating upkeep.
    """
