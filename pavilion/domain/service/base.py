"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the rules that span several entities, here the
    invite lifecycle and credential handling.
    """

    pass
