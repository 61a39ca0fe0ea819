"""Custom Dishka scopes for mdgate."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """mdgate dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Application lifetime (config, clients, stateless services)
    - UOW: Unit of Work (one HTTP request)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
