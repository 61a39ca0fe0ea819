from dishka import Provider as DishkaProvider

from mdgate.util.di.scope import Scope


class Provider(DishkaProvider):
    """Base for all mdgate DI providers.

    Defaults to the APP scope; per-request factories declare ``Scope.UOW``.
    """

    scope = Scope.APP
