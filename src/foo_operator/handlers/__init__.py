"""Handler modules for Foo resources and linked pods."""

# Import handlers to register them - all handlers register themselves via @kopf decorators
from . import foo  # noqa: F401
from . import pod  # noqa: F401
