"""
Explicit event → journal generator registry.

Generators register against one event class each; dispatch() looks the
handler up by the event's kind. Nothing is discovered implicitly: the
generator modules are imported from LedgerCoreConfig.ready().
"""
import logging

logger = logging.getLogger(__name__)

# event kind → generator instance
_REGISTRY = {}


def register(event_cls):
    """Class decorator: bind a JournalGenerator subclass to an event class."""

    def decorator(generator_cls):
        if event_cls.kind in _REGISTRY:
            raise RuntimeError(
                f"A generator is already registered for {event_cls.kind}")
        generator_cls.event_type = event_cls
        _REGISTRY[event_cls.kind] = generator_cls()
        return generator_cls

    return decorator


def generator_for(kind):
    try:
        return _REGISTRY[kind]
    except KeyError:
        raise LookupError(f"No journal generator registered for {kind!r}")


def registered_kinds():
    return sorted(_REGISTRY)


def dispatch(event):
    """Hand an event to its generator; returns the JournalEntry or None."""
    generator = generator_for(event.kind)
    logger.debug(
        "Dispatching event",
        extra={"event_kind": event.kind, "reference_id": event.reference_id},
    )
    return generator.handle(event)
