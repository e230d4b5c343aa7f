"""Base class for domain services."""


class Service:
    """Marker base for domain services.

    Services hold the rules that span entities: the membership gate, the
    RSVP state machine and score calculation. They receive repositories and
    settings through their constructors and never touch the database session.
    """
