class NotProvided:
    """Default for builder arguments the caller left out.

    DuskConfig setters compare against the class itself, so an explicit
    ``None`` (e.g. ``application(base_url=None)``) still overrides a value.
    """
