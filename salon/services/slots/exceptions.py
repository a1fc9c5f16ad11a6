# salon/services/slots/exceptions.py


class InvalidArgument(ValueError):
    """Malformed input to slot computation (calendar, duration, date or time)."""
