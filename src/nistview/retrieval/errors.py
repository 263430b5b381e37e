class LoadError(RuntimeError):
    """Neither the remote catalog nor the embedded fallback produced a record set."""
