class InputBackendError(Exception):
    pass
