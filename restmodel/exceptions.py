# restmodel/exceptions.py

class RestModelError(Exception):
    """Base exception for restmodel operations"""
    pass

class ConfigurationError(RestModelError):
    """Raised when settings or call options are invalid"""
    pass

class MissingIdError(ConfigurationError):
    """Raised when an operation needs a resource id and none is available"""

    def __init__(self, message: str = None):
        super().__init__(
            message
            or "id parameter must be provided in options or object's id field "
               "must be set before calling this method."
        )

class InvalidModelError(ConfigurationError, TypeError):
    """Raised when a model argument is not an instance of the expected type"""
    pass

class RequestFailedError(RestModelError):
    """Raised when the transport fails or the server answers with an error status"""

    def __init__(self, response=None, request=None, status_code: int = None):
        self.response = response
        self.request = request
        self.status_code = status_code
        target = f"{request.method} {request.url}" if request is not None else "request"
        if status_code is not None:
            message = f"{target} failed: {status_code} - {response}"
        else:
            message = f"{target} failed: {response}"
        super().__init__(message)
