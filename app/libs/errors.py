class APIError(Exception):
    """Base API error with status code and message"""

    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv["message"] = self.message
        return rv


class BadRequestError(APIError):
    """Malformed or missing input"""

    def __init__(self, message="Bad request", status_code=400):
        super().__init__(message, status_code)


class AuthError(APIError):
    """Authentication errors"""

    def __init__(self, message="Authentication required", status_code=401):
        super().__init__(message, status_code)


class ForbiddenError(APIError):
    """Authenticated but not entitled"""

    def __init__(self, message="Forbidden", status_code=403):
        super().__init__(message, status_code)


class NotFoundError(APIError):
    """Resource not found errors"""

    def __init__(self, message="Resource not found", status_code=404):
        super().__init__(message, status_code)


class ConflictError(APIError):
    """Duplicate or missing reaction, duplicate unique field"""

    def __init__(self, message="Conflict", status_code=409):
        super().__init__(message, status_code)
