"""
Domain exceptions.

Every error the services raise on bad input derives from ``AppError`` and
carries the HTTP status and machine-readable code the API layer renders.
``CatalogConfigurationError`` is the exception: it is raised while the
catalog loads and aborts startup instead of reaching a request.
"""


class CatalogConfigurationError(Exception):
    """The questionnaire catalog definition is invalid."""


class AppError(Exception):
    status_code: int = 400
    code: str = "BAD_REQUEST"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(AppError):
    pass


class NotFound(AppError):
    status_code = 404
    code = "NOT_FOUND"


class CategoryNotFound(NotFound):
    def __init__(self, category_id: str):
        super().__init__(f"Category not found: {category_id}")
        self.category_id = category_id


class ProfileNotFound(NotFound):
    def __init__(self, user_id: str):
        super().__init__(f"User profile not found for userId: {user_id}")
        self.user_id = user_id


class ExperienceNotFound(NotFound):
    def __init__(self, experience_id: str):
        super().__init__(f"Experience not found: {experience_id}")
        self.experience_id = experience_id


class UnknownQuestion(AppError):
    code = "UNKNOWN_QUESTION"

    def __init__(self, question_id: str):
        super().__init__(f"Unknown question: {question_id}")
        self.question_id = question_id


class InvalidAnswerShape(AppError):
    code = "INVALID_ANSWER_SHAPE"

    def __init__(self, question_id: str, message: str):
        super().__init__(f"Invalid answer for '{question_id}': {message}")
        self.question_id = question_id


class InvalidAnswerOption(InvalidAnswerShape):
    """Raised only when option validation is switched on."""


class InvalidCoordinate(AppError):
    code = "INVALID_COORDINATE"

    def __init__(self, latitude: float, longitude: float):
        super().__init__(
            f"Coordinate out of range: ({latitude}, {longitude}). "
            "Latitude must be within [-90, 90] and longitude within [-180, 180]."
        )
        self.latitude = latitude
        self.longitude = longitude


class PermissionDenied(AppError):
    status_code = 403
    code = "FORBIDDEN"


class Unauthenticated(AppError):
    status_code = 401
    code = "UNAUTHORIZED"


class ConcurrentUpdateError(AppError):
    status_code = 409
    code = "CONFLICT"
