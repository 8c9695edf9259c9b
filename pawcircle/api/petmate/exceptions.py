# pawcircle/api/petmate/exceptions.py
"""매칭(교배) 흐름의 도메인 예외. 라우트에서 error_code/status_code로 그대로 응답합니다."""

class PetMateError(Exception):
    error_code = "PETMATE_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class PetNotFoundError(PetMateError):
    error_code = "PET_NOT_FOUND"
    status_code = 404

class UserNotFoundError(PetMateError):
    error_code = "USER_NOT_FOUND"
    status_code = 404

class RequestNotFoundError(PetMateError):
    error_code = "REQUEST_NOT_FOUND"
    status_code = 404

class OwnerNotFoundError(PetMateError):
    error_code = "OWNER_NOT_FOUND"
    status_code = 404

class ForbiddenError(PetMateError):
    error_code = "FORBIDDEN"
    status_code = 403

class InvalidBreedingPairError(PetMateError):
    error_code = "INVALID_BREEDING_PAIR"
    status_code = 400

class PetNotAvailableError(PetMateError):
    error_code = "PET_NOT_AVAILABLE"
    status_code = 409

class DuplicateRequestError(PetMateError):
    error_code = "DUPLICATE_REQUEST"
    status_code = 409

class AlreadyMatchedError(PetMateError):
    error_code = "ALREADY_MATCHED"
    status_code = 409

class RequestAlreadyResolvedError(PetMateError):
    error_code = "REQUEST_ALREADY_RESOLVED"
    status_code = 409
