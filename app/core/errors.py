"""Error taxonomy shared by the storage layer and the HTTP surface.

Routes map ``NotFoundError`` to 404 and ``ConflictError`` to 409;
``StorageError`` is turned into a 500 carrying the driver's message.
"""


class LibraryError(Exception):
    default_message = "Library error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(LibraryError):
    default_message = "Not found"


class ConflictError(LibraryError):
    default_message = "Conflict"


class BookNotFoundError(NotFoundError):
    default_message = "Book not found"


class BorrowingNotFoundError(NotFoundError):
    default_message = "Borrowed book not in system"


class BookUnavailableError(ConflictError):
    default_message = "Book not available"


class NoBooksAvailableError(ConflictError):
    default_message = "No books are available"


class StorageError(LibraryError):
    default_message = "Storage error"


class ConfigurationError(LibraryError):
    default_message = "Missing configuration"
