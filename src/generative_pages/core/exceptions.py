"""Domain exceptions for page generation."""


class PageGenerationError(Exception):
    """Base exception for all page generation errors."""

    code = "GENERATION_FAILED"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        recoverable: bool = False,
    ):
        super().__init__(message)
        if code:
            self.code = code
        self.recoverable = recoverable


class ClassificationError(PageGenerationError):
    """Intent classifier failed or returned an unusable response."""

    code = "CLASSIFICATION_FAILED"


class RetrievalError(PageGenerationError):
    """Embedding or vector index failure."""

    code = "RETRIEVAL_FAILED"

    def __init__(
        self,
        message: str,
        strategy: str | None = None,
        recoverable: bool = False,
    ):
        super().__init__(message, recoverable=recoverable)
        self.strategy = strategy


class ContentGenerationError(PageGenerationError):
    """Text generator error, invalid JSON, or content not matching the layout."""

    code = "GENERATION_FAILED"

    def __init__(
        self,
        message: str,
        layout_id: str | None = None,
        recoverable: bool = False,
    ):
        super().__init__(message, recoverable=recoverable)
        self.layout_id = layout_id


class ImageGenerationError(PageGenerationError):
    """A single image generation attempt failed."""

    code = "IMAGE_FAILED"

    def __init__(
        self,
        message: str,
        image_id: str | None = None,
        provider: str | None = None,
        recoverable: bool = True,
    ):
        super().__init__(message, recoverable=recoverable)
        self.image_id = image_id
        self.provider = provider


class CMSError(PageGenerationError):
    """Error communicating with the content management backend."""

    code = "PERSIST_FAILED"

    def __init__(
        self,
        message: str,
        path: str | None = None,
        status_code: int | None = None,
        recoverable: bool = True,
    ):
        super().__init__(message, recoverable=recoverable)
        self.path = path
        self.status_code = status_code


class PersistenceError(CMSError):
    """Generated page could not be saved or published."""


class GenerationInProgressError(PageGenerationError):
    """Another generation for the same path is already running."""

    code = "GENERATION_IN_PROGRESS"

    def __init__(self, path: str):
        super().__init__(
            f"Generation already in progress for {path}",
            recoverable=True,
        )
        self.path = path
