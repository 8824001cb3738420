class TranscriptionError(RuntimeError):
    pass


class RateLimited(TranscriptionError):
    pass


class RetryExhausted(RateLimited):
    def __init__(self, attempts: int):
        super().__init__(f"Still rate limited after {attempts} attempts")
        self.attempts = attempts


class RemoteFailure(TranscriptionError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyResult(TranscriptionError):
    pass


class AudioRejected(ValueError):
    pass


class NotAudio(AudioRejected):
    def __init__(self, mime_type: str):
        super().__init__(f"Not an audio file: {mime_type}")
        self.mime_type = mime_type


class AudioTooLarge(AudioRejected):
    def __init__(self, size_bytes: int, max_bytes: int):
        super().__init__(f"Audio file is {size_bytes} bytes, limit is {max_bytes}")
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
