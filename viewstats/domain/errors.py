class VideoRegistryError(ValueError):
    code = "INVALID_REQUEST"


class InvalidVideoIdError(VideoRegistryError):
    code = "INVALID_VIDEO_ID"


class InvalidVideoConfigError(VideoRegistryError):
    code = "INVALID_CONFIG"


class DuplicateVideoError(VideoRegistryError):
    code = "DUPLICATE_VIDEO_ID"


class LastVideoError(VideoRegistryError):
    code = "CANNOT_DELETE_LAST"


class VideoNotFoundError(LookupError):
    code = "VIDEO_NOT_FOUND"


class VideoNotTrackedError(LookupError):
    code = "VIDEO_NOT_TRACKED"
