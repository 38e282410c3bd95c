class LambdaEnvVarsError(Exception):
    pass


class InvalidLocation(LambdaEnvVarsError, ValueError):
    """Raised when a lookup names a location that isn't supported."""
    def __init__(self, location, allowed, *args):
        super().__init__(
            "location %r is invalid, must be one of: %s" % (location, ", ".join(allowed)),
            *args)
        self.location = location
        self.allowed = allowed


class MissingS3Config(LambdaEnvVarsError, ValueError):
    """Raised when an S3 lookup doesn't fully identify the document.

    The message always names every required field so that the caller can
    fix all of them at once.
    """
    def __init__(self, required, missing, *args):
        super().__init__(
            "s3Config requires %s (missing: %s)" % (", ".join(required), ", ".join(missing)),
            *args)
        self.required = required
        self.missing = missing


class MalformedDocument(LambdaEnvVarsError):
    def __init__(self, msg="document could not be parsed", key=None, *args):
        super().__init__(msg, *args)
        self.key = key


class DecryptionFailed(LambdaEnvVarsError):
    def __init__(self, name, *args):
        super().__init__("could not decrypt variable %r" % name, *args)
        self.name = name
