"""Exception types for the employee weekly update job."""


class PipelineError(Exception):
    """Base class for fatal run errors."""


class ConfigError(PipelineError):
    """An environment or CLI option is malformed."""


class InputError(PipelineError):
    """The input snapshot could not be loaded."""


class InputNotFound(InputError):
    """The input path does not exist."""


class InvalidJson(InputError):
    """The input file is not valid JSON."""


class InvalidShape(InputError):
    """The input JSON is not an array of records."""


class StoreError(PipelineError):
    """A batch could not be committed to the employee store."""


class BatchTimeout(StoreError):
    """A batch exceeded its transaction timeout and was rolled back."""


class StoreWriteFailure(StoreError):
    """The store rejected a batch; nothing from that batch was committed."""
