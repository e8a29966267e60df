"""
Error types for latsearch

Every error carries the process exit code the command line driver reports
for it, so callers can tell a bad input file from an unreadable path or a
misconfigured output directory.
"""

class LatticeError(Exception):
    """Base class for all latsearch errors"""
    exit_code = 1

class FileAccessError(LatticeError):
    """A path could not be opened for reading or writing"""
    exit_code = 1

    def __init__(self, path, mode: str = "reading"):
        self.path = str(path)
        self.mode = mode
        super().__init__(f"Unable to open file {self.path} for {mode}")

class MalformedInputError(LatticeError):
    """A lattice, reference or list file could not be parsed"""
    exit_code = 2

    def __init__(self, path, reason: str = ""):
        self.path = str(path)
        self.reason = reason
        message = f"Not able to parse file {self.path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)

class DegenerateInputError(LatticeError):
    """Input is well formed but yields no meaningful numeric answer"""
    exit_code = 3

class NoPathError(DegenerateInputError):
    """The end node is unreachable from the start node"""

class EmptyReferenceError(DegenerateInputError):
    """A reference transcript contains no words"""

class OutputPathConflictError(LatticeError):
    """An output path would overwrite one of the inputs"""
    exit_code = 5

    def __init__(self, output_path, input_path):
        self.output_path = str(output_path)
        self.input_path = str(input_path)
        super().__init__(
            f"Output file {self.output_path} collides with input {self.input_path}; "
            "output directory must not be the same as the input directory"
        )
