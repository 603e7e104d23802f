class TxtarError(Exception):
    """Base class for txtar-specific errors.

    Parsing never raises; these cover moving archives to and from the filesystem.
    """


# Names
class UnsafeNameError(TxtarError, ValueError):
    pass


# Content that would not survive a format/parse round trip
class MarkerInContentError(TxtarError, ValueError):
    def __init__(self, name: str, part: str = "content"):
        super().__init__(f"{name}: {part} contains a txtar file marker line")
        self.name = name
        self.part = part


# Extraction
class DestinationExistsError(TxtarError, FileExistsError):
    pass
