# Marker line delimiters
MARKER = "-- "
MARKER_END = " --"
NEWLINE_MARKER = "\n" + MARKER

# The shortest marker line is "-- --": prefix and suffix share the middle space.
MIN_MARKER_LEN = len(MARKER) + len(MARKER_END) - 1

ENCODING = "utf-8"

# Extraction conflict policies
EXISTS_OVERWRITE = "overwrite"
EXISTS_SKIP = "skip"
EXISTS_RENAME = "rename"
EXISTS_FAIL = "fail"
EXISTS_POLICIES = (EXISTS_OVERWRITE, EXISTS_SKIP, EXISTS_RENAME, EXISTS_FAIL)
DEFAULT_EXISTS_POLICY = EXISTS_RENAME
