"""GUI helpers: paths, logging bridge, crash logs, icons."""
