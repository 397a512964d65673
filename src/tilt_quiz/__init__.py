from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tilt-quiz")
except PackageNotFoundError:
    __version__ = "0.0.0"
