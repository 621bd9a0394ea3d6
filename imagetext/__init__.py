"""Image-to-text capture widget backed by an asynchronous cloud Read API."""

__version__ = "1.0.0"
