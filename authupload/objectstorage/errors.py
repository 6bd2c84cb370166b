from __future__ import annotations


class ObjectStoreError(Exception):
    """Base class for object store errors raised by this package."""


class ObjectNotFound(ObjectStoreError):
    pass


class ObjectStoreConfigError(ObjectStoreError):
    pass
