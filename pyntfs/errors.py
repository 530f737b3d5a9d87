"""Error kinds raised by the virtual NTFS volume.

They extend PyFilesystem2's error hierarchy, so callers can either catch
the precise kind or the generic ``fs.errors`` parent
(``ResourceNotFound``, ``FileExists``, ...).
"""
from fs import errors


class VFSError(errors.FSError):
    default_message = "virtual filesystem error"


class PathNotFound(errors.ResourceNotFound):
    default_message = "path not found: '{path}'"


class EntryNotFound(errors.ResourceNotFound):
    default_message = "no such file or folder: '{path}'"


class FileAlreadyExists(errors.FileExists):
    default_message = "destination file already exists: '{path}'"


class DestinationAmbiguous(errors.DestinationExists):
    default_message = "destination name is ambiguous: '{path}'"


class InvalidPath(errors.InvalidPath):
    default_message = "path contains invalid characters or form: '{path}'"

