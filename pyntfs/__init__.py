from pyntfs.config import VFSConfig
from pyntfs.emu_fs import VirtualFileSystem
from pyntfs.errors import (DestinationAmbiguous, EntryNotFound, FileAlreadyExists,
                           InvalidPath, PathNotFound, VFSError)

__version__ = "0.1.0"
