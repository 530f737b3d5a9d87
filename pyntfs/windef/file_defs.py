class FileAttribute:
    FILE_ATTRIBUTE_READONLY=0x1
    FILE_ATTRIBUTE_HIDDEN=0x2
    FILE_ATTRIBUTE_SYSTEM=0x4
    FILE_ATTRIBUTE_DIRECTORY=0x10
    FILE_ATTRIBUTE_ARCHIVE=0x20
    FILE_ATTRIBUTE_NORMAL=0x80

class FileTime:
    # 100ns intervals between 1601-01-01 and 1970-01-01
    EPOCH_AS_FILETIME=116444736000000000
    HUNDREDS_OF_NS_PER_MS=10000

    @staticmethod
    def from_epoch_ms(epoch_ms:int) -> int:
        return FileTime.EPOCH_AS_FILETIME + int(epoch_ms) * FileTime.HUNDREDS_OF_NS_PER_MS

class PathChars:
    SEP="\\"
    ALTSEP="/"
    EXTENDED_PREFIX="\\\\?\\"
    DEVICE_PREFIX="\\\\.\\"
    WILDCARDS="*?<>\""
    # characters NTFS refuses inside a single path segment
    ILLEGAL='<>:"|?*' + "".join(chr(c) for c in range(0x20))

VOLUME_LETTER="c:"
