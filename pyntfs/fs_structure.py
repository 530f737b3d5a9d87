import ctypes

FILE_SIGNATURE = 0x4B504656  # 'VFPK'


class _FILE_CONTAINER_HDR(ctypes.LittleEndianStructure):
    _pack_ = 1
    _fields_ = [
        ("sig", ctypes.c_uint32),
        ("attributes", ctypes.c_uint32),
        ("size_of_file", ctypes.c_uint32),
        ("size_of_name", ctypes.c_uint32),
    ]

    @classmethod
    def sizeof(cls):
        return ctypes.sizeof(cls)

    @classmethod
    def cast(cls, buf, offset=0):
        return cls.from_buffer_copy(buf, offset)

    def get_file_name(self, buf, offset=0):
        start = offset + self.sizeof()
        return bytes(buf[start:start + self.size_of_name]).decode("utf-16le")

    def get_file_contents(self, buf, offset=0):
        start = offset + self.sizeof() + self.size_of_name
        return bytes(buf[start:start + self.size_of_file])
