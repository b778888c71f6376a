class Chip8Error(Exception):
    """Fatal machine fault. Carries the raw opcode and the address it was fetched from."""

    def __init__(self, message, opcode=None, pc=None):
        super().__init__(message)
        self.opcode = opcode
        self.pc = pc


class UnknownOpcode(Chip8Error):
    def __init__(self, opcode, pc):
        super().__init__(f"Unknown opcode {opcode:04X} at {pc:03X}", opcode, pc)


class StackOverflow(Chip8Error):
    def __init__(self, opcode, pc):
        super().__init__(f"Stack overflow on CALL at {pc:03X}", opcode, pc)


class StackUnderflow(Chip8Error):
    def __init__(self, opcode, pc):
        super().__init__(f"Stack underflow on RET at {pc:03X}", opcode, pc)


class MemoryOutOfBounds(Chip8Error):
    def __init__(self, address, opcode=None, pc=None):
        where = f" at {pc:03X}" if pc is not None else ""
        super().__init__(f"Memory access out of bounds: {address:#06x}{where}", opcode, pc)
        self.address = address


class RomTooLarge(ValueError):
    def __init__(self, size, capacity):
        super().__init__(f"ROM is {size} bytes, only {capacity} fit above 0x200")
        self.size = size
        self.capacity = capacity
