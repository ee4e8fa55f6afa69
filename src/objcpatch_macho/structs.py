#
#  objcpatch | objcpatch_macho
#  structs.py
#
#  Raw Mach-O record layouts. Values of fields line up with those in the dyld sources.
#
#  the __init__ defs here are only required for IDEs to recognize and autocomplete the struct attributes
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

from objcpatch_lib.structs import *


class fat_header(Struct):
    """
    First 8 Bytes of a FAT MachO File

    Attributes:
        self.magic: FAT MachO Magic

        self.nfat_archs: Number of Fat Arch entries after these bytes
    """
    FIELDS = {
        'magic': uint32_t,
        'nfat_archs': uint32_t
    }

    def __init__(self, byte_order="big"):
        super().__init__(byte_order=byte_order)
        self.magic = 0
        self.nfat_archs = 0


class fat_arch(Struct):
    """
    Struct representing a slice in a FAT MachO
    """
    FIELDS = {
        'cpu_type': uint32_t,
        'cpu_subtype': uint32_t,
        'offset': uint32_t,
        'size': uint32_t,
        'align': uint32_t
    }

    def __init__(self, byte_order="big"):
        super().__init__(byte_order=byte_order)
        self.cpu_type = 0
        self.cpu_subtype = 0
        self.offset = 0
        self.size = 0
        self.align = 0


class fat_arch_64(Struct):
    """
    Slice entry in a FAT_MAGIC_64 container; offset and size are widened to 64 bits
    """
    FIELDS = {
        'cpu_type': uint32_t,
        'cpu_subtype': uint32_t,
        'offset': uint64_t,
        'size': uint64_t,
        'align': uint32_t,
        'reserved': uint32_t
    }

    def __init__(self, byte_order="big"):
        super().__init__(byte_order=byte_order)
        self.cpu_type = 0
        self.cpu_subtype = 0
        self.offset = 0
        self.size = 0
        self.align = 0
        self.reserved = 0


class mach_header(Struct):
    FIELDS = {
        'magic': uint32_t,
        'cpu_type': uint32_t,
        'cpu_subtype': uint32_t,
        'filetype': uint32_t,
        'loadcnt': uint32_t,
        'loadsize': uint32_t,
        'flags': uint32_t
    }

    def __init__(self, byte_order="little"):
        super().__init__(byte_order=byte_order)
        self.magic = 0
        self.cpu_type = 0
        self.cpu_subtype = 0
        self.filetype = 0
        self.loadcnt = 0
        self.loadsize = 0
        self.flags = 0


class mach_header_64(Struct):
    FIELDS = {
        'magic': uint32_t,
        'cpu_type': uint32_t,
        'cpu_subtype': uint32_t,
        'filetype': uint32_t,
        'loadcnt': uint32_t,
        'loadsize': uint32_t,
        'flags': uint32_t,
        'reserved': uint32_t
    }

    def __init__(self, byte_order="little"):
        super().__init__(byte_order=byte_order)
        self.magic = 0
        self.cpu_type = 0
        self.cpu_subtype = 0
        self.filetype = 0
        self.loadcnt = 0
        self.loadsize = 0
        self.flags = 0
        self.reserved = 0


class unk_command(Struct):
    FIELDS = {
        'cmd': uint32_t,
        'cmdsize': uint32_t
    }

    def __init__(self, byte_order="little"):
        super().__init__(byte_order=byte_order)
        self.cmd = 0
        self.cmdsize = 0


class segment_command(Struct):
    FIELDS = {
        'cmd': uint32_t,
        'cmdsize': uint32_t,
        'segname': bytes_t[16],
        'vmaddr': uint32_t,
        'vmsize': uint32_t,
        'fileoff': uint32_t,
        'filesize': uint32_t,
        'maxprot': uint32_t,
        'initprot': uint32_t,
        'nsects': uint32_t,
        'flags': uint32_t
    }

    def __init__(self, byte_order="little"):
        super().__init__(byte_order=byte_order)
        self.cmd = 0
        self.cmdsize = 0
        self.segname = b''
        self.vmaddr = 0
        self.vmsize = 0
        self.fileoff = 0
        self.filesize = 0
        self.maxprot = 0
        self.initprot = 0
        self.nsects = 0
        self.flags = 0


class segment_command_64(Struct):
    FIELDS = {
        'cmd': uint32_t,
        'cmdsize': uint32_t,
        'segname': bytes_t[16],
        'vmaddr': uint64_t,
        'vmsize': uint64_t,
        'fileoff': uint64_t,
        'filesize': uint64_t,
        'maxprot': uint32_t,
        'initprot': uint32_t,
        'nsects': uint32_t,
        'flags': uint32_t
    }

    def __init__(self, byte_order="little"):
        super().__init__(byte_order=byte_order)
        self.cmd = 0
        self.cmdsize = 0
        self.segname = b''
        self.vmaddr = 0
        self.vmsize = 0
        self.fileoff = 0
        self.filesize = 0
        self.maxprot = 0
        self.initprot = 0
        self.nsects = 0
        self.flags = 0


class section(Struct):
    FIELDS = {
        'sectname': bytes_t[16],
        'segname': bytes_t[16],
        'addr': uint32_t,
        'size': uint32_t,
        'offset': uint32_t,
        'align': uint32_t,
        'reloff': uint32_t,
        'nreloc': uint32_t,
        'flags': uint32_t,
        'reserved1': uint32_t,
        'reserved2': uint32_t
    }

    def __init__(self, byte_order="little"):
        super().__init__(byte_order=byte_order)
        self.sectname = b''
        self.segname = b''
        self.addr = 0
        self.size = 0
        self.offset = 0
        self.align = 0
        self.reloff = 0
        self.nreloc = 0
        self.flags = 0
        self.reserved1 = 0
        self.reserved2 = 0


class section_64(Struct):
    FIELDS = {
        'sectname': bytes_t[16],
        'segname': bytes_t[16],
        'addr': uint64_t,
        'size': uint64_t,
        'offset': uint32_t,
        'align': uint32_t,
        'reloff': uint32_t,
        'nreloc': uint32_t,
        'flags': uint32_t,
        'reserved1': uint32_t,
        'reserved2': uint32_t,
        'reserved3': uint32_t
    }

    def __init__(self, byte_order="little"):
        super().__init__(byte_order=byte_order)
        self.sectname = b''
        self.segname = b''
        self.addr = 0
        self.size = 0
        self.offset = 0
        self.align = 0
        self.reloff = 0
        self.nreloc = 0
        self.flags = 0
        self.reserved1 = 0
        self.reserved2 = 0
        self.reserved3 = 0



class objc2_category_head(Struct):
    """
    Leading field of an objc2 category_t. The record continues with cls, instance/class method lists,
        protocols and properties, none of which are read here.
    """
    FIELDS = {
        'name': uintptr_t
    }

    def __init__(self, byte_order="little"):
        super().__init__(byte_order=byte_order)
        self.name = 0
