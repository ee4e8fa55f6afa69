#
#  objcpatch | objcpatch
#  macho.py
#
#  This file contains utilities for basic parsing of MachO File headers and such, plus the two byte buffers a patch
#   run works against.
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

import os
from enum import Enum
from typing import BinaryIO, List, Union

from objcpatch_lib.structs import Struct
from objcpatch_macho import *
from objcpatch.exceptions import MalformedMachOException, UnsupportedFiletypeException
from objcpatch.util import log
from objcpatch.vm import AddressTranslator


class MachOFileType(Enum):
    FAT = 0
    THIN = 1


class SourceImage:
    """
    Read-only view of the original file content.

    Every pointer that leads to *another* pointer is read from here, never from the WorkingImage, so a pointer
        chain can't pass through bytes that were already patched in the same run.
    """

    def __init__(self, data: Union[bytes, bytearray], name=''):
        self._data = bytes(data)
        self.size = len(self._data)
        self.name = name

    @classmethod
    def from_file(cls, fp: BinaryIO) -> 'SourceImage':
        name = os.path.basename(fp.name) if hasattr(fp, 'name') and isinstance(fp.name, str) else ''
        fp.seek(0)
        return cls(fp.read(), name)

    def read_bytes(self, location, count) -> bytes:
        return self._data[location:location + count]

    def read_int(self, location, count, endian="big") -> int:
        return int.from_bytes(self.read_bytes(location, count), endian)

    def read_cstr(self, location, end) -> bytes:
        """
        Bytes from location up to (not including) the next NUL, or up to end if no NUL comes first.
        """
        if location >= end:
            return b''
        terminator = self._data.find(b'\x00', location, end)
        if terminator == -1:
            terminator = end
        return self._data[location:terminator]

    def raw_bytes(self) -> bytes:
        return self._data


class WorkingImage:
    """
    Mutable copy of a SourceImage. All patches land here, and this is what gets written back to disk.

    It has no read accessors for patch code on purpose; use raw_bytes() once patching is finished.
    """

    def __init__(self, source: SourceImage):
        self.file = bytearray(source.raw_bytes())
        self.size = source.size
        self.name = source.name

    def write(self, location, data: bytes):
        if location < 0 or location + len(data) > self.size:
            raise MalformedMachOException(f'Write of {len(data)} bytes @ {hex(location)} is outside the image')
        log.debug_more(f'Wrote {str(data)} @ {hex(location)}')
        self.file[location:location + len(data)] = data
        assert len(self.file) == self.size

    def raw_bytes(self) -> bytes:
        return bytes(self.file)


class MachOFile:
    """
    A thin or fat Mach-O file.

    Fat members that fail to parse are logged, recorded in ``failed_slices`` as (index, reason), and skipped; a thin
        file that fails to parse raises.
    """

    def __init__(self, source: SourceImage):
        self.source = source
        self.filename = source.name

        self.slices: List[Slice] = []
        self.failed_slices = []

        if source.size < 4:
            log.error(f'File is too small to be a MachO ({source.size} bytes)')
            raise UnsupportedFiletypeException

        self.magic = source.read_int(0, 4)

        if self.magic in FAT_MAGICS:
            self.type = MachOFileType.FAT
        elif self.magic in THIN_MAGICS:
            self.type = MachOFileType.THIN
        else:
            log.error(f'Bad Magic: {hex(self.magic)}')
            raise UnsupportedFiletypeException

        if self.type == MachOFileType.FAT:
            self._load_fat()
        else:
            self.slices.append(Slice(source, 0, source.size))

    def _load_fat(self):
        endian = "little" if self.magic in [FAT_CIGAM, FAT_CIGAM_64] else "big"
        arch_type = fat_arch_64 if self.magic in [FAT_MAGIC_64, FAT_CIGAM_64] else fat_arch

        if self.source.size < fat_header.size():
            raise MalformedMachOException('File is too small to hold a fat header')

        self.header: fat_header = self._load_struct(0, fat_header, endian)
        if self.magic in [FAT_MAGIC, FAT_CIGAM] and self.header.nfat_archs >= FAT_MAX_ARCHS:
            log.error(f'Fat header claims {self.header.nfat_archs} archs; this is probably a Java class file')
            raise UnsupportedFiletypeException

        table_end = fat_header.size() + self.header.nfat_archs * arch_type.size()
        if table_end > self.source.size:
            log.error(f'Fat header claims {self.header.nfat_archs} archs, which runs past the end of the file')
            raise MalformedMachOException

        for index in range(0, self.header.nfat_archs):
            offset = fat_header.size() + (index * arch_type.size())
            arch_struct = self._load_struct(offset, arch_type, endian)
            log.debug_more(arch_struct)

            try:
                self.slices.append(Slice(self.source, arch_struct.offset, arch_struct.size))
            except MalformedMachOException as ex:
                log.error(f'Failed to get object for architecture {index}: {str(ex)}')
                self.failed_slices.append((index, str(ex)))

    def _load_struct(self, address: int, struct_type, endian="big"):
        struct = Struct.create_with_bytes(struct_type, self.source.read_bytes(address, struct_type.size()), endian)
        struct.off = address
        return struct


class Section:
    """
    One section header from a segment load command. The name is decoded lazily, so a garbage name only
        costs that one section.
    """

    def __init__(self, cmd):
        self.cmd = cmd
        self.file_address = cmd.offset
        self.size = cmd.size
        self.type = cmd.flags & SECTION_TYPE_MASK

    @property
    def name(self) -> str:
        return self.cmd.sectname.split(b'\x00')[0].decode('utf-8')


class Segment:
    def __init__(self, macho_slice, cmd):
        self.slice = macho_slice
        self.is64 = isinstance(cmd, segment_command_64)
        self.cmd = cmd
        self.vm_address = cmd.vmaddr
        self.file_address = cmd.fileoff
        self.size = cmd.vmsize
        self.name = cmd.segname.split(b'\x00')[0].decode('utf-8', errors='replace')

        self.sections: List[Section] = self._process_sections()

    def __str__(self):
        return f'Segment {self.name} at {hex(self.vm_address)}'

    def _process_sections(self) -> List[Section]:
        sections = []
        struct_type = section_64 if self.is64 else section
        ea = self.cmd.off + self.cmd.size()

        for _ in range(0, self.cmd.nsects):
            sections.append(Section(self.slice.load_struct(ea, struct_type)))
            ea += struct_type.size()

        return sections


class Slice:
    """
    One architecture's object inside a (possibly fat) file.

    All addresses taken by the get_*/load_* methods are relative to the start of the slice; ``offset`` is where the
        slice starts in the whole file.
    """

    def __init__(self, source: SourceImage, offset: int, size: int):
        self.source = source
        self.offset = offset
        self.size = size

        if size < 4:
            raise MalformedMachOException(f'Slice @ {hex(offset)} is only {size} bytes, too small to hold a magic')
        if offset + size > source.size:
            raise MalformedMachOException(f'Slice @ {hex(offset)} (size {hex(size)}) is outside the file')

        magic = self.get_int_at(0, 4, "big")
        if magic not in THIN_MAGICS:
            raise MalformedMachOException(f'Slice @ {hex(offset)} has bad magic {hex(magic)}')

        self.byte_order = "little" if self.get_int_at(0, 4, "little") in [MH_MAGIC, MH_MAGIC_64] else "big"
        self.is64 = self.get_int_at(0, 4, self.byte_order) == MH_MAGIC_64
        self.ptr_size = 8 if self.is64 else 4

        self.header = self.load_struct(0, mach_header_64 if self.is64 else mach_header)
        self.arch = arch_name(self.header.cpu_type, self.header.cpu_subtype)

        self.segments: List[Segment] = []
        self._load_commands()

        self.vm = AddressTranslator(self.segments)

    @property
    def sections(self) -> List[Section]:
        return [sect for segment in self.segments for sect in segment.sections]

    def _load_commands(self):
        offset = self.header.size()

        for index in range(self.header.loadcnt):
            if offset + unk_command.size() > self.size:
                raise MalformedMachOException(f'Load command {index} @ {hex(offset)} is past the end of the slice')

            cmd = self.get_int_at(offset, 4)
            cmd_size = self.get_int_at(offset + 4, 4)

            if cmd_size < unk_command.size() or offset + cmd_size > self.size:
                raise MalformedMachOException(f'Bad Load Command at {hex(offset)} index {index}\n        '
                                              f'{hex(cmd)} - {hex(cmd_size)}')

            if cmd in [LOAD_COMMAND.SEGMENT, LOAD_COMMAND.SEGMENT_64]:
                is64 = cmd == LOAD_COMMAND.SEGMENT_64
                seg_type = segment_command_64 if is64 else segment_command
                sect_type = section_64 if is64 else section

                if cmd_size < seg_type.size():
                    raise MalformedMachOException(f'Segment command at {hex(offset)} is truncated')
                seg_cmd = self.load_struct(offset, seg_type)
                if seg_type.size() + seg_cmd.nsects * sect_type.size() > cmd_size:
                    raise MalformedMachOException(f'Segment command at {hex(offset)} claims {seg_cmd.nsects} '
                                                  f'sections, which overflows its cmdsize')

                segment = Segment(self, seg_cmd)
                log.debug(str(segment))
                self.segments.append(segment)

            offset += cmd_size

    def load_struct(self, addr: int, struct_type):
        size = struct_type.size(ptr_size=self.ptr_size)
        if addr < 0 or addr + size > self.size:
            raise MalformedMachOException(f'{struct_type.__name__} @ {hex(addr)} is past the end of the slice')

        struct = Struct.create_with_bytes(struct_type, self.get_bytes_at(addr, size), self.byte_order, self.ptr_size)
        struct.off = addr

        return struct

    def get_int_at(self, addr: int, count: int, endian=None):
        return int.from_bytes(self.get_bytes_at(addr, count), endian or self.byte_order)

    def get_bytes_at(self, addr: int, count: int):
        return self.source.read_bytes(self.offset + addr, count)

    def get_cstr_at(self, addr: int) -> bytes:
        return self.source.read_cstr(self.offset + addr, self.offset + self.size)

    def section_content(self, sect: Section) -> bytes:
        if sect.type in ZEROFILL_TYPES:
            return b''
        if sect.file_address + sect.size > self.size:
            raise MalformedMachOException(f'Section @ {hex(sect.file_address)} (size {hex(sect.size)}) runs past '
                                          f'the end of the slice')
        return self.get_bytes_at(sect.file_address, sect.size)

    def serialize(self):
        return {
            'arch': self.arch,
            'offset': self.offset,
            'size': self.size,
            'is_64_bit': self.is64,
            'byte_order': self.byte_order,
            'header': self.header.serialize()
        }
