#
#  objcpatch | tests
#  machobuilder.py
#
#  Builds small synthetic MachOs for the tests, so no real binaries need to be checked in.
#
#  Packing is done with the struct module directly rather than through objcpatch's own Struct classes, so the tests
#   don't share the code they're checking.
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

import struct
from collections import namedtuple

MH_MAGIC = 0xFEEDFACE
MH_MAGIC_64 = 0xFEEDFACF
FAT_MAGIC = 0xCAFEBABE
FAT_MAGIC_64 = 0xCAFEBABF

LC_SEGMENT = 0x1
LC_SEGMENT_64 = 0x19
LC_UUID = 0x1b

CPU_TYPE_X86 = 7
CPU_TYPE_X86_64 = 0x01000007
CPU_TYPE_ARM = 12
CPU_TYPE_ARM64 = 0x0100000C

MH_EXECUTE = 0x2

ObjCLayout = namedtuple("ObjCLayout", ["class_names", "category_names", "category_records", "catlist", "vm_base"])


class MachOBuilder:
    """
    Lays out a MachO image of a fixed size: header and load commands at 0, whatever data the test puts elsewhere.
    """

    def __init__(self, size=0x2000, is64=True, byte_order='little', cpu_type=CPU_TYPE_ARM64, cpu_subtype=0):
        self.image = bytearray(size)
        self.is64 = is64
        self.endian = '<' if byte_order == 'little' else '>'
        self.cpu_type = cpu_type
        self.cpu_subtype = cpu_subtype
        self.commands = []

    @property
    def ptr_size(self):
        return 8 if self.is64 else 4

    def add_segment(self, name, vmaddr, vmsize, fileoff, filesize, sections=()):
        """
        :param sections: (sectname, addr, size, offset) or (sectname, addr, size, offset, flags) tuples
        """
        e = self.endian
        sect_data = b''
        for sect in sections:
            sectname, addr, size, offset = sect[:4]
            flags = sect[4] if len(sect) > 4 else 0
            if self.is64:
                sect_data += struct.pack(e + '16s16sQQIIIIIIII', sectname.encode(), name.encode(), addr, size, offset,
                                         0, 0, 0, flags, 0, 0, 0)
            else:
                sect_data += struct.pack(e + '16s16sIIIIIIIII', sectname.encode(), name.encode(), addr, size, offset,
                                         0, 0, 0, flags, 0, 0)

        if self.is64:
            cmdsize = 72 + len(sect_data)
            cmd = struct.pack(e + 'II16sQQQQiiII', LC_SEGMENT_64, cmdsize, name.encode(), vmaddr, vmsize, fileoff,
                              filesize, 7, 7, len(sections), 0)
        else:
            cmdsize = 56 + len(sect_data)
            cmd = struct.pack(e + 'II16sIIIIiiII', LC_SEGMENT, cmdsize, name.encode(), vmaddr, vmsize, fileoff,
                              filesize, 7, 7, len(sections), 0)

        self.commands.append(cmd + sect_data)

    def add_raw_command(self, data: bytes):
        self.commands.append(data)

    def put(self, offset, data: bytes):
        self.image[offset:offset + len(data)] = data

    def pack_ptr(self, value):
        return struct.pack(self.endian + ('Q' if self.is64 else 'I'), value)

    def put_ptr(self, offset, value):
        self.put(offset, self.pack_ptr(value))

    def build(self) -> bytes:
        e = self.endian
        load_cmds = b''.join(self.commands)

        if self.is64:
            header = struct.pack(e + 'IIIIIIII', MH_MAGIC_64, self.cpu_type, self.cpu_subtype, MH_EXECUTE,
                                 len(self.commands), len(load_cmds), 0, 0)
        else:
            header = struct.pack(e + 'IIIIIII', MH_MAGIC, self.cpu_type, self.cpu_subtype, MH_EXECUTE,
                                 len(self.commands), len(load_cmds), 0)

        self.put(0, header + load_cmds)
        return bytes(self.image)


def pack_names(names):
    """ NUL terminated, back to back. Returns (blob, {name: offset in blob}) """
    blob = b''
    offsets = {}
    for name in names:
        offsets[name] = len(blob)
        blob += name.encode() + b'\x00'
    return blob, offsets


def objc_binary(class_names=(), category_names=(), is64=True, byte_order='little', cpu_type=None, cpu_subtype=0,
                vm_base=None, extra_catlist=()):
    """
    A minimal image with ObjC metadata:

        __TEXT  file 0x0    - 0x1000    __objc_classname @ 0x800, __cstring (category names) @ 0x900
        __DATA  file 0x1000 - 0x2000    __objc_catlist @ 0x1000, category records @ 0x1100 (0x40 apart)

    :param extra_catlist: Raw pointer values appended to the catlist after the real categories
    :return: (bytes, ObjCLayout) where all offsets in the layout are relative to the start of this image
    """
    if cpu_type is None:
        cpu_type = CPU_TYPE_ARM64 if is64 else CPU_TYPE_ARM
    if vm_base is None:
        vm_base = 0x100000000 if is64 else 0x4000

    builder = MachOBuilder(0x2000, is64, byte_order, cpu_type, cpu_subtype)

    class_blob, class_offsets = pack_names(class_names)
    cat_blob, cat_offsets = pack_names(category_names)

    catlist_count = len(category_names) + len(extra_catlist)

    builder.add_segment('__TEXT', vm_base, 0x1000, 0, 0x1000, [
        ('__objc_classname', vm_base + 0x800, len(class_blob), 0x800),
        ('__cstring', vm_base + 0x900, len(cat_blob), 0x900),
    ])
    builder.add_segment('__DATA', vm_base + 0x1000, 0x1000, 0x1000, 0x1000, [
        ('__objc_catlist', vm_base + 0x1000, catlist_count * builder.ptr_size, 0x1000),
        ('__objc_const', vm_base + 0x1100, len(category_names) * 0x40, 0x1100),
    ])

    builder.put(0x800, class_blob)
    builder.put(0x900, cat_blob)

    records = {}
    for index, name in enumerate(category_names):
        record = 0x1100 + index * 0x40
        records[name] = record
        builder.put_ptr(record, vm_base + 0x900 + cat_offsets[name])
        builder.put_ptr(0x1000 + index * builder.ptr_size, vm_base + record)

    for index, value in enumerate(extra_catlist):
        builder.put_ptr(0x1000 + (len(category_names) + index) * builder.ptr_size, value)

    layout = ObjCLayout({name: 0x800 + off for name, off in class_offsets.items()},
                        {name: 0x900 + off for name, off in cat_offsets.items()},
                        records, 0x1000, vm_base)
    return builder.build(), layout


def fat_binary(slices, align=0x1000, magic64=False):
    """
    :param slices: (data, cpu_type, cpu_subtype) tuples
    :return: (bytes, [file offset of each slice])
    """
    arch_size = 32 if magic64 else 20
    offset = 8 + arch_size * len(slices)
    offset = (offset + align - 1) // align * align

    header = struct.pack('>II', FAT_MAGIC_64 if magic64 else FAT_MAGIC, len(slices))
    body = b''
    offsets = []

    for data, cpu_type, cpu_subtype in slices:
        offsets.append(offset)
        if magic64:
            header += struct.pack('>IIQQII', cpu_type, cpu_subtype, offset, len(data), 12, 0)
        else:
            header += struct.pack('>IIIII', cpu_type, cpu_subtype, offset, len(data), 12)
        body += data
        padded = (len(data) + align - 1) // align * align
        body += b'\x00' * (padded - len(data))
        offset += padded

    head_size = offsets[0] if offsets else len(header)
    return header + b'\x00' * (head_size - len(header)) + body, offsets


def read_cstr(data: bytes, offset: int) -> bytes:
    return data[offset:data.index(b'\x00', offset)]
