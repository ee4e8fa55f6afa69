#
#  objcpatch | objcpatch
#  vm.py
#
#  Virtual address -> file offset translation for a single slice
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

from collections import namedtuple
from typing import Iterable, Optional

from objcpatch.util import log

vm_obj = namedtuple("vm_obj", ["vm_address", "size", "file_address", "name"], defaults=[''])


class AddressTranslator:
    """
    Virtual Memory is the location "in memory" where the library/bin, etc will be accessed when ran.
    Pointers stored inside the file (the category list, a category's name field) are VM addresses, and have to be
        mapped back to a location in the file before we can read or patch what they point to.

    These mappings come from the segment load commands. The file offsets produced are relative to the start of the
        slice, not the start of a fat file.

    Segments are checked in load command order and the first one containing the address wins. 32 and 64 bit segment
        commands both just provide (vmaddr, vmsize, fileoff), so both work here.

    Addresses that no segment covers (e.g. ones only filled in by dyld fixups at load time) translate to None; that is
        a normal outcome, and callers skip whatever they were trying to reach.
    """

    def __init__(self, segments: Iterable = ()):
        self.map = [vm_obj(seg.vm_address, seg.size, seg.file_address, getattr(seg, 'name', ''))
                    for seg in segments]
        self.cache = {}

    def __str__(self):
        ret = ""
        for obj in self.map:
            ret += f'{obj.name.ljust(16)}  ||  Start: 0x{hex(obj.vm_address)[2:].zfill(9)}  |  ' \
                   f'End: 0x{hex(obj.vm_address + obj.size)[2:].zfill(9)}  |  ' \
                   f'File Offset: 0x{hex(obj.file_address)[2:].zfill(9)}\n'
        return ret

    def translate(self, vm_address: int) -> Optional[int]:
        if vm_address in self.cache:
            return self.cache[vm_address]

        for o in self.map:
            if o.vm_address <= vm_address < o.vm_address + o.size:
                file_address = o.file_address + (vm_address - o.vm_address)
                self.cache[vm_address] = file_address
                return file_address

        log.debug_more(f'Address {hex(vm_address)} isn\'t mapped by any segment')
        return None
