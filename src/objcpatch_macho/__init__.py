#
#  objcpatch | objcpatch_macho
#  __init__.py
#
#  Pythonized representations of the #defines and enums from the Mach-O loader headers that objcpatch cares about
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

from enum import IntEnum

from objcpatch_macho.structs import *

MH_MAGIC = 0xFEEDFACE
MH_CIGAM = 0xCEFAEDFE
MH_MAGIC_64 = 0xFEEDFACF
MH_CIGAM_64 = 0xCFFAEDFE
FAT_MAGIC = 0xCAFEBABE
FAT_CIGAM = 0xBEBAFECA
FAT_MAGIC_64 = 0xCAFEBABF
FAT_CIGAM_64 = 0xBFBAFECA

THIN_MAGICS = [MH_MAGIC, MH_CIGAM, MH_MAGIC_64, MH_CIGAM_64]
FAT_MAGICS = [FAT_MAGIC, FAT_CIGAM, FAT_MAGIC_64, FAT_CIGAM_64]
# Java class files share FAT_MAGIC; their second word (the class version) is always 45 or higher.
FAT_MAX_ARCHS = 43

# Section names, as they appear (NUL padded) in section/section_64 headers
OBJC_CLASSNAME_SECTION = '__objc_classname'
OBJC_CATLIST_SECTION = '__objc_catlist'

LC_REQ_DYLD = 0x80000000


class LOAD_COMMAND(IntEnum):
    SEGMENT = 0x1
    SYMTAB = 0x2
    DYSYMTAB = 0xB
    LOAD_DYLIB = 0xC
    ID_DYLIB = 0xD
    LOAD_DYLINKER = 0xE
    SEGMENT_64 = 0x19
    UUID = 0x1b
    CODE_SIGNATURE = 0x1D
    ENCRYPTION_INFO = 0x21
    DYLD_INFO_ONLY = 0x22 | LC_REQ_DYLD
    MAIN = 0x28 | LC_REQ_DYLD
    BUILD_VERSION = 0x32


S_ZEROFILL = 0x1
S_GB_ZEROFILL = 0xC
S_THREAD_LOCAL_ZEROFILL = 0x12
ZEROFILL_TYPES = [S_ZEROFILL, S_GB_ZEROFILL, S_THREAD_LOCAL_ZEROFILL]
SECTION_TYPE_MASK = 0xff

CPU_ARCH_MASK = 0xff000000
CPU_ARCH_ABI64 = 0x01000000
CPU_ARCH_ABI64_32 = 0x02000000
CPU_SUBTYPE_MASK = 0x00ffffff


class CPUType(IntEnum):
    X86 = 7
    X86_64 = X86 | CPU_ARCH_ABI64
    ARM = 12
    ARM64 = ARM | CPU_ARCH_ABI64
    ARM64_32 = ARM | CPU_ARCH_ABI64_32
    POWERPC = 18
    POWERPC64 = POWERPC | CPU_ARCH_ABI64


# (cpu_type, cpu_subtype) -> the arch name clang/lipo use. subtype None matches any subtype.
ARCH_NAMES = {
    (CPUType.X86, None): 'i386',
    (CPUType.X86_64, 8): 'x86_64h',
    (CPUType.X86_64, None): 'x86_64',
    (CPUType.ARM, 9): 'armv7',
    (CPUType.ARM, 11): 'armv7s',
    (CPUType.ARM, 12): 'armv7k',
    (CPUType.ARM, None): 'arm',
    (CPUType.ARM64, 2): 'arm64e',
    (CPUType.ARM64, None): 'arm64',
    (CPUType.ARM64_32, None): 'arm64_32',
    (CPUType.POWERPC, None): 'ppc',
    (CPUType.POWERPC64, None): 'ppc64',
}


def arch_name(cpu_type: int, cpu_subtype: int) -> str:
    subtype = cpu_subtype & CPU_SUBTYPE_MASK
    if (cpu_type, subtype) in ARCH_NAMES:
        return ARCH_NAMES[(cpu_type, subtype)]
    if (cpu_type, None) in ARCH_NAMES:
        return ARCH_NAMES[(cpu_type, None)]
    return f'cpu_{hex(cpu_type)}'
