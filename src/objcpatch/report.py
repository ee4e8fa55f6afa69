#
#  objcpatch | objcpatch
#  report.py
#
#  Record of what a patch run did, serializable for --json output.
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

from enum import Enum
from typing import List, NamedTuple

from objcpatch.util import decode_name


class PatchKind(Enum):
    CLASS = 0
    CATEGORY = 1


class PatchRecord(NamedTuple):
    kind: PatchKind
    arch: str
    offset: int
    original: bytes
    replacement: bytes

    def serialize(self):
        return {
            'kind': self.kind.name,
            'arch': self.arch,
            'offset': self.offset,
            'original': decode_name(self.original),
            'replacement': decode_name(self.replacement)
        }


class ExclusionRecord(NamedTuple):
    arch: str
    offset: int
    name: bytes

    def serialize(self):
        return {
            'arch': self.arch,
            'offset': self.offset,
            'name': decode_name(self.name)
        }


class PatchReport:
    def __init__(self, filename=''):
        self.filename = filename
        self.slices = []
        self.patches: List[PatchRecord] = []
        self.exclusions: List[ExclusionRecord] = []
        self.failed_slices = []
        self.dry_run = False
        self.written = False

    def __len__(self):
        return len(self.patches)

    def patches_of_kind(self, kind: PatchKind) -> List[PatchRecord]:
        return [record for record in self.patches if record.kind == kind]

    def serialize(self):
        return {
            'filename': self.filename,
            'dry_run': self.dry_run,
            'written': self.written,
            'slices': self.slices,
            'failed_slices': [{'slice': ident, 'reason': reason} for ident, reason in self.failed_slices],
            'patches': [record.serialize() for record in self.patches],
            'excluded': [record.serialize() for record in self.exclusions]
        }
