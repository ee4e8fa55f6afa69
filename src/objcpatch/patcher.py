#
#  objcpatch | objcpatch
#  patcher.py
#
#  Walks the ObjC metadata of every slice and rewrites class and category names in place.
#
#  Nothing in here changes the size of anything: names are overwritten byte-for-byte up to (not including) their
#   terminator, so no other offset in the file moves.
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

from typing import Optional

from objcpatch_macho import OBJC_CATLIST_SECTION, OBJC_CLASSNAME_SECTION, objc2_category_head
from objcpatch.config import PatchConfig
from objcpatch.exceptions import MalformedMachOException
from objcpatch.macho import MachOFile, Slice, SourceImage, WorkingImage
from objcpatch.report import ExclusionRecord, PatchKind, PatchRecord, PatchReport
from objcpatch.strategy import PatchStrategy
from objcpatch.util import decode_name, log


class NamePatcher:
    """
    Shared apply/log/record step for anything that ends up with a name and where it lives in the file.
    """

    KIND = PatchKind.CLASS

    def __init__(self, macho_slice: Slice, working: WorkingImage, strategy: PatchStrategy, config: PatchConfig,
                 report: PatchReport):
        self.slice = macho_slice
        self.working = working
        self.strategy = strategy
        self.config = config
        self.report = report

    def emit(self, msg):
        if not self.config.quiet:
            log.out(msg)

    def patch_name(self, original: bytes, file_offset: int) -> bool:
        """
        :param original: Name as read from the SourceImage, without terminator
        :param file_offset: Absolute offset of the name in the file
        :return: True if the name was rewritten
        """
        replacement = self.strategy.apply(original)
        if replacement is None:
            return False

        assert len(replacement) == len(original)

        self.emit(f'[{self.KIND.name}] Found: {decode_name(original)} at file offset {file_offset}')
        self.emit(f'  -> Replaced with: {decode_name(replacement)}')

        self.working.write(file_offset, replacement)
        self.report.patches.append(PatchRecord(self.KIND, self.slice.arch, file_offset, original, replacement))
        return True


class StringTablePatcher(NamePatcher):
    """
    __objc_classname is a run of NUL terminated names packed back to back. Every non-empty entry that isn't
        excluded gets handed to the strategy.
    """

    KIND = PatchKind.CLASS

    def patch(self, content: bytes, section_file_offset: int):
        excluded = self.config.excluded_names
        base = self.slice.offset + section_file_offset
        position = 0

        while position < len(content):
            end = content.find(b'\x00', position)
            if end == -1:
                end = len(content)

            name = content[position:end]
            if not name:
                position += 1
                continue

            if name in excluded:
                self.emit(f'[{self.KIND.name}] Skipping excluded class: {decode_name(name)}')
                self.report.exclusions.append(ExclusionRecord(self.slice.arch, base + position, name))
            else:
                self.patch_name(name, base + position)

            position = end + 1


class CategoryListResolver(NamePatcher):
    """
    __objc_catlist is an array of pointers to category_t records; the first field of each record points at the
        category's name.

    Both hops of that chain are read from the SourceImage. The record could sit in bytes this same run already
        rewrote, and reading it back out of the WorkingImage would give us a pointer built from patched data.

    Category names are not checked against the exclusion list.
    """

    KIND = PatchKind.CATEGORY

    def __init__(self, macho_slice: Slice, source: SourceImage, working: WorkingImage, strategy: PatchStrategy,
                 config: PatchConfig, report: PatchReport):
        super().__init__(macho_slice, working, strategy, config, report)
        self.source = source

    def patch(self, content: bytes):
        ptr_size = self.slice.ptr_size

        for index in range(0, len(content) - ptr_size + 1, ptr_size):
            category_va = int.from_bytes(content[index:index + ptr_size], self.slice.byte_order)

            name_offset = self.resolve_name(category_va)
            if name_offset is None:
                continue

            name = self.slice.get_cstr_at(name_offset)
            if not name:
                continue

            self.patch_name(name, self.slice.offset + name_offset)

    def resolve_name(self, category_va: int) -> Optional[int]:
        """
        Follow category pointer -> category_t.name -> name string.

        :return: Slice relative offset of the name, or None if either hop isn't backed by file content
        """
        category_offset = self.slice.vm.translate(category_va)
        if category_offset is None:
            return None

        try:
            category = self.slice.load_struct(category_offset, objc2_category_head)
        except MalformedMachOException as ex:
            log.debug_more(f'Category @ {hex(category_va)} unreadable: {str(ex)}')
            return None

        return self.slice.vm.translate(category.name)


class SliceProcessor:
    """
    Runs the section patchers over one slice. A section with an unreadable name or content is logged and skipped;
        the rest of the slice is still processed.
    """

    def __init__(self, macho_slice: Slice, source: SourceImage, working: WorkingImage, strategy: PatchStrategy,
                 config: PatchConfig, report: PatchReport):
        self.slice = macho_slice
        self.source = source
        self.working = working
        self.strategy = strategy
        self.config = config
        self.report = report

    def process(self):
        if not self.config.quiet:
            log.out(f'--- Patching architecture: {self.slice.arch} (slice offset: {self.slice.offset}) ---')

        log.debug(f'VM map for {self.slice.arch}:\n{str(self.slice.vm)}')
        patched_before = len(self.report)

        for index, sect in enumerate(self.slice.sections):
            try:
                name = sect.name
            except UnicodeDecodeError:
                log.error(f'Section {index} in {self.slice.arch} has an unreadable name, skipping it')
                continue

            if name not in [OBJC_CLASSNAME_SECTION, OBJC_CATLIST_SECTION]:
                continue

            try:
                content = self.slice.section_content(sect)
            except MalformedMachOException as ex:
                log.error(f'Couldn\'t read {name} in {self.slice.arch}: {str(ex)}')
                continue

            if name == OBJC_CLASSNAME_SECTION:
                StringTablePatcher(self.slice, self.working, self.strategy, self.config,
                                   self.report).patch(content, sect.file_address)
            else:
                CategoryListResolver(self.slice, self.source, self.working, self.strategy, self.config,
                                     self.report).patch(content)

        log.info(f'Patched {len(self.report) - patched_before} names in {self.slice.arch}')


class UniversalDispatcher:
    """
    Runs a SliceProcessor for every slice of a thin or fat file against one shared WorkingImage.
    """

    def __init__(self, macho_file: MachOFile, strategy: PatchStrategy, config: PatchConfig, report: PatchReport):
        self.macho_file = macho_file
        self.strategy = strategy
        self.config = config
        self.report = report

    def dispatch(self) -> WorkingImage:
        source = self.macho_file.source
        working = WorkingImage(source)

        self.report.failed_slices.extend(self.macho_file.failed_slices)
        if not self.macho_file.slices:
            log.warn('No architecture in this file could be parsed, nothing to patch')

        for macho_slice in self.macho_file.slices:
            try:
                SliceProcessor(macho_slice, source, working, self.strategy, self.config, self.report).process()
            except MalformedMachOException as ex:
                log.error(f'Failed to patch Mach-O slice {macho_slice.arch}: {str(ex)}')
                self.report.failed_slices.append((macho_slice.arch, str(ex)))
                continue
            self.report.slices.append(macho_slice.serialize())

        assert working.size == source.size
        return working
