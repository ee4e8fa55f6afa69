#
#  objcpatch | objcpatch
#  objcpatch.py
#
#  Outward facing API
#
#  Some of these functions are only a couple lines long, but the point is to standardize an outward facing API that
#   allows refactoring things internally without breaking others' scripts.
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

import random
from typing import BinaryIO, NamedTuple, Optional, Union

from objcpatch.config import PatchConfig
from objcpatch.exceptions import PatchWriteException
from objcpatch.macho import MachOFile, SourceImage, WorkingImage
from objcpatch.patcher import UniversalDispatcher
from objcpatch.report import PatchReport
from objcpatch.strategy import strategy_for_config
from objcpatch.util import log


class PatchResult(NamedTuple):
    image: WorkingImage
    report: PatchReport


def load_macho_file(fp: Union[BinaryIO, bytes, bytearray, SourceImage]) -> MachOFile:
    """
    Load a thin or fat MachO from an open file ('rb'), raw bytes, or an existing SourceImage.

    :raises UnsupportedFiletypeException: Not a MachO at all
    :raises MalformedMachOException: A thin MachO, or a fat header, that can't be parsed
    """
    if isinstance(fp, SourceImage):
        source = fp
    elif isinstance(fp, (bytes, bytearray)):
        source = SourceImage(fp)
    else:
        source = SourceImage.from_file(fp)

    return MachOFile(source)


def patch_macho(macho_file: MachOFile, config: PatchConfig, rng: Optional[random.Random] = None) -> PatchResult:
    """
    Patch every slice of an already loaded MachO in memory. The file on disk is not touched.

    Bad slices/sections and unmapped addresses are logged and skipped, so for a validated config this does not raise.

    :param macho_file: Loaded file
    :param config: Validated config, see PatchConfig.create
    :param rng: Generator for randomize mode. Defaults to one seeded from config.seed
    """
    report = PatchReport(macho_file.filename)
    report.dry_run = config.dry_run

    strategy = strategy_for_config(config, rng)
    working = UniversalDispatcher(macho_file, strategy, config, report).dispatch()

    return PatchResult(working, report)


def write_image(path: str, image: WorkingImage):
    """
    Overwrite path with the full content of image, in one write.

    :raises PatchWriteException:
    """
    try:
        with open(path, 'wb') as fp:
            fp.write(image.raw_bytes())
    except OSError as ex:
        raise PatchWriteException(f'Error opening {path} for writing: {ex.strerror}') from ex


def patch_binary(path: str, config: PatchConfig, rng: Optional[random.Random] = None) -> PatchReport:
    """
    Load path, patch it, and (unless config.dry_run) write the result back over it.

    :raises OSError: path couldn't be read
    :raises UnsupportedFiletypeException:
    :raises MalformedMachOException:
    :raises PatchWriteException:
    """
    with open(path, 'rb') as fp:
        macho_file = load_macho_file(fp)

    image, report = patch_macho(macho_file, config, rng)

    if config.dry_run:
        if not config.quiet:
            log.out('\nDry run complete. Binary was not modified.')
        return report

    write_image(path, image)
    report.written = True

    if not config.quiet:
        log.out(f'\nSuccessfully patched binary in-place: {path}')

    return report
