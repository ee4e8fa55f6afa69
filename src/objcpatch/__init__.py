from objcpatch.objcpatch import load_macho_file, patch_macho, patch_binary, write_image, PatchResult

from objcpatch.config import PatchConfig, PatchMode
from objcpatch.macho import MachOFile, MachOFileType, Slice, Segment, Section, SourceImage, WorkingImage
from objcpatch.patcher import StringTablePatcher, CategoryListResolver, SliceProcessor, UniversalDispatcher
from objcpatch.report import PatchReport, PatchRecord, PatchKind
from objcpatch.strategy import PatchStrategy, RandomizeStrategy, ReplaceStrategy, strategy_for_config
from objcpatch.vm import AddressTranslator
from objcpatch.util import OBJCPATCH_VERSION, log, LogLevel
