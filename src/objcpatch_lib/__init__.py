from objcpatch_lib.structs import *
from objcpatch_lib.log import log, LogLevel, print_err
