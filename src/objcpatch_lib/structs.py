#
#  objcpatch | objcpatch_lib
#  structs.py
#
#  Field-declared Struct implementation that handles packing/unpacking of fixed and pointer-sized binary records
#
#  This file is part of objcpatch. objcpatch is free software that
#  is made available under the MIT license. Consult the
#  file "LICENSE" that is distributed together with this file
#  for the exact licensing terms.
#
#  Copyright (c) 0cyn 2026.
#

# Size calc is hot code (every load command and section header goes through it), so field types
#   and sizes are packed into a single int and split with masks.
type_mask = 0xffff0000
size_mask = 0xffff

type_uint = 0
type_sint = 0x10000
type_bytes = 0x30000

uint8_t = 1
uint16_t = 2
uint32_t = 4
uint64_t = 8

int8_t = type_sint | 1
int16_t = type_sint | 2
int32_t = type_sint | 4
int64_t = type_sint | 8

# bytes_t[16] -> a 16 byte wide raw bytes field.
bytes_t = [type_bytes | i for i in range(65)]


class uintptr_t:
    """ Marker type for a field that is 4 bytes wide in 32 bit images and 8 bytes wide in 64 bit ones. """
    pass


def _uint_to_int(uint, bits):
    """ Reinterpret an unsigned value read from the file as two's complement """
    sign_bit = 1 << (bits - 1)
    return uint - (1 << bits) if uint & sign_bit else uint


def _display(value):
    return hex(value) if isinstance(value, int) else value


def _json_value(value):
    return value.hex() if isinstance(value, (bytes, bytearray)) else value


def _field_size(value, ptr_size):
    if isinstance(value, int):
        return value & size_mask
    if issubclass(value, uintptr_t):
        if ptr_size is None:
            raise AssertionError("Trying to get size on a pointer sized type without a ptr_size")
        return ptr_size
    raise AssertionError(f'Unknown field type {value}')


# noinspection PyUnresolvedReferences
class Struct:
    """
    Custom namedtuple-esque Struct representation, unpacked from bytes read out of the file.

    Subclasses declare a FIELDS dict of field name -> field type, in on-disk order.
    """

    @classmethod
    def size(cls, ptr_size=None):
        variable = any(not isinstance(value, int) for value in cls.FIELDS.values())
        if variable:
            return sum(_field_size(value, ptr_size) for value in cls.FIELDS.values())

        if '_fixed_size' not in cls.__dict__:
            cls._fixed_size = sum(value & size_mask for value in cls.FIELDS.values())
        return cls._fixed_size

    # noinspection PyProtectedMember
    @staticmethod
    def create_with_bytes(struct_class, raw, byte_order="little", ptr_size=8):
        """
        Unpack a struct from raw bytes

        :param struct_class: Struct subclass
        :param raw: Bytes, at least struct_class.size(ptr_size) long
        :param byte_order: Little/Big Endian Struct Unpacking
        :param ptr_size: Width of uintptr_t fields
        :return: struct_class Instance
        """
        instance: Struct = struct_class(byte_order)
        instance.ptr_size = ptr_size
        size = struct_class.size(ptr_size=ptr_size)

        if len(raw) < size:
            raise ValueError(f'{struct_class.__name__} needs {size} bytes, got {len(raw)}')

        raw = bytes(raw[:size])
        current_off = 0

        for field in instance._fields:
            value = instance._field_sizes[field]

            if isinstance(value, int):
                field_type = type_mask & value
                size = size_mask & value
                data = raw[current_off:current_off + size]

                if field_type == type_bytes:
                    field_value = data
                elif field_type == type_sint:
                    field_value = _uint_to_int(int.from_bytes(data, byte_order), size * 8)
                else:
                    field_value = int.from_bytes(data, byte_order)

            elif issubclass(value, uintptr_t):
                size = ptr_size
                field_value = int.from_bytes(raw[current_off:current_off + size], byte_order)

            else:
                raise AssertionError

            setattr(instance, field, field_value)
            current_off += size

        return instance

    def __repr__(self):
        return str(self)

    def __str__(self):
        fields = ", ".join(f"{field}={_display(getattr(self, field))}" for field in self._fields)
        return f"{self.__class__.__name__}({fields})"

    def serialize(self):
        """ JSON-ready dict of the field values; bytes fields are hex encoded """
        struct_dict = {"type": self.__class__.__name__}
        struct_dict.update({field: _json_value(getattr(self, field)) for field in self._fields})
        return struct_dict

    def __init__(self, byte_order="little"):
        if not hasattr(self.__class__, 'FIELDS'):
            raise AssertionError("Do not use the bare Struct class; it must be implemented in an actual type")

        self._fields = list(self.__class__.FIELDS.keys())
        self._field_sizes = dict(self.__class__.FIELDS)

        self.byte_order = byte_order
        self.ptr_size = 8

        self.off = 0
