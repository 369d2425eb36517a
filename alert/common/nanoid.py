import string
from math import ceil, log
from os import urandom
from typing import TypeAlias

# Primary keys are prefixed nano ids, e.g. user-XSqS5h9vFTSgP
NanoIdType: TypeAlias = str

DEFAULT_CHAR_POOL = string.digits + string.ascii_letters


def generate_custom_nanoid(size: int = 8, char_pool: str | None = None) -> NanoIdType:
    """
    Generate a short random url safe id
    Entropy here -> https://zelark.github.io/nano-id-cc/
    """
    if size <= 0:
        raise ValueError(f'size must be positive: {size}')

    if char_pool is None:
        char_pool = DEFAULT_CHAR_POOL

    char_pool_len = len(char_pool)
    mask = 1
    if char_pool_len > 1:
        mask = (2 << int(log(char_pool_len - 1) / log(2))) - 1
    step = int(ceil(1.6 * mask * size / char_pool_len))

    nano_id = ''
    # Bytes outside the pool are discarded rather than wrapped, keeps the distribution uniform
    while True:
        random_bytes = bytearray(urandom(step))
        for i in range(step):
            random_byte = random_bytes[i] & mask
            if random_byte < char_pool_len:
                nano_id += char_pool[random_byte]
                if len(nano_id) == size:
                    return nano_id


class NanoId:
    """
    ID used as primary key
    """

    _CHAR_SIZE = 13

    @classmethod
    def gen(cls, abbrev: str | None = None) -> NanoIdType:
        nano_id = generate_custom_nanoid(size=cls._CHAR_SIZE, char_pool=DEFAULT_CHAR_POOL)
        if abbrev:
            nano_id = f'{abbrev}-{nano_id}'

        return nano_id
