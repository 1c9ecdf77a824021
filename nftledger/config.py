import os


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


DELIMITER = ':'
INDEX_SEPARATOR = '.'

MAX_HASH_DIMENSIONS = 16

DEFAULT_NAMESPACE = 'collection'

# Token ids are unsigned 256 bit integers
MAX_TOKEN_ID = 2 ** 256 - 1

# Interface detection ids
INTERFACE_ID_DETECTION = 0x01ffc9a7
INTERFACE_ID_OWNERSHIP = 0x80ac58cd
INTERFACE_ID_METADATA = 0x5b5e139f
SUPPORTED_INTERFACES = {INTERFACE_ID_DETECTION, INTERFACE_ID_OWNERSHIP, INTERFACE_ID_METADATA}

PRIVATE_METHOD_PREFIX = '_'
EXPORT_ATTRIBUTE = '__exported__'
CALLER_ARGUMENT = 'caller'

# Policy defaults, overridable per ledger
RECEIVER_CHECKS = _env_flag('NFT_RECEIVER_CHECKS', True)
OWNER_CHECK_FIRST = _env_flag('NFT_OWNER_CHECK_FIRST', False)
