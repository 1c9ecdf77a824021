from nftledger.db.driver import LedgerDriver
from nftledger.db.encoder import encode_key
from nftledger import config


class Datum:
    def __init__(self, contract, name, driver: LedgerDriver):
        self._driver = driver
        self._key = self._driver.make_key(contract, name)


class Variable(Datum):
    def __init__(self, contract, name, driver: LedgerDriver, t=None):
        self._type = None

        if isinstance(t, type):
            self._type = t

        super().__init__(contract, name, driver=driver)

    def set(self, value):
        if self._type is not None and value is not None and not isinstance(value, self._type):
            raise TypeError('Wrong type passed to variable! Expected {}, got {}.'.format(self._type, type(value)))

        self._driver.set(self._key, value)

    def get(self):
        return self._driver.get(self._key)


class Hash(Datum):
    def __init__(self, contract, name, driver: LedgerDriver, default_value=None):
        super().__init__(contract, name, driver=driver)
        self._delimiter = config.DELIMITER
        self._default_value = default_value

    def _set(self, key, value):
        self._driver.set('{}{}{}'.format(self._key, self._delimiter, key), value)

    def _get(self, item):
        value = self._driver.get('{}{}{}'.format(self._key, self._delimiter, item))

        # defaultdict behavior
        if value is None:
            value = self._default_value

        return value

    def _encode_key(self, key):
        if not isinstance(key, tuple):
            key = (key,)

        if len(key) > config.MAX_HASH_DIMENSIONS:
            raise ValueError('Too many dimensions ({}) for hash. Max is {}'.format(len(key), config.MAX_HASH_DIMENSIONS))

        return self._delimiter.join(encode_key(k) for k in key)

    def __setitem__(self, key, value):
        self._set(self._encode_key(key), value)

    def __getitem__(self, key):
        return self._get(self._encode_key(key))

    def __delitem__(self, key):
        self._set(self._encode_key(key), None)
