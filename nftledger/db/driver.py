from nftledger.db.encoder import encode, decode, make_key
from nftledger.logger import get_logger


# DB maps bytes to encoded values
# Driver maps string to python object


class InMemDriver:
    def __init__(self):
        self.db = {}

    def get(self, item: str):
        res = self.db.get(item.encode())
        if res is None:
            return None
        return decode(res)

    def set(self, key: str, value):
        if value is None:
            self.delete(key)
        else:
            self.db[key.encode()] = encode(value).encode()

    def delete(self, key: str):
        self.db.pop(key.encode(), None)

    def flush(self):
        self.db.clear()


_MISSING = object()


class LedgerDriver:
    """
    Stages writes in a pending layer above a raw store.

    Reads see pending writes first. ``commit`` applies the pending layer to the
    store, ``rollback`` discards it, and ``checkpoint``/``restore`` give nested
    callers a way to undo only their own writes.
    """

    def __init__(self, driver=None):
        self.pending_writes = {}
        self.driver = driver or InMemDriver()
        self.log = get_logger('nftledger.driver')

    def find(self, key: str):
        value = self.pending_writes.get(key, _MISSING)
        if value is not _MISSING:
            return value

        return self.driver.get(key)

    def get(self, key: str):
        return self.find(key)

    def set(self, key, value):
        self.pending_writes[key] = value

    def delete(self, key):
        self.set(key, None)

    def checkpoint(self):
        return dict(self.pending_writes)

    def restore(self, checkpoint: dict):
        self.pending_writes = dict(checkpoint)

    def commit(self):
        writes = self.pending_writes
        self.pending_writes = {}

        for k, v in writes.items():
            if v is None:
                self.driver.delete(k)
            else:
                self.driver.set(k, v)

        if writes:
            self.log.debug('Committed {} writes'.format(len(writes)))

        return writes

    def rollback(self):
        self.pending_writes = {}

    def clear_pending_state(self):
        self.rollback()

    def make_key(self, contract, variable, args=()):
        return make_key(contract, variable, args)

    def get_var(self, contract, variable, arguments=()):
        key = self.make_key(contract, variable, arguments)
        return self.get(key)

    def flush(self):
        self.driver.flush()
        self.clear_pending_state()
