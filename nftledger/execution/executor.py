import inspect
import traceback
from copy import deepcopy

from nftledger import config
from nftledger.exceptions import FunctionNotExported
from nftledger.ledger import is_exported
from nftledger.logger import get_logger

log = get_logger('nftledger.executor')


class Executor:
    """
    Host-side dispatcher. Resolves an exported ledger operation by name, runs it
    on behalf of ``sender`` and reports the outcome as a status dict instead of
    raising, so hosts can decide what a failure means for their own transaction.
    """

    def __init__(self, ledger):
        self.ledger = ledger
        self.subscribers = []

        self._events = []
        self.ledger.subscribe(self._events.append)

    def subscribe(self, subscriber):
        if subscriber not in self.subscribers:
            self.subscribers.append(subscriber)

    def unsubscribe(self, subscriber):
        if subscriber in self.subscribers:
            self.subscribers.remove(subscriber)

    def resolve(self, function_name):
        if function_name.startswith(config.PRIVATE_METHOD_PREFIX):
            raise FunctionNotExported(function_name=function_name)

        func = getattr(self.ledger, function_name, None)

        if func is None or not is_exported(func):
            raise FunctionNotExported(function_name=function_name)

        return func

    def exported_functions(self):
        return sorted(name for name, func in inspect.getmembers(self.ledger, callable)
                      if not name.startswith(config.PRIVATE_METHOD_PREFIX) and is_exported(func))

    @staticmethod
    def _takes_caller(func):
        return config.CALLER_ARGUMENT in inspect.signature(func).parameters

    def execute(self, sender, function_name, kwargs=None) -> dict:
        kwargs = dict(kwargs or {})
        del self._events[:]

        status_code = 0
        writes = {}
        try:
            func = self.resolve(function_name)

            if self._takes_caller(func):
                kwargs[config.CALLER_ARGUMENT] = sender

            result = func(**kwargs)
            writes = deepcopy(self.ledger.last_writes)
        except Exception as e:
            result = e
            log.error('{}.{} by {} failed: {}'.format(self.ledger.namespace, function_name, sender, e))
            log.debug(traceback.format_exc())
            status_code = 1

        events = list(self._events)
        del self._events[:]

        if status_code == 0:
            for event in events:
                for subscriber in list(self.subscribers):
                    subscriber(event)

        return {
            'status_code': status_code,
            'result': result,
            'events': events,
            'writes': writes,
        }
