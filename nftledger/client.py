from functools import partial

from nftledger.db.driver import LedgerDriver
from nftledger.execution.executor import Executor
from nftledger.ledger import Ledger


class AbstractLedger:
    def __init__(self, signer, executor: Executor):
        self.signer = signer
        self.executor = executor
        self.ledger = executor.ledger
        self.functions = executor.exported_functions()

        # each exported operation becomes a partial bound to the default signer
        for func in self.functions:
            setattr(self, func, partial(self._abstract_function_call, func=func))

    def _abstract_function_call(self, func, signer=None, **kwargs):
        signer = signer or self.signer

        output = self.executor.execute(sender=signer,
                                       function_name=func,
                                       kwargs=kwargs)

        if output['status_code'] == 1:
            raise output['result']

        return output['result']

    def subscribe(self, subscriber):
        self.executor.subscribe(subscriber)

    def unsubscribe(self, subscriber):
        self.executor.unsubscribe(subscriber)


class LedgerClient:
    def __init__(self, signer='sys', driver=None):
        self.signer = signer
        self.raw_driver = driver or LedgerDriver()
        self.executors = {}

    def deploy(self, name, symbol, max_supply, base_token_uri, signer=None, **options):
        signer = signer or self.signer

        ledger = Ledger(name, symbol, max_supply, base_token_uri, caller=signer, driver=self.raw_driver, **options)
        executor = Executor(ledger)
        self.executors[ledger.namespace] = executor

        return AbstractLedger(signer=signer, executor=executor)

    def get_collection(self, namespace, signer=None):
        executor = self.executors.get(namespace)

        if executor is None:
            return None

        return AbstractLedger(signer=signer or self.signer, executor=executor)

    def get_var(self, namespace, variable, arguments=()):
        return self.raw_driver.get_var(namespace, variable, arguments)

    def flush(self):
        self.raw_driver.flush()
        self.executors.clear()
