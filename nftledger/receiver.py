"""Receiver-acceptance collaborator.

During ``safe_transfer`` and ``safe_mint`` the ledger asks the receiving party
whether it accepts the token. Plain accounts have nothing registered and
accept implicitly. Contract-like recipients register a ``Receiver`` whose
``on_token_received`` answers the question.
"""

from nftledger.logger import get_logger

log = get_logger('nftledger.receiver')


class Receiver:
    def on_token_received(self, operator, from_address, token_id, data) -> bool:
        return True


class RejectingReceiver(Receiver):
    def on_token_received(self, operator, from_address, token_id, data) -> bool:
        return False


class CallbackReceiver(Receiver):
    """Adapts a plain callable with the ``on_token_received`` signature."""

    def __init__(self, callback):
        self.callback = callback

    def on_token_received(self, operator, from_address, token_id, data) -> bool:
        return self.callback(operator, from_address, token_id, data)


class ReceiverRegistry:
    def __init__(self, receivers=None):
        self._receivers = {}
        for address, receiver in (receivers or {}).items():
            self.register(address, receiver)

    def register(self, address, receiver):
        if callable(receiver) and not isinstance(receiver, Receiver):
            receiver = CallbackReceiver(receiver)
        self._receivers[address] = receiver

    def unregister(self, address):
        self._receivers.pop(address, None)

    def is_contract(self, address):
        return address in self._receivers

    def check(self, address, operator, from_address, token_id, data=b''):
        """
        Returns True when ``address`` accepts ``token_id``.

        Only a literal True counts as acceptance. Errors raised by the
        receiver propagate to the caller, which treats them as a decline.
        """
        receiver = self._receivers.get(address)

        if receiver is None:
            return True

        accepted = receiver.on_token_received(operator, from_address, token_id, data)
        log.debug('Receiver {} answered {!r} for token {}'.format(address, accepted, token_id))

        return accepted is True
