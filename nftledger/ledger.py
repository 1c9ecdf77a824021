import functools

from nftledger import config
from nftledger.db.driver import LedgerDriver
from nftledger.db.orm import Variable, Hash
from nftledger.events import Transfer, Approval, ApprovalForAll
from nftledger.exceptions import (
    NotAuthorized, NotFound, NullAddress, InvalidRecipient, AlreadyExists, SupplyExceeded,
    MintingPaused, SelfApproval, OwnerMismatch, ReceiverRejected, InvalidTokenId, CollectionExists
)
from nftledger.logger import get_logger
from nftledger.receiver import ReceiverRegistry

log = get_logger('nftledger.ledger')


def export(func):
    """
    Marks a ledger method as an operation hosts may call, and runs it atomically.

    Writes land in the driver's pending layer. When the outermost exported call
    returns they are committed and the queued events are delivered. When any
    exported call raises, the pending layer and the event queue go back to what
    they were when that call started, so a nested call made from a receiver
    callback only undoes its own work.
    """
    @functools.wraps(func)
    def call(self, *args, **kwargs):
        writes = self.driver.checkpoint()
        queued = len(self._queued_events)

        self._depth += 1
        try:
            result = func(self, *args, **kwargs)
        except Exception:
            self.driver.restore(writes)
            del self._queued_events[queued:]
            raise
        finally:
            self._depth -= 1

        if self._depth == 0:
            self._commit()

        return result

    setattr(call, config.EXPORT_ATTRIBUTE, True)
    return call


def is_exported(func):
    return getattr(func, config.EXPORT_ATTRIBUTE, False) is True


class Ledger:
    """
    Ownership, approvals and supply of one non-fungible token collection.

    ``caller`` is the identity deploying the collection and becomes its admin.
    Every state-changing operation takes the authenticated caller explicitly.
    """

    def __init__(self, name, symbol, max_supply, base_token_uri, caller,
                 driver=None, receivers=None, namespace=config.DEFAULT_NAMESPACE,
                 receiver_checks=None, owner_check_first=None):

        for argument, value in (('name', name), ('symbol', symbol), ('base_token_uri', base_token_uri)):
            if not isinstance(value, str):
                raise ValueError('{} must be a string, got {!r}'.format(argument, value))

        if isinstance(max_supply, bool) or not isinstance(max_supply, int) or max_supply < 0:
            raise ValueError('max_supply must be a non-negative integer, got {!r}'.format(max_supply))

        if self._is_null(caller):
            raise NullAddress(argument='caller')

        self.driver = driver or LedgerDriver()
        self.receivers = receivers if receivers is not None else ReceiverRegistry()
        self.namespace = namespace

        self.receiver_checks = config.RECEIVER_CHECKS if receiver_checks is None else receiver_checks
        self.owner_check_first = config.OWNER_CHECK_FIRST if owner_check_first is None else owner_check_first

        self._depth = 0
        self._queued_events = []
        self._listeners = []
        self.last_writes = {}

        self._name = Variable(namespace, 'name', driver=self.driver, t=str)
        self._symbol = Variable(namespace, 'symbol', driver=self.driver, t=str)
        self._base_uri = Variable(namespace, 'base_uri', driver=self.driver, t=str)
        self._max_supply = Variable(namespace, 'max_supply', driver=self.driver, t=int)
        self._admin = Variable(namespace, 'admin', driver=self.driver)
        self._total_supply = Variable(namespace, 'total_supply', driver=self.driver, t=int)
        self._mint_paused = Variable(namespace, 'mint_paused', driver=self.driver, t=bool)

        self.owners = Hash(namespace, 'owners', driver=self.driver)
        self.balances = Hash(namespace, 'balances', driver=self.driver, default_value=0)
        self.approvals = Hash(namespace, 'approvals', driver=self.driver)
        self.operators = Hash(namespace, 'operators', driver=self.driver, default_value=False)

        if self._admin.get() is not None:
            raise CollectionExists(namespace=namespace)

        self._name.set(name)
        self._symbol.set(symbol)
        self._base_uri.set(base_token_uri)
        self._max_supply.set(max_supply)
        self._admin.set(caller)
        self._total_supply.set(0)
        self._mint_paused.set(False)

        self.last_writes = self.driver.commit()

        log.info('Deployed collection {} ({}) with max supply {}, admin {}'.format(name, symbol, max_supply, caller))

    # Events

    def subscribe(self, listener):
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event):
        self._queued_events.append(event)

    def _commit(self):
        writes = self.driver.commit()

        events, self._queued_events = self._queued_events, []
        for event in events:
            log.debug('Emit {}'.format(event))
            for listener in list(self._listeners):
                listener(event)

        # Listeners may call back in and commit on their own
        self.last_writes = writes

    # Checks

    @staticmethod
    def _is_null(address):
        return address is None or address == ''

    @staticmethod
    def _check_token_id(token_id):
        if isinstance(token_id, bool) or not isinstance(token_id, int) or \
                token_id < 0 or token_id > config.MAX_TOKEN_ID:
            raise InvalidTokenId(token_id=token_id)

    def _require_admin(self, caller):
        if self._is_null(caller) or caller != self._admin.get():
            raise NotAuthorized(caller=caller)

    def _owner_of(self, token_id):
        self._check_token_id(token_id)

        owner = self.owners[token_id]
        if owner is None:
            raise NotFound(token_id=token_id)

        return owner

    def _is_operator(self, owner, operator):
        if self._is_null(operator):
            return False
        return self.operators[owner, operator] is True

    def _is_approved_or_owner(self, spender, token_id):
        owner = self._owner_of(token_id)

        if self._is_null(spender):
            return False

        return spender == owner or \
            self.approvals[token_id] == spender or \
            self._is_operator(owner, spender)

    def _set_balance(self, address, balance):
        # Zero balances are not stored
        self.balances[address] = balance if balance > 0 else None

    def _check_receiver(self, operator, from_address, to, token_id, data):
        if not self.receiver_checks:
            return

        try:
            accepted = self.receivers.check(to, operator, from_address, token_id, data)
        except Exception as e:
            raise ReceiverRejected(to=to, token_id=token_id) from e

        if not accepted:
            raise ReceiverRejected(to=to, token_id=token_id)

    # Mutations

    def _mint(self, caller, to, token_id):
        self._require_admin(caller)

        if self._mint_paused.get():
            raise MintingPaused()

        if self._is_null(to):
            raise InvalidRecipient(argument='to')

        self._check_token_id(token_id)

        if self.owners[token_id] is not None:
            raise AlreadyExists(token_id=token_id)

        supply = self._total_supply.get()
        max_supply = self._max_supply.get()
        if supply >= max_supply:
            raise SupplyExceeded(max_supply=max_supply)

        self.owners[token_id] = to
        self._set_balance(to, self.balances[to] + 1)
        self._total_supply.set(supply + 1)

        self._emit(Transfer(None, to, token_id))
        log.debug('Minted {} to {}'.format(token_id, to))

    def _transfer(self, caller, from_address, to, token_id):
        owner = self._owner_of(token_id)

        if self.owner_check_first:
            if owner != from_address:
                raise OwnerMismatch(token_id=token_id, from_address=from_address)

            if not self._is_approved_or_owner(caller, token_id):
                raise NotAuthorized(caller=caller)
        else:
            if not self._is_approved_or_owner(caller, token_id):
                raise NotAuthorized(caller=caller)

            if owner != from_address:
                raise OwnerMismatch(token_id=token_id, from_address=from_address)

        if self._is_null(to):
            raise InvalidRecipient(argument='to')

        del self.approvals[token_id]
        self._set_balance(from_address, self.balances[from_address] - 1)
        self._set_balance(to, self.balances[to] + 1)
        self.owners[token_id] = to

        self._emit(Transfer(from_address, to, token_id))
        log.debug('Transferred {} from {} to {} by {}'.format(token_id, from_address, to, caller))

    @export
    def mint(self, caller, to, token_id):
        self._mint(caller, to, token_id)

    @export
    def safe_mint(self, caller, to, token_id, data=b''):
        self._mint(caller, to, token_id)
        self._check_receiver(caller, None, to, token_id, data)

    @export
    def burn(self, caller, token_id):
        owner = self._owner_of(token_id)

        if not self._is_approved_or_owner(caller, token_id):
            raise NotAuthorized(caller=caller)

        del self.approvals[token_id]
        self._set_balance(owner, self.balances[owner] - 1)
        self._total_supply.set(self._total_supply.get() - 1)
        del self.owners[token_id]

        self._emit(Transfer(owner, None, token_id))
        log.debug('Burned {} owned by {}'.format(token_id, owner))

    @export
    def approve(self, caller, to, token_id):
        owner = self._owner_of(token_id)

        if to == owner:
            raise SelfApproval(address=to)

        if self._is_null(caller) or (caller != owner and not self._is_operator(owner, caller)):
            raise NotAuthorized(caller=caller)

        if self._is_null(to):
            to = None

        self.approvals[token_id] = to
        self._emit(Approval(owner, to, token_id))

    @export
    def set_approval_for_all(self, caller, operator, approved):
        if self._is_null(caller):
            raise NullAddress(argument='caller')

        if self._is_null(operator):
            raise NullAddress(argument='operator')

        if operator == caller:
            raise SelfApproval(address=operator)

        approved = bool(approved)

        self.operators[caller, operator] = True if approved else None
        self._emit(ApprovalForAll(caller, operator, approved))

    @export
    def transfer(self, caller, from_address, to, token_id):
        self._transfer(caller, from_address, to, token_id)

    @export
    def safe_transfer(self, caller, from_address, to, token_id, data=b''):
        self._transfer(caller, from_address, to, token_id)
        self._check_receiver(caller, from_address, to, token_id, data)

    @export
    def pause(self, caller):
        self._require_admin(caller)
        self._mint_paused.set(True)
        log.notice('Minting paused by {}'.format(caller))

    @export
    def unpause(self, caller):
        self._require_admin(caller)
        self._mint_paused.set(False)
        log.notice('Minting unpaused by {}'.format(caller))

    # Queries

    @export
    def balance_of(self, owner):
        if self._is_null(owner):
            raise NullAddress(argument='owner')
        return self.balances[owner]

    @export
    def owner_of(self, token_id):
        return self._owner_of(token_id)

    @export
    def get_approved(self, token_id):
        self._owner_of(token_id)
        return self.approvals[token_id]

    @export
    def is_approved_for_all(self, owner, operator):
        if self._is_null(owner):
            return False
        return self._is_operator(owner, operator)

    @export
    def is_approved_or_owner(self, spender, token_id):
        return self._is_approved_or_owner(spender, token_id)

    @export
    def token_uri(self, token_id):
        self._owner_of(token_id)
        return '{}{}'.format(self._base_uri.get(), token_id)

    @export
    def total_supply(self):
        return self._total_supply.get()

    @export
    def max_supply(self):
        return self._max_supply.get()

    @export
    def name(self):
        return self._name.get()

    @export
    def symbol(self):
        return self._symbol.get()

    @export
    def admin(self):
        return self._admin.get()

    @export
    def mint_paused(self):
        return self._mint_paused.get() is True

    @export
    def supports_interface(self, interface_id):
        if isinstance(interface_id, str):
            try:
                interface_id = int(interface_id, 16)
            except ValueError:
                return False

        return interface_id in config.SUPPORTED_INTERFACES
