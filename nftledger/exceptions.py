class LedgerError(Exception):
    """
    The base exception for the ledger. The fmt directive
    will be overloaded by the inheriting classes

    :ivar msg: The message associated with the error
    """
    fmt = 'An unspecified ledger error occurred'

    def __init__(self, **kwargs):
        msg = self.fmt.format(**kwargs)
        Exception.__init__(self, msg)
        self.kwargs = kwargs


class NotAuthorized(LedgerError):
    """
    The caller lacks the role or relationship the operation
    requires (admin, owner, approved spender or operator)

    :ivar caller: The identity that attempted the call
    """
    fmt = "Not authorized: '{caller}'"


class NotFound(LedgerError):
    """
    The referenced token has not been minted or was burned

    :ivar token_id: The token that was looked up
    """
    fmt = 'Token does not exist: {token_id}'


class NullAddress(LedgerError):
    """
    The null address was given where an account is required

    :ivar argument: The name of the offending argument
    """
    fmt = "Null address given for '{argument}'"


class InvalidRecipient(NullAddress):
    fmt = "Mint or transfer to the null address ('{argument}')"


class AlreadyExists(LedgerError):
    fmt = 'Token already minted: {token_id}'


class SupplyExceeded(LedgerError):
    """
    :ivar max_supply: The fixed cap of the collection
    """
    fmt = 'Max supply reached ({max_supply})'


class MintingPaused(LedgerError):
    fmt = 'Minting paused'


class SelfApproval(LedgerError):
    """
    Approving the current owner of a token, or
    approving oneself as an operator

    :ivar address: The address that was approved
    """
    fmt = "Approval to current owner or self: '{address}'"


class OwnerMismatch(LedgerError):
    fmt = "Token {token_id} is not owned by '{from_address}'"


class ReceiverRejected(LedgerError):
    """
    The receiving party declined the token, or its
    acceptance check failed

    :ivar to: The receiving address
    :ivar token_id: The token being delivered
    """
    fmt = "Receiver '{to}' rejected token {token_id}"


class InvalidTokenId(LedgerError):
    fmt = 'Token id must be an unsigned 256 bit integer, got {token_id!r}'


class FunctionNotExported(LedgerError):
    """
    The executor was asked to run something that is not
    an exported ledger operation

    :ivar function_name: The requested name
    """
    fmt = "Function '{function_name}' is not an exported ledger operation"


class CollectionExists(LedgerError):
    """
    When constructing a ledger, found that its namespace
    is already initialized in the driver

    :ivar namespace: The storage namespace of the collection
    """
    fmt = "Collection with namespace '{namespace}' already exists in the database"
