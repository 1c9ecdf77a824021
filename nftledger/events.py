from collections import namedtuple

# Ownership moved. from_address is None on mint, to is None on burn.
Transfer = namedtuple('Transfer', ['from_address', 'to', 'token_id'])

# Per-token spender set or cleared (approved is None).
Approval = namedtuple('Approval', ['owner', 'approved', 'token_id'])

ApprovalForAll = namedtuple('ApprovalForAll', ['owner', 'operator', 'approved'])

