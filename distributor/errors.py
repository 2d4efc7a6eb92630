class OrderingViolationError(Exception):
    """Raise if a `set` call would break the ascending order of the distribution"""

    pass


class AddressNotInOrderError(OrderingViolationError):
    """Raise if an address is not strictly greater than the last inserted address"""

    pass


class TokenNotInOrderError(OrderingViolationError):
    """Raise if a token is not strictly greater than the last token of the current address"""

    pass


class DistributionMerklizedError(Exception):
    """Raise if a merklized distribution is mutated without resetting the index first"""

    pass


class AlreadyMerklizedError(Exception):
    """Raise if merklize is called on a distribution that is not in the unmerklized state"""

    pass


class ParseError(Exception):
    """Raise if a raw reward record cannot be parsed"""

    pass


class AmountParseError(ParseError):
    pass


class AddressParseError(ParseError):
    pass


class RecordParseError(ParseError):
    """Raise if a line of the bulk record file is not a valid earner line"""

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        super().__init__(f"Line {line_number}: {reason}")


class DuplicateRecordError(ParseError):
    """Raise if the same (earner, token) pair appears twice and duplicates are rejected"""

    pass


class EncodingOverflowError(Exception):
    """Raise if a value does not fit its fixed-size slot in a leaf"""

    pass


class AmountOutOfRangeError(EncodingOverflowError):
    """Raise if an amount is negative or does not fit in a uint256"""

    pass


class EmptyTreeError(Exception):
    """Raise if a merkle tree would be built over zero leaves"""

    pass


class ClaimNotFoundError(Exception):
    """Raise if a claim is requested for an earner or token not in the distribution"""

    pass


class BadConfigException(Exception):
    pass


class MissingEnvironmentVariableException(Exception):
    pass


class MissingDBException(Exception):
    pass
