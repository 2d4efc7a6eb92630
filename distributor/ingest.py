"""
Turns unordered batches of reward records into a `Distribution`.

`Distribution.set` only accepts pairs in ascending order, so everything here is
about getting records into that order: parse every amount, sort by earner then
token, collapse repeated pairs according to a `DuplicatePolicy`, then append.
A bad record aborts the whole batch before the distribution is touched.
"""
from decimal import Decimal, InvalidOperation
from itertools import groupby
from pathlib import Path
from typing import Iterable, NamedTuple, Union

from pydantic import ValidationError

from distributor.distribution import Distribution
from distributor.errors import (
    AmountOutOfRangeError,
    AmountParseError,
    DuplicateRecordError,
    RecordParseError,
)
from distributor.leaves import MAX_AMOUNT
from distributor.models import (
    Address,
    DuplicatePolicy,
    EarnerLine,
    SerializedDistribution,
    to_checksum,
)


class ParsedLine(NamedTuple):
    earner: Address
    token: Address
    snapshot: int
    amount: int


def parse_amount(value: str, truncate: bool = True) -> int:
    """
    Exact integer value of a decimal string, which may use scientific notation
    e.g. "2.690822691e+27". Any fractional part is truncated towards zero, or
    refused when `truncate` is off.
    """
    try:
        number = Decimal(value.strip())
    except (InvalidOperation, AttributeError):
        raise AmountParseError(f"Invalid amount: {value!r}") from None

    if not number.is_finite():
        raise AmountParseError(f"Amount must be finite, got {value!r}")
    if number < 0:
        raise AmountParseError(f"Amount cannot be negative, got {value!r}")
    # nothing this long fits a uint256, refuse before building the int
    if number and number.adjusted() >= 78:
        raise AmountOutOfRangeError(f"Amount does not fit in a uint256: {value!r}")

    if not truncate and number != number.to_integral_value():
        raise AmountParseError(f"Amount must be a whole number, got {value!r}")

    # int() on a Decimal is exact and does not depend on the context precision
    amount = int(number)
    if amount > MAX_AMOUNT:
        raise AmountOutOfRangeError(f"Amount does not fit in a uint256: {value!r}")
    return amount


def parse_lines(text: str) -> list[EarnerLine]:
    """Parse newline delimited json, skipping blank lines"""
    lines = []
    for line_number, raw in enumerate(text.splitlines(), start=1):
        if not raw.strip():
            continue
        try:
            lines.append(EarnerLine.model_validate_json(raw))
        except ValidationError as e:
            raise RecordParseError(line_number, str(e)) from e
    return lines


def read_lines(path: Union[str, Path]) -> list[EarnerLine]:
    return parse_lines(Path(path).read_text())


def _parse(line: EarnerLine) -> ParsedLine:
    return ParsedLine(
        earner=line.earner_address,
        token=line.token_address,
        snapshot=line.snapshot,
        amount=parse_amount(line.cumulative_amount),
    )


def merge_duplicates(
    records: list[ParsedLine], policy: DuplicatePolicy
) -> list[ParsedLine]:
    """
    Collapse records sharing an (earner, token) pair. `records` must already be sorted.
    Under `REJECT` any repeated pair fails the whole batch.
    """
    if policy == DuplicatePolicy.REJECT:
        for previous, record in zip(records, records[1:]):
            if (previous.earner, previous.token) == (record.earner, record.token):
                raise DuplicateRecordError(
                    f"Duplicate record for earner {to_checksum(record.earner)} "
                    f"and token {to_checksum(record.token)}"
                )
        return records

    merged = []
    for (earner, token), group in groupby(records, key=lambda r: (r.earner, r.token)):
        group = list(group)
        if policy == DuplicatePolicy.SUM:
            merged.append(
                ParsedLine(
                    earner=earner,
                    token=token,
                    snapshot=max(r.snapshot for r in group),
                    amount=sum(r.amount for r in group),
                )
            )
        else:
            # cumulative amounts only grow, so ties on snapshot keep the larger amount
            merged.append(max(group, key=lambda r: (r.snapshot, r.amount)))
    return merged


def load_lines(
    distribution: Distribution,
    lines: Iterable[EarnerLine],
    policy: DuplicatePolicy = DuplicatePolicy.REJECT,
) -> Distribution:
    """Sort `lines` by earner then token and append them to `distribution`"""
    records = sorted((_parse(line) for line in lines), key=lambda r: (r.earner, r.token))
    records = merge_duplicates(records, DuplicatePolicy(policy))

    for record in records:
        distribution.set(record.earner, record.token, record.amount)
    return distribution


def from_lines(
    lines: Iterable[EarnerLine], policy: DuplicatePolicy = DuplicatePolicy.REJECT
) -> Distribution:
    return load_lines(Distribution(), lines, policy)


def from_model(model: SerializedDistribution) -> Distribution:
    """
    Rebuild a distribution that was written out after an earlier build.
    Entries are appended in the order given, so a document that is not sorted
    fails with an ordering error instead of being silently rearranged. Amounts
    were written as exact integers and anything else is refused.
    """
    distribution = Distribution()
    for account in model.accounts:
        for token in account.tokens:
            amount = parse_amount(token.amount, truncate=False)
            distribution.set(account.address, token.token, amount)
    return distribution


def from_json(document: Union[str, bytes]) -> Distribution:
    return from_model(SerializedDistribution.model_validate_json(document))


def read_distribution(path: Union[str, Path]) -> Distribution:
    return from_json(Path(path).read_text())
