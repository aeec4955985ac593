"""Order numbers, handed out by a single sequence in strictly increasing order."""

from protean.exceptions import ObjectNotFoundError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from checkout.domain import checkout

SEQUENCE_NAME = "order_number"


@checkout.aggregate
class OrderNumberSequence:
    name = String(identifier=True, max_length=50)
    last_number = Integer(default=0)

    def issue(self):
        self.last_number = (self.last_number or 0) + 1
        return self.last_number


def issue_order_number():
    """Take the next order number and persist the sequence in the current unit of work."""
    repo = current_domain.repository_for(OrderNumberSequence)
    try:
        sequence = repo.get(SEQUENCE_NAME)
    except ObjectNotFoundError:
        sequence = OrderNumberSequence(name=SEQUENCE_NAME)

    number = sequence.issue()
    repo.add(sequence)
    return number
