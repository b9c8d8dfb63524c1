"""
Clause synthesis for missing union variants

Each missing variant gets the simplest clause that handles it without doing
anything:

    statement-form:   case C():  pass
    expression-form:  case C():  return <default value of the result type>

The default value itself is chosen by the emitter from result_type.
"""

from typing import List, Optional, Sequence

from .symbols import TypeIdentity
from .syntax import Clause, ConstructShape, NeutralValueBody, NoOpBody, Pattern


def synthesize(missing: Sequence[TypeIdentity], shape: ConstructShape,
               result_type: Optional[TypeIdentity] = None) -> List[Clause]:
    """Build one clause per missing type, in the order given"""
    if shape is ConstructShape.EXPRESSION:
        body = NeutralValueBody(result_type)
    else:
        body = NoOpBody()
    return [Clause(patterns=(Pattern.bare(type_id),), body=body) for type_id in missing]
