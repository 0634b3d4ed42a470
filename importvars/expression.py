"""
Import expression data model.

The argument of a dynamic `import()` call is represented as a small tagged
tree. Nodes are immutable pydantic models; to_glob.py walks them with a
structural `match`.
"""
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class Literal(_Node):
    """A string (or number) literal: import('./foo/bar.js')"""
    value: str


class TemplateLiteral(_Node):
    """A template literal: import(`./foo/${bar}.js`)

    `quasis` are the raw static fragments; there is always exactly one more
    fragment than there are interpolated expressions.
    """
    quasis: List[str]
    expressions: List["ImportExpression"] = []


class Concatenation(_Node):
    """A binary expression: import('./foo/' + bar)"""
    left: "ImportExpression"
    right: "ImportExpression"
    operator: str = "+"


class ConcatCall(_Node):
    """A `.concat()` call: import('./foo/'.concat(bar))"""
    receiver: "ImportExpression"
    arguments: List["ImportExpression"] = []


class Other(_Node):
    """Anything else; it could expand to any string.

    Member accesses keep their receiver and member name so the parser can
    recognise `x.concat(...)` calls.
    """
    kind: str = "Identifier"
    source: str = ""
    receiver: Optional["ImportExpression"] = None
    member: Optional[str] = None


ImportExpression = Union[Literal, TemplateLiteral, Concatenation, ConcatCall, Other]

for _model in (TemplateLiteral, Concatenation, ConcatCall, Other):
    _model.model_rebuild()


def template(*parts):
    """Build a TemplateLiteral from alternating static strings and expressions.

    template('./views/', Other(source='id'), '.js') is `./views/${id}.js`.
    """
    quasis = []
    expressions = []
    expect_static = True
    for part in parts:
        if isinstance(part, str):
            if expect_static:
                quasis.append(part)
            else:
                quasis[-1] += part
            expect_static = False
        else:
            if expect_static:
                quasis.append("")
            expressions.append(part)
            expect_static = True
    if expect_static:
        quasis.append("")
    return TemplateLiteral(quasis=quasis, expressions=expressions)
