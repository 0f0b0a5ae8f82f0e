"""sqlweave schema models: Query, clauses, conditions, CompilerOptions."""
from sqlweave.schema.base import WILDCARD_ENGINE, AbstractClause, Raw
from sqlweave.schema.clauses import (
    AbstractColumn,
    AbstractFrom,
    AbstractInsertClause,
    AbstractJoin,
    AbstractOrderBy,
    AbstractUnion,
    AggregateClause,
    Column,
    DeepJoinClause,
    FromClause,
    InsertClause,
    InsertQueryClause,
    Join,
    JoinClause,
    LimitOffset,
    LockClause,
    OrderBy,
    QueryColumn,
    QueryFromClause,
    RandomOrderBy,
    RawColumn,
    RawFromClause,
    RawOrderBy,
    RawUnionClause,
    UnionClause,
)
from sqlweave.schema.conditions import (
    AbstractCondition,
    BasicCondition,
    BasicDateCondition,
    BasicStringCondition,
    BetweenCondition,
    BooleanCondition,
    ExistsCondition,
    InCondition,
    InQueryCondition,
    NestedCondition,
    NullCondition,
    RawCondition,
    SubQueryCondition,
    TwoColumnsCondition,
)
from sqlweave.schema.options import CompilerOptions
from sqlweave.schema.query import Query

__all__ = [
    "WILDCARD_ENGINE",
    "AbstractClause",
    "Raw",
    "Query",
    "CompilerOptions",
    # FROM / JOIN
    "AbstractFrom",
    "FromClause",
    "RawFromClause",
    "QueryFromClause",
    "AbstractJoin",
    "Join",
    "JoinClause",
    "DeepJoinClause",
    # Columns / order
    "AbstractColumn",
    "Column",
    "RawColumn",
    "QueryColumn",
    "AbstractOrderBy",
    "OrderBy",
    "RawOrderBy",
    "RandomOrderBy",
    # Other clauses
    "AggregateClause",
    "AbstractInsertClause",
    "InsertClause",
    "InsertQueryClause",
    "LimitOffset",
    "AbstractUnion",
    "UnionClause",
    "RawUnionClause",
    "LockClause",
    # Conditions
    "AbstractCondition",
    "RawCondition",
    "BasicCondition",
    "BasicStringCondition",
    "BasicDateCondition",
    "TwoColumnsCondition",
    "NestedCondition",
    "SubQueryCondition",
    "InCondition",
    "InQueryCondition",
    "BetweenCondition",
    "NullCondition",
    "ExistsCondition",
    "BooleanCondition",
]
